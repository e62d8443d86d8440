"""Test fixtures: sample records and placeholder inspection helpers."""

from __future__ import annotations

import re
from typing import Any

USERS: list[dict[str, Any]] = [
    {"name": "Hugo", "age": 20},
    {"name": "Jon", "age": 25},
]

_PLACEHOLDER = re.compile(r"\$(\d+)")


def placeholder_numbers(text: str) -> list[int]:
    """Return the ``$n`` placeholder numbers in ``text``, in order of appearance."""
    return [int(number) for number in _PLACEHOLDER.findall(text)]
