"""Identifier quoting for table and column names."""
from __future__ import annotations

from fragql.errors import InvalidIdentifierError


def escape_identifier(identifier: str) -> str:
    """Return ``identifier`` wrapped in double quotes.

    An identifier that is already quoted is not quoted a second time.
    Embedded double quotes are rejected rather than escaped.

    Examples::

        >>> escape_identifier("created_at")
        '"created_at"'
        >>> escape_identifier('"created_at"')
        '"created_at"'

    Raises:
        InvalidIdentifierError: If the name is empty, or a double quote
            remains after stripping one surrounding pair.
    """
    name = identifier
    if len(name) >= 2 and name.startswith('"') and name.endswith('"'):
        name = name[1:-1]
    if not name or '"' in name:
        raise InvalidIdentifierError(identifier)
    return f'"{name}"'
