"""Template entry points: literal text + interpolated values → ``QueryConfig``.

Python has no tagged template literals, so the split a JavaScript tag would
receive is passed explicitly: ``N + 1`` literal segments and ``N`` values.
The segments are always the outer elements of the result::

    sql(["SELECT email FROM users WHERE id = ", ""], user_id)
    # QueryConfig(text="SELECT email FROM users WHERE id = $1", values=[user_id])

Two more convenient spellings produce the same split:

``sql_format``
    A ``str.format``-style string; every replacement field is bound::

        sql_format("SELECT * FROM users WHERE {} AND created_at > {since}",
                   spread_and({"role": "admin"}), since=yesterday)

``sql_template``
    A Python 3.14 template string (``t"..."``)::

        sql_template(t"SELECT email FROM users WHERE id = {user_id}")

Interpolated values are bound as ``$n`` parameters unless they are
builders, in which case they are spliced in place: ``sql.raw(...)``,
``sql.safe(...)``, the spread helpers and nested :func:`fragment` calls.
"""
from __future__ import annotations

import string
from collections.abc import Sequence
from typing import Any

from fragql.compile.base import QueryConfig
from fragql.compile.builder import SqlBuilder, render
from fragql.compile.combinators import join_sql, merge_lists, param, raw, to_builder
from fragql.errors import TemplateError
from fragql.trace import trace_query

_formatter = string.Formatter()


def build_query(builder: SqlBuilder) -> QueryConfig:
    """Render a complete query; placeholders always start at ``$1``.

    The result is reported on the ``fragql.query`` trace logger.
    """
    query = render(builder, 1)
    trace_query(query)
    return query


def fragment(texts: Sequence[str] | str, *values: Any) -> SqlBuilder:
    """Build the unrendered fragment for ``texts`` interleaved with ``values``.

    Use this instead of :func:`sql` to nest a template inside another
    template or inside a spread helper record.

    Raises:
        TemplateError: If ``len(texts) != len(values) + 1``.
    """
    if isinstance(texts, str):
        texts = (texts,)
    if len(texts) != len(values) + 1:
        raise TemplateError(
            f"Expected {len(values) + 1} text segment(s) for {len(values)} value(s), "
            f"got {len(texts)}."
        )

    text_builders = [raw(text) for text in texts]
    value_builders = [to_builder(value) for value in values]
    return join_sql(merge_lists(text_builders, value_builders))


def sql(texts: Sequence[str] | str, *values: Any) -> QueryConfig:
    """Build a query object: ``QueryConfig(text, values)``.

    Values are SQL-injection-proofed automatically unless wrapped in
    :func:`sql.raw`.

    Example::

        query = sql(["SELECT name, email FROM users WHERE id = ", ""], user_id)
        rows = await connection.fetch(*query.to_args())
    """
    return build_query(fragment(texts, *values))


sql.raw = raw  # type: ignore[attr-defined]
sql.safe = param  # type: ignore[attr-defined]


def _split_format(fmt: str, args: Sequence[Any], kwargs: dict[str, Any]) -> tuple[list[str], list[Any]]:
    """Split a ``str.format`` string into literal segments and field values."""
    texts: list[str] = []
    values: list[Any] = []
    current = ""
    auto_index = 0
    numbering: str | None = None

    for literal, field_name, format_spec, conversion in _formatter.parse(fmt):
        current += literal
        if field_name is None:
            continue
        if format_spec or conversion:
            raise TemplateError(
                f"Replacement field {{{field_name}}} uses a conversion or format spec; "
                "values are bound as parameters and cannot be formatted."
            )

        # "{}", "{[0]}" and "{.attr}" take the next positional argument.
        if not field_name or field_name[0] in ".[":
            if numbering == "manual":
                raise TemplateError("Cannot switch from manual field numbering to automatic.")
            numbering = "auto"
            field_name = f"{auto_index}{field_name}"
            auto_index += 1
        elif field_name[0].isdigit():
            if numbering == "auto":
                raise TemplateError("Cannot switch from automatic field numbering to manual.")
            numbering = "manual"

        try:
            value, _ = _formatter.get_field(field_name, args, kwargs)
        except (IndexError, KeyError, AttributeError, TypeError) as exc:
            raise TemplateError(f"No value for replacement field {{{field_name}}}: {exc}") from exc

        texts.append(current)
        values.append(value)
        current = ""

    texts.append(current)
    return texts, values


def fragment_format(fmt: str, /, *args: Any, **kwargs: Any) -> SqlBuilder:
    """Like :func:`fragment`, from a ``str.format``-style string."""
    try:
        texts, values = _split_format(fmt, args, kwargs)
    except ValueError as exc:
        raise TemplateError(f"Malformed format string: {exc}") from exc
    return fragment(texts, *values)


def sql_format(fmt: str, /, *args: Any, **kwargs: Any) -> QueryConfig:
    """Build a query object from a ``str.format``-style string.

    Every replacement field becomes a bound value (or a spliced builder);
    ``{{`` and ``}}`` produce literal braces.

    Raises:
        TemplateError: If the string is malformed, a field has no value, or
            a field carries a conversion (``!r``) or format spec (``:>10``).
    """
    return build_query(fragment_format(fmt, *args, **kwargs))


def sql_template(template: Any) -> QueryConfig:
    """Build a query object from a template string (``t"..."``).

    Accepts any object exposing ``strings`` and ``interpolations`` the way
    :class:`string.templatelib.Template` does.

    Raises:
        TemplateError: If ``template`` does not look like a template, or an
            interpolation carries a conversion or format spec.
    """
    try:
        texts = tuple(template.strings)
        interpolations = tuple(template.interpolations)
    except AttributeError as exc:
        raise TemplateError(
            f"Expected a template string, got {type(template).__name__}."
        ) from exc

    for interpolation in interpolations:
        if getattr(interpolation, "conversion", None) or getattr(interpolation, "format_spec", ""):
            raise TemplateError(
                f"Interpolation {{{getattr(interpolation, 'expression', '?')}}} uses a "
                "conversion or format spec; values are bound as parameters and cannot "
                "be formatted."
            )

    return sql(texts, *(interpolation.value for interpolation in interpolations))
