"""Unit tests for the template entry points: sql, sql_format, sql_template."""

from __future__ import annotations

from textwrap import dedent
from types import SimpleNamespace

import pytest

from fragql import (
    UNSET,
    QueryConfig,
    fragment,
    fragment_format,
    raw,
    safe,
    spread_and,
    spread_insert,
    spread_update,
    sql,
    sql_format,
    sql_template,
)
from fragql.errors import TemplateError
from tests.fixtures import placeholder_numbers


def _dedented(query: QueryConfig) -> QueryConfig:
    return QueryConfig(text=dedent(query.text), values=query.values)


def _template(*parts):
    """Build a stand-in for a ``t"..."`` template: strings and interpolations."""
    strings = [part for part in parts if isinstance(part, str)]
    interpolations = [
        SimpleNamespace(value=part.value, expression="x", conversion=None, format_spec="")
        for part in parts
        if isinstance(part, SimpleNamespace)
    ]
    return SimpleNamespace(strings=tuple(strings), interpolations=tuple(interpolations))


def _value(v):
    return SimpleNamespace(value=v)


# ---------------------------------------------------------------------------
# sql()
# ---------------------------------------------------------------------------


def test_sql_creates_a_valid_postgres_query():
    assert sql(["SELECT email FROM users WHERE id = ", ""], 1) == QueryConfig(
        text="SELECT email FROM users WHERE id = $1", values=[1]
    )


def test_sql_safe_works():
    q = sql(["SELECT email FROM users WHERE id = ", ""], sql.safe(1))
    assert q == QueryConfig(text="SELECT email FROM users WHERE id = $1", values=[1])
    assert safe(1) == sql.safe(1)


def test_sql_raw_works():
    q = sql(["SELECT email FROM users WHERE id = ", ""], sql.raw("1"))
    assert q == QueryConfig(text="SELECT email FROM users WHERE id = 1", values=[])


def test_sql_without_interpolations():
    assert sql(["SELECT 1"]) == QueryConfig(text="SELECT 1", values=[])
    assert sql("SELECT 1") == QueryConfig(text="SELECT 1", values=[])


def test_sql_binds_none_as_null():
    q = sql(["UPDATE users SET deleted_at = ", ""], None)
    assert q.text == "UPDATE users SET deleted_at = $1"
    assert q.values == [None]


def test_sql_rejects_wrong_segment_count():
    with pytest.raises(TemplateError):
        sql(["SELECT ", ""], 1, 2)
    with pytest.raises(TemplateError):
        sql(["a", "b", "c"], 1)


def test_sql_with_spread_and():
    q = sql(
        ["\n    SELECT * FROM users WHERE ", "\n  "],
        spread_and(
            {
                "name": "Hugo",
                "age": 20,
                "email": sql.raw("'foo@example.com'"),
                "foo": UNSET,
            }
        ),
    )
    assert dedent(q.text).strip() == (
        """SELECT * FROM users WHERE ("name" = $1 AND "age" = $2 AND "email" = 'foo@example.com')"""
    )
    assert q.values == ["Hugo", 20]


def test_sql_with_spread_insert_returning():
    q = sql(
        ["INSERT INTO users ", " RETURNING *"],
        spread_insert({"name": "Hugo", "age": 20, "created_at": sql.raw("NOW()"), "foo": UNSET}),
    )
    assert q.text == (
        'INSERT INTO users ("name", "age", "created_at") VALUES ($1, $2, NOW()) RETURNING *'
    )
    assert q.values == ["Hugo", 20]


def test_sql_with_spread_update_and_trailing_param():
    q = sql(
        ["UPDATE users SET ", " WHERE id = ", ""],
        spread_update({"name": "Hugo", "created_at": sql.raw("NOW()")}),
        42,
    )
    assert q.text == 'UPDATE users SET "name" = $1, "created_at" = NOW() WHERE id = $2'
    assert q.values == ["Hugo", 42]


def test_sql_works_with_multiple_parameters():
    q = sql(
        [
            """
    WITH some_users AS (
      SELECT * FROM users WHERE id = """,
            " OR email = ",
            """
    )
    INSERT INTO users """,
            """ UNION SELECT * FROM some_users RETURNING *
    """,
        ],
        1,
        "foo@example.com",
        spread_insert(
            {"name": "Hugo", "age": 20, "created_at": sql.raw("NOW()"), "role": "user"}
        ),
    )
    assert _dedented(q) == QueryConfig(
        text=dedent(
            """
    WITH some_users AS (
      SELECT * FROM users WHERE id = $1 OR email = $2
    )
    INSERT INTO users ("name", "age", "created_at", "role") VALUES ($3, $4, NOW(), $5) UNION SELECT * FROM some_users RETURNING *
    """
        ),
        values=[1, "foo@example.com", "Hugo", 20, "user"],
    )


def test_nested_fragments_are_renumbered():
    condition = fragment(["age > ", " AND role = ", ""], 18, "admin")
    q = sql(["SELECT * FROM users WHERE id = ", " OR (", ")"], 7, condition)
    assert q.text == "SELECT * FROM users WHERE id = $1 OR (age > $2 AND role = $3)"
    assert q.values == [7, 18, "admin"]


def test_fragment_reused_in_two_places():
    active = fragment(["active = ", ""], True)
    q = sql(["SELECT ", " FROM a WHERE ", " UNION SELECT 1 WHERE ", ""], 0, active, active)
    assert q.text == "SELECT $1 FROM a WHERE active = $2 UNION SELECT 1 WHERE active = $3"
    assert q.values == [0, True, True]
    assert placeholder_numbers(q.text) == [1, 2, 3]


def test_fragment_inside_spread_record():
    q = sql(
        ["UPDATE counters SET ", ""],
        spread_update({"hits": fragment(["hits + ", ""], 1), "label": "x"}),
    )
    assert q.text == 'UPDATE counters SET "hits" = hits + $1, "label" = $2'
    assert q.values == [1, "x"]


# ---------------------------------------------------------------------------
# sql_format()
# ---------------------------------------------------------------------------


def test_sql_format_auto_numbered_fields():
    q = sql_format("SELECT * FROM users WHERE id = {} AND name = {}", 1, "Hugo")
    assert q.text == "SELECT * FROM users WHERE id = $1 AND name = $2"
    assert q.values == [1, "Hugo"]


def test_sql_format_manual_and_keyword_fields():
    q = sql_format("SELECT {0}, {1}, {0}, {name}", "a", "b", name="n")
    assert q.text == "SELECT $1, $2, $3, $4"
    assert q.values == ["a", "b", "a", "n"]


def test_sql_format_attribute_and_index_lookup():
    user = SimpleNamespace(id=3)
    q = sql_format("SELECT * FROM t WHERE id = {user.id} AND tag = {tags[0]}", user=user, tags=["x"])
    assert q.values == [3, "x"]


def test_sql_format_splices_builders():
    q = sql_format(
        "SELECT * FROM users WHERE {} LIMIT {}",
        spread_and({"name": "Hugo", "role": UNSET}),
        10,
    )
    assert q.text == 'SELECT * FROM users WHERE ("name" = $1) LIMIT $2'
    assert q.values == ["Hugo", 10]


def test_sql_format_escaped_braces():
    q = sql_format("SELECT '{{}}'::jsonb, {}", 1)
    assert q.text == "SELECT '{}'::jsonb, $1"


def test_fragment_format_nests():
    inner = fragment_format("x = {}", raw("y"))
    q = sql_format("SELECT {} WHERE {}", 1, inner)
    assert q.text == "SELECT $1 WHERE x = y"
    assert q.values == [1]


@pytest.mark.parametrize(
    "fmt, args, kwargs",
    [
        ("SELECT {!r}", (1,), {}),
        ("SELECT {:>10}", (1,), {}),
        ("SELECT {}", (), {}),
        ("SELECT {missing}", (), {}),
        ("SELECT {} {0}", (1,), {}),
        ("SELECT {0} {}", (1,), {}),
        ("SELECT {", (), {}),
    ],
)
def test_sql_format_rejects_bad_input(fmt, args, kwargs):
    with pytest.raises(TemplateError):
        sql_format(fmt, *args, **kwargs)


# ---------------------------------------------------------------------------
# sql_template()
# ---------------------------------------------------------------------------


def test_sql_template_reads_strings_and_interpolations():
    template = _template("SELECT email FROM users WHERE id = ", _value(1), "")
    assert sql_template(template) == QueryConfig(
        text="SELECT email FROM users WHERE id = $1", values=[1]
    )


def test_sql_template_splices_builders():
    template = _template("INSERT INTO users ", _value(spread_insert({"name": "Hugo"})), "")
    q = sql_template(template)
    assert q.text == 'INSERT INTO users ("name") VALUES ($1)'


def test_sql_template_rejects_conversions():
    template = SimpleNamespace(
        strings=("SELECT ", ""),
        interpolations=(
            SimpleNamespace(value=1, expression="x", conversion="r", format_spec=""),
        ),
    )
    with pytest.raises(TemplateError):
        sql_template(template)


def test_sql_template_rejects_plain_strings():
    with pytest.raises(TemplateError):
        sql_template("SELECT 1")
