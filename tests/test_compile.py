"""Unit tests for SQL generation (both dialects)."""

from __future__ import annotations

import logging

import pytest

from quarrydb.compile.clauses import humanize_positions, render_value
from quarrydb.compile.mysql import MySQLGenerator
from quarrydb.compile.sqlite import SQLiteGenerator
from quarrydb.errors import InvalidQueryError
from quarrydb.query import Query


def _my() -> MySQLGenerator:
    return MySQLGenerator()


def _sq() -> SQLiteGenerator:
    return SQLiteGenerator()


USERS_ROWS = [
    {"user_id": 1, "user_name": "'a'"},
    {"user_id": 2, "user_name": "'b'"},
]


# ---------------------------------------------------------------------------
# SELECT
# ---------------------------------------------------------------------------


def test_select_minimal_from_mapping():
    opts = {"type": "SELECT", "table": "users", "condition": "user_id = 1"}
    assert _my().generate(opts) == "SELECT * FROM users WHERE user_id = 1"
    assert _sq().generate(opts) == "SELECT * FROM users WHERE user_id = 1"


def test_select_type_is_case_insensitive():
    assert _my().generate({"type": "select", "table": "users"}) == "SELECT * FROM users WHERE 1 = 1"


def test_select_without_condition_uses_tautology():
    opts = Query.select().from_("users").build()
    assert _sq().generate(opts) == "SELECT * FROM users WHERE 1 = 1"


def test_select_full_clause_order():
    opts = (
        Query.select()
        .distinct()
        .expr("u.user_id, g.group_name")
        .from_("users", "u")
        .join("left", "user_groups", "g", "g.group_id = u.group_id")
        .join("inner", "roles", condition="roles.user_id = u.user_id")
        .where("u.active = 1")
        .group_by("g.group_name")
        .having("COUNT(*) > 1")
        .order_by("u.user_id")
        .limit(10)
        .offset(20)
        .build()
    )
    head = (
        "SELECT DISTINCT u.user_id, g.group_name FROM users AS u "
        "LEFT JOIN user_groups AS g ON g.group_id = u.group_id "
        "INNER JOIN roles ON roles.user_id = u.user_id "
        "WHERE u.active = 1 GROUP BY g.group_name HAVING COUNT(*) > 1 "
        "ORDER BY u.user_id"
    )
    assert _my().generate(opts) == head + " LIMIT 20, 10"
    assert _sq().generate(opts) == head + " LIMIT 10 OFFSET 20"


def test_join_without_alias_or_condition():
    opts = Query.select().from_("a").join("cross", "b").build()
    assert _my().generate(opts) == "SELECT * FROM a CROSS JOIN b WHERE 1 = 1"


def test_having_requires_group_by(caplog):
    opts = Query.select().from_("users").having("COUNT(*) > 1").build()
    with caplog.at_level(logging.WARNING, logger="quarrydb"):
        sql = _my().generate(opts)
    assert sql == "SELECT * FROM users WHERE 1 = 1"
    assert "HAVING" in caplog.text


def test_offset_without_limit_is_omitted():
    opts = Query.select().from_("users").offset(5).build()
    assert _my().generate(opts) == "SELECT * FROM users WHERE 1 = 1"
    assert _sq().generate(opts) == "SELECT * FROM users WHERE 1 = 1"


def test_zero_offset_and_zero_limit():
    opts = Query.select().from_("users").limit(0).offset(0).build()
    assert _my().generate(opts).endswith("LIMIT 0")
    assert _sq().generate(opts).endswith("LIMIT 0")


def test_placeholders_are_left_for_substitution():
    opts = Query.select().from_("users").where("user_id = {int:user_id}").build()
    assert _my().generate(opts) == "SELECT * FROM users WHERE user_id = {int:user_id}"


# ---------------------------------------------------------------------------
# INSERT / REPLACE
# ---------------------------------------------------------------------------


def test_multi_row_insert():
    opts = {"type": "INSERT", "table": "users", "rows": USERS_ROWS}
    assert _my().generate(opts) == (
        "INSERT INTO users (`user_id`, `user_name`) VALUES (1, 'a'), (2, 'b')"
    )
    assert _sq().generate(opts) == (
        "INSERT INTO users (\"user_id\", \"user_name\") VALUES (1, 'a'), (2, 'b')"
    )


def test_insert_ignore_per_dialect():
    opts = Query.insert().ignore().into("t").values({"a": 1}).build()
    assert _my().generate(opts) == "INSERT IGNORE INTO t (`a`) VALUES (1)"
    assert _sq().generate(opts) == 'INSERT OR IGNORE INTO t ("a") VALUES (1)'


def test_replace_per_dialect():
    opts = Query.replace().into("t").keys(["a"]).values({"a": 1, "b": "'x'"}).build()
    assert _my().generate(opts) == "REPLACE INTO t (`a`, `b`) VALUES (1, 'x')"
    assert _sq().generate(opts) == "INSERT OR REPLACE INTO t (\"a\", \"b\") VALUES (1, 'x')"


def test_row_values_render_null_and_booleans():
    opts = Query.insert().into("t").values({"a": None, "b": True, "c": False}).build()
    assert _my().generate(opts) == "INSERT INTO t (`a`, `b`, `c`) VALUES (NULL, 1, 0)"


def test_insert_without_rows():
    with pytest.raises(InvalidQueryError) as exc_info:
        _my().generate(Query.insert().into("users").build())
    assert str(exc_info.value) == (
        "There must be at least one row specified to insert or replace."
    )


@pytest.mark.parametrize(
    "bad_positions, expected",
    [
        ([2], "2"),
        ([2, 3], "2 and 3"),
        ([2, 3, 5], "2, 3 and 5"),
    ],
)
def test_mismatched_rows_are_all_reported(bad_positions, expected):
    rows = []
    for position in range(1, 6):
        if position in bad_positions:
            rows.append({"user_name": "'x'", "user_id": position})
        else:
            rows.append({"user_id": position, "user_name": "'x'"})
    opts = {"type": "INSERT", "table": "users", "rows": rows}
    with pytest.raises(InvalidQueryError) as exc_info:
        _sq().generate(opts)
    assert str(exc_info.value) == f"Row keys do not match, found at row values {expected}."
    assert exc_info.value.clause == "VALUES"


def test_rows_with_extra_column_mismatch():
    opts = Query.insert().into("t").values({"a": 1}).values({"a": 2, "b": 3}).build()
    with pytest.raises(InvalidQueryError):
        _my().generate(opts)


# ---------------------------------------------------------------------------
# UPDATE / DELETE
# ---------------------------------------------------------------------------


def test_update_full():
    opts = (
        Query.update()
        .table("users")
        .set({"user_name": "{string:name}", "active": True})
        .where("user_id = 1")
        .order_by("user_id")
        .limit(1)
        .build()
    )
    assert _my().generate(opts) == (
        "UPDATE users SET user_name = {string:name}, active = 1 "
        "WHERE user_id = 1 ORDER BY user_id LIMIT 1"
    )


def test_update_ignore_per_dialect(caplog):
    opts = Query.update().table("users").ignore().set({"a": 1}).build()
    with caplog.at_level(logging.WARNING, logger="quarrydb"):
        assert _my().generate(opts) == "UPDATE IGNORE users SET a = 1"
        assert _sq().generate(opts) == "UPDATE OR IGNORE users SET a = 1"
    assert "no WHERE condition" in caplog.text


def test_update_requires_values():
    with pytest.raises(InvalidQueryError):
        _my().generate(Query.update().table("users").where("user_id = 1").build())


def test_delete_with_condition():
    opts = Query.delete().from_("users").where("user_id = 1").build()
    assert _my().generate(opts) == "DELETE FROM users WHERE user_id = 1"


def test_delete_order_and_limit():
    opts = Query.delete().from_("logs").where("level = 0").order_by("created").limit(100).build()
    assert _sq().generate(opts) == "DELETE FROM logs WHERE level = 0 ORDER BY created LIMIT 100"


def test_delete_without_condition_is_unconditioned(caplog):
    with caplog.at_level(logging.WARNING, logger="quarrydb"):
        sql = _my().generate(Query.delete().from_("users").build())
    assert sql == "DELETE FROM users"
    assert "every row" in caplog.text


# ---------------------------------------------------------------------------
# NATIVE
# ---------------------------------------------------------------------------


def test_native_picks_own_dialect():
    opts = Query.native().using("mysql").query("SHOW TABLES").using("sqlite3").query(
        "SELECT name FROM sqlite_master"
    ).build()
    assert _my().generate(opts) == "SHOW TABLES"
    assert _sq().generate(opts) == "SELECT name FROM sqlite_master"


def test_native_without_dialect_template():
    opts = Query.native().using("mysql").query("SHOW TABLES").build()
    with pytest.raises(InvalidQueryError) as exc_info:
        _sq().generate(opts)
    assert exc_info.value.clause == "NATIVE"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def test_quote_identifier_escapes_quote_chars():
    assert _my().quote_identifier("we`ird") == "`we``ird`"
    assert _sq().quote_identifier('we"ird') == '"we""ird"'


def test_humanize_positions():
    assert humanize_positions([4]) == "4"
    assert humanize_positions([1, 2]) == "1 and 2"
    assert humanize_positions([1, 2, 4]) == "1, 2 and 4"


def test_render_value():
    assert render_value(None) == "NULL"
    assert render_value(False) == "0"
    assert render_value(3.5) == "3.5"
    assert render_value("NOW()") == "NOW()"


def test_generate_rejects_non_mapping():
    with pytest.raises(InvalidQueryError):
        _my().generate(["SELECT"])


def test_generate_rejects_missing_type():
    with pytest.raises(InvalidQueryError) as exc_info:
        _my().generate({"table": "users"})
    assert exc_info.value.clause == "type"
