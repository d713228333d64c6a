"""Unit tests for statement classification."""

import pytest

from sqlhelper.core.classifier import StatementKind, classify_statement


@pytest.mark.parametrize(
    ("sql", "kind", "keyword"),
    [
        ("CREATE TABLE t (id INT)", StatementKind.DDL, "CREATE"),
        ("  drop table t", StatementKind.DDL, "DROP"),
        ("ALTER TABLE t ADD c INT", StatementKind.DDL, "ALTER"),
        ("truncate t", StatementKind.DDL, "TRUNCATE"),
        ("INSERT INTO t VALUES (1)", StatementKind.MUTATION, "INSERT"),
        ("\nupdate t SET a = 1", StatementKind.MUTATION, "UPDATE"),
        ("DELETE FROM t", StatementKind.MUTATION, "DELETE"),
        ("Replace INTO t VALUES (1)", StatementKind.MUTATION, "REPLACE"),
        ("SELECT 1", StatementKind.READ, "SELECT"),
        ("SHOW TABLES", StatementKind.READ, "SHOW"),
        ("UPDATES", StatementKind.READ, "UPDATES"),
        ("(SELECT 1)", StatementKind.READ, ""),
        ("", StatementKind.READ, ""),
    ],
)
def test_classify_statement(sql: str, kind: StatementKind, keyword: str) -> None:
    """Test statements are bucketed by their first word."""
    classification = classify_statement(sql)
    assert classification.kind is kind
    assert classification.keyword == keyword


@pytest.mark.parametrize(("sql", "expected"), [("INSERT INTO t", True), ("REPLACE INTO t", True), ("UPDATE t", False)])
def test_captures_insert_id(sql: str, expected: bool) -> None:
    """Test only INSERT and REPLACE capture a generated identifier."""
    assert classify_statement(sql).captures_insert_id is expected


def test_statement_kind_str() -> None:
    assert str(StatementKind.MUTATION) == "mutation"
