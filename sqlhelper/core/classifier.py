"""Statement classification by leading keyword."""

import re
from enum import Enum
from typing import Final, NamedTuple

__all__ = (
    "DDL_KEYWORDS",
    "INSERT_ID_KEYWORDS",
    "MUTATION_KEYWORDS",
    "StatementClassification",
    "StatementKind",
    "classify_statement",
)

_LEADING_KEYWORD_RE: Final = re.compile(r"^\s*([A-Za-z]+)")

DDL_KEYWORDS: Final = frozenset({"CREATE", "ALTER", "TRUNCATE", "DROP"})
MUTATION_KEYWORDS: Final = frozenset({"INSERT", "DELETE", "UPDATE", "REPLACE"})
INSERT_ID_KEYWORDS: Final = frozenset({"INSERT", "REPLACE"})


class StatementKind(str, Enum):
    """How the executor treats the outcome of a statement.

    - DDL: returns the driver's raw success value
    - MUTATION: returns the affected row count
    - READ: materializes rows and column metadata, returns the row count
    """

    DDL = "ddl"
    MUTATION = "mutation"
    READ = "read"

    def __str__(self) -> str:
        return self.name.lower()


class StatementClassification(NamedTuple):
    kind: StatementKind
    keyword: str

    @property
    def captures_insert_id(self) -> bool:
        return self.keyword in INSERT_ID_KEYWORDS


def classify_statement(sql: str) -> StatementClassification:
    """Classify ``sql`` by its first word, ignoring case and leading whitespace.

    DDL wins over mutation, mutation wins over read; anything unrecognized is a read.
    """
    match = _LEADING_KEYWORD_RE.match(sql or "")
    keyword = match.group(1).upper() if match else ""
    if keyword in DDL_KEYWORDS:
        return StatementClassification(StatementKind.DDL, keyword)
    if keyword in MUTATION_KEYWORDS:
        return StatementClassification(StatementKind.MUTATION, keyword)
    return StatementClassification(StatementKind.READ, keyword)
