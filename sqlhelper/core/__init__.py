"""Core processing for sqlhelper.

- escaping.py: value escaping, native or backslash
- template.py: ``%d``/``%f``/``%s``/``%%`` template compilation
- builders.py: INSERT, REPLACE, UPDATE and DELETE templates from mappings
- classifier.py: statement classification by leading keyword
- result.py: immutable outcomes and result sets
- accessors.py: read helpers over a result set
- executor.py: statement execution and the cached latest outcome
"""

from sqlhelper.core import accessors
from sqlhelper.core.builders import (
    BuiltStatement,
    build_delete,
    build_insert_replace,
    build_update,
    quote_identifier,
    resolve_formats,
)
from sqlhelper.core.classifier import StatementClassification, StatementKind, classify_statement
from sqlhelper.core.escaping import Escaper, backslash_escape, to_sql_text
from sqlhelper.core.executor import QueryExecutor
from sqlhelper.core.result import ColumnInfo, ExecutionOutcome, ResultSet
from sqlhelper.core.template import TemplateCompiler

__all__ = (
    "BuiltStatement",
    "ColumnInfo",
    "Escaper",
    "ExecutionOutcome",
    "QueryExecutor",
    "ResultSet",
    "StatementClassification",
    "StatementKind",
    "TemplateCompiler",
    "accessors",
    "backslash_escape",
    "build_delete",
    "build_insert_replace",
    "build_update",
    "classify_statement",
    "quote_identifier",
    "resolve_formats",
    "to_sql_text",
)
