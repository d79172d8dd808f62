"""Column names from CREATE TABLE text.

This is a heuristic scan, not a SQL grammar. It takes the text between
the first "(" and the last ")", splits it on commas and keeps the first
token of each part. Nested parentheses such as DECIMAL(10,2), commas in
DEFAULT expressions and table constraints (PRIMARY KEY (...), FOREIGN
KEY ...) produce spurious or missing names; callers get exactly what the
scan finds.
"""

from __future__ import annotations

_QUOTE_CHARS = "\"`[]"


def _column_parts(sql: str) -> list[str]:
    open_paren = sql.find("(")
    close_paren = sql.rfind(")")
    if open_paren == -1 or close_paren <= open_paren:
        return []

    parts = (part.strip() for part in sql[open_paren + 1 : close_paren].split(","))
    return [part for part in parts if part]


def _unquote(token: str) -> str:
    return token.strip(_QUOTE_CHARS)


def extract_column_definitions(sql: str) -> list[tuple[str, str]]:
    """Split a CREATE TABLE statement into (name, rest-of-definition) pairs.

    Example:
        >>> extract_column_definitions('CREATE TABLE t(id INTEGER PRIMARY KEY, "name" TEXT)')
        [('id', 'INTEGER PRIMARY KEY'), ('name', 'TEXT')]
    """
    definitions = []
    for part in _column_parts(sql):
        tokens = part.split(None, 1)
        declaration = tokens[1].strip() if len(tokens) > 1 else ""
        definitions.append((_unquote(tokens[0]), declaration))
    return definitions


def extract_column_names(sql: str) -> list[str]:
    """Return the column names of a CREATE TABLE statement, in order.

    Example:
        >>> extract_column_names("CREATE TABLE t([id] INTEGER, `name` TEXT)")
        ['id', 'name']
    """
    return [name for name, _ in extract_column_definitions(sql)]


def is_rowid_alias(declaration: str) -> bool:
    """True if a column declaration makes the column an alias for the rowid.

    The type name must be exactly INTEGER ("INT PRIMARY KEY" does not
    qualify) and a PRIMARY KEY constraint may appear anywhere after it,
    e.g. "INTEGER NOT NULL PRIMARY KEY". A DESC key is not an alias.

    Example:
        >>> is_rowid_alias("INTEGER CONSTRAINT pk PRIMARY KEY")
        True
    """
    words = declaration.upper().split()
    if not words or words[0] != "INTEGER":
        return False
    for i in range(1, len(words) - 1):
        if words[i] == "PRIMARY" and words[i + 1] == "KEY":
            return words[i + 2 : i + 3] != ["DESC"]
    return False
