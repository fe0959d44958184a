# =============================================================================
# core/query.py  —  IGDB Query Builder
# =============================================================================
#
# IGDB endpoints take a plain-text body in its own query language
# ("APIcalypse"):
#
#     search "zelda";
#     fields name, rating, genres.name;
#     where id = 1942;
#     limit 10;
#
# Every clause ends with a semicolon.  String literals are double-quoted, so
# user text must be escaped before it goes inside one.  All escaping lives
# in quote(); nothing else in the code base builds query text by hand.
# =============================================================================

from typing import Optional, Union

Value = Union[int, str]


def quote(text: str) -> str:
    """Return `text` as a double-quoted query-language string literal."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _literal(value: Value) -> str:
    if isinstance(value, bool):
        raise TypeError("booleans are not valid query values")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return quote(value)
    raise TypeError(f"unsupported query value: {type(value).__name__}")


class Query:
    """Fluent builder for one query-language request body.

    Usage:
        body = (
            Query()
            .search("Final Fantasy")
            .fields("name", "rating")
            .limit(10)
            .render()
        )
    """

    def __init__(self) -> None:
        self._search: Optional[str] = None
        self._fields: list[str] = []
        self._where: list[str] = []
        self._limit: Optional[int] = None

    def search(self, text: str) -> "Query":
        self._search = text
        return self

    def fields(self, *names: str) -> "Query":
        self._fields.extend(names)
        return self

    def where(self, field_name: str, op: str, value: Value) -> "Query":
        """Add a filter; multiple filters are combined with `&`."""
        self._where.append(f"{field_name} {op} {_literal(value)}")
        return self

    def where_equals(self, field_name: str, value: Value) -> "Query":
        return self.where(field_name, "=", value)

    def limit(self, count: int) -> "Query":
        if isinstance(count, bool) or not isinstance(count, int):
            raise TypeError("limit must be an integer")
        self._limit = count
        return self

    def render(self) -> str:
        clauses = []
        if self._search is not None:
            clauses.append(f"search {quote(self._search)};")
        if self._where:
            clauses.append(f"where {' & '.join(self._where)};")
        if self._fields:
            clauses.append(f"fields {', '.join(self._fields)};")
        if self._limit is not None:
            clauses.append(f"limit {self._limit};")
        return "\n".join(clauses)

    def __str__(self) -> str:
        return self.render()

