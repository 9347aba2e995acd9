# storeit/platform/query.py
from dataclasses import dataclass
from typing import Any, Iterable, Tuple


def _as_tuple(value: Any) -> Tuple:
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(value)
    return (value,)


@dataclass(frozen=True)
class Query:
    """One filter, ordering or paging instruction for ``Databases.list_documents``."""

    method: str
    attribute: str = ""
    values: Tuple = ()

    @classmethod
    def equal(cls, attribute: str, value: Any) -> "Query":
        return cls("equal", attribute, _as_tuple(value))

    @classmethod
    def contains(cls, attribute: str, value: Any) -> "Query":
        return cls("contains", attribute, _as_tuple(value))

    @classmethod
    def or_(cls, queries: Iterable["Query"]) -> "Query":
        return cls("or", values=tuple(queries))

    @classmethod
    def limit(cls, limit: int) -> "Query":
        return cls("limit", values=(limit,))

    @classmethod
    def order_asc(cls, attribute: str) -> "Query":
        return cls("orderAsc", attribute)

    @classmethod
    def order_desc(cls, attribute: str) -> "Query":
        return cls("orderDesc", attribute)

    @property
    def is_filter(self) -> bool:
        return self.method in ("equal", "contains", "or")
