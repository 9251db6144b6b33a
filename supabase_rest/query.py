"""Fluent PostgREST query builder."""

from collections.abc import Sequence
from typing import TYPE_CHECKING

from .exceptions import UnknownOperationError
from .types import Delete, Insert, Operation, Select, Update, Upsert

if TYPE_CHECKING:
    from .client import SupabaseClient


class Query:
    """Builder for a single operation against one table.

    Obtained from :meth:`SupabaseClient.from_`. Filter, ordering and
    pagination calls append ``column=operator.value`` fragments in call order;
    exactly one of ``select``/``insert``/``update``/``upsert``/``delete``
    picks the operation (the last call wins, the default is ``select("*")``).
    Nothing is sent until :meth:`execute`.

    Values are appended verbatim, so callers are responsible for URL-safety.
    A query is single-use and must not be shared between threads.

    Example:
        >>> client.from_("users").select("id,name").eq("active", "true").limit(10).execute()
        '[{"id":1,"name":"Test"}]'
    """

    def __init__(self, client: "SupabaseClient", table: str):
        self._client = client
        self._table = table
        self._operation: Operation = Select()
        self._conditions: list[str] = []

    def __repr__(self) -> str:
        return (
            f"Query(table={self._table!r}, operation={self._operation.name}, "
            f"query={self.query_string!r})"
        )

    @property
    def table(self) -> str:
        return self._table

    @property
    def operation(self) -> Operation:
        return self._operation

    @property
    def conditions(self) -> tuple[str, ...]:
        return tuple(self._conditions)

    @property
    def query_string(self) -> str:
        """Conditions joined with ``&``."""
        return "&".join(self._conditions)

    @property
    def select_fields(self) -> str:
        if isinstance(self._operation, Select):
            return self._operation.fields
        return "*"

    @property
    def payload(self) -> str | None:
        return getattr(self._operation, "payload", None)

    @property
    def on_conflict(self) -> tuple[str, ...]:
        if isinstance(self._operation, Upsert):
            return self._operation.on_conflict
        return ()

    # Operations

    def select(self, fields: str = "*") -> "Query":
        """Read rows, returning ``fields`` (PostgREST ``select=`` syntax)."""
        self._operation = Select(fields)
        return self

    def insert(self, payload: str) -> "Query":
        """Insert the rows described by a JSON ``payload``.

        Raises:
            ValidationError: If ``payload`` is empty.
        """
        self._operation = Insert(payload)
        return self

    def update(self, payload: str) -> "Query":
        """Patch matching rows with a JSON ``payload``.

        Raises:
            ValidationError: If ``payload`` is empty.
        """
        self._operation = Update(payload)
        return self

    def upsert(self, payload: str, on_conflict: Sequence[str]) -> "Query":
        """Insert rows, merging with existing rows that clash on ``on_conflict``.

        Raises:
            ValidationError: If ``payload`` is empty or ``on_conflict`` is
                empty or contains duplicates.
        """
        self._operation = Upsert(payload, on_conflict)
        return self

    def delete(self) -> "Query":
        """Delete matching rows."""
        self._operation = Delete()
        return self

    # Filters

    def eq(self, column: str, value: str) -> "Query":
        return self._add_filter(column, "eq", value)

    def neq(self, column: str, value: str) -> "Query":
        return self._add_filter(column, "neq", value)

    def gt(self, column: str, value: str) -> "Query":
        return self._add_filter(column, "gt", value)

    def gte(self, column: str, value: str) -> "Query":
        return self._add_filter(column, "gte", value)

    def lt(self, column: str, value: str) -> "Query":
        return self._add_filter(column, "lt", value)

    def lte(self, column: str, value: str) -> "Query":
        return self._add_filter(column, "lte", value)

    def like(self, column: str, pattern: str) -> "Query":
        """Case-sensitive pattern match (``*`` or ``%`` wildcards)."""
        return self._add_filter(column, "like", pattern)

    def ilike(self, column: str, pattern: str) -> "Query":
        """Case-insensitive pattern match."""
        return self._add_filter(column, "ilike", pattern)

    def in_(self, column: str, values: Sequence[str]) -> "Query":
        """Match any of ``values``: ``column=in.(a,b,c)``."""
        self._conditions.append(f"{column}=in.({','.join(values)})")
        return self

    def is_null(self, column: str, is_null: bool = True) -> "Query":
        """``column=is.null``, or ``column=not.is.null`` when ``is_null`` is False."""
        value = "is.null" if is_null else "not.is.null"
        self._conditions.append(f"{column}={value}")
        return self

    def not_(self, column: str, operator: str, value: str) -> "Query":
        """Negate any operator: ``column=not.operator.value``."""
        self._conditions.append(f"{column}=not.{operator}.{value}")
        return self

    # Ordering and pagination

    def order_asc(self, column: str) -> "Query":
        self._conditions.append(f"order={column}.asc")
        return self

    def order_desc(self, column: str) -> "Query":
        self._conditions.append(f"order={column}.desc")
        return self

    def limit(self, count: int) -> "Query":
        self._conditions.append(f"limit={int(count)}")
        return self

    def offset(self, count: int) -> "Query":
        self._conditions.append(f"offset={int(count)}")
        return self

    def execute(self) -> str:
        """Send the query and return the raw response body.

        Raises:
            APIError: On a non-2xx response.
            TransportError: On timeout or network failure.
            UnknownOperationError: If no valid operation is set.
        """
        operation = self._operation
        if isinstance(operation, Select):
            return self._client.select(self)
        if isinstance(operation, Insert):
            return self._client.insert(self, operation.payload)
        if isinstance(operation, Upsert):
            return self._client.upsert(self, operation.payload, operation.on_conflict)
        if isinstance(operation, Update):
            return self._client.update(self, operation.payload)
        if isinstance(operation, Delete):
            return self._client.delete(self)
        raise UnknownOperationError(f"Unknown operation: {operation!r}")

    def _add_filter(self, column: str, op: str, value: str) -> "Query":
        self._conditions.append(f"{column}={op}.{value}")
        return self
