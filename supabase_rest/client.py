"""Supabase REST (PostgREST) HTTP client."""

import logging
import os
from collections.abc import Mapping, Sequence

import httpx

from .exceptions import (
    APIError,
    ConnectionError,
    TimeoutError,
    UnexpectedTransportError,
    UnknownOperationError,
    ValidationError,
)
from .query import Query
from .types import (
    Delete,
    ExecuteError,
    Insert,
    Operation,
    PreparedRequest,
    Select,
    Timeouts,
    Update,
    Upsert,
)

logger = logging.getLogger(__name__)

REST_PREFIX = "/rest/v1/"
MERGE_DUPLICATES = "resolution=merge-duplicates"


def _env_seconds(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a number of seconds, got {raw!r}", field=name)


class SupabaseClient:
    """HTTP client for a Supabase/PostgREST data API.

    Holds only immutable configuration: every request opens its own
    ``httpx.Client`` and closes it before returning, whatever the outcome.

    Args:
        url: Project base URL (e.g., "https://xyz.supabase.co").
        api_key: API key, sent both as ``apikey`` and as the bearer token.
        timeouts: Connect/read/write timeouts applied to every request.
        transport: Optional httpx transport used for every request
            (e.g., ``httpx.MockTransport`` in tests).

    Raises:
        ValidationError: If ``url`` or ``api_key`` is empty.

    Example:
        >>> client = SupabaseClient("https://xyz.supabase.co", "anon-key")
        >>> rows = client.from_("users").select("*").eq("active", "true").execute()
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        timeouts: Timeouts | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        if not url:
            raise ValidationError("url must not be empty", field="url")
        if not api_key:
            raise ValidationError("api key must not be empty", field="api_key")

        self.url = url.rstrip("/")
        self.api_key = api_key
        self.timeouts = timeouts or Timeouts()
        self._transport = transport

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> "SupabaseClient":
        """Build a client from ``SUPABASE_URL`` and ``SUPABASE_KEY``.

        ``SUPABASE_CONNECT_TIMEOUT``, ``SUPABASE_READ_TIMEOUT`` and
        ``SUPABASE_WRITE_TIMEOUT`` override the default timeouts.
        """
        if env is None:
            env = os.environ

        defaults = Timeouts()
        timeouts = Timeouts(
            connect=_env_seconds(env, "SUPABASE_CONNECT_TIMEOUT", defaults.connect),
            read=_env_seconds(env, "SUPABASE_READ_TIMEOUT", defaults.read),
            write=_env_seconds(env, "SUPABASE_WRITE_TIMEOUT", defaults.write),
        )
        return cls(
            env.get("SUPABASE_URL", ""),
            env.get("SUPABASE_KEY", ""),
            timeouts=timeouts,
            transport=transport,
        )

    def __repr__(self) -> str:
        return f"SupabaseClient(url={self.url!r})"

    @property
    def rest_url(self) -> str:
        return f"{self.url}{REST_PREFIX}"

    @property
    def headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    def from_(self, table: str) -> Query:
        """Start a query against ``table``.

        Raises:
            ValidationError: If ``table`` is empty.
        """
        if not table:
            raise ValidationError("table must not be empty", field="table")
        return Query(self, table)

    table = from_

    def build_request(
        self, query: Query, operation: Operation | None = None
    ) -> PreparedRequest:
        """Assemble the HTTP request for ``query`` without sending it.

        Args:
            query: Query supplying the table and conditions.
            operation: Operation to perform (defaults to ``query.operation``).

        Returns:
            The method, URL, headers and body to send.
        """
        if operation is None:
            operation = query.operation

        url = f"{self.rest_url}{query.table}"
        headers = self.headers
        conditions = query.query_string

        if isinstance(operation, Select):
            query_str = f"select={operation.fields}"
            if conditions:
                query_str += f"&{conditions}"
            return PreparedRequest("GET", f"{url}?{query_str}", headers)
        if isinstance(operation, Insert):
            return PreparedRequest("POST", url, headers, operation.payload)
        if isinstance(operation, Upsert):
            headers["Prefer"] = MERGE_DUPLICATES
            on_conflict = ",".join(operation.on_conflict)
            return PreparedRequest(
                "POST", f"{url}?on_conflict={on_conflict}", headers, operation.payload
            )

        if conditions:
            url += f"?{conditions}"
        if isinstance(operation, Update):
            return PreparedRequest("PATCH", url, headers, operation.payload)
        if isinstance(operation, Delete):
            return PreparedRequest("DELETE", url, headers)
        raise UnknownOperationError(f"Unknown operation: {operation!r}")

    def select(self, query: Query) -> str:
        """Run a SELECT for ``query`` and return the response body."""
        operation = Select(query.select_fields)
        return self.send(self.build_request(query, operation), operation.name)

    def insert(self, query: Query, payload: str) -> str:
        """INSERT ``payload`` into the query's table.

        Raises:
            ValidationError: If ``payload`` is empty.
        """
        operation = Insert(payload)
        return self.send(self.build_request(query, operation), operation.name)

    def upsert(self, query: Query, payload: str, on_conflict: Sequence[str]) -> str:
        """UPSERT ``payload``, merging rows that clash on ``on_conflict``.

        Raises:
            ValidationError: If ``payload`` is empty or ``on_conflict`` is
                empty or contains duplicates.
        """
        operation = Upsert(payload, on_conflict)
        return self.send(self.build_request(query, operation), operation.name)

    def update(self, query: Query, payload: str) -> str:
        """PATCH the rows matched by ``query`` with ``payload``.

        Raises:
            ValidationError: If ``payload`` is empty.
        """
        operation = Update(payload)
        return self.send(self.build_request(query, operation), operation.name)

    def delete(self, query: Query) -> str:
        """DELETE the rows matched by ``query``."""
        operation = Delete()
        return self.send(self.build_request(query, operation), operation.name)

    def rpc(self, name: str) -> str:
        """Call the database function ``name`` and return the response body.

        Raises:
            ValidationError: If ``name`` is empty.
        """
        if not name:
            raise ValidationError("rpc name must not be empty", field="rpc")
        request = PreparedRequest("POST", f"{self.rest_url}rpc/{name}", self.headers)
        return self.send(request, "RPC")

    def send(self, request: PreparedRequest, operation: str) -> str:
        """Perform one HTTP request and classify the outcome.

        The underlying connection is released before returning, on success,
        API error and transport failure alike.

        Args:
            request: Request to send.
            operation: Operation name used in errors and logs.

        Returns:
            The response body, unchanged, for any 2xx status.

        Raises:
            APIError: On a non-2xx response.
            TimeoutError: If the connect, read or write timeout is exceeded.
            ConnectionError: On a network or protocol failure.
            UnexpectedTransportError: On any other failure while sending.
        """
        logger.debug("%s %s %s", operation, request.method, request.url)
        try:
            with httpx.Client(
                timeout=self.timeouts.to_httpx(), transport=self._transport
            ) as client:
                response = client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    content=request.content,
                )
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out: %s", operation, request.url, e)
            raise TimeoutError(f"Timeout error: {e}", operation) from e
        except (httpx.NetworkError, httpx.ProtocolError) as e:
            logger.warning("%s %s network failure: %s", operation, request.url, e)
            raise ConnectionError(f"Network error: {e}", operation) from e
        except Exception as e:
            logger.warning("%s %s failed: %s", operation, request.url, e)
            raise UnexpectedTransportError(f"Unexpected error: {e}", operation) from e

        logger.debug("%s %s -> %d", operation, request.url, response.status_code)
        if response.is_success:
            return response.text

        error = APIError(
            operation, response.status_code, ExecuteError.from_response(response.text)
        )
        logger.warning("%s", error)
        raise error
