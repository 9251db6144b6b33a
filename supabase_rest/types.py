"""Type definitions for the Supabase REST client."""

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar

import httpx

from .exceptions import ValidationError


@dataclass(frozen=True)
class Timeouts:
    """Per-request timeouts in seconds."""

    connect: float = 40.0
    read: float = 30.0
    write: float = 30.0

    def to_httpx(self) -> httpx.Timeout:
        """Build the equivalent ``httpx.Timeout``.

        The pool timeout follows ``connect`` since every request opens its own
        connection.
        """
        return httpx.Timeout(
            connect=self.connect,
            read=self.read,
            write=self.write,
            pool=self.connect,
        )


@dataclass(frozen=True)
class Operation:
    """Base class for the terminal operation a query performs."""

    name: ClassVar[str] = ""


def _require_payload(payload: str) -> None:
    if not payload:
        raise ValidationError("payload must not be empty", field="payload")


@dataclass(frozen=True)
class Select(Operation):
    """Read rows, projecting ``fields``."""

    name: ClassVar[str] = "SELECT"

    fields: str = "*"


@dataclass(frozen=True)
class Insert(Operation):
    """Create rows from a JSON payload."""

    name: ClassVar[str] = "INSERT"

    payload: str

    def __post_init__(self) -> None:
        _require_payload(self.payload)


@dataclass(frozen=True)
class Update(Operation):
    """Patch the rows matched by the query conditions."""

    name: ClassVar[str] = "UPDATE"

    payload: str

    def __post_init__(self) -> None:
        _require_payload(self.payload)


@dataclass(frozen=True)
class Upsert(Operation):
    """Insert rows, merging on conflict with ``on_conflict`` columns."""

    name: ClassVar[str] = "UPSERT"

    payload: str
    on_conflict: tuple[str, ...]

    def __post_init__(self) -> None:
        _require_payload(self.payload)
        if isinstance(self.on_conflict, str):
            raise ValidationError(
                "on_conflict must be a sequence of column names", field="on_conflict"
            )
        columns = tuple(self.on_conflict)
        if not columns:
            raise ValidationError("on_conflict must not be empty", field="on_conflict")
        if len(set(columns)) != len(columns):
            raise ValidationError(
                f"on_conflict contains duplicate columns: {', '.join(columns)}",
                field="on_conflict",
            )
        object.__setattr__(self, "on_conflict", columns)


@dataclass(frozen=True)
class Delete(Operation):
    """Remove the rows matched by the query conditions."""

    name: ClassVar[str] = "DELETE"


@dataclass(frozen=True)
class PreparedRequest:
    """A fully assembled HTTP request, ready to send."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    content: str | None = None


def _as_text(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value) if isinstance(value, (dict, list)) else str(value)


@dataclass
class ExecuteError:
    """Error payload returned by the API on a non-2xx response.

    Any of the fields may be absent.
    """

    message: str | None = None
    hint: str | None = None
    details: str | None = None
    code: str | None = None

    @classmethod
    def from_response(cls, body: str) -> "ExecuteError":
        """Create ExecuteError from a raw response body.

        Bodies that are not a JSON object keep their text as the message.
        """
        try:
            data = json.loads(body) if body else None
        except ValueError:
            data = None

        if not isinstance(data, dict):
            return cls(message=body or None)

        return cls(
            message=_as_text(data.get("message")),
            hint=_as_text(data.get("hint")),
            details=_as_text(data.get("details")),
            code=_as_text(data.get("code")),
        )

    def describe(self) -> str:
        """Render every field, using ``null`` for the absent ones."""
        parts = []
        for key in ("message", "hint", "details", "code"):
            value = getattr(self, key)
            parts.append(f"{key}={'null' if value is None else value}")
        return " ".join(parts)
