"""Supabase REST Python Client.

A small synchronous client for Supabase's PostgREST data API.

Usage:
    from supabase_rest import SupabaseClient

    client = SupabaseClient("https://xyz.supabase.co", "anon-key")

    # Query rows
    rows = client.from_("users").select("*").eq("active", "true").execute()

    # Insert a row
    client.from_("users").insert('{"name": "Alice"}').execute()

    # Update rows
    client.from_("users").eq("id", "4").update('{"name": "Fred"}').execute()

    # Delete rows
    client.from_("users").eq("id", "5").delete().execute()

Every call returns the raw JSON response body as a string.
"""

from .client import SupabaseClient
from .exceptions import (
    APIError,
    ConnectionError,
    SupabaseError,
    TimeoutError,
    TransportError,
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

__version__ = "0.1.0"
__all__ = [
    "SupabaseClient",
    "Query",
    "SupabaseError",
    "ValidationError",
    "UnknownOperationError",
    "APIError",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "UnexpectedTransportError",
    "ExecuteError",
    "Timeouts",
    "PreparedRequest",
    "Operation",
    "Select",
    "Insert",
    "Update",
    "Upsert",
    "Delete",
]
