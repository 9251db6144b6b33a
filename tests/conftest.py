from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from supabase_rest import SupabaseClient

from .helpers import KEY, URL, Stub


@pytest.fixture
def stub() -> Stub:
    return Stub()


@pytest.fixture
def make_client() -> Callable[..., SupabaseClient]:
    def _make(handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any) -> SupabaseClient:
        return SupabaseClient(URL, KEY, transport=httpx.MockTransport(handler), **kwargs)

    return _make


@pytest.fixture
def client(stub: Stub, make_client: Callable[..., SupabaseClient]) -> SupabaseClient:
    return make_client(stub)
