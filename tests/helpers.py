from __future__ import annotations

import httpx

URL = "https://mock.supabase.co"
KEY = "test-api-key"


class Stub:
    """Records every request and answers with a canned response."""

    def __init__(self, status_code: int = 200, text: str = "[]") -> None:
        self.status_code = status_code
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.text)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]
