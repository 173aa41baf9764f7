"""Test helper functions."""

import json
from typing import Any, Callable, Dict, Optional

import httpx

from petconnect.models.user import Session
from petconnect.services.backend_client import BackendClient
from petconnect.utils.settings import Settings

# Frozen "now" for meeting-time tests: Monday 2025-06-02 12:00 UTC
FROZEN_NOW = "2025-06-02 12:00:00"


class RecordingBackend:
    """
    httpx.MockTransport handler that serves canned responses by (method, path)
    and records every request it sees.
    """

    def __init__(self, routes: Optional[Dict[tuple, Any]] = None):
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, response: Any) -> None:
        self.routes[(method, path)] = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={"msg": f"No route for {request.method} {path}"})
        if callable(route):
            return route(request)
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, json=route)

    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    session: Optional[Session] = None
) -> BackendClient:
    """BackendClient wired to an in-process mock transport."""
    return BackendClient(
        session or Session(token="test-token"),
        settings=Settings(api_base_url="http://petconnect.test/api", http_timeout_seconds=5.0),
        transport=httpx.MockTransport(handler),
    )
