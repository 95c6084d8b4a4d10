from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import httpx
import pytest

from typedrest.config import ClientSettings
from typedrest.transport.http import Transport


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeRestServer:
    """
    In-memory JSONPlaceholder look-alike served through httpx.MockTransport.

    Knobs for tests: `delays` (seconds per path), `status_overrides`
    (status per "METHOD /path"), `raw_bodies` (body text per path).
    """

    def __init__(self) -> None:
        self.collections: dict[str, dict[int, dict[str, Any]]] = {
            "posts": {
                1: {"id": 1, "title": "first", "body": "one", "userId": 1},
                2: {"id": 2, "title": "second", "body": "two", "userId": 1},
                3: {"id": 3, "title": "third", "body": "three", "userId": 2},
            },
            "users": {
                1: {"id": 1, "name": "Leanne", "email": "leanne@example.org", "phone": "555"},
            },
            "albums": {
                1: {"id": 1, "userId": 1, "title": "album"},
            },
            "comments": {
                1: {"id": 1, "postId": 1, "name": "c1", "email": "a@b.c", "body": "nice"},
                2: {"id": 2, "postId": 2, "name": "c2", "email": "a@b.c", "body": "meh"},
            },
        }
        self.delays: dict[str, float] = {}
        self.status_overrides: dict[str, int] = {}
        self.raw_bodies: dict[str, str] = {}
        self.requests: list[httpx.Request] = []
        self.started: list[str] = []
        self.completed: list[str] = []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    async def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append(request)
        self.started.append(path)
        if path in self.delays:
            await asyncio.sleep(self.delays[path])
        try:
            return self._route(request)
        finally:
            self.completed.append(path)

    def _json(self, status: int, payload: Any) -> httpx.Response:
        return httpx.Response(status, content=json.dumps(payload).encode(), headers={"Content-Type": "application/json"})

    def _route(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        key = f"{method} {path}"
        if key in self.status_overrides:
            return self._json(self.status_overrides[key], {})
        if path in self.raw_bodies:
            return httpx.Response(200, content=self.raw_bodies[path].encode())

        parts = [p for p in path.split("/") if p]
        if not parts or parts[0] not in self.collections:
            return self._json(404, {})
        table = self.collections[parts[0]]
        item_id: Optional[int] = int(parts[1]) if len(parts) > 1 else None

        if item_id is None:
            if method == "GET":
                rows = list(table.values())
                params = dict(request.url.params)
                start = int(params.pop("_start", 0))
                limit = params.pop("_limit", None)
                for k, v in params.items():
                    rows = [r for r in rows if str(r.get(k)) == v]
                rows = rows[start:]
                if limit is not None:
                    rows = rows[: int(limit)]
                return self._json(200, rows)
            if method == "POST":
                payload = json.loads(request.content)
                payload["id"] = max(table, default=0) + 1
                table[payload["id"]] = payload
                return self._json(201, payload)
            return self._json(405, {})

        if item_id not in table:
            return self._json(404, {})
        if method == "GET":
            return self._json(200, table[item_id])
        if method == "PUT":
            payload = json.loads(request.content)
            payload["id"] = item_id
            table[item_id] = payload
            return self._json(200, payload)
        if method == "PATCH":
            table[item_id] = {**table[item_id], **json.loads(request.content)}
            return self._json(200, table[item_id])
        if method == "DELETE":
            del table[item_id]
            return httpx.Response(204)
        return self._json(405, {})


@pytest.fixture
def server() -> FakeRestServer:
    return FakeRestServer()


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(host="api.test", timeout=2.0)


@pytest.fixture
async def transport(server: FakeRestServer, settings: ClientSettings):
    async with Transport(settings, transport=server.transport()) as t:
        yield t
