"""Shared fixtures: an in-memory session and a scripted fake backend."""

from typing import Any, Callable, Optional, Union

import httpx
import pytest
import pytest_asyncio

from gigline import AsyncGigline, SessionStore, ViewHooks
from gigline.config import Settings
from gigline.models.identity import Identity

BASE_URL = "https://api.test"
ME = {"id": 1, "email": "me@example.com", "name": "Mia", "role": "ARTIST"}
OTHER = {"id": 2, "name": "Olly", "role": "ORGANIZER"}

Route = Union[tuple[int, Any], Callable[[httpx.Request], httpx.Response]]


def message(id: Any, sender: dict[str, Any], content: str = "hi", seen: bool = False,
            created_at: str = "2024-05-01T10:00:00Z") -> dict[str, Any]:
    return {"id": id, "content": content, "createdAt": created_at, "sender": sender, "seen": seen}


class FakeBackend:
    """Routes (method, path) to canned responses and records every request."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Route] = {}
        self.calls: list[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, json: Any = None,
           handler: Optional[Callable[[httpx.Request], httpx.Response]] = None) -> None:
        self.routes[(method, path)] = handler or (status, json)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        if callable(route):
            return route(request)
        status, body = route
        return httpx.Response(status, json=body)

    def paths(self, method: Optional[str] = None) -> list[str]:
        return [r.url.path for r in self.calls if method is None or r.method == method]


class RecordingHooks(ViewHooks):
    def __init__(self, confirm_answer: bool = True) -> None:
        super().__init__()
        self.alerts: list[str] = []
        self.navigations: list[str] = []
        self.confirmations: list[str] = []
        self._answer = confirm_answer

    def navigate(self, conversation_id: str) -> None:
        super().navigate(conversation_id)
        self.navigations.append(conversation_id)

    def alert(self, message: str) -> None:
        self.alerts.append(message)

    def confirm(self, message: str) -> bool:
        self.confirmations.append(message)
        return self._answer


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def session() -> SessionStore:
    return SessionStore.in_memory("tok-123", Identity.from_api(ME))


@pytest.fixture
def hooks() -> RecordingHooks:
    return RecordingHooks()


@pytest_asyncio.fixture
async def client(backend, session):
    c = AsyncGigline(
        settings=Settings(base_url=BASE_URL),
        session=session,
        transport=httpx.MockTransport(backend),
    )
    yield c
    await c.close()


@pytest_asyncio.fixture
async def anonymous_client(backend):
    c = AsyncGigline(
        settings=Settings(base_url=BASE_URL),
        session=SessionStore.in_memory(),
        transport=httpx.MockTransport(backend),
    )
    yield c
    await c.close()
