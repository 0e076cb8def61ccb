"""Fixtures de tests: backend simulado y dobles de la capa de presentación."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from adapters.http_client import ResourceClient
from core.config import AppSettings
from core.session import Session

BASE_URL = "http://grh.test"


class FakeBackend:
    """Backend en memoria para `httpx.MockTransport`.

    Cada ruta se registra con `on(method, path, status, json)`; lo no
    registrado responde 404. Todas las peticiones quedan grabadas.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, json: Any = None) -> None:
        self.routes[(method.upper(), path)] = (status, json)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"message": "Route introuvable"})
        status, body = self.routes[key]
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def calls(self, method: str | None = None, path: str | None = None) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if (method is None or r.method == method.upper()) and (path is None or r.url.path == path)
        ]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        if not request.content:
            return None
        return json.loads(request.content)


class RecordingNavigator:
    def __init__(self) -> None:
        self.routes: list[str] = []

    def navigate(self, route: str) -> None:
        self.routes.append(route)


class RecordingNotifier:
    def __init__(self) -> None:
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


class StubConfirmer:
    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.questions: list[str] = []

    def confirm(self, message: str) -> bool:
        self.questions.append(message)
        return self.answer


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None, api_base_url=BASE_URL)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def make_client(backend: FakeBackend, settings: AppSettings) -> Callable[..., ResourceClient]:
    def factory(token: str | None = "tok-123") -> ResourceClient:
        session = Session(token=token)
        return ResourceClient(session, settings, transport=httpx.MockTransport(backend.handler))

    return factory


@pytest.fixture
def client(make_client: Callable[..., ResourceClient]) -> ResourceClient:
    return make_client()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def ui(navigator: RecordingNavigator, notifier: RecordingNotifier) -> dict[str, Any]:
    return {"navigator": navigator, "notifier": notifier}
