"""Wrapper de httpx para el backend RRHH.

Por qué un wrapper:
- Estandariza base URL, headers, bearer token y logging de todas las llamadas.
- Decodifica errores HTTP a excepciones tipadas en un único sitio.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.

Política: sin reintentos, sin backoff y, salvo configuración explícita, sin
timeout. Un fallo se propaga una sola vez al llamador.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

import httpx

from core.config import AppSettings
from core.session import Session
from core.errors import ApiError, TransportError

logger = logging.getLogger(__name__)

AuthPolicy = Literal["required", "optional", "none"]


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` apuntando al host fijo del backend.

    Por qué un builder:
    - Centraliza base URL/headers para que todos los recursos se comporten igual.
    - `transport` permite sustituir la red en tests.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=headers,
        transport=transport,
    )


def extract_message(payload: Any) -> str | None:
    """Mensaje legible del backend (`{"message": ...}`), si lo hay."""

    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


def unwrap_payload(payload: Any) -> Any:
    """Quita el sobre `{"success": ..., "data": X}` cuando existe."""

    if isinstance(payload, dict) and payload.get("data") is not None:
        return payload["data"]
    return payload


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class ResourceClient:
    """Cliente autenticado para las rutas `/api/...` del backend.

    La sesión se recibe de forma explícita; con `auth="required"` (por defecto)
    la ausencia de token corta la operación antes de tocar la red.
    """

    def __init__(
        self,
        session: Session,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._settings = settings or AppSettings()
        self._client = client or build_async_client(self._settings, transport=transport)
        self._owns_client = client is None

    @property
    def session(self) -> Session:
        return self._session

    async def __aenter__(self) -> "ResourceClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self, auth: AuthPolicy) -> dict[str, str]:
        if auth == "none":
            return {}
        if auth == "required":
            self._session.require_token()
        return self._session.bearer_headers()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        auth: AuthPolicy = "required",
    ) -> Any:
        headers = self._headers(auth)
        logger.debug("%s %s", method, path)
        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise TransportError(str(exc)) from exc

        payload = _decode_body(response)
        if response.is_error:
            logger.warning("%s %s -> HTTP %s", method, path, response.status_code)
            raise ApiError(response.status_code, extract_message(payload), payload)
        return unwrap_payload(payload)

    async def get(self, path: str, *, auth: AuthPolicy = "required") -> Any:
        return await self.request("GET", path, auth=auth)

    async def post(self, path: str, json: Any = None, *, auth: AuthPolicy = "required") -> Any:
        return await self.request("POST", path, json=json, auth=auth)

    async def put(self, path: str, json: Any = None, *, auth: AuthPolicy = "required") -> Any:
        return await self.request("PUT", path, json=json, auth=auth)

    async def delete(self, path: str, *, auth: AuthPolicy = "required") -> Any:
        return await self.request("DELETE", path, auth=auth)
