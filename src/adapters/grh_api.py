"""Endpoints tipados del backend RRHH.

Cada clase envuelve un recurso REST y devuelve modelos del dominio ya
validados. Los formularios y listas nunca tocan diccionarios crudos de la
respuesta: si el payload no encaja con el modelo, se levanta `DecodeError`.
"""

from __future__ import annotations

from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from adapters.http_client import ResourceClient
from core.domain.models import (
    Article,
    Avenant,
    Contrat,
    DashboardStats,
    Menu,
    Mission,
    Profil,
    SousMenu,
    User,
)
from core.errors import DecodeError

ModelT = TypeVar("ModelT", bound=BaseModel)


def decode(model: type[ModelT], payload: Any) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise DecodeError(f"unexpected {model.__name__} payload: {exc}") from exc


def decode_list(model: type[ModelT], payload: Any, *, key: str | None = None) -> list[ModelT]:
    """Decode a collection, optionally nested under `key` (`{"menus": [...]}`)."""

    if key is not None and isinstance(payload, dict):
        payload = payload.get(key) or []
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise DecodeError(f"expected a list of {model.__name__}, got {type(payload).__name__}")
    return [decode(model, item) for item in payload]


def decode_optional(model: type[ModelT], payload: Any) -> ModelT | None:
    """Write endpoints do not all echo the record back; keep it when they do.

    Message-only answers (`{"message": ...}`) carry no `_id` and yield `None`.
    """

    if isinstance(payload, dict) and payload.get("_id"):
        try:
            return model.model_validate(payload)
        except ValidationError:
            return None
    return None


class EntityEndpoint(Generic[ModelT]):
    """CRUD de un recurso `/api/<plural>`."""

    path: ClassVar[str]
    model: ClassVar[type[BaseModel]]

    def __init__(self, client: ResourceClient) -> None:
        self._client = client

    @property
    def client(self) -> ResourceClient:
        return self._client

    def item_path(self, entity_id: str) -> str:
        return f"{self.path}/{entity_id}"

    async def get(self, entity_id: str) -> ModelT:
        return decode(self.model, await self._client.get(self.item_path(entity_id)))  # type: ignore[return-value]

    async def list(self) -> list[ModelT]:
        return decode_list(self.model, await self._client.get(self.path))  # type: ignore[return-value]

    async def create(self, payload: dict[str, Any]) -> ModelT | None:
        return decode_optional(self.model, await self._client.post(self.path, payload))  # type: ignore[return-value]

    async def update(self, entity_id: str, payload: dict[str, Any]) -> ModelT | None:
        raw = await self._client.put(self.item_path(entity_id), payload)
        return decode_optional(self.model, raw)  # type: ignore[return-value]

    async def delete(self, entity_id: str) -> None:
        await self._client.delete(self.item_path(entity_id))


class ArticlesApi(EntityEndpoint[Article]):
    path = "/api/articles"
    model = Article


class AvenantsApi(EntityEndpoint[Avenant]):
    path = "/api/avenants"
    model = Avenant


class MissionsApi(EntityEndpoint[Mission]):
    path = "/api/missions"
    model = Mission

    @staticmethod
    def _unnest(payload: Any) -> Any:
        # Mission writes answer `{"mission": {...}, "notification": {...}}`.
        if isinstance(payload, dict) and isinstance(payload.get("mission"), dict):
            return payload["mission"]
        return payload

    async def create(self, payload: dict[str, Any]) -> Mission | None:
        return decode_optional(Mission, self._unnest(await self._client.post(self.path, payload)))

    async def update(self, entity_id: str, payload: dict[str, Any]) -> Mission | None:
        raw = await self._client.put(self.item_path(entity_id), payload)
        return decode_optional(Mission, self._unnest(raw))


class ProfilsApi(EntityEndpoint[Profil]):
    path = "/api/profils"
    model = Profil


class UsersApi(EntityEndpoint[User]):
    path = "/api/users"
    model = User

    async def register(self, payload: dict[str, Any]) -> User | None:
        """Alta de usuario: el token se envía si existe, pero no es obligatorio."""

        return decode_optional(User, await self._client.post("/api/register", payload, auth="optional"))


class ContratsApi:
    """Solo lectura del contrato padre y regeneración de su PDF."""

    path = "/api/contrats"

    def __init__(self, client: ResourceClient) -> None:
        self._client = client

    async def get(self, contrat_id: str) -> Contrat:
        return decode(Contrat, await self._client.get(f"{self.path}/{contrat_id}"))

    async def update_pdf(self, contrat_id: str) -> None:
        await self._client.put(f"{self.path}/{contrat_id}/update-pdf")


class MenusApi:
    """Árbol de menús: menús de primer nivel con sus sous-menus embebidos."""

    path = "/api/menu"

    def __init__(self, client: ResourceClient) -> None:
        self._client = client

    async def list(self) -> list[Menu]:
        return decode_list(Menu, await self._client.get(self.path), key="menus")

    async def get(self, menu_id: str) -> Menu:
        return decode(Menu, await self._client.get(f"{self.path}/{menu_id}"))

    async def get_sous_menu(self, sous_menu_id: str) -> SousMenu:
        return decode(SousMenu, await self._client.get(f"{self.path}/sous-menu/{sous_menu_id}"))

    async def update(self, menu_id: str, payload: dict[str, Any]) -> Menu | None:
        return decode_optional(Menu, await self._client.put(f"{self.path}/{menu_id}", payload))

    async def update_sous_menu(self, sous_menu_id: str, payload: dict[str, Any]) -> SousMenu | None:
        raw = await self._client.put(f"{self.path}/sous-menu/{sous_menu_id}", payload)
        return decode_optional(SousMenu, raw)

    async def delete(self, menu_id: str) -> None:
        await self._client.delete(f"{self.path}/{menu_id}")

    async def delete_sous_menu(self, sous_menu_id: str) -> None:
        await self._client.delete(f"{self.path}/sousMenu/{sous_menu_id}")


class AuthMenusApi:
    """Rutas `/api/auth/...`: catálogo de perfiles, menús del usuario y alta de menú."""

    path = "/api/auth"

    def __init__(self, client: ResourceClient) -> None:
        self._client = client

    async def profils(self) -> list[Profil]:
        return decode_list(Profil, await self._client.get(f"{self.path}/profils"))

    async def mes_menus(self) -> list[Menu]:
        return decode_list(Menu, await self._client.get(f"{self.path}/mes-menus"), key="menus")

    async def create_menu(self, payload: dict[str, Any]) -> Menu | None:
        return decode_optional(Menu, await self._client.post(f"{self.path}/menus", payload))


class StatsApi:
    """Contadores del tablero de administración."""

    def __init__(self, client: ResourceClient) -> None:
        self._client = client

    async def _counter(self, path: str) -> dict[str, Any]:
        payload = await self._client.get(path)
        if not isinstance(payload, dict):
            raise DecodeError(f"expected a JSON object from {path}")
        return payload

    async def dashboard(self) -> DashboardStats:
        merged: dict[str, Any] = {}
        for path in (
            "/api/users/count",
            "/api/offres/active/count",
            "/api/candidatures/pending/count",
            "/api/hiring-rate",
        ):
            merged.update(await self._counter(path))
        return decode(DashboardStats, merged)
