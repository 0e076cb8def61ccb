"""Concrete dashboard forms.

Each form only declares what differs from the generic lifecycle in
`core.services.entity_form`: its fields, which of them are required, where
it reads and writes, and where the user lands afterwards.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, ClassVar

from adapters.grh_api import (
    ArticlesApi,
    AuthMenusApi,
    AvenantsApi,
    ContratsApi,
    EntityEndpoint,
    MenusApi,
    MissionsApi,
    ProfilsApi,
    UsersApi,
)
from core.domain.form_mode import FormMode
from core.domain.models import (
    Article,
    Avenant,
    ContractScoped,
    Contrat,
    Menu,
    MenuType,
    Mission,
    MissionStatus,
    Profil,
    SousMenu,
    User,
)
from core.errors import ApiError, ContractNotStarted, ContractUnavailable, GrhError
from core.services.entity_form import EntityForm, RecordT, SubmitResult, is_blank
from core.services.feedback import describe_error
from core.services.side_effects import NOT_REQUIRED, SideEffectResult, refresh_contract_document

logger = logging.getLogger(__name__)


class EndpointForm(EntityForm[RecordT]):
    """Form backed by a single `/api/<plural>` resource."""

    def __init__(self, endpoint: EntityEndpoint[RecordT], mode: FormMode, **kwargs: Any) -> None:
        super().__init__(mode, **kwargs)
        self.endpoint = endpoint

    async def fetch(self, entity_id: str) -> RecordT:
        return await self.endpoint.get(entity_id)

    async def create(self, payload: dict[str, Any]) -> RecordT | None:
        return await self.endpoint.create(payload)

    async def update(self, entity_id: str, payload: dict[str, Any]) -> RecordT | None:
        return await self.endpoint.update(entity_id, payload)


class ContractChildForm(EndpointForm[RecordT]):
    """Article or avenant: lives under a contract whose PDF must follow."""

    parent_field = "contrat"

    def __init__(self, endpoint: EntityEndpoint[RecordT], contrats: ContratsApi, mode: FormMode, **kwargs: Any) -> None:
        super().__init__(endpoint, mode, **kwargs)
        self.contrats = contrats

    def parent_from(self, record: RecordT) -> str | None:
        if isinstance(record, ContractScoped):
            return record.contrat_id
        return None

    def build_payload(self) -> dict[str, Any]:
        payload = super().build_payload()
        # The contract link is fixed at creation; updates only touch own fields.
        if not self.is_edit:
            payload["contrat"] = self.parent_id
        return payload

    async def run_side_effect(self) -> SideEffectResult:
        if not self.parent_id:
            return NOT_REQUIRED
        return await refresh_contract_document(self.contrats, self.parent_id)

    def destination(self) -> str:
        return f"/contrat-details/{self.parent_id}"


class ArticleForm(ContractChildForm[Article]):
    entity = "article"
    field_names = ("titreArticle", "description")
    required = ("titreArticle", "description")

    def __init__(self, articles: ArticlesApi, contrats: ContratsApi, mode: FormMode, **kwargs: Any) -> None:
        super().__init__(articles, contrats, mode, **kwargs)


class AvenantForm(ContractChildForm[Avenant]):
    entity = "avenant"
    field_names = ("titre", "dateEffet", "description")
    required = ("titre", "dateEffet", "description")

    def __init__(self, avenants: AvenantsApi, contrats: ContratsApi, mode: FormMode, **kwargs: Any) -> None:
        super().__init__(avenants, contrats, mode, **kwargs)


class MissionForm(EndpointForm[Mission]):
    """Mission of a contract; blocked while the contract has not started."""

    entity = "mission"
    field_names = ("titre", "description", "dateDebut", "dateFin", "statut", "commentaires")
    required = ("titre", "description", "dateDebut")
    defaults: ClassVar[dict[str, Any]] = {"statut": MissionStatus.A_FAIRE}

    def __init__(
        self,
        missions: MissionsApi,
        contrats: ContratsApi,
        mode: FormMode,
        *,
        today: Callable[[], date] = date.today,
        **kwargs: Any,
    ) -> None:
        super().__init__(missions, mode, **kwargs)
        self.contrats = contrats
        self.today = today
        self.contrat: Contrat | None = None

    def parent_from(self, record: Mission) -> str | None:
        return record.contrat_id

    async def load(self) -> bool:
        loaded = await super().load()
        await self.load_contract()
        return loaded

    async def load_contract(self) -> Contrat | None:
        """Fetch the parent contract so the start-date rule can be checked."""

        if not self.parent_id:
            return None
        try:
            self.contrat = await self.contrats.get(self.parent_id)
        except GrhError as exc:
            self._report(describe_error(exc, self.language, "contract_unavailable"))
            self.contrat = None
        return self.contrat

    async def check_preconditions(self) -> None:
        if self.contrat is None:
            raise ContractUnavailable(self.parent_id)
        start = self.contrat.date_debut
        today = self.today()
        if start is not None and today < start:
            raise ContractNotStarted(start, today)

    def set_field(self, name: str, value: Any) -> None:
        if name == "statut":
            # The backend enum has no empty member.
            value = MissionStatus.A_FAIRE if is_blank(value) else MissionStatus(value)
        super().set_field(name, value)

    def build_payload(self) -> dict[str, Any]:
        payload = super().build_payload()
        payload["contrat"] = self.parent_id
        return payload

    def destination(self) -> str:
        return "/contrat_entreprise"


class ProfilForm(EndpointForm[Profil]):
    entity = "profil"
    field_names = ("name",)
    required = ("name",)

    def __init__(self, profils: ProfilsApi, mode: FormMode, **kwargs: Any) -> None:
        super().__init__(profils, mode, **kwargs)

    def destination(self) -> str:
        return "/"


class UserForm(EndpointForm[User]):
    """Account form; creation goes through the registration route."""

    entity = "user"
    field_names = ("nom", "email", "motDePasse")
    required = ("nom", "email")

    def __init__(self, users: UsersApi, mode: FormMode, **kwargs: Any) -> None:
        super().__init__(users, mode, **kwargs)
        self.users = users

    def required_fields(self) -> tuple[str, ...]:
        if self.is_edit:
            return self.required
        return self.required + ("motDePasse",)

    def fields_from(self, record: User) -> dict[str, Any]:
        # Passwords are never pre-filled.
        return {"nom": record.nom, "email": record.email, "motDePasse": None}

    def build_payload(self) -> dict[str, Any]:
        payload = super().build_payload()
        if is_blank(payload.get("motDePasse")):
            payload.pop("motDePasse", None)
        return payload

    async def create(self, payload: dict[str, Any]) -> User | None:
        return await self.users.register(payload)

    async def submit(self) -> SubmitResult:
        result = await super().submit()
        if result.written:
            self.fields.update({name: None for name in self.field_names})
        return result

    def destination(self) -> str:
        return "/UserList"


class MenuForm(EntityForm[Menu]):
    """Menu or sub-menu, with the profile it belongs to."""

    entity = "menu"
    field_names = ("nom", "route", "menuType", "parent", "id_profil", "iconUrl")
    required = ("nom", "route", "menuType")
    defaults: ClassVar[dict[str, Any]] = {"menuType": MenuType.MENU}

    def __init__(self, menus: MenusApi, auth_menus: AuthMenusApi, mode: FormMode, **kwargs: Any) -> None:
        super().__init__(mode, **kwargs)
        self.menus = menus
        self.auth_menus = auth_menus
        self.profil_choices: list[Profil] = []
        self.parent_choices: list[Menu] = []

    @property
    def is_sous_menu(self) -> bool:
        return self.fields.get("menuType") == MenuType.SOUS_MENU

    def required_fields(self) -> tuple[str, ...]:
        if self.is_sous_menu and not self.is_edit:
            return self.required + ("parent",)
        return self.required

    def set_field(self, name: str, value: Any) -> None:
        if name == "menuType":
            value = MenuType(value)
            # Each type owns one field the other must not carry.
            if value is MenuType.SOUS_MENU:
                self.fields["iconUrl"] = None
            else:
                self.fields["parent"] = None
        super().set_field(name, value)

    async def load_options(self) -> None:
        """Profile and parent-menu choices offered by the form."""

        try:
            self.profil_choices = await self.auth_menus.profils()
            self.parent_choices = await self.auth_menus.mes_menus()
        except GrhError as exc:
            self._report(describe_error(exc, self.language, "list_failed", entity="menu"))

    async def fetch(self, entity_id: str) -> Menu:
        # The id may belong to a sub-menu or to a top-level menu.
        try:
            sous_menu = await self.menus.get_sous_menu(entity_id)
        except ApiError as exc:
            if exc.status_code != 404:
                raise
            return await self.menus.get(entity_id)
        return self._as_menu(sous_menu)

    @staticmethod
    def _as_menu(sous_menu: SousMenu) -> Menu:
        return Menu(
            _id=sous_menu.id,
            nom=sous_menu.nom,
            route=sous_menu.route,
            iconUrl=sous_menu.icon_url,
            menuType=MenuType.SOUS_MENU,
        )

    def fields_from(self, record: Menu) -> dict[str, Any]:
        return {
            "nom": record.nom,
            "route": record.route,
            "menuType": record.menu_type,
            "parent": record.parent if record.menu_type is MenuType.SOUS_MENU else None,
            "id_profil": self.fields.get("id_profil"),
            "iconUrl": record.icon_url if record.menu_type is MenuType.MENU else None,
        }

    def build_payload(self) -> dict[str, Any]:
        payload = super().build_payload()
        if not self.is_sous_menu:
            payload["parent"] = None
        if is_blank(payload.get("id_profil")):
            payload.pop("id_profil", None)
        return payload

    async def create(self, payload: dict[str, Any]) -> Menu | None:
        return await self.auth_menus.create_menu(payload)

    async def update(self, entity_id: str, payload: dict[str, Any]) -> Menu | None:
        if self.is_sous_menu:
            updated = await self.menus.update_sous_menu(entity_id, payload)
            return self._as_menu(updated) if updated is not None else None
        return await self.menus.update(entity_id, payload)

    def destination(self) -> str:
        return "/ListeMenu"


__all__ = [
    "ArticleForm",
    "AvenantForm",
    "MenuForm",
    "MissionForm",
    "ProfilForm",
    "UserForm",
]
