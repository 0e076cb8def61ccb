"""List/table view controllers.

A list view fetches a collection once, renders it, and offers two row
actions: edit (navigate to the form) and delete. Deletion always asks for
confirmation and removes the row from local state only after the backend
acknowledged it.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Generic, TypeVar

from adapters.grh_api import MenusApi, ProfilsApi, UsersApi
from core.domain.language import Language
from core.domain.messages import translate
from core.domain.models import GrhRecord, Menu, Profil, User
from core.errors import GrhError
from core.interfaces.ui import Confirmer, Navigator, Notifier
from core.services.feedback import describe_error

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=GrhRecord)


class ListView(Generic[ItemT]):
    """Base list controller; subclasses provide `fetch`, `remove` and `edit_route`."""

    entity: ClassVar[str]

    def __init__(
        self,
        *,
        navigator: Navigator,
        notifier: Notifier,
        confirmer: Confirmer,
        language: Language = Language.FRENCH,
    ) -> None:
        self.navigator = navigator
        self.notifier = notifier
        self.confirmer = confirmer
        self.language = language
        self.items: list[ItemT] = []
        self.loading = False
        self.error: str | None = None
        self.success_message: str | None = None

    async def fetch(self) -> list[ItemT]:
        raise NotImplementedError

    async def remove(self, item_id: str) -> None:
        raise NotImplementedError

    def edit_route(self, item: ItemT) -> str:
        raise NotImplementedError

    async def load(self) -> bool:
        self.loading = True
        try:
            self.items = await self.fetch()
        except GrhError as exc:
            self._report(describe_error(exc, self.language, "list_failed", entity=self.entity))
            return False
        finally:
            self.loading = False
        return True

    def find(self, item_id: str) -> ItemT | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def edit(self, item: ItemT) -> str:
        route = self.edit_route(item)
        self.navigator.navigate(route)
        return route

    async def delete(self, item_id: str) -> bool:
        """Confirm, delete remotely, then drop the row. Returns True when removed."""

        if not self._confirmed(self.entity):
            return False
        try:
            await self.remove(item_id)
        except GrhError as exc:
            self._report(describe_error(exc, self.language, "delete_failed", entity=self.entity))
            return False
        self.items = [item for item in self.items if item.id != item_id]
        self._succeed(translate("deleted", self.language, entity=self.entity))
        return True

    def _confirmed(self, entity: str) -> bool:
        return self.confirmer.confirm(translate("delete_confirm", self.language, entity=entity))

    def _report(self, message: str) -> None:
        self.error = message
        self.notifier.error(message)

    def _succeed(self, message: str) -> None:
        self.success_message = message
        self.notifier.success(message)


class MenuListView(ListView[Menu]):
    """Menu tree with one expandable row at a time."""

    entity = "menu"

    def __init__(self, menus: MenusApi, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.menus = menus
        self.expanded_id: str | None = None

    async def fetch(self) -> list[Menu]:
        return await self.menus.list()

    async def remove(self, item_id: str) -> None:
        await self.menus.delete(item_id)

    def edit_route(self, item: Menu) -> str:
        return f"/CreateMenu/{item.id}"

    @property
    def expanded(self) -> Menu | None:
        if self.expanded_id is None:
            return None
        return self.find(self.expanded_id)

    def toggle(self, menu_id: str) -> Menu | None:
        """Expand `menu_id`, or collapse it when it is already the expanded row."""

        self.expanded_id = None if self.expanded_id == menu_id else menu_id
        return self.expanded

    async def delete(self, item_id: str) -> bool:
        removed = await super().delete(item_id)
        if removed and self.expanded_id == item_id:
            self.expanded_id = None
        return removed

    async def delete_sous_menu(self, sous_menu_id: str) -> bool:
        """Delete a child of the expanded row; no-op when nothing is expanded."""

        parent = self.expanded
        if parent is None:
            return False
        if not self._confirmed("sous_menu"):
            return False
        try:
            await self.menus.delete_sous_menu(sous_menu_id)
        except GrhError as exc:
            self._report(describe_error(exc, self.language, "delete_failed", entity="sous_menu"))
            return False
        parent.sous_menus = [child for child in parent.sous_menus if child.id != sous_menu_id]
        self._succeed(translate("deleted", self.language, entity="sous_menu"))
        return True


class ProfilListView(ListView[Profil]):
    entity = "profil"

    def __init__(self, profils: ProfilsApi, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.profils = profils

    async def fetch(self) -> list[Profil]:
        return await self.profils.list()

    async def remove(self, item_id: str) -> None:
        await self.profils.delete(item_id)

    def edit_route(self, item: Profil) -> str:
        return f"/CreateProfile/{item.id}"


class UserListView(ListView[User]):
    entity = "user"

    def __init__(self, users: UsersApi, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.users = users

    async def fetch(self) -> list[User]:
        return await self.users.list()

    async def remove(self, item_id: str) -> None:
        await self.users.delete(item_id)

    def edit_route(self, item: User) -> str:
        return f"/CreateUser/{item.id}"
