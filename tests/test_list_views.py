"""Listas con borrado confirmado (menús, profils, utilisateurs)."""

from __future__ import annotations

import pytest

from adapters.grh_api import MenusApi, ProfilsApi, UsersApi
from core.services.list_views import MenuListView, ProfilListView, UserListView
from conftest import StubConfirmer

MENUS = {
    "menus": [
        {
            "_id": "m1",
            "nom": "RH",
            "route": "/rh",
            "sousMenus": [
                {"_id": "s1", "nom": "Congés", "route": "/conges"},
                {"_id": "s2", "nom": "Paie", "route": "/paie"},
            ],
        },
        {"_id": "m2", "nom": "Admin", "route": "/admin", "sousMenus": []},
    ]
}


def menu_view(client, ui, answer=True):
    confirmer = StubConfirmer(answer)
    return MenuListView(MenusApi(client), confirmer=confirmer, **ui), confirmer


class TestMenuList:
    @pytest.mark.asyncio
    async def test_load_reads_nested_collection(self, client, backend, ui):
        backend.on("GET", "/api/menu", json=MENUS)
        view, _ = menu_view(client, ui)

        assert await view.load()

        assert [m.id for m in view.items] == ["m1", "m2"]
        assert [s.nom for s in view.items[0].sous_menus] == ["Congés", "Paie"]

    @pytest.mark.asyncio
    async def test_load_failure(self, client, backend, ui, notifier):
        backend.on("GET", "/api/menu", status=500)
        view, _ = menu_view(client, ui)

        assert await view.load() is False
        assert view.items == []
        assert notifier.errors == ["Erreur lors de la récupération des menus."]

    @pytest.mark.asyncio
    async def test_toggle_keeps_one_row_open(self, client, backend, ui):
        backend.on("GET", "/api/menu", json=MENUS)
        view, _ = menu_view(client, ui)
        await view.load()

        assert view.toggle("m1").id == "m1"
        assert view.toggle("m2").id == "m2"
        assert view.toggle("m2") is None
        assert view.expanded_id is None

    @pytest.mark.asyncio
    async def test_declined_confirmation_sends_nothing(self, client, backend, ui):
        backend.on("GET", "/api/menu", json=MENUS)
        view, confirmer = menu_view(client, ui, answer=False)
        await view.load()

        assert await view.delete("m1") is False

        assert confirmer.questions == ["Êtes-vous sûr de vouloir supprimer le menu ?"]
        assert backend.calls("DELETE") == []
        assert len(view.items) == 2

    @pytest.mark.asyncio
    async def test_confirmed_delete_removes_row(self, client, backend, ui, notifier):
        backend.on("GET", "/api/menu", json=MENUS)
        backend.on("DELETE", "/api/menu/m1", json={"message": "Menu supprimé"})
        view, _ = menu_view(client, ui)
        await view.load()
        view.toggle("m1")

        assert await view.delete("m1")

        assert [m.id for m in view.items] == ["m2"]
        assert view.expanded_id is None
        assert view.success_message == "Menu supprimé avec succès."
        assert notifier.successes == ["Menu supprimé avec succès."]

    @pytest.mark.asyncio
    async def test_failed_delete_keeps_row(self, client, backend, ui, notifier):
        backend.on("GET", "/api/menu", json=MENUS)
        backend.on("DELETE", "/api/menu/m1", status=500)
        view, _ = menu_view(client, ui)
        await view.load()

        assert await view.delete("m1") is False

        assert len(view.items) == 2
        assert view.error == "Erreur lors de la suppression du menu."
        assert notifier.errors == [view.error]

    @pytest.mark.asyncio
    async def test_delete_sous_menu_of_expanded_row(self, client, backend, ui, notifier):
        backend.on("GET", "/api/menu", json=MENUS)
        backend.on("DELETE", "/api/menu/sousMenu/s1", json={})
        view, confirmer = menu_view(client, ui)
        await view.load()
        view.toggle("m1")

        assert await view.delete_sous_menu("s1")

        assert [s.id for s in view.expanded.sous_menus] == ["s2"]
        assert confirmer.questions == ["Êtes-vous sûr de vouloir supprimer le sous-menu ?"]
        assert notifier.successes == ["Sous-menu supprimé avec succès."]

    @pytest.mark.asyncio
    async def test_delete_sous_menu_without_expanded_row_is_noop(self, client, backend, ui):
        backend.on("GET", "/api/menu", json=MENUS)
        view, confirmer = menu_view(client, ui)
        await view.load()

        assert await view.delete_sous_menu("s1") is False

        assert confirmer.questions == []
        assert backend.calls("DELETE") == []

    @pytest.mark.asyncio
    async def test_edit_navigates_to_form(self, client, backend, ui, navigator):
        backend.on("GET", "/api/menu", json=MENUS)
        view, _ = menu_view(client, ui)
        await view.load()

        view.edit(view.find("m2"))

        assert navigator.routes == ["/CreateMenu/m2"]


class TestProfilAndUserLists:
    @pytest.mark.asyncio
    async def test_profil_delete(self, client, backend, ui, navigator):
        backend.on("GET", "/api/profils", json=[{"_id": "p1", "name": "RH"}, {"_id": "p2", "name": "Admin"}])
        backend.on("DELETE", "/api/profils/p1", json={})
        view = ProfilListView(ProfilsApi(client), confirmer=StubConfirmer(), **ui)
        await view.load()

        assert await view.delete("p1")
        view.edit(view.items[0])

        assert [p.id for p in view.items] == ["p2"]
        assert navigator.routes == ["/CreateProfile/p2"]

    @pytest.mark.asyncio
    async def test_user_list_unwraps_envelope(self, client, backend, ui, navigator):
        backend.on("GET", "/api/users", json={"success": True, "data": [{"_id": "u1", "nom": "Awa", "email": "a@x.io"}]})
        view = UserListView(UsersApi(client), confirmer=StubConfirmer(), **ui)

        assert await view.load()
        view.edit(view.items[0])

        assert view.items[0].email == "a@x.io"
        assert navigator.routes == ["/CreateUser/u1"]

    @pytest.mark.asyncio
    async def test_user_delete_needs_token(self, make_client, backend, ui, notifier):
        view = UserListView(UsersApi(make_client(token=None)), confirmer=StubConfirmer(), **ui)

        assert await view.delete("u1") is False

        assert notifier.errors == ["Authentification requise"]
        assert backend.requests == []
