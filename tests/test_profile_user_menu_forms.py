"""Formularios sin contrato padre: profils, utilisateurs y menús."""

from __future__ import annotations

import pytest

from adapters.grh_api import AuthMenusApi, MenusApi, ProfilsApi, UsersApi
from core.domain.form_mode import Create, Edit, mode_from_identifier
from core.domain.models import MenuType
from core.services.entity_form import SubmitStatus
from core.services.forms import MenuForm, ProfilForm, UserForm
from core.services.side_effects import SideEffectStatus


class TestProfil:
    @pytest.mark.asyncio
    async def test_create_goes_home(self, client, backend, ui, navigator, notifier):
        backend.on("POST", "/api/profils", status=201, json={"_id": "p1", "name": "RH"})
        form = ProfilForm(ProfilsApi(client), Create(), **ui)
        form.set_field("name", "RH")

        result = await form.submit()

        assert result.ok
        assert result.record.id == "p1"
        assert result.side_effect.status is SideEffectStatus.NOT_REQUIRED
        assert backend.body(backend.requests[0]) == {"name": "RH"}
        assert navigator.routes == ["/"]
        assert notifier.successes == ["Profil ajouté avec succès !"]

    @pytest.mark.asyncio
    async def test_edit_round(self, client, backend, ui, notifier):
        backend.on("GET", "/api/profils/p1", json={"_id": "p1", "name": "RH"})
        backend.on("PUT", "/api/profils/p1", json={"_id": "p1", "name": "Direction"})
        form = ProfilForm(ProfilsApi(client), mode_from_identifier("p1"), **ui)

        await form.load()
        assert form.fields == {"name": "RH"}
        form.set_field("name", "Direction")
        result = await form.submit()

        assert result.ok
        assert backend.body(backend.calls("PUT", "/api/profils/p1")[0]) == {"name": "Direction"}
        assert notifier.successes == ["Profil modifié avec succès !"]

    @pytest.mark.asyncio
    async def test_profiles_require_a_token(self, make_client, backend, ui, notifier):
        form = ProfilForm(ProfilsApi(make_client(token=None)), Create(), **ui)
        form.set_field("name", "RH")

        result = await form.submit()

        assert result.status is SubmitStatus.FAILED
        assert notifier.errors == ["Authentification requise"]
        assert backend.requests == []


class TestUser:
    @pytest.mark.asyncio
    async def test_creation_registers_and_clears_fields(self, client, backend, ui, navigator):
        backend.on("POST", "/api/register", status=201, json={"message": "Utilisateur créé"})
        form = UserForm(UsersApi(client), Create(), **ui)
        form.update_fields(nom="Awa", email="awa@example.com", motDePasse="s3cret")

        result = await form.submit()

        assert result.ok
        (post,) = backend.calls("POST", "/api/register")
        assert backend.body(post) == {"nom": "Awa", "email": "awa@example.com", "motDePasse": "s3cret"}
        assert form.fields == {"nom": None, "email": None, "motDePasse": None}
        assert navigator.routes == ["/UserList"]

    @pytest.mark.asyncio
    async def test_registration_works_without_token(self, make_client, backend, ui):
        backend.on("POST", "/api/register", status=201, json={})
        form = UserForm(UsersApi(make_client(token=None)), Create(), **ui)
        form.update_fields(nom="Awa", email="awa@example.com", motDePasse="s3cret")

        assert (await form.submit()).ok
        assert "Authorization" not in backend.requests[0].headers

    @pytest.mark.asyncio
    async def test_password_required_on_creation(self, client, backend, ui):
        form = UserForm(UsersApi(client), Create(), **ui)
        form.update_fields(nom="Awa", email="awa@example.com")

        result = await form.submit()

        assert result.missing == ["motDePasse"]
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_edit_never_prefills_or_sends_blank_password(self, client, backend, ui, navigator):
        backend.on("GET", "/api/users/u1", json={"_id": "u1", "nom": "Awa", "email": "awa@example.com", "motDePasse": "hash"})
        backend.on("PUT", "/api/users/u1", json={"_id": "u1", "nom": "Awa D.", "email": "awa@example.com"})
        form = UserForm(UsersApi(client), Edit("u1"), **ui)

        await form.load()
        assert form.fields["motDePasse"] is None
        form.set_field("nom", "Awa D.")
        result = await form.submit()

        assert result.ok
        (put,) = backend.calls("PUT", "/api/users/u1")
        assert backend.body(put) == {"nom": "Awa D.", "email": "awa@example.com"}
        assert navigator.routes == ["/UserList"]

    @pytest.mark.asyncio
    async def test_failed_creation_keeps_fields(self, client, backend, ui):
        backend.on("POST", "/api/register", status=400, json={"message": "Email déjà utilisé"})
        form = UserForm(UsersApi(client), Create(), **ui)
        form.update_fields(nom="Awa", email="awa@example.com", motDePasse="s3cret")

        result = await form.submit()

        assert result.status is SubmitStatus.FAILED
        assert form.error == "Email déjà utilisé"
        assert form.fields["email"] == "awa@example.com"


def menu_form(client, ui, mode=None):
    return MenuForm(MenusApi(client), AuthMenusApi(client), mode or Create(), **ui)


class TestMenu:
    @pytest.mark.asyncio
    async def test_create_top_level_menu(self, client, backend, ui, navigator):
        backend.on("POST", "/api/auth/menus", status=201, json={"success": True, "data": {"_id": "m1", "nom": "RH"}})
        form = menu_form(client, ui)
        form.update_fields(nom="RH", route="/rh", iconUrl="/icons/rh.svg", id_profil="p1")

        result = await form.submit()

        assert result.ok
        (post,) = backend.calls("POST", "/api/auth/menus")
        assert backend.body(post) == {
            "nom": "RH",
            "route": "/rh",
            "menuType": "menu",
            "parent": None,
            "id_profil": "p1",
            "iconUrl": "/icons/rh.svg",
        }
        assert navigator.routes == ["/ListeMenu"]

    @pytest.mark.asyncio
    async def test_sous_menu_needs_parent_on_creation(self, client, backend, ui):
        form = menu_form(client, ui)
        form.set_field("menuType", "sous-menu")
        form.update_fields(nom="Congés", route="/conges")

        result = await form.submit()

        assert result.status is SubmitStatus.INVALID
        assert result.missing == ["parent"]
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_sous_menu_payload_keeps_parent_and_drops_blank_profile(self, client, backend, ui):
        backend.on("POST", "/api/auth/menus", status=201, json={})
        form = menu_form(client, ui)
        form.set_field("iconUrl", "/icons/x.svg")
        form.set_field("menuType", MenuType.SOUS_MENU)
        form.update_fields(nom="Congés", route="/conges", parent="m1", id_profil="  ")

        assert (await form.submit()).ok

        body = backend.body(backend.calls("POST", "/api/auth/menus")[0])
        assert body["parent"] == "m1"
        assert body["iconUrl"] is None
        assert body["menuType"] == "sous-menu"
        assert "id_profil" not in body

    def test_switching_back_to_menu_clears_parent(self, client, ui):
        form = menu_form(client, ui)
        form.set_field("menuType", MenuType.SOUS_MENU)
        form.set_field("parent", "m1")

        form.set_field("menuType", MenuType.MENU)

        assert form.fields["parent"] is None

    @pytest.mark.asyncio
    async def test_edit_sous_menu(self, client, backend, ui, navigator):
        backend.on("GET", "/api/menu/sous-menu/s1", json={"_id": "s1", "nom": "Congés", "route": "/conges"})
        backend.on("PUT", "/api/menu/sous-menu/s1", json={"_id": "s1", "nom": "Absences", "route": "/conges"})
        form = menu_form(client, ui, Edit("s1"))

        await form.load()
        assert form.fields["menuType"] is MenuType.SOUS_MENU
        form.set_field("nom", "Absences")
        result = await form.submit()

        assert result.ok
        assert result.record.nom == "Absences"
        assert len(backend.calls("PUT", "/api/menu/sous-menu/s1")) == 1
        assert navigator.routes == ["/ListeMenu"]

    @pytest.mark.asyncio
    async def test_edit_falls_back_to_top_level_menu(self, client, backend, ui):
        backend.on("GET", "/api/menu/m1", json={"_id": "m1", "nom": "RH", "route": "/rh", "iconUrl": "/i.svg", "menuType": "menu"})
        backend.on("PUT", "/api/menu/m1", json={"_id": "m1", "nom": "RH", "route": "/rh"})
        form = menu_form(client, ui, Edit("m1"))

        assert await form.load()
        assert form.fields["iconUrl"] == "/i.svg"
        result = await form.submit()

        assert result.ok
        assert [r.url.path for r in backend.requests] == ["/api/menu/sous-menu/m1", "/api/menu/m1", "/api/menu/m1"]

    @pytest.mark.asyncio
    async def test_load_failure_other_than_not_found(self, client, backend, ui, notifier):
        backend.on("GET", "/api/menu/sous-menu/m1", status=500)
        form = menu_form(client, ui, Edit("m1"))

        assert await form.load() is False
        assert notifier.errors == ["Erreur lors du chargement du menu."]
        assert backend.calls("GET", "/api/menu/m1") == []

    @pytest.mark.asyncio
    async def test_load_options(self, client, backend, ui):
        backend.on("GET", "/api/auth/profils", json=[{"_id": "p1", "name": "RH"}])
        backend.on("GET", "/api/auth/mes-menus", json={"menus": [{"_id": "m1", "nom": "RH", "route": "/rh"}]})
        form = menu_form(client, ui)

        await form.load_options()

        assert [p.name for p in form.profil_choices] == ["RH"]
        assert [m.id for m in form.parent_choices] == ["m1"]


class TestWriteResponses:
    @pytest.mark.asyncio
    async def test_message_only_update_keeps_loaded_record(self, client, backend, ui):
        backend.on("GET", "/api/users/u1", json={"_id": "u1", "nom": "Awa", "email": "awa@example.com"})
        backend.on("PUT", "/api/users/u1", json={"message": "Utilisateur mis à jour avec succès"})
        form = UserForm(UsersApi(client), Edit("u1"), **ui)
        await form.load()
        form.set_field("nom", "Awa D.")

        result = await form.submit()

        assert result.ok
        assert result.record is None
        assert form.record.id == "u1"

    @pytest.mark.asyncio
    async def test_enveloped_message_without_record(self, client, backend, ui):
        backend.on("POST", "/api/profils", status=201, json={"success": True, "message": "Profil créé"})
        form = ProfilForm(ProfilsApi(client), Create(), **ui)
        form.set_field("name", "RH")

        result = await form.submit()

        assert result.ok
        assert result.record is None
