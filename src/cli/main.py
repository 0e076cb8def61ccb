"""CLI principal (Typer).

Cada comando construye un controlador del Core (formulario o lista), le
inyecta las implementaciones de consola de navegación/notificación/
confirmación y lo ejecuta con `asyncio.run`. La CLI no contiene lógica de
negocio: solo traduce opciones a campos y resultados a códigos de salida.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.grh_api import (
    ArticlesApi,
    AuthMenusApi,
    AvenantsApi,
    ContratsApi,
    MenusApi,
    MissionsApi,
    ProfilsApi,
    StatsApi,
    UsersApi,
)
from adapters.http_client import ResourceClient
from adapters.json_exporter import export_records_json, records_to_json
from cli import doctor
from cli.ui_components import (
    ConsoleConfirmer,
    ConsoleNavigator,
    ConsoleNotifier,
    build_menus_table,
    build_profils_table,
    build_stats_panel,
    build_users_table,
)
from core.config import AppSettings
from core.domain.form_mode import mode_from_identifier
from core.domain.models import MenuType, MissionStatus
from core.services.dashboard import load_dashboard_stats
from core.services.entity_form import EntityForm, SubmitResult
from core.services.forms import ArticleForm, AvenantForm, MenuForm, MissionForm, ProfilForm, UserForm
from core.services.list_views import ListView, MenuListView, ProfilListView, UserListView
from core.session import Session

app = typer.Typer(no_args_is_help=True, help="GRH dashboard: contrats, missions, profils, menus.")
articles_app = typer.Typer(no_args_is_help=True, help="Articles d'un contrat.")
avenants_app = typer.Typer(no_args_is_help=True, help="Avenants d'un contrat.")
missions_app = typer.Typer(no_args_is_help=True, help="Missions d'un contrat.")
profils_app = typer.Typer(no_args_is_help=True, help="Profils.")
users_app = typer.Typer(no_args_is_help=True, help="Utilisateurs.")
menus_app = typer.Typer(no_args_is_help=True, help="Menus et sous-menus.")

app.add_typer(articles_app, name="articles")
app.add_typer(avenants_app, name="avenants")
app.add_typer(missions_app, name="missions")
app.add_typer(profils_app, name="profils")
app.add_typer(users_app, name="users")
app.add_typer(menus_app, name="menus")
app.add_typer(doctor.app, name="doctor")

_DATE_FORMATS = ["%Y-%m-%d"]


@dataclass
class CliState:
    """Estado compartido entre comandos (settings, sesión, consola)."""

    settings: AppSettings = field(default_factory=AppSettings)
    console: Console = field(default_factory=Console)
    transport: httpx.AsyncBaseTransport | None = None
    as_json: bool = False
    assume_yes: bool = False

    @property
    def session(self) -> Session:
        return Session.from_settings(self.settings)

    def client(self) -> ResourceClient:
        return ResourceClient(self.session, self.settings, transport=self.transport)

    def ui(self) -> dict[str, Any]:
        return {
            "navigator": ConsoleNavigator(self.console),
            "notifier": ConsoleNotifier(self.console),
            "language": self.settings.language,
        }

    def list_ui(self) -> dict[str, Any]:
        return {**self.ui(), "confirmer": ConsoleConfirmer(assume_yes=self.assume_yes)}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def _root(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Salida JSON en lugar de tablas."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Confirmar borrados sin preguntar."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Logging DEBUG."),
) -> None:
    state = ctx.obj if isinstance(ctx.obj, CliState) else CliState()
    state.as_json = json_output
    state.assume_yes = yes
    configure_logging("DEBUG" if verbose else state.settings.log_level)
    ctx.obj = state


def _state(ctx: typer.Context) -> CliState:
    return ctx.obj


def _day(value: Optional[datetime]):
    return value.date() if value is not None else None


async def _run_form(form: EntityForm, values: dict[str, Any]) -> SubmitResult | None:
    """Carga (si edita), aplica las opciones recibidas y envía."""

    if not await form.load() and form.is_edit:
        return None
    form.update_fields(**{name: value for name, value in values.items() if value is not None})
    return await form.submit()


def _finish_form(state: CliState, result: SubmitResult | None) -> None:
    if result is None or not result.ok:
        raise typer.Exit(code=1)
    if state.as_json and result.record is not None:
        typer.echo(records_to_json(result.record))


def _finish_list(state: CliState, view: ListView, loaded: bool, table_builder, output: Optional[Path]) -> None:
    if not loaded:
        raise typer.Exit(code=1)
    if output is not None:
        export_records_json(records=view.items, output_path=output)
        state.console.print(f"[green]Saved:[/green] {output}")
    elif state.as_json:
        typer.echo(records_to_json(view.items))
    else:
        state.console.print(table_builder(view.items))


# -- articles / avenants / missions --------------------------------------


@articles_app.command("save")
def save_article(
    ctx: typer.Context,
    contrat: Optional[str] = typer.Option(None, "--contrat", help="Contrat parent."),
    article_id: Optional[str] = typer.Option(None, "--id", help="Article a modificar (omitir = alta)."),
    titre: Optional[str] = typer.Option(None, "--titre"),
    description: Optional[str] = typer.Option(None, "--description"),
) -> None:
    """Crear o modificar un article; regenera el PDF si el contrato está publicado."""

    state = _state(ctx)

    async def run() -> SubmitResult | None:
        async with state.client() as client:
            form = ArticleForm(
                ArticlesApi(client),
                ContratsApi(client),
                mode_from_identifier(article_id),
                parent_id=contrat,
                **state.ui(),
            )
            return await _run_form(form, {"titreArticle": titre, "description": description})

    _finish_form(state, asyncio.run(run()))


@avenants_app.command("save")
def save_avenant(
    ctx: typer.Context,
    contrat: Optional[str] = typer.Option(None, "--contrat", help="Contrat parent."),
    avenant_id: Optional[str] = typer.Option(None, "--id", help="Avenant a modificar (omitir = alta)."),
    titre: Optional[str] = typer.Option(None, "--titre"),
    date_effet: Optional[datetime] = typer.Option(None, "--date-effet", formats=_DATE_FORMATS),
    description: Optional[str] = typer.Option(None, "--description"),
) -> None:
    """Crear o modificar un avenant; regenera el PDF si el contrato está publicado."""

    state = _state(ctx)

    async def run() -> SubmitResult | None:
        async with state.client() as client:
            form = AvenantForm(
                AvenantsApi(client),
                ContratsApi(client),
                mode_from_identifier(avenant_id),
                parent_id=contrat,
                **state.ui(),
            )
            values = {"titre": titre, "dateEffet": _day(date_effet), "description": description}
            return await _run_form(form, values)

    _finish_form(state, asyncio.run(run()))


@missions_app.command("save")
def save_mission(
    ctx: typer.Context,
    contrat: Optional[str] = typer.Option(None, "--contrat", help="Contrat parent."),
    mission_id: Optional[str] = typer.Option(None, "--id", help="Mission a modificar (omitir = alta)."),
    titre: Optional[str] = typer.Option(None, "--titre"),
    description: Optional[str] = typer.Option(None, "--description"),
    date_debut: Optional[datetime] = typer.Option(None, "--date-debut", formats=_DATE_FORMATS),
    date_fin: Optional[datetime] = typer.Option(None, "--date-fin", formats=_DATE_FORMATS),
    statut: Optional[MissionStatus] = typer.Option(None, "--statut"),
    commentaires: Optional[str] = typer.Option(None, "--commentaires"),
) -> None:
    """Crear o modificar una mission (rechazada si el contrato aún no empezó)."""

    state = _state(ctx)

    async def run() -> SubmitResult | None:
        async with state.client() as client:
            form = MissionForm(
                MissionsApi(client),
                ContratsApi(client),
                mode_from_identifier(mission_id),
                parent_id=contrat,
                **state.ui(),
            )
            values = {
                "titre": titre,
                "description": description,
                "dateDebut": _day(date_debut),
                "dateFin": _day(date_fin),
                "statut": statut,
                "commentaires": commentaires,
            }
            return await _run_form(form, values)

    _finish_form(state, asyncio.run(run()))


# -- profils --------------------------------------------------------------


@profils_app.command("save")
def save_profil(
    ctx: typer.Context,
    profil_id: Optional[str] = typer.Option(None, "--id"),
    name: Optional[str] = typer.Option(None, "--name"),
) -> None:
    state = _state(ctx)

    async def run() -> SubmitResult | None:
        async with state.client() as client:
            form = ProfilForm(ProfilsApi(client), mode_from_identifier(profil_id), **state.ui())
            return await _run_form(form, {"name": name})

    _finish_form(state, asyncio.run(run()))


@profils_app.command("list")
def list_profils(
    ctx: typer.Context,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Exportar a JSON."),
) -> None:
    state = _state(ctx)

    async def run() -> tuple[ProfilListView, bool]:
        async with state.client() as client:
            view = ProfilListView(ProfilsApi(client), **state.list_ui())
            return view, await view.load()

    view, loaded = asyncio.run(run())
    _finish_list(state, view, loaded, build_profils_table, output)


@profils_app.command("delete")
def delete_profil(ctx: typer.Context, profil_id: str = typer.Argument(...)) -> None:
    state = _state(ctx)

    async def run() -> bool:
        async with state.client() as client:
            view = ProfilListView(ProfilsApi(client), **state.list_ui())
            return await view.delete(profil_id)

    if not asyncio.run(run()):
        raise typer.Exit(code=1)


# -- users ----------------------------------------------------------------


@users_app.command("save")
def save_user(
    ctx: typer.Context,
    user_id: Optional[str] = typer.Option(None, "--id"),
    nom: Optional[str] = typer.Option(None, "--nom"),
    email: Optional[str] = typer.Option(None, "--email"),
    mot_de_passe: Optional[str] = typer.Option(None, "--mot-de-passe", help="Obligatorio en alta."),
) -> None:
    state = _state(ctx)

    async def run() -> SubmitResult | None:
        async with state.client() as client:
            form = UserForm(UsersApi(client), mode_from_identifier(user_id), **state.ui())
            return await _run_form(form, {"nom": nom, "email": email, "motDePasse": mot_de_passe})

    _finish_form(state, asyncio.run(run()))


@users_app.command("list")
def list_users(
    ctx: typer.Context,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Exportar a JSON."),
) -> None:
    state = _state(ctx)

    async def run() -> tuple[UserListView, bool]:
        async with state.client() as client:
            view = UserListView(UsersApi(client), **state.list_ui())
            return view, await view.load()

    view, loaded = asyncio.run(run())
    _finish_list(state, view, loaded, build_users_table, output)


@users_app.command("delete")
def delete_user(ctx: typer.Context, user_id: str = typer.Argument(...)) -> None:
    state = _state(ctx)

    async def run() -> bool:
        async with state.client() as client:
            view = UserListView(UsersApi(client), **state.list_ui())
            return await view.delete(user_id)

    if not asyncio.run(run()):
        raise typer.Exit(code=1)


# -- menus ----------------------------------------------------------------


@menus_app.command("list")
def list_menus(
    ctx: typer.Context,
    expand: Optional[str] = typer.Option(None, "--expand", help="Menu cuyos sous-menus se muestran."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Exportar a JSON."),
) -> None:
    state = _state(ctx)

    async def run() -> tuple[MenuListView, bool]:
        async with state.client() as client:
            view = MenuListView(MenusApi(client), **state.list_ui())
            loaded = await view.load()
            if loaded and expand:
                view.toggle(expand)
            return view, loaded

    view, loaded = asyncio.run(run())

    def table(items):
        return build_menus_table(items, expanded_id=view.expanded_id)

    _finish_list(state, view, loaded, table, output)


@menus_app.command("delete")
def delete_menu(ctx: typer.Context, menu_id: str = typer.Argument(...)) -> None:
    state = _state(ctx)

    async def run() -> bool:
        async with state.client() as client:
            view = MenuListView(MenusApi(client), **state.list_ui())
            return await view.delete(menu_id)

    if not asyncio.run(run()):
        raise typer.Exit(code=1)


@menus_app.command("delete-sous-menu")
def delete_sous_menu(
    ctx: typer.Context,
    menu_id: str = typer.Argument(..., help="Menu padre."),
    sous_menu_id: str = typer.Argument(...),
) -> None:
    state = _state(ctx)

    async def run() -> bool:
        async with state.client() as client:
            view = MenuListView(MenusApi(client), **state.list_ui())
            if not await view.load():
                return False
            view.toggle(menu_id)
            return await view.delete_sous_menu(sous_menu_id)

    if not asyncio.run(run()):
        raise typer.Exit(code=1)


@menus_app.command("save")
def save_menu(
    ctx: typer.Context,
    menu_id: Optional[str] = typer.Option(None, "--id"),
    nom: Optional[str] = typer.Option(None, "--nom"),
    route: Optional[str] = typer.Option(None, "--route"),
    menu_type: Optional[MenuType] = typer.Option(None, "--type"),
    parent: Optional[str] = typer.Option(None, "--parent", help="Menu padre (sous-menu)."),
    profil: Optional[str] = typer.Option(None, "--profil", help="Perfil asociado."),
    icon_url: Optional[str] = typer.Option(None, "--icon-url"),
) -> None:
    state = _state(ctx)

    async def run() -> SubmitResult | None:
        async with state.client() as client:
            form = MenuForm(MenusApi(client), AuthMenusApi(client), mode_from_identifier(menu_id), **state.ui())
            if not await form.load() and form.is_edit:
                return None
            # Type first: switching it clears the field owned by the other type.
            if menu_type is not None:
                form.set_field("menuType", menu_type)
            values = {"nom": nom, "route": route, "parent": parent, "id_profil": profil, "iconUrl": icon_url}
            form.update_fields(**{name: value for name, value in values.items() if value is not None})
            return await form.submit()

    _finish_form(state, asyncio.run(run()))


# -- dashboard ------------------------------------------------------------


@app.command()
def dashboard(ctx: typer.Context) -> None:
    """Contadores del tablero de administración."""

    state = _state(ctx)

    async def run():
        async with state.client() as client:
            return await load_dashboard_stats(
                StatsApi(client),
                notifier=ConsoleNotifier(state.console),
                language=state.settings.language,
            )

    result = asyncio.run(run())
    if result.stats is None:
        raise typer.Exit(code=1)
    if state.as_json:
        typer.echo(records_to_json(result.stats))
    else:
        state.console.print(build_stats_panel(result.stats))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
