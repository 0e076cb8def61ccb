"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Las implementaciones de consola de `Navigator`, `Notifier` y `Confirmer`
  viven aquí para que los comandos solo orquesten controladores.
"""

from __future__ import annotations

from typing import Iterable

import typer
from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import DashboardStats, Menu, Profil, User


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos (JSON/pipelines).
    """

    title = Text("GRH Dashboard", style="bold cyan")
    subtitle = Text("Contrats • Missions • Profils • Menus", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


class ConsoleNotifier:
    """Notificaciones transitorias en la consola."""

    def __init__(self, console: Console) -> None:
        self._console = console

    def success(self, message: str) -> None:
        self._console.print(f"[green]✔[/green] {message}")

    def error(self, message: str) -> None:
        self._console.print(f"[red]✘[/red] {message}")


class ConsoleNavigator:
    """No hay router en terminal: se muestra la ruta de destino."""

    def __init__(self, console: Console) -> None:
        self._console = console
        self.route: str | None = None

    def navigate(self, route: str) -> None:
        self.route = route
        self._console.print(f"[dim]→ {route}[/dim]")


class ConsoleConfirmer:
    """Confirmación interactiva; `assume_yes` para scripts."""

    def __init__(self, *, assume_yes: bool = False) -> None:
        self._assume_yes = assume_yes

    def confirm(self, message: str) -> bool:
        if self._assume_yes:
            return True
        return typer.confirm(message, default=False)


def build_menus_table(menus: Iterable[Menu], *, expanded_id: str | None = None) -> Table:
    table = Table(title="Menus")
    table.add_column("", no_wrap=True)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Nom", style="cyan")
    table.add_column("Route", style="magenta")
    for menu in menus:
        is_open = menu.id is not None and menu.id == expanded_id
        marker = "-" if is_open else "+"
        table.add_row(marker, menu.id or "", menu.nom, menu.route)
        if is_open:
            for child in menu.sous_menus:
                table.add_row("", child.id or "", f"  └ {child.nom}", child.route)
    return table


def build_profils_table(profils: Iterable[Profil]) -> Table:
    table = Table(title="Profils")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Nom", style="cyan")
    for profil in profils:
        table.add_row(profil.id or "", profil.name)
    return table


def build_users_table(users: Iterable[User]) -> Table:
    table = Table(title="Utilisateurs")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Nom", style="cyan")
    table.add_column("Email", style="white")
    for user in users:
        table.add_row(user.id or "", user.nom, user.email)
    return table


def build_stats_panel(stats: DashboardStats) -> Panel:
    """Panel con los contadores del tablero."""

    body = Text()
    body.append("Utilisateurs inscrits: ", style="bold")
    body.append(f"{stats.users}\n")
    body.append("Offres actives: ", style="bold")
    body.append(f"{stats.active_offers}\n")
    body.append("Candidatures en cours: ", style="bold")
    body.append(f"{stats.pending_applications}\n")
    body.append("Taux d'embauche: ", style="bold")
    body.append(stats.hiring_rate_label)
    return Panel(body, title=Text("Tableau de bord", style="bold yellow"), border_style="yellow")
