"""Contratos de la capa de presentación.

Por qué Protocol:
- Los controladores de formularios y listas no saben si corren detrás de una
  CLI, de una UI web o de un test: solo piden navegar, notificar o confirmar.
- Duck typing estructural, sin herencia rígida.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Navigator(Protocol):
    """Destino tras un envío correcto (ruta de la aplicación)."""

    def navigate(self, route: str) -> None:
        ...


@runtime_checkable
class Notifier(Protocol):
    """Notificaciones transitorias visibles para el usuario."""

    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


@runtime_checkable
class Confirmer(Protocol):
    """Confirmación explícita antes de una acción destructiva."""

    def confirm(self, message: str) -> bool:
        ...
