"""Modelos del dominio (Pydantic v2) del tablero RRHH.

Por qué Pydantic en el dominio:
- Los payloads del backend se validan una sola vez, en el borde del cliente,
  en lugar de navegar diccionarios sin tipo en cada formulario.
- El backend expone `_id` y claves en francés (`titreArticle`, `dateEffet`);
  los alias mantienen el contrato de red y los atributos quedan en Python.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


def coerce_date(value: Any) -> Any:
    """Reduce ISO datetimes (`2024-03-01T00:00:00.000Z`) to their calendar day."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    if value == "":
        return None
    return value


def reference_id(value: Any) -> Any:
    """Normalise a back-reference that may be an id or an embedded document."""

    if isinstance(value, dict):
        return value.get("_id") or value.get("id")
    return value


class MissionStatus(str, Enum):
    A_FAIRE = "À faire"
    EN_COURS = "En cours"
    TERMINE = "Terminé"
    VALIDE = "Validé"
    ANNULEE = "Annulée"


class MenuType(str, Enum):
    MENU = "menu"
    SOUS_MENU = "sous-menu"


class GrhRecord(BaseModel):
    """Base de todos los registros persistidos por el backend."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str | None = Field(
        default=None,
        alias="_id",
        description="Identificador asignado por el backend (ausente antes de persistir).",
    )


class ContractScoped(GrhRecord):
    """Registro hijo de un contrato (artículo, avenant, misión)."""

    contrat_id: str | None = Field(
        default=None,
        alias="contrat",
        description="Contrato padre; el backend puede devolverlo embebido.",
    )

    @field_validator("contrat_id", mode="before")
    @classmethod
    def _unwrap_contrat(cls, value: Any) -> Any:
        return reference_id(value)


class Article(ContractScoped):
    titre_article: str = Field(default="", alias="titreArticle")
    description: str = Field(default="")


class Avenant(ContractScoped):
    titre: str = Field(default="")
    date_effet: date | None = Field(default=None, alias="dateEffet")
    description: str = Field(default="")

    @field_validator("date_effet", mode="before")
    @classmethod
    def _day(cls, value: Any) -> Any:
        return coerce_date(value)


class Mission(ContractScoped):
    titre: str = Field(default="")
    description: str = Field(default="")
    date_debut: date | None = Field(default=None, alias="dateDebut")
    date_fin: date | None = Field(default=None, alias="dateFin")
    statut: MissionStatus = Field(default=MissionStatus.A_FAIRE)
    commentaires: str | None = Field(default=None)

    @field_validator("date_debut", "date_fin", mode="before")
    @classmethod
    def _day(cls, value: Any) -> Any:
        return coerce_date(value)


class Contrat(GrhRecord):
    """Contrato padre: controla la regeneración del PDF y el alta de misiones."""

    titre: str | None = None
    date_debut: date | None = Field(default=None, alias="dateDebut")
    date_fin: date | None = Field(default=None, alias="dateFin")
    published: bool = Field(
        default=False,
        description="Solo un contrato publicado tiene documento derivado que regenerar.",
    )

    @field_validator("date_debut", "date_fin", mode="before")
    @classmethod
    def _day(cls, value: Any) -> Any:
        return coerce_date(value)


class Profil(GrhRecord):
    name: str = Field(default="")


class User(GrhRecord):
    nom: str = Field(default="")
    email: str = Field(default="")


class SousMenu(GrhRecord):
    nom: str = Field(default="")
    route: str = Field(default="")
    icon_url: str | None = Field(default=None, alias="iconUrl")


class Menu(GrhRecord):
    nom: str = Field(default="")
    route: str = Field(default="")
    icon_url: str | None = Field(default=None, alias="iconUrl")
    menu_type: MenuType = Field(default=MenuType.MENU, alias="menuType")
    parent: str | None = Field(default=None)
    sous_menus: list[SousMenu] = Field(default_factory=list, alias="sousMenus")

    @field_validator("parent", mode="before")
    @classmethod
    def _unwrap_parent(cls, value: Any) -> Any:
        return reference_id(value) or None


class DashboardStats(BaseModel):
    """Contadores del tablero de administración."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    users: int = Field(default=0, alias="totalUsers")
    active_offers: int = Field(default=0, alias="totalActiveOffers")
    pending_applications: int = Field(default=0, alias="totalPendingApplications")
    hiring_rate: float = Field(default=0.0, alias="hiringRate")

    @property
    def hiring_rate_label(self) -> str:
        return f"{self.hiring_rate:g}%"
