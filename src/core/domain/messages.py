"""User-facing message catalogue (French and English).

Forms, list views and the CLI never hard-code notification text: they ask
for a message key and the catalogue renders it in the session language.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.domain.language import Language


@dataclass(frozen=True)
class EntityLabel:
    """Grammatical forms of an entity name used in messages."""

    name: str
    definite: str
    plural: str
    of: str


_LABELS: dict[Language, dict[str, EntityLabel]] = {
    Language.FRENCH: {
        "article": EntityLabel("Article", "l'article", "articles", "de l'article"),
        "avenant": EntityLabel("Avenant", "l'avenant", "avenants", "de l'avenant"),
        "mission": EntityLabel("Mission", "la mission", "missions", "de la mission"),
        "contrat": EntityLabel("Contrat", "le contrat", "contrats", "du contrat"),
        "profil": EntityLabel("Profil", "le profil", "profils", "du profil"),
        "user": EntityLabel("Utilisateur", "l'utilisateur", "utilisateurs", "de l'utilisateur"),
        "menu": EntityLabel("Menu", "le menu", "menus", "du menu"),
        "sous_menu": EntityLabel("Sous-menu", "le sous-menu", "sous-menus", "du sous-menu"),
    },
    Language.ENGLISH: {
        "article": EntityLabel("Article", "the article", "articles", "of the article"),
        "avenant": EntityLabel("Amendment", "the amendment", "amendments", "of the amendment"),
        "mission": EntityLabel("Mission", "the mission", "missions", "of the mission"),
        "contrat": EntityLabel("Contract", "the contract", "contracts", "of the contract"),
        "profil": EntityLabel("Profile", "the profile", "profiles", "of the profile"),
        "user": EntityLabel("User", "the user", "users", "of the user"),
        "menu": EntityLabel("Menu", "the menu", "menus", "of the menu"),
        "sous_menu": EntityLabel("Sub-menu", "the sub-menu", "sub-menus", "of the sub-menu"),
    },
}

_MESSAGES: dict[Language, dict[str, str]] = {
    Language.FRENCH: {
        "auth_required": "Authentification requise",
        "generic_error": "Erreur lors de l'opération",
        "network_error": "Erreur de connexion au serveur.",
        "load_failed": "Erreur lors du chargement {of}.",
        "list_failed": "Erreur lors de la récupération des {plural}.",
        "create_failed": "Erreur lors de l'ajout {of}.",
        "update_failed": "Erreur lors de la modification {of}.",
        "created": "{name} ajouté avec succès !",
        "updated": "{name} modifié avec succès !",
        "required_missing": "Champs obligatoires manquants : {fields}",
        "parent_missing": "Identifiant parent non défini ({field}).",
        "contract_unavailable": "Détails du contrat non disponibles",
        "contract_not_started": (
            "Le contrat n'a pas encore débuté. Vous ne pouvez pas ajouter de mission."
        ),
        "pdf_updated": "PDF mis à jour avec succès",
        "pdf_failed": "Erreur lors de la mise à jour du PDF",
        "delete_confirm": "Êtes-vous sûr de vouloir supprimer {definite} ?",
        "deleted": "{name} supprimé avec succès.",
        "delete_failed": "Erreur lors de la suppression {of}.",
        "stats_failed": "Impossible de charger les statistiques.",
    },
    Language.ENGLISH: {
        "auth_required": "Authentication required",
        "generic_error": "The operation failed",
        "network_error": "Could not reach the server.",
        "load_failed": "Could not load {definite}.",
        "list_failed": "Could not fetch the {plural}.",
        "create_failed": "Could not create {definite}.",
        "update_failed": "Could not update {definite}.",
        "created": "{name} created.",
        "updated": "{name} updated.",
        "required_missing": "Missing required fields: {fields}",
        "parent_missing": "Parent identifier is not set ({field}).",
        "contract_unavailable": "Contract details are not available",
        "contract_not_started": (
            "The contract has not started yet. Missions cannot be added."
        ),
        "pdf_updated": "Contract document regenerated",
        "pdf_failed": "Could not regenerate the contract document",
        "delete_confirm": "Delete {definite}?",
        "deleted": "{name} deleted.",
        "delete_failed": "Could not delete {definite}.",
        "stats_failed": "Could not load the statistics.",
    },
}


def entity_label(entity: str, language: Language) -> EntityLabel:
    return _LABELS[language][entity]


def translate(key: str, language: Language, *, entity: str | None = None, **values: object) -> str:
    """Render message `key` in `language`.

    When `entity` is given its label forms (`name`, `definite`, `plural`, `of`) are
    available as placeholders alongside the explicit keyword values.
    """

    template = _MESSAGES[language][key]
    params: dict[str, object] = {}
    if entity is not None:
        label = entity_label(entity, language)
        params.update(name=label.name, definite=label.definite, plural=label.plural, of=label.of)
    params.update(values)
    return template.format(**params)
