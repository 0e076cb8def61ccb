"""Turn client-side exceptions into the message a user should read."""

from __future__ import annotations

from core.domain.language import Language
from core.domain.messages import translate
from core.errors import (
    ApiError,
    AuthenticationRequired,
    ContractNotStarted,
    ContractUnavailable,
    GrhError,
    RequiredFieldsMissing,
)


def describe_error(
    exc: GrhError | None,
    language: Language,
    fallback_key: str,
    *,
    entity: str | None = None,
) -> str:
    """Server `message` when the backend sent one, else a localized fallback."""

    if isinstance(exc, AuthenticationRequired):
        return translate("auth_required", language)
    if isinstance(exc, RequiredFieldsMissing):
        return translate("required_missing", language, fields=", ".join(exc.fields))
    if isinstance(exc, ContractNotStarted):
        return translate("contract_not_started", language)
    if isinstance(exc, ContractUnavailable):
        return translate("contract_unavailable", language)
    if isinstance(exc, ApiError) and exc.message:
        return exc.message
    return translate(fallback_key, language, entity=entity)
