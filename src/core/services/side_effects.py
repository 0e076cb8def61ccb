"""Post-submit side effect: regenerate the contract document.

After an article or an avenant is written, a published contract must get
its PDF regenerated server-side. The primary write and this follow-up are
not transactional; the follow-up is modelled as the second step of a small
saga whose outcome is reported next to, never instead of, the primary
result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from core.domain.models import Contrat
from core.errors import GrhError

logger = logging.getLogger(__name__)


class SideEffectStatus(str, Enum):
    NOT_REQUIRED = "not_required"
    SKIPPED = "skipped"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class SideEffectResult:
    status: SideEffectStatus
    error: GrhError | None = None

    @property
    def failed(self) -> bool:
        return self.status is SideEffectStatus.FAILED


NOT_REQUIRED = SideEffectResult(SideEffectStatus.NOT_REQUIRED)


class ContractDocuments(Protocol):
    """What the saga needs from the contracts endpoint."""

    async def get(self, contrat_id: str) -> Contrat:
        ...

    async def update_pdf(self, contrat_id: str) -> None:
        ...


async def refresh_contract_document(contracts: ContractDocuments, contrat_id: str) -> SideEffectResult:
    """Regenerate the derived document of `contrat_id` when it is published.

    Fetch failures and regeneration failures both end as `FAILED`; the error
    is kept on the result so the caller can show the server message.
    """

    try:
        contrat = await contracts.get(contrat_id)
        if not contrat.published:
            logger.debug("contract %s not published, document left as is", contrat_id)
            return SideEffectResult(SideEffectStatus.SKIPPED)
        await contracts.update_pdf(contrat_id)
    except GrhError as exc:
        logger.warning("document refresh for contract %s failed: %s", contrat_id, exc)
        return SideEffectResult(SideEffectStatus.FAILED, exc)
    return SideEffectResult(SideEffectStatus.DONE)
