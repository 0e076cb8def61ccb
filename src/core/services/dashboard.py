"""Admin dashboard counters."""

from __future__ import annotations

from dataclasses import dataclass

from adapters.grh_api import StatsApi
from core.domain.language import Language
from core.domain.models import DashboardStats
from core.errors import GrhError
from core.interfaces.ui import Notifier
from core.services.feedback import describe_error


@dataclass
class DashboardResult:
    stats: DashboardStats | None
    error: str | None = None


async def load_dashboard_stats(
    stats_api: StatsApi,
    *,
    notifier: Notifier,
    language: Language = Language.FRENCH,
) -> DashboardResult:
    """Fetch the four counters; any failure is reported once for the whole panel."""

    try:
        stats = await stats_api.dashboard()
    except GrhError as exc:
        message = describe_error(exc, language, "stats_failed")
        notifier.error(message)
        return DashboardResult(stats=None, error=message)
    return DashboardResult(stats=stats)
