"""Explicit session context.

The browser client read its bearer token from ambient storage on every call.
Here the token travels in a `Session` value that every network-calling
object receives at construction time, so nothing looks it up behind the
caller's back.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.config import AppSettings
from core.domain.language import Language
from core.errors import AuthenticationRequired


@dataclass(frozen=True)
class Session:
    """Who is calling the backend and in which language they read messages."""

    token: str | None = None
    user_id: str | None = None
    language: Language = Language.FRENCH

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "Session":
        token = (settings.api_token or "").strip() or None
        return cls(token=token, user_id=settings.user_id, language=settings.language)

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    def require_token(self) -> str:
        if not self.token:
            raise AuthenticationRequired("no bearer token in session")
        return self.token

    def bearer_headers(self) -> dict[str, str]:
        """Authorization header when a token exists, else nothing."""

        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
