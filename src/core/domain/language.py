"""Language utilities for the GRH dashboard client.

This module centralizes the language options supported across the
application. Keeping it in the domain layer allows the CLI, the services
and the message catalogue to share a single source of truth without
creating circular imports with adapters.
"""

from __future__ import annotations

from enum import Enum


class Language(str, Enum):
    """Supported natural-language choices for user-facing output."""

    FRENCH = "fr"
    ENGLISH = "en"

    @classmethod
    def default(cls) -> "Language":
        """Return the default language used across the application."""

        return cls.FRENCH

    @classmethod
    def from_bool(cls, english: bool) -> "Language":
        """Derive a language value from a boolean flag."""

        return cls.ENGLISH if english else cls.FRENCH

    def label(self) -> str:
        """Human readable label for prompts and logging."""

        return "English" if self is Language.ENGLISH else "Français"
