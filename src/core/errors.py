"""Exceptions for the GRH dashboard client.

Every error a form or a list view can surface derives from `GrhError`, so
controllers catch a single base class at their seam and turn it into a
user-visible notification. Partial failures of the post-submit side effect
are not exceptions: they travel as a status in the submit result.
"""

from __future__ import annotations

from typing import Any


class GrhError(Exception):
    """Base class for every client-side error."""


class AuthenticationRequired(GrhError):
    """No bearer token in the session; raised before any network call."""


class RemoteError(GrhError):
    """The backend could not be used."""


class ApiError(RemoteError):
    """The backend answered with an HTTP error status."""

    def __init__(self, status_code: int, message: str | None = None, payload: Any = None) -> None:
        self.status_code = status_code
        self.message = message
        self.payload = payload
        super().__init__(message or f"HTTP {status_code}")


class TransportError(RemoteError):
    """No HTTP response at all (connection refused, DNS, reset)."""


class DecodeError(RemoteError):
    """The backend answered 2xx with a payload that does not fit the model."""


class RequiredFieldsMissing(GrhError):
    """Local validation failure: required fields are empty."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(", ".join(fields))


class BusinessRuleViolation(GrhError):
    """A domain precondition blocks the submission locally."""


class ContractUnavailable(BusinessRuleViolation):
    """The parent contract could not be fetched before submission."""


class ContractNotStarted(BusinessRuleViolation):
    """Missions cannot be recorded before the contract start date."""

    def __init__(self, start_date: Any, today: Any) -> None:
        self.start_date = start_date
        self.today = today
        super().__init__(f"contract starts on {start_date}, today is {today}")
