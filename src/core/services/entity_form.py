"""Generic entity-form lifecycle.

Every dashboard form follows the same flow: build with a `FormMode`, load
the persisted entity when editing, mutate fields, then submit. Submission
validates required fields, runs entity preconditions, writes (POST or PUT),
runs the optional post-submit side effect and finally navigates. Concrete
forms in `core.services.forms` only describe their fields, endpoints and
destination.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from core.domain.form_mode import Create, Edit, FormMode
from core.domain.language import Language
from core.domain.messages import translate
from core.errors import BusinessRuleViolation, GrhError, RequiredFieldsMissing
from core.interfaces.ui import Navigator, Notifier
from core.services.feedback import describe_error
from core.services.side_effects import NOT_REQUIRED, SideEffectResult, SideEffectStatus

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class SubmitStatus(str, Enum):
    SAVED = "saved"
    INVALID = "invalid"
    REJECTED = "rejected"
    FAILED = "failed"
    PARENT_MISSING = "parent_missing"


@dataclass
class SubmitResult:
    """Outcome of one submission.

    `SAVED` and `PARENT_MISSING` both mean the primary write reached the
    backend; `side_effect` tells whether the follow-up step ran.
    """

    status: SubmitStatus
    record: BaseModel | None = None
    side_effect: SideEffectResult = NOT_REQUIRED
    destination: str | None = None
    message: str | None = None
    missing: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is SubmitStatus.SAVED

    @property
    def written(self) -> bool:
        return self.status in (SubmitStatus.SAVED, SubmitStatus.PARENT_MISSING)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def to_wire(value: Any) -> Any:
    """JSON-ready value for the request body."""

    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return value.strip()
    return value


class EntityForm(Generic[RecordT]):
    """Base controller shared by all create/edit forms.

    Subclasses set `entity` (message key), `field_names`, `required` and
    `defaults`, and implement `fetch`, `create`, `update` and `destination`.
    """

    entity: ClassVar[str]
    field_names: ClassVar[tuple[str, ...]] = ()
    required: ClassVar[tuple[str, ...]] = ()
    defaults: ClassVar[dict[str, Any]] = {}
    # Name of the parent reference shown in the error when it is missing.
    parent_field: ClassVar[str | None] = None

    def __init__(
        self,
        mode: FormMode,
        *,
        navigator: Navigator,
        notifier: Notifier,
        language: Language = Language.FRENCH,
        parent_id: str | None = None,
    ) -> None:
        self.mode = mode
        self.navigator = navigator
        self.notifier = notifier
        self.language = language
        self.parent_id = parent_id
        self.fields: dict[str, Any] = {name: None for name in self.field_names}
        self.fields.update(self.defaults)
        self.record: RecordT | None = None
        self.loading = False
        self.error: str | None = None

    # -- hooks -----------------------------------------------------------

    async def fetch(self, entity_id: str) -> RecordT:
        raise NotImplementedError

    async def create(self, payload: dict[str, Any]) -> RecordT | None:
        raise NotImplementedError

    async def update(self, entity_id: str, payload: dict[str, Any]) -> RecordT | None:
        raise NotImplementedError

    def destination(self) -> str:
        raise NotImplementedError

    def fields_from(self, record: RecordT) -> dict[str, Any]:
        dumped = record.model_dump(by_alias=True)
        return {name: dumped.get(name) for name in self.field_names}

    def parent_from(self, record: RecordT) -> str | None:
        return None

    def required_fields(self) -> tuple[str, ...]:
        return self.required

    async def check_preconditions(self) -> None:
        """Raise `BusinessRuleViolation` to abort before any write."""

    def build_payload(self) -> dict[str, Any]:
        return {name: to_wire(self.fields.get(name)) for name in self.field_names}

    async def run_side_effect(self) -> SideEffectResult:
        return NOT_REQUIRED

    # -- lifecycle -------------------------------------------------------

    @property
    def is_edit(self) -> bool:
        return self.mode.is_edit

    @property
    def can_submit(self) -> bool:
        return not self.loading

    async def load(self) -> bool:
        """Populate fields from the backend in edit mode; defaults otherwise."""

        if isinstance(self.mode, Create):
            return True
        self.loading = True
        try:
            record = await self.fetch(self.mode.entity_id)
        except GrhError as exc:
            self._report(describe_error(exc, self.language, "load_failed", entity=self.entity))
            return False
        finally:
            self.loading = False
        self.record = record
        self.fields.update(self.fields_from(record))
        self.parent_id = self.parent_from(record) or self.parent_id
        return True

    def set_field(self, name: str, value: Any) -> None:
        if name not in self.fields:
            raise KeyError(f"{type(self).__name__} has no field {name!r}")
        self.fields[name] = value

    def update_fields(self, **values: Any) -> None:
        for name, value in values.items():
            self.set_field(name, value)

    def missing_fields(self) -> list[str]:
        return [name for name in self.required_fields() if is_blank(self.fields.get(name))]

    def validate(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise RequiredFieldsMissing(missing)

    async def write(self, payload: dict[str, Any]) -> RecordT | None:
        if isinstance(self.mode, Edit):
            return await self.update(self.mode.entity_id, payload)
        return await self.create(payload)

    async def submit(self) -> SubmitResult:
        self.error = None
        try:
            self.validate()
        except RequiredFieldsMissing as exc:
            message = describe_error(exc, self.language, "generic_error")
            self._report(message)
            return SubmitResult(SubmitStatus.INVALID, message=message, missing=exc.fields)

        self.loading = True
        try:
            return await self._submit_validated()
        finally:
            self.loading = False

    async def _submit_validated(self) -> SubmitResult:
        try:
            await self.check_preconditions()
        except BusinessRuleViolation as exc:
            message = describe_error(exc, self.language, "generic_error")
            logger.info("%s submission blocked: %s", self.entity, exc)
            self._report(message)
            return SubmitResult(SubmitStatus.REJECTED, message=message)

        fallback = "update_failed" if self.is_edit else "create_failed"
        try:
            record = await self.write(self.build_payload())
        except GrhError as exc:
            message = describe_error(exc, self.language, fallback, entity=self.entity)
            self._report(message)
            return SubmitResult(SubmitStatus.FAILED, message=message)

        if record is not None:
            self.record = record
        self.notifier.success(
            translate("updated" if self.is_edit else "created", self.language, entity=self.entity)
        )

        if self.parent_field and not self.parent_id:
            message = translate("parent_missing", self.language, field=self.parent_field)
            logger.warning("%s saved without %s, not navigating", self.entity, self.parent_field)
            self._report(message)
            return SubmitResult(SubmitStatus.PARENT_MISSING, record=record, message=message)

        side_effect = await self.run_side_effect()
        if side_effect.status is SideEffectStatus.DONE:
            self.notifier.success(translate("pdf_updated", self.language))
        elif side_effect.failed:
            self.notifier.error(describe_error(side_effect.error, self.language, "pdf_failed"))

        destination = self.destination()
        self.navigator.navigate(destination)
        return SubmitResult(SubmitStatus.SAVED, record=record, side_effect=side_effect, destination=destination)

    def _report(self, message: str) -> None:
        self.error = message
        self.notifier.error(message)
