"""Create / Edit tagged variant.

Whether a form creates or updates is decided exactly once, at entry, from
the presence of an identifier in the navigation context. The rest of the
flow pattern-matches on the variant instead of re-checking for `None`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Create:
    """The form will issue a create (POST) call."""

    @property
    def is_edit(self) -> bool:
        return False


@dataclass(frozen=True)
class Edit:
    """The form edits the persisted entity `entity_id` (PUT)."""

    entity_id: str

    def __post_init__(self) -> None:
        if not self.entity_id:
            raise ValueError("Edit mode requires a non-empty identifier")

    @property
    def is_edit(self) -> bool:
        return True


FormMode = Union[Create, Edit]


def mode_from_identifier(entity_id: str | None) -> FormMode:
    """Build the form mode from an optional navigation identifier."""

    if entity_id:
        return Edit(entity_id)
    return Create()
