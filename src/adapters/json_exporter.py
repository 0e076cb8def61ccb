"""Exportación JSON de registros del backend.

Por qué JSON:
- Interoperabilidad con scripts y pipelines (`grh ... --json | jq`).
- Permite guardar un listado sin depender del render de tablas Rich.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel


def records_to_json(records: Iterable[BaseModel] | BaseModel) -> str:
    """Serializa uno o varios modelos con las claves del backend (`_id`, `titreArticle`...)."""

    if isinstance(records, BaseModel):
        payload: object = records.model_dump(mode="json", by_alias=True)
    else:
        payload = [record.model_dump(mode="json", by_alias=True) for record in records]
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)


def export_records_json(*, records: Iterable[BaseModel] | BaseModel, output_path: Path) -> Path:
    """Exporta registros a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(records_to_json(records) + "\n", encoding="utf-8")
    return output_path
