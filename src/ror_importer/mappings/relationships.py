"""Mapping helpers for relationships between organisations."""

from __future__ import annotations

from ..identifiers import extract_id_from
from ..models import RorRecord
from .common import Rows, display_name


def build_relationship_rows(record: RorRecord, ror_id: str) -> Rows:
    ror_name = display_name(record, ror_id)
    return [
        {
            "id": ror_id,
            "ror_name": ror_name,
            "rel_type": rel.type,
            "related_id": extract_id_from(rel.id),
            "related_name": rel.label,
        }
        for rel in record.relationships
    ]
