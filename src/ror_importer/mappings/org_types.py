"""Mapping helpers for organisation types."""

from __future__ import annotations

from ..models import RorRecord
from .common import Rows, display_name


def build_type_rows(record: RorRecord, ror_id: str) -> Rows:
    ror_name = display_name(record, ror_id)
    return [
        {"id": ror_id, "ror_name": ror_name, "org_type": org_type}
        for org_type in record.types
    ]
