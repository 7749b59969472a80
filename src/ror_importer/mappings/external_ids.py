"""Mapping helpers for external identifiers (ISNI, GRID, FundRef, Wikidata)."""

from __future__ import annotations

from ..models import RorRecord
from .common import Rows, display_name


def build_external_id_rows(record: RorRecord, ror_id: str) -> Rows:
    ror_name = display_name(record, ror_id)
    rows: Rows = []
    for ext in record.external_ids:
        values = list(ext.all_values)
        # A preferred value missing from ``all`` is still stored.
        if ext.preferred and ext.preferred not in values:
            values.append(ext.preferred)
        for value in values:
            rows.append(
                {
                    "id": ror_id,
                    "ror_name": ror_name,
                    "id_type": ext.type,
                    "id_value": value,
                    "is_preferred": value == ext.preferred,
                }
            )
    return rows
