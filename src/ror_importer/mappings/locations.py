"""Mapping helpers for geocoded locations."""

from __future__ import annotations

from ..models import RorRecord
from .common import Rows, display_name


def build_location_rows(record: RorRecord, ror_id: str) -> Rows:
    ror_name = display_name(record, ror_id)
    rows: Rows = []
    for location in record.locations:
        details = location.geonames_details
        rows.append(
            {
                "id": ror_id,
                "ror_name": ror_name,
                "geonames_id": location.geonames_id,
                "geonames_name": details.name if details else None,
                "lat": details.lat if details else None,
                "lng": details.lng if details else None,
                "country_code": details.country_code if details else None,
                "country_name": details.country_name if details else None,
            }
        )
    return rows
