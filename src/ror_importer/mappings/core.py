"""Mapping helpers for the singleton core_data and admin_data rows."""

from __future__ import annotations

from typing import Optional

from ..models import RorAdminDate, RorRecord
from .common import Row, d, display_name
from .external_ids import build_external_id_rows
from .links import build_domain_rows, build_link_rows
from .locations import build_location_rows
from .names import build_name_rows
from .org_types import build_type_rows
from .relationships import build_relationship_rows


def build_core_row(record: RorRecord, ror_id: str) -> Row:
    location: Optional[str] = None
    country_code: Optional[str] = None
    if record.locations:
        details = record.locations[0].geonames_details
        if details is not None:
            location = details.name
            country_code = details.country_code

    return {
        "id": ror_id,
        "ror_full_id": record.id,
        "ror_name": display_name(record, ror_id),
        "status": record.status,
        "established": record.established,
        "location": location,
        "country_code": country_code,
    }


def _count(rows, column: str, value: str) -> int:
    return sum(1 for row in rows if row[column] == value)


def _admin_date(entry: Optional[RorAdminDate]):
    if entry is None:
        return None, None
    return d(entry.date), entry.schema_version


def build_admin_row(record: RorRecord, ror_id: str) -> Row:
    """Build the admin_data row, counting the detail rows the record emits."""
    names = build_name_rows(record, ror_id)
    ext_ids = build_external_id_rows(record, ror_id)
    links = build_link_rows(record, ror_id)
    rels = build_relationship_rows(record, ror_id)

    admin = record.admin
    created, cr_schema = _admin_date(admin.created if admin else None)
    last_modified, lm_schema = _admin_date(admin.last_modified if admin else None)

    return {
        "id": ror_id,
        "ror_name": display_name(record, ror_id),
        "n_locs": len(build_location_rows(record, ror_id)),
        "n_labels": _count(names, "name_type", "label"),
        "n_aliases": _count(names, "name_type", "alias"),
        "n_acronyms": _count(names, "name_type", "acronym"),
        "n_names": len(names),
        "n_langcodes": sum(1 for row in names if row["lang_code"] is not None),
        "n_isni": _count(ext_ids, "id_type", "isni"),
        "n_grid": _count(ext_ids, "id_type", "grid"),
        "n_fundref": _count(ext_ids, "id_type", "fundref"),
        "n_wikidata": _count(ext_ids, "id_type", "wikidata"),
        "n_wikipedia": _count(links, "link_type", "wikipedia"),
        "n_website": _count(links, "link_type", "website"),
        "n_types": len(build_type_rows(record, ror_id)),
        "n_relrels": _count(rels, "rel_type", "related"),
        "n_parrels": _count(rels, "rel_type", "parent"),
        "n_chrels": _count(rels, "rel_type", "child"),
        "n_sucrels": _count(rels, "rel_type", "successor"),
        "n_predrels": _count(rels, "rel_type", "predecessor"),
        "n_doms": len(build_domain_rows(record, ror_id)),
        "created": created,
        "cr_schema": cr_schema,
        "last_modified": last_modified,
        "lm_schema": lm_schema,
    }
