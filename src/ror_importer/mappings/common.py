"""Shared utilities for mapping ROR records into table rows."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from dateutil import parser as dtparse

from ..identifiers import has_expected_shape
from ..models import RorRecord

LOGGER = logging.getLogger("ror_importer.mappings")

Row = Dict[str, Any]
Rows = List[Row]

NAME_TYPES = frozenset({"ror_display", "primary", "label", "alias", "acronym"})
EXTERNAL_ID_TYPES = frozenset({"isni", "grid", "fundref", "wikidata"})
LINK_TYPES = frozenset({"website", "wikipedia"})
RELATIONSHIP_TYPES = frozenset(
    {"related", "parent", "child", "successor", "predecessor"}
)


def d(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return dtparse.parse(value).date()
    except (ValueError, OverflowError):
        LOGGER.warning("Unparsable admin date %r stored as NULL", value)
        return None


def display_name(record: RorRecord, ror_id: str) -> str:
    name = record.display_name
    return ror_id if name is None else name


def report_data_quality(record: RorRecord, ror_id: str) -> int:
    """Log non-fatal anomalies in ``record`` and return how many were found."""
    issues: List[str] = []
    if not has_expected_shape(record.id):
        issues.append(f"identifier {record.id!r} is not a ROR URI")
    if not record.names:
        issues.append("no names; identifier used as display name")
    elif not any(name.is_display_name for name in record.names):
        issues.append("no ror_display name; first name used as display name")

    for name in record.names:
        if not name.types:
            issues.append(f"name {name.value!r} has no type tags")
        issues.extend(
            f"unrecognised name type {tag!r}" for tag in name.types if tag not in NAME_TYPES
        )
    issues.extend(
        f"unrecognised external id type {ext.type!r}"
        for ext in record.external_ids
        if ext.type not in EXTERNAL_ID_TYPES
    )
    issues.extend(
        f"unrecognised link type {link.type!r}"
        for link in record.links
        if link.type not in LINK_TYPES
    )
    issues.extend(
        f"unrecognised relationship type {rel.type!r}"
        for rel in record.relationships
        if rel.type not in RELATIONSHIP_TYPES
    )

    for issue in issues:
        LOGGER.warning("Record %s: %s", ror_id, issue)
    return len(issues)
