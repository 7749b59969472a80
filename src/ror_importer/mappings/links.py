"""Mapping helpers for links and web domains."""

from __future__ import annotations

from ..models import RorRecord
from .common import Rows, display_name


def build_link_rows(record: RorRecord, ror_id: str) -> Rows:
    ror_name = display_name(record, ror_id)
    return [
        {"id": ror_id, "ror_name": ror_name, "link_type": link.type, "link": link.value}
        for link in record.links
    ]


def build_domain_rows(record: RorRecord, ror_id: str) -> Rows:
    ror_name = display_name(record, ror_id)
    return [
        {"id": ror_id, "ror_name": ror_name, "domain": domain}
        for domain in record.domains
    ]
