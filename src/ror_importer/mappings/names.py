"""Mapping helpers for organisation names."""

from __future__ import annotations

from ..models import DISPLAY_NAME_TAGS, RorName, RorRecord
from .common import Rows

UNSPECIFIED_NAME_TYPE = "unspecified"


def name_type(name: RorName) -> str:
    """Return the role tag stored for ``name``.

    The display tag only marks ``is_ror_name``; the stored role is the first
    other tag, or the display tag itself when the name carries nothing else.
    """
    for tag in name.types:
        if tag not in DISPLAY_NAME_TAGS:
            return tag
    if name.types:
        return name.types[0]
    return UNSPECIFIED_NAME_TYPE


def build_name_rows(record: RorRecord, ror_id: str) -> Rows:
    return [
        {
            "id": ror_id,
            "value": name.value,
            "name_type": name_type(name),
            "is_ror_name": name.is_display_name,
            "lang_code": name.lang or None,
            "script_code": name.script or None,
        }
        for name in record.names
    ]
