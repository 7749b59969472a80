"""Canonical identifier extraction for ROR URIs."""

from __future__ import annotations

import re

_EXPECTED_SHAPE = re.compile(r"^https?://[^/\s]+/([^/\s]+)$")


def extract_id_from(full_id: str) -> str:
    """Return the trailing path segment of a ROR full identifier.

    ``https://ror.org/0abc123xy`` becomes ``0abc123xy``. Input without a
    ``/`` is returned stripped, so the result is never empty for non-blank
    input.
    """
    stripped = full_id.strip()
    trimmed = stripped.rstrip("/")
    segment = trimmed.rsplit("/", 1)[-1]
    return segment or trimmed or stripped


def has_expected_shape(full_id: str) -> bool:
    return _EXPECTED_SHAPE.match(full_id.strip()) is not None
