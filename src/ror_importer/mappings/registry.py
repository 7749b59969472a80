"""Registry of row builders, one per ``ror`` table."""

from __future__ import annotations

from typing import Callable, Dict, Tuple

from ..models import RorRecord
from .common import Row, Rows
from .core import build_admin_row, build_core_row
from .external_ids import build_external_id_rows
from .links import build_domain_rows, build_link_rows
from .locations import build_location_rows
from .names import build_name_rows
from .org_types import build_type_rows
from .relationships import build_relationship_rows

RowBuilder = Callable[[RorRecord, str], Rows]


def _single(builder: Callable[[RorRecord, str], Row]) -> RowBuilder:
    def build(record: RorRecord, ror_id: str) -> Rows:
        return [builder(record, ror_id)]

    return build


TABLE_BUILDERS: Tuple[Tuple[str, RowBuilder], ...] = (
    ("core_data", _single(build_core_row)),
    ("admin_data", _single(build_admin_row)),
    ("names", build_name_rows),
    ("locations", build_location_rows),
    ("external_ids", build_external_id_rows),
    ("links", build_link_rows),
    ("type", build_type_rows),
    ("relationships", build_relationship_rows),
    ("domains", build_domain_rows),
)

BUILDERS_BY_TABLE: Dict[str, RowBuilder] = dict(TABLE_BUILDERS)


def fan_out(record: RorRecord, ror_id: str) -> Dict[str, Rows]:
    """Expand one record into the rows it contributes to every table."""
    return {table: builder(record, ror_id) for table, builder in TABLE_BUILDERS}
