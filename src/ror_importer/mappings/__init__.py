"""Pure mappings from ROR records to table rows."""

from . import (common, core, external_ids, links, locations, names, org_types,
               registry, relationships)
from .registry import BUILDERS_BY_TABLE, TABLE_BUILDERS, fan_out

__all__ = [
    "BUILDERS_BY_TABLE",
    "TABLE_BUILDERS",
    "common",
    "core",
    "external_ids",
    "fan_out",
    "links",
    "locations",
    "names",
    "org_types",
    "registry",
    "relationships",
]
