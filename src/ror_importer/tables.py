"""SQLAlchemy Core definitions of the ``ror`` import tables.

The tables are created by ``create_ror_tables.sql``; these definitions only
describe the columns the loader writes and the summary reads.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import (Boolean, Column, Date, Float, Integer, MetaData, Table,
                        Text)

ROR_SCHEMA = "ror"

metadata = MetaData(schema=ROR_SCHEMA)


def _counter(name: str) -> Column:
    return Column(name, Integer, nullable=False, server_default="0")


core_data = Table(
    "core_data",
    metadata,
    Column("id", Text, primary_key=True),
    Column("ror_full_id", Text, nullable=False),
    Column("ror_name", Text, nullable=False),
    Column("status", Text),
    Column("established", Integer),
    Column("location", Text),
    Column("country_code", Text),
)

# Counter column -> (detail table, filter column, filter value).
# A filter column with no value counts rows where that column is not null.
ADMIN_COUNTERS: dict[str, tuple[str, Optional[str], Optional[str]]] = {
    "n_locs": ("locations", None, None),
    "n_labels": ("names", "name_type", "label"),
    "n_aliases": ("names", "name_type", "alias"),
    "n_acronyms": ("names", "name_type", "acronym"),
    "n_names": ("names", None, None),
    "n_langcodes": ("names", "lang_code", None),
    "n_isni": ("external_ids", "id_type", "isni"),
    "n_grid": ("external_ids", "id_type", "grid"),
    "n_fundref": ("external_ids", "id_type", "fundref"),
    "n_wikidata": ("external_ids", "id_type", "wikidata"),
    "n_wikipedia": ("links", "link_type", "wikipedia"),
    "n_website": ("links", "link_type", "website"),
    "n_types": ("type", None, None),
    "n_relrels": ("relationships", "rel_type", "related"),
    "n_parrels": ("relationships", "rel_type", "parent"),
    "n_chrels": ("relationships", "rel_type", "child"),
    "n_sucrels": ("relationships", "rel_type", "successor"),
    "n_predrels": ("relationships", "rel_type", "predecessor"),
    "n_doms": ("domains", None, None),
}

admin_data = Table(
    "admin_data",
    metadata,
    Column("id", Text, primary_key=True),
    Column("ror_name", Text, nullable=False),
    *[_counter(name) for name in ADMIN_COUNTERS],
    Column("created", Date),
    Column("cr_schema", Text),
    Column("last_modified", Date),
    Column("lm_schema", Text),
)

names = Table(
    "names",
    metadata,
    Column("id", Text, nullable=False, index=True),
    Column("value", Text, nullable=False),
    Column("name_type", Text, nullable=False),
    Column("is_ror_name", Boolean, nullable=False),
    Column("lang_code", Text),
    Column("script_code", Text),
)

locations = Table(
    "locations",
    metadata,
    Column("id", Text, nullable=False, index=True),
    Column("ror_name", Text, nullable=False),
    Column("geonames_id", Integer),
    Column("geonames_name", Text),
    Column("lat", Float),
    Column("lng", Float),
    Column("country_code", Text),
    Column("country_name", Text),
)

external_ids = Table(
    "external_ids",
    metadata,
    Column("id", Text, nullable=False, index=True),
    Column("ror_name", Text, nullable=False),
    Column("id_type", Text, nullable=False),
    Column("id_value", Text, nullable=False),
    Column("is_preferred", Boolean, nullable=False),
)

links = Table(
    "links",
    metadata,
    Column("id", Text, nullable=False, index=True),
    Column("ror_name", Text, nullable=False),
    Column("link_type", Text, nullable=False),
    Column("link", Text, nullable=False),
)

org_type = Table(
    "type",
    metadata,
    Column("id", Text, nullable=False, index=True),
    Column("ror_name", Text, nullable=False),
    Column("org_type", Text, nullable=False),
)

relationships = Table(
    "relationships",
    metadata,
    Column("id", Text, nullable=False, index=True),
    Column("ror_name", Text, nullable=False),
    Column("rel_type", Text, nullable=False),
    Column("related_id", Text, nullable=False),
    Column("related_name", Text),
)

domains = Table(
    "domains",
    metadata,
    Column("id", Text, nullable=False, index=True),
    Column("ror_name", Text, nullable=False),
    Column("domain", Text, nullable=False),
)

ALL_TABLES: tuple[Table, ...] = (
    core_data,
    admin_data,
    names,
    locations,
    external_ids,
    links,
    org_type,
    relationships,
    domains,
)

TABLES_BY_NAME: dict[str, Table] = {table.name: table for table in ALL_TABLES}
