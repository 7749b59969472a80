"""Pydantic models for ROR schema v2 records."""

from __future__ import annotations

from typing import Annotated, Any, Optional, Union

from pydantic import (AfterValidator, BaseModel, BeforeValidator, ConfigDict,
                      Field, StrictStr, TypeAdapter, ValidationError)

from .errors import DecodeError

DISPLAY_NAME_TAGS = frozenset({"ror_display", "primary"})


def _none_as_empty(value: Any) -> Any:
    return [] if value is None else value


# JSON null for a repeating field decodes to an empty list.
NoneAsEmpty = BeforeValidator(_none_as_empty)


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("identifier must not be blank")
    return value


Identifier = Annotated[StrictStr, AfterValidator(_not_blank)]


class RorModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RorName(RorModel):
    value: StrictStr
    types: Annotated[list[StrictStr], NoneAsEmpty] = Field(default_factory=list)
    lang: Optional[StrictStr] = None
    script: Optional[StrictStr] = None

    @property
    def is_display_name(self) -> bool:
        return any(tag in DISPLAY_NAME_TAGS for tag in self.types)


class GeonamesDetails(RorModel):
    name: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    country_code: Optional[str] = None
    country_name: Optional[str] = None


class RorLocation(RorModel):
    geonames_id: Optional[int] = None
    geonames_details: Optional[GeonamesDetails] = None


class RorExternalId(RorModel):
    type: StrictStr
    all_values: Annotated[list[StrictStr], NoneAsEmpty] = Field(
        default_factory=list, alias="all"
    )
    preferred: Optional[StrictStr] = None


class RorLink(RorModel):
    type: StrictStr
    value: StrictStr


class RorRelationship(RorModel):
    type: StrictStr
    id: Identifier
    label: Optional[StrictStr] = None


class RorAdminDate(RorModel):
    date: Optional[str] = None
    schema_version: Optional[str] = None


class RorAdmin(RorModel):
    created: Optional[RorAdminDate] = None
    last_modified: Optional[RorAdminDate] = None


class RorRecord(RorModel):
    id: Identifier
    names: Annotated[list[RorName], NoneAsEmpty] = Field(default_factory=list)
    status: Optional[str] = None
    established: Optional[int] = None
    locations: Annotated[list[RorLocation], NoneAsEmpty] = Field(default_factory=list)
    external_ids: Annotated[list[RorExternalId], NoneAsEmpty] = Field(
        default_factory=list
    )
    links: Annotated[list[RorLink], NoneAsEmpty] = Field(default_factory=list)
    types: Annotated[list[StrictStr], NoneAsEmpty] = Field(default_factory=list)
    relationships: Annotated[list[RorRelationship], NoneAsEmpty] = Field(
        default_factory=list
    )
    domains: Annotated[list[StrictStr], NoneAsEmpty] = Field(default_factory=list)
    admin: Optional[RorAdmin] = None

    @property
    def display_name(self) -> Optional[str]:
        for name in self.names:
            if name.is_display_name:
                return name.value
        return self.names[0].value if self.names else None


RECORDS_ADAPTER = TypeAdapter(list[RorRecord])


def decode_records(data: Union[str, bytes]) -> list[RorRecord]:
    """Decode a whole ROR dump (a JSON array) into records.

    Raises ``DecodeError`` for malformed JSON and for the first record that
    violates the model, reporting its array index and field path.
    """
    try:
        return RECORDS_ADAPTER.validate_json(data)
    except ValidationError as exc:
        raise _decode_error(exc) from exc


def _decode_error(exc: ValidationError) -> DecodeError:
    first = exc.errors(include_url=False)[0]
    loc = list(first.get("loc", ()))
    message = first.get("msg", str(exc))
    if first.get("type") == "json_invalid":
        return DecodeError(f"malformed JSON ({message})")
    if loc and isinstance(loc[0], int):
        path = ".".join(str(part) for part in loc[1:])
        return DecodeError(message, index=loc[0], path=path or None)
    return DecodeError(message, path=".".join(str(part) for part in loc) or None)
