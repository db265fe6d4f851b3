"""Request/response schemas for entries and the typed list query."""

import datetime as dt
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from app.schemas.auth import MOBILE_PATTERN
from app.schemas.common import CamelModel

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10
SEARCH_MAX_LEN = 100


def _text(min_length: int = 0, max_length: int | None = None):
    return Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=min_length, max_length=max_length),
    ]


SrNo = _text(1, 20)
VehicleNo = _text(1, 20)
NameDetails = _text(1, 100)
MobileNo = Annotated[str, StringConstraints(strip_whitespace=True, pattern=MOBILE_PATTERN)]


class SortField(str, Enum):
    """Fields a list request may sort by (wire names)."""

    SR_NO = "srNo"
    VEHICLE_NO = "vehicleNo"
    NAME_DETAILS = "nameDetails"
    DATE = "date"
    CREATED_AT = "createdAt"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class _EntryOptionalFields(CamelModel):
    net_weight: _text(0, 20) | None = None
    moisture: _text(0, 20) | None = None
    gate_pass_no: _text(0, 30) | None = None
    mobile_no: MobileNo | None = None
    unload: _text(0, 50) | None = None
    shortage: _text(0, 50) | None = None
    remarks: _text(0, 200) | None = None
    rate: _text(0, 20) | None = None


class EntryCreate(_EntryOptionalFields):
    """Body of POST /entries. vehicleNo is upper-cased; date defaults to today."""

    sr_no: SrNo
    vehicle_no: VehicleNo
    name_details: NameDetails
    date: dt.date | None = None

    @field_validator("vehicle_no")
    @classmethod
    def uppercase_vehicle_no(cls, v: str) -> str:
        return v.upper()


class EntryUpdate(_EntryOptionalFields):
    """Body of PUT /entries/{id}. Only fields present in the body are applied."""

    sr_no: SrNo | None = None
    vehicle_no: VehicleNo | None = None
    name_details: NameDetails | None = None
    date: dt.date | None = None

    @field_validator("vehicle_no")
    @classmethod
    def uppercase_vehicle_no(cls, v: str | None) -> str | None:
        return v.upper() if v is not None else None


class EntryRead(CamelModel):
    """Outbound entry. The owner id is never exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    sr_no: str
    vehicle_no: str
    name_details: str
    date: dt.date
    net_weight: str | None = None
    moisture: str | None = None
    gate_pass_no: str | None = None
    mobile_no: str | None = None
    unload: str | None = None
    shortage: str | None = None
    remarks: str | None = None
    rate: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime


class EntryQuery(BaseModel):
    """Validated list/export parameters; the owner is supplied separately by the auth gate."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    search: str | None = Field(default=None, max_length=SEARCH_MAX_LEN)
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    start_date: dt.date | None = None
    end_date: dt.date | None = None

    @field_validator("search")
    @classmethod
    def blank_search_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class DeletedEntry(BaseModel):
    id: str
