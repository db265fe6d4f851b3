"""Entry endpoints: owner-scoped CRUD, paginated search and Excel export. All routes require auth."""

import datetime as dt
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.schemas.auth import CurrentUser
from app.schemas.common import Envelope
from app.schemas.entry import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    SEARCH_MAX_LEN,
    DeletedEntry,
    EntryCreate,
    EntryQuery,
    EntryRead,
    EntryUpdate,
    SortField,
    SortOrder,
)
from app.services import entries as entry_service
from app.services.export import XLSX_MEDIA_TYPE, build_workbook, export_filename

router = APIRouter()

CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]
DbDep = Annotated[Session, Depends(get_db)]


def entry_query(
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
    search: Annotated[str | None, Query(max_length=SEARCH_MAX_LEN)] = None,
    sort_by: Annotated[SortField, Query(alias="sortBy")] = SortField.CREATED_AT,
    sort_order: Annotated[SortOrder, Query(alias="sortOrder")] = SortOrder.DESC,
    start_date: Annotated[dt.date | None, Query(alias="startDate")] = None,
    end_date: Annotated[dt.date | None, Query(alias="endDate")] = None,
) -> EntryQuery:
    """Collect list parameters from the query string into a typed EntryQuery."""
    return EntryQuery(
        page=page,
        limit=limit,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        start_date=start_date,
        end_date=end_date,
    )


def _xlsx_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "",
    response_model=Envelope[EntryRead],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_entry(
    body: EntryCreate,
    current_user: CurrentUserDep,
    db: DbDep,
) -> Envelope[EntryRead]:
    """Create an entry for the caller. 409 if the caller already has this serial number."""
    entry = entry_service.create_entry(db, current_user.id, body)
    return Envelope(message="Entry created successfully", data=EntryRead.model_validate(entry))


@router.get("", response_model=Envelope[list[EntryRead]], response_model_exclude_none=True)
def list_entries(
    query: Annotated[EntryQuery, Depends(entry_query)],
    current_user: CurrentUserDep,
    db: DbDep,
) -> Envelope[list[EntryRead]]:
    """
    Page through the caller's entries.

    - **search**: case-insensitive match on srNo, vehicleNo, nameDetails, gatePassNo, remarks
    - **startDate / endDate**: inclusive bounds on the entry date
    - **sortBy**: srNo | vehicleNo | nameDetails | date | createdAt; **sortOrder**: asc | desc
    """
    items, pagination = entry_service.list_entries(db, current_user.id, query)
    return Envelope(
        message="Data retrieved successfully",
        data=[EntryRead.model_validate(e) for e in items],
        pagination=pagination,
    )


@router.get("/export", response_class=Response)
def export_entries(
    current_user: CurrentUserDep,
    db: DbDep,
    start_date: Annotated[dt.date | None, Query(alias="startDate")] = None,
    end_date: Annotated[dt.date | None, Query(alias="endDate")] = None,
) -> Response:
    """Download the caller's entries (optionally date-filtered) as an .xlsx workbook."""
    entries = entry_service.entries_for_export(db, current_user.id, start_date, end_date)
    content = build_workbook(entries, sheet_title="Entries")
    return _xlsx_response(content, export_filename("entries_export"))


@router.get("/export/all", response_class=Response)
def export_all_entries(
    current_user: CurrentUserDep,
    db: DbDep,
) -> Response:
    """Download every entry the caller owns, unfiltered."""
    entries = entry_service.entries_for_export(db, current_user.id)
    content = build_workbook(entries, sheet_title="All Entries")
    return _xlsx_response(content, export_filename("all_entries_export"))


@router.get("/{entry_id}", response_model=Envelope[EntryRead], response_model_exclude_none=True)
def get_entry(
    entry_id: str,
    current_user: CurrentUserDep,
    db: DbDep,
) -> Envelope[EntryRead]:
    entry = entry_service.get_entry(db, current_user.id, entry_id)
    return Envelope(message="Entry retrieved successfully", data=EntryRead.model_validate(entry))


@router.put("/{entry_id}", response_model=Envelope[EntryRead], response_model_exclude_none=True)
def update_entry(
    entry_id: str,
    body: EntryUpdate,
    current_user: CurrentUserDep,
    db: DbDep,
) -> Envelope[EntryRead]:
    """Apply the supplied fields. 409 if a changed srNo collides with another of the caller's entries."""
    entry = entry_service.update_entry(db, current_user.id, entry_id, body)
    return Envelope(message="Entry updated successfully", data=EntryRead.model_validate(entry))


@router.delete(
    "/{entry_id}",
    response_model=Envelope[DeletedEntry],
    response_model_exclude_none=True,
)
def delete_entry(
    entry_id: str,
    current_user: CurrentUserDep,
    db: DbDep,
) -> Envelope[DeletedEntry]:
    deleted_id = entry_service.delete_entry(db, current_user.id, entry_id)
    return Envelope(message="Entry deleted successfully", data=DeletedEntry(id=deleted_id))
