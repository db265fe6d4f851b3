"""
Entry store: owner-scoped create/read/update/delete, filtered listing and export queries.

Every function takes the owner id from the authenticated context. A row that
exists under another owner is treated exactly like a missing row.
"""

import datetime as dt
import logging
import math
import uuid

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session
from sqlalchemy.sql.elements import ColumnElement

from app.core.errors import Conflict, NotFound, invalid_id
from app.models import Entry
from app.models.base import utcnow
from app.schemas.common import PaginationMeta
from app.schemas.entry import EntryCreate, EntryQuery, EntryUpdate, SortField, SortOrder

logger = logging.getLogger(__name__)

ENTRY_NOT_FOUND = "Entry not found or unauthorized"
NO_ENTRIES_FOR_EXPORT = "No entries found for export"

SORT_COLUMNS = {
    SortField.SR_NO: Entry.sr_no,
    SortField.VEHICLE_NO: Entry.vehicle_no,
    SortField.NAME_DETAILS: Entry.name_details,
    SortField.DATE: Entry.date,
    SortField.CREATED_AT: Entry.created_at,
}

SEARCH_COLUMNS = (
    Entry.sr_no,
    Entry.vehicle_no,
    Entry.name_details,
    Entry.gate_pass_no,
    Entry.remarks,
)

# Columns that cannot be cleared by an update.
REQUIRED_FIELDS = frozenset({"sr_no", "vehicle_no", "name_details", "date"})


def _sr_no_conflict(sr_no: str) -> Conflict:
    return Conflict(f"Serial number {sr_no} already exists")


def parse_entry_id(entry_id: str) -> str:
    """Canonical form of an entry id; malformed ids are a validation error, not a lookup miss."""
    try:
        return str(uuid.UUID(entry_id))
    except (ValueError, TypeError, AttributeError):
        raise invalid_id() from None


def date_range_filters(
    start_date: dt.date | None, end_date: dt.date | None
) -> list[ColumnElement[bool]]:
    """Inclusive bounds on Entry.date; either side optional."""
    conditions: list[ColumnElement[bool]] = []
    if start_date is not None:
        conditions.append(Entry.date >= start_date)
    if end_date is not None:
        conditions.append(Entry.date <= end_date)
    return conditions


def search_filter(term: str) -> ColumnElement[bool]:
    """Case-insensitive substring match OR-ed across the searchable columns."""
    return or_(*(column.icontains(term, autoescape=True) for column in SEARCH_COLUMNS))


def entry_filters(owner_id: str, query: EntryQuery) -> list[ColumnElement[bool]]:
    """owner AND optional date range AND optional search."""
    conditions: list[ColumnElement[bool]] = [Entry.user_id == owner_id]
    conditions.extend(date_range_filters(query.start_date, query.end_date))
    if query.search:
        conditions.append(search_filter(query.search))
    return conditions


def entry_ordering(query: EntryQuery) -> list[ColumnElement]:
    """Caller-chosen sort plus id as a tiebreaker so pages never overlap."""
    column = SORT_COLUMNS[query.sort_by]
    if query.sort_order == SortOrder.DESC:
        return [column.desc(), Entry.id.desc()]
    return [column.asc(), Entry.id.asc()]


def _owned(db: Session, owner_id: str) -> Query:
    return db.query(Entry).filter(Entry.user_id == owner_id)


def _sr_no_taken(db: Session, owner_id: str, sr_no: str, exclude_id: str | None = None) -> bool:
    q = _owned(db, owner_id).filter(Entry.sr_no == sr_no)
    if exclude_id is not None:
        q = q.filter(Entry.id != exclude_id)
    return db.query(q.exists()).scalar()


def _commit(db: Session, sr_no: str) -> None:
    """Commit; a unique-constraint violation on (user_id, sr_no) becomes Conflict."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise _sr_no_conflict(sr_no) from e


def create_entry(db: Session, owner_id: str, body: EntryCreate) -> Entry:
    if _sr_no_taken(db, owner_id, body.sr_no):
        raise _sr_no_conflict(body.sr_no)

    values = body.model_dump(exclude={"date"})
    entry = Entry(
        user_id=owner_id,
        date=body.date or utcnow().date(),
        **values,
    )
    db.add(entry)
    _commit(db, body.sr_no)
    db.refresh(entry)
    logger.info("Created entry id=%s owner=%s sr_no=%s", entry.id, owner_id, entry.sr_no)
    return entry


def list_entries(
    db: Session, owner_id: str, query: EntryQuery
) -> tuple[list[Entry], PaginationMeta]:
    """One page of the owner's filtered, sorted entries plus page metadata."""
    filtered = db.query(Entry).filter(*entry_filters(owner_id, query))
    total = filtered.count()
    items = (
        filtered.order_by(*entry_ordering(query))
        .offset(query.offset)
        .limit(query.limit)
        .all()
    )
    pagination = PaginationMeta(
        page=query.page,
        limit=query.limit,
        total=total,
        pages=math.ceil(total / query.limit),
    )
    return items, pagination


def get_entry(db: Session, owner_id: str, entry_id: str) -> Entry:
    entry = _owned(db, owner_id).filter(Entry.id == parse_entry_id(entry_id)).first()
    if entry is None:
        raise NotFound(ENTRY_NOT_FOUND)
    return entry


def update_entry(db: Session, owner_id: str, entry_id: str, body: EntryUpdate) -> Entry:
    """Merge the supplied fields; a changed serial number is re-checked against the owner's others."""
    entry = get_entry(db, owner_id, entry_id)
    changes = body.model_dump(exclude_unset=True)
    for field in REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            del changes[field]

    new_sr_no = changes.get("sr_no")
    if new_sr_no is not None and new_sr_no != entry.sr_no:
        if _sr_no_taken(db, owner_id, new_sr_no, exclude_id=entry.id):
            raise _sr_no_conflict(new_sr_no)

    for field, value in changes.items():
        setattr(entry, field, value)
    entry.updated_at = utcnow()
    _commit(db, entry.sr_no)
    db.refresh(entry)
    logger.info("Updated entry id=%s owner=%s fields=%s", entry.id, owner_id, sorted(changes))
    return entry


def delete_entry(db: Session, owner_id: str, entry_id: str) -> str:
    entry = get_entry(db, owner_id, entry_id)
    deleted_id = entry.id
    db.delete(entry)
    db.commit()
    logger.info("Deleted entry id=%s owner=%s", deleted_id, owner_id)
    return deleted_id


def entries_for_export(
    db: Session,
    owner_id: str,
    start_date: dt.date | None = None,
    end_date: dt.date | None = None,
) -> list[Entry]:
    """All matching entries, newest date first then newest created. Raises NotFound when empty."""
    entries = (
        _owned(db, owner_id)
        .filter(*date_range_filters(start_date, end_date))
        .order_by(Entry.date.desc(), Entry.created_at.desc(), Entry.id.desc())
        .all()
    )
    if not entries:
        raise NotFound(NO_ENTRIES_FOR_EXPORT)
    return entries
