"""Build .xlsx workbooks of entries for download."""

import datetime as dt
import logging
from collections.abc import Sequence
from io import BytesIO

from openpyxl import Workbook

from app.models import Entry

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

EXPORT_COLUMNS = (
    "S.No",
    "Sr No",
    "Vehicle No",
    "Name Details",
    "Date",
    "Net Weight",
    "Moisture",
    "Gate Pass No",
    "Mobile No",
    "Unload",
    "Shortage",
    "Remarks",
    "Rate",
    "Created At",
)


def _iso(value: dt.date | dt.datetime) -> str:
    return value.isoformat()


def entry_row(index: int, entry: Entry) -> list[object]:
    """One sheet row; missing optional fields become empty strings."""
    return [
        index,
        entry.sr_no,
        entry.vehicle_no,
        entry.name_details,
        _iso(entry.date),
        entry.net_weight or "",
        entry.moisture or "",
        entry.gate_pass_no or "",
        entry.mobile_no or "",
        entry.unload or "",
        entry.shortage or "",
        entry.remarks or "",
        entry.rate or "",
        _iso(entry.created_at),
    ]


def build_workbook(entries: Sequence[Entry], sheet_title: str = "Entries") -> bytes:
    """Single-sheet workbook: header row of labels, then one row per entry in the given order."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title
    sheet.append(list(EXPORT_COLUMNS))
    for index, entry in enumerate(entries, start=1):
        sheet.append(entry_row(index, entry))

    buffer = BytesIO()
    workbook.save(buffer)
    logger.info("Built workbook sheet=%s rows=%s", sheet_title, len(entries))
    return buffer.getvalue()


def export_filename(prefix: str, today: dt.date | None = None) -> str:
    """e.g. entries_export_2024-05-01.xlsx"""
    today = today or dt.datetime.now(dt.UTC).date()
    return f"{prefix}_{today.isoformat()}.xlsx"
