from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, BinaryIO, Callable, Sequence

from pkp_report.models.records import RootSummary, StatusCategory, StatusLabel
from pkp_report.models.report import ReportInput
from pkp_report.services.xlsx.writer import BOLD, BOLD_WRAP, WRAP, CellStyle, SheetWriter, open_writer

logger = logging.getLogger(__name__)

SHEET_SUMMARY = "PKP"
SHEET_PKP_DETAILS = "PKP_details"
SHEET_PKS_DETAILS = "PKS_details"
SHEET_CAR_RESULTS = "Car_results"
SHEET_EXCLUDED_CARS = "Excluded_cars"
SHEET_CAR_THRESHOLDS = "Cars_thresholds"

SHEET_ORDER = (
    SHEET_SUMMARY,
    SHEET_PKP_DETAILS,
    SHEET_PKS_DETAILS,
    SHEET_CAR_RESULTS,
    SHEET_EXCLUDED_CARS,
    SHEET_CAR_THRESHOLDS,
)

COLOR_RED = "FFFF0000"
COLOR_AMBER = "FFFFC000"
COLOR_GREEN = "FF00B050"
COLOR_BLACK = "FF000000"

_STATUS_COLORS = {
    StatusCategory.RED: COLOR_RED,
    StatusCategory.AMBER: COLOR_AMBER,
    StatusCategory.GREEN: COLOR_GREEN,
}

DIMENSION_HEADERS = ("Accuracy", "Completeness", "Consistency", "Timeliness")


@dataclass(frozen=True)
class LayoutConfig:
    title_font_size: int = 14
    summary_label_width: float = 100
    status_column_width: float = 30
    # sheet name -> {zero-based column: width}
    column_widths: dict[str, dict[int, float]] = field(default_factory=lambda: {SHEET_PKP_DETAILS: {2: 100}})


class RowCursor:
    def __init__(self, start: int = 0) -> None:
        self.row = start

    def next_row(self) -> int:
        r = self.row
        self.row += 1
        return r

    def skip(self, n: int) -> None:
        self.row += n


def _iso(d: date | None) -> str:
    return d.isoformat() if d is not None else ""


def _s(v: str | None) -> str:
    return "" if v is None else v


def color_of(label: StatusLabel | None) -> str:
    if label is None:
        return COLOR_BLACK
    return _STATUS_COLORS.get(label.category, COLOR_BLACK)


def write_status(sheet: SheetWriter, row: int, col: int, label: StatusLabel | None) -> None:
    """Write a RAG label: raw text, wrapped, font colored by category.

    An absent label is an empty, unstyled cell.
    """
    if label is None:
        sheet.write(row, col, "")
        return
    sheet.write(row, col, label.text, CellStyle(wrap=True, color=color_of(label)))


def _write_status_row(sheet: SheetWriter, row: int, labels: Sequence[StatusLabel | None]) -> None:
    for col, label in enumerate(labels, start=1):
        write_status(sheet, row, col, label)


def _write_dimension_headers(sheet: SheetWriter, row: int) -> None:
    for col, header in enumerate(DIMENSION_HEADERS, start=1):
        sheet.write(row, col, header, BOLD_WRAP)


# ---------------------------------------------------------------------------
# Summary sheet (PKP)
# ---------------------------------------------------------------------------

SummarySection = Callable[[SheetWriter, RowCursor, ReportInput, LayoutConfig], None]


def _section_title(sheet: SheetWriter, cur: RowCursor, report: ReportInput, cfg: LayoutConfig) -> None:
    root = report.root
    sheet.write(cur.next_row(), 0, _s(root.pkp_name), CellStyle(bold=True, font_size=cfg.title_font_size))
    sheet.set_column_width(0, cfg.summary_label_width)
    sheet.write(cur.next_row(), 0, _iso(root.pkp_date))
    cur.skip(2)


def _section_assessment(sheet: SheetWriter, cur: RowCursor, report: ReportInput, cfg: LayoutConfig) -> None:
    root: RootSummary = report.root
    row = cur.next_row()
    sheet.write(row, 0, "", BOLD)
    _write_dimension_headers(sheet, row)
    for col in range(1, len(DIMENSION_HEADERS) + 1):
        sheet.set_column_width(col, cfg.status_column_width)

    row = cur.next_row()
    sheet.write(row, 0, "System Based", BOLD)
    _write_status_row(sheet, row, root.system_based())

    row = cur.next_row()
    sheet.write(row, 0, "Adjusted", BOLD)
    _write_status_row(sheet, row, root.adjusted())
    cur.skip(2)


def _section_comment(sheet: SheetWriter, cur: RowCursor, report: ReportInput, cfg: LayoutConfig) -> None:
    sheet.write(cur.next_row(), 0, "samochod owner comment:", BOLD)
    sheet.write(cur.next_row(), 0, _s(report.root.pkp_comment), WRAP)
    cur.skip(2)


def _section_children(sheet: SheetWriter, cur: RowCursor, report: ReportInput, cfg: LayoutConfig) -> None:
    row = cur.next_row()
    sheet.write(row, 0, "Polska Klasa Samochodow", BOLD)
    _write_dimension_headers(sheet, row)

    for pks in report.pks:
        row = cur.next_row()
        sheet.write(row, 0, _s(pks.pks_name), BOLD)
        _write_status_row(sheet, row, pks.statuses())
    cur.skip(2)


def _section_footer(sheet: SheetWriter, cur: RowCursor, report: ReportInput, cfg: LayoutConfig) -> None:
    root = report.root
    sheet.write(cur.next_row(), 0, "Created at " + _s(root.pkp_comment_timestamp))
    sheet.write(cur.next_row(), 0, "uuid " + _s(root.pkp_comment_uuid))


SUMMARY_SECTIONS: tuple[SummarySection, ...] = (
    _section_title,
    _section_assessment,
    _section_comment,
    _section_children,
    _section_footer,
)


def write_summary_sheet(sheet: SheetWriter, report: ReportInput, cfg: LayoutConfig) -> int:
    """Lay out the PKP summary block. Returns the number of rows spanned."""
    cur = RowCursor()
    for section in SUMMARY_SECTIONS:
        section(sheet, cur, report, cfg)
    return cur.row


# ---------------------------------------------------------------------------
# Tabular sheets
# ---------------------------------------------------------------------------

NUMBER = "number"
OPTIONAL_NUMBER = "optional_number"
DATE = "date"
TEXT = "text"


@dataclass(frozen=True)
class Column:
    header: str
    attr: str
    kind: str = TEXT


@dataclass(frozen=True)
class TableSheet:
    name: str
    columns: tuple[Column, ...]
    source: str

    @property
    def headers(self) -> list[str]:
        return [c.header for c in self.columns]


def _write_value(sheet: SheetWriter, row: int, col: int, kind: str, value: Any) -> None:
    if kind == NUMBER:
        sheet.write(row, col, value)
    elif kind == OPTIONAL_NUMBER:
        sheet.write(row, col, "" if value is None else value)
    elif kind == DATE:
        sheet.write(row, col, _iso(value), WRAP)
    else:
        sheet.write(row, col, _s(value), WRAP)


TABLE_SHEETS: tuple[TableSheet, ...] = (
    TableSheet(
        name=SHEET_PKP_DETAILS,
        source="pkp_details",
        columns=(
            Column("PKP ID", "pkp_id", NUMBER),
            Column("PKP DATE", "pkp_date", DATE),
            Column("PKP NAME", "pkp_name"),
            Column("DIMENSION", "dimension"),
            Column("RED", "red", NUMBER),
            Column("AMBER", "amber", NUMBER),
            Column("GREEN", "green", NUMBER),
            Column("NA", "na", NUMBER),
            Column("PKP STATUS", "pkp_status"),
            Column("PKP STATUS AMENDED", "pkp_status_amended"),
        ),
    ),
    TableSheet(
        name=SHEET_PKS_DETAILS,
        source="pks_details",
        columns=(
            Column("PKP ID", "pkp_id", NUMBER),
            Column("PKS ID", "pks_id", NUMBER),
            Column("PKP DATE", "pkp_date", DATE),
            Column("PKS NAME", "pks_name"),
            Column("DIMENSION", "dimension"),
            Column("RED", "red", NUMBER),
            Column("AMBER", "amber", NUMBER),
            Column("GREEN", "green", NUMBER),
            Column("NA", "na", NUMBER),
            Column("RAG STATUS", "rag_status"),
        ),
    ),
    TableSheet(
        name=SHEET_CAR_RESULTS,
        source="car_results",
        columns=(
            Column("CAR ID", "car_id", NUMBER),
            Column("CAR NAME", "car_name"),
            Column("DIMENSION", "dimension"),
            Column("RED", "red"),
            Column("AMBER", "amber"),
            Column("CAR SCORE", "car_score", OPTIONAL_NUMBER),
            Column("CAR STATUS", "car_status"),
        ),
    ),
    TableSheet(
        name=SHEET_EXCLUDED_CARS,
        source="excluded_cars",
        columns=(
            Column("CAR ID", "car_id", NUMBER),
            Column("CAR NAME", "car_name"),
            Column("EXCLUSION REASON", "exclusion_reason"),
        ),
    ),
    TableSheet(
        name=SHEET_CAR_THRESHOLDS,
        source="car_thresholds",
        columns=(
            Column("CAR NAME", "car_name"),
            Column("ACCURACY", "accuracy", NUMBER),
            Column("COMPLETENESS", "completeness", NUMBER),
            Column("CONSISTENCY", "consistency", NUMBER),
            Column("TIMELINESS", "timeliness", NUMBER),
        ),
    ),
)


def write_table_sheet(sheet: SheetWriter, table: TableSheet, records: Sequence[Any], cfg: LayoutConfig) -> int:
    """Header row plus one row per record, input order. Returns rows written."""
    for col, column in enumerate(table.columns):
        sheet.write(0, col, column.header, BOLD)
    for col, width in sorted(cfg.column_widths.get(table.name, {}).items()):
        sheet.set_column_width(col, width)

    row = 1
    for rec in records:
        for col, column in enumerate(table.columns):
            _write_value(sheet, row, col, column.kind, getattr(rec, column.attr))
        row += 1
    return row


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def generate(
    report: ReportInput,
    stream: BinaryIO,
    *,
    writer: SheetWriter | None = None,
    layout: LayoutConfig | None = None,
) -> None:
    """Write the six-sheet PKP workbook into `stream`.

    Any error from the writer or the stream propagates; nothing is retried.
    """
    sheet = writer if writer is not None else open_writer()
    cfg = layout if layout is not None else LayoutConfig()

    sheet.create_sheet(SHEET_SUMMARY)
    rows = write_summary_sheet(sheet, report, cfg)
    logger.debug("sheet %s: %d rows", SHEET_SUMMARY, rows)

    for table in TABLE_SHEETS:
        sheet.create_sheet(table.name)
        rows = write_table_sheet(sheet, table, getattr(report, table.source), cfg)
        logger.debug("sheet %s: %d rows", table.name, rows)

    sheet.finish(stream)
    logger.info("generated PKP workbook for %r (%d PKS)", report.root.pkp_name, len(report.pks))


def generate_bytes(
    report: ReportInput,
    *,
    writer: SheetWriter | None = None,
    layout: LayoutConfig | None = None,
) -> bytes:
    buf = io.BytesIO()
    generate(report, buf, writer=writer, layout=layout)
    return buf.getvalue()
