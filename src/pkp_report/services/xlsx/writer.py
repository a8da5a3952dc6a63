from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO, Protocol, Union

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

logger = logging.getLogger(__name__)

CellValue = Union[str, int, float]


@dataclass(frozen=True)
class CellStyle:
    bold: bool = False
    wrap: bool = False
    font_size: float | None = None
    # ARGB hex, e.g. "FFFF0000"
    color: str | None = None


BOLD = CellStyle(bold=True)
BOLD_WRAP = CellStyle(bold=True, wrap=True)
WRAP = CellStyle(wrap=True)


class SheetWriter(Protocol):
    """What the layout engine needs from a spreadsheet library.

    Positions are zero-based. Cells go to the sheet most recently created.
    """

    def create_sheet(self, name: str) -> None: ...

    def write(self, row: int, col: int, value: CellValue, style: CellStyle | None = None) -> None: ...

    def set_column_width(self, col: int, width: float) -> None: ...

    def finish(self, stream: BinaryIO) -> None: ...


class OpenpyxlSheetWriter:
    """`SheetWriter` backed by an in-memory openpyxl workbook.

    Font/Alignment objects are shared per distinct `CellStyle`, so the saved
    document carries one style record per combination actually used.
    """

    def __init__(self) -> None:
        self._wb = Workbook()
        # Drop the default "Sheet"; the document holds only what the caller creates.
        self._wb.remove(self._wb.active)
        self._ws: Worksheet | None = None
        self._fonts: dict[CellStyle, Font] = {}
        self._alignments: dict[bool, Alignment] = {}
        self._finished = False

    @property
    def workbook(self) -> Workbook:
        return self._wb

    def _sheet(self) -> Worksheet:
        if self._ws is None:
            raise RuntimeError("no sheet created yet")
        return self._ws

    def create_sheet(self, name: str) -> None:
        if self._finished:
            raise RuntimeError("writer already finished")
        self._ws = self._wb.create_sheet(title=name)
        logger.debug("created sheet %s", name)

    def _font(self, style: CellStyle) -> Font:
        key = CellStyle(bold=style.bold, font_size=style.font_size, color=style.color)
        font = self._fonts.get(key)
        if font is None:
            font = Font(bold=style.bold, size=style.font_size, color=style.color)
            self._fonts[key] = font
        return font

    def _alignment(self, wrap: bool) -> Alignment:
        al = self._alignments.get(wrap)
        if al is None:
            al = Alignment(wrap_text=wrap)
            self._alignments[wrap] = al
        return al

    def write(self, row: int, col: int, value: CellValue, style: CellStyle | None = None) -> None:
        if isinstance(value, str):
            # control characters are not representable in sheet XML; drop them
            value = ILLEGAL_CHARACTERS_RE.sub("", value)
        cell = self._sheet().cell(row=row + 1, column=col + 1, value=value)
        if style is None:
            return
        if style.bold or style.font_size is not None or style.color is not None:
            cell.font = self._font(style)
        if style.wrap:
            cell.alignment = self._alignment(True)

    def set_column_width(self, col: int, width: float) -> None:
        self._sheet().column_dimensions[get_column_letter(col + 1)].width = width

    def finish(self, stream: BinaryIO) -> None:
        if self._finished:
            raise RuntimeError("writer already finished")
        self._finished = True
        self._wb.save(stream)
        stream.flush()
        logger.debug("workbook flushed (sheets=%s)", self._wb.sheetnames)


def open_writer() -> OpenpyxlSheetWriter:
    return OpenpyxlSheetWriter()
