from __future__ import annotations

import io
from datetime import date
from typing import Any

import pytest
from openpyxl import load_workbook

from pkp_report.models.report import ReportInput
from pkp_report.services.xlsx.writer import CellStyle


class RecordingWriter:
    """In-memory SheetWriter that keeps every write for inspection."""

    def __init__(self) -> None:
        self.sheets: dict[str, dict[tuple[int, int], tuple[Any, CellStyle | None]]] = {}
        self.widths: dict[str, dict[int, float]] = {}
        self.order: list[str] = []
        self.finished = False
        self._current: str | None = None

    def create_sheet(self, name: str) -> None:
        self.sheets[name] = {}
        self.widths[name] = {}
        self.order.append(name)
        self._current = name

    def write(self, row: int, col: int, value: Any, style: CellStyle | None = None) -> None:
        assert self._current is not None
        self.sheets[self._current][(row, col)] = (value, style)

    def set_column_width(self, col: int, width: float) -> None:
        assert self._current is not None
        self.widths[self._current][col] = width

    def finish(self, stream) -> None:
        self.finished = True
        stream.write(b"recorded")
        stream.flush()

    def value(self, sheet: str, row: int, col: int) -> Any:
        return self.sheets[sheet][(row, col)][0]

    def style(self, sheet: str, row: int, col: int) -> CellStyle | None:
        return self.sheets[sheet][(row, col)][1]

    def rows(self, sheet: str) -> list[int]:
        return sorted({r for r, _ in self.sheets[sheet]})


@pytest.fixture
def recorder() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture
def audit_report() -> ReportInput:
    return ReportInput.model_validate(
        {
            "pkp": {
                "pkp_name": "Audit2024",
                "pkp_date": date(2024, 1, 15),
                "accuracy": "Red",
                "completeness": None,
            },
            "pks": [],
            "pkp_details": [
                {
                    "pkp_id": 1,
                    "pkp_date": date(2024, 1, 15),
                    "pkp_name": "A",
                    "dimension": "D1",
                    "red": 2,
                    "amber": 1,
                    "green": 3,
                    "na": 0,
                    "pkp_status": "Amber",
                    "pkp_status_amended": "Green",
                }
            ],
        }
    )


@pytest.fixture
def full_report() -> ReportInput:
    return ReportInput.model_validate(
        {
            "pkp": {
                "pkp_name": "Flota Północ",
                "pkp_date": "2024-03-31",
                "pkp_comment": "Reviewed with owner.\nTimeliness recovered in March.",
                "pkp_comment_timestamp": "2024-04-02T09:15:00",
                "pkp_comment_uuid": "6f1c2d3e-0000-4000-8000-000000000001",
                "accuracy": "Green",
                "completeness": "AMBER",
                "consistency": " red ",
                "timeliness": "n/a",
                "accuracy_amended": "Green",
                "completeness_amended": "Green",
                "consistency_amended": "Amber",
                "timeliness_amended": None,
            },
            "pks": [
                {"pks_name": "PKS-1", "accuracy": "Green", "completeness": "Red"},
                {"pks_name": "PKS-2", "consistency": "Amber", "timeliness": "Green"},
                {"pks_name": "PKS-3"},
            ],
            "pkp_details": [
                {"pkp_id": 10, "pkp_name": "Flota Północ", "dimension": "Accuracy", "red": 1},
                {"pkp_id": 10, "pkp_date": "2024-03-31", "dimension": "Completeness", "green": 4},
            ],
            "pks_details": [
                {"pkp_id": 10, "pks_id": 1, "pks_name": "PKS-1", "dimension": "Accuracy", "rag_status": "Green"},
                {"pkp_id": 10, "pks_id": 2, "pkp_date": "2024-03-31", "pks_name": "PKS-2", "amber": 2},
                {"pkp_id": 10, "pks_id": 3, "pks_name": None, "na": 5},
            ],
            "car_results": [
                {"car_id": 7, "car_name": "CAR-7", "dimension": "Accuracy", "red": "5%", "amber": "10%",
                 "car_score": 97.5, "car_status": "Green"},
                {"car_id": 8, "car_name": "CAR-8", "car_score": None, "car_status": None},
            ],
            "excluded_cars": [
                {"car_id": 9, "car_name": "CAR-9", "exclusion_reason": "No data for period"},
            ],
            "car_thresholds": [
                {"car_name": "CAR-7", "accuracy": 95, "completeness": 90, "consistency": 85, "timeliness": 80},
            ],
        }
    )


def load_xlsx(data: bytes):
    return load_workbook(io.BytesIO(data))


def text(cell) -> str:
    # openpyxl does not persist empty strings; they read back as None.
    return "" if cell.value is None else cell.value
