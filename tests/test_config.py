from __future__ import annotations

import pytest

from pkp_report.config import Settings
from pkp_report.services.xlsx.layout import LayoutConfig


def test_defaults_match_layout_defaults() -> None:
    assert Settings().layout() == LayoutConfig()


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PKP_REPORT_TITLE_FONT_SIZE", "16")
    monkeypatch.setenv("PKP_REPORT_SUMMARY_LABEL_WIDTH", "500")
    monkeypatch.setenv("PKP_REPORT_COLUMN_WIDTHS", '{"PKP_details": {"2": 80}, "Car_results": {"1": 40}}')
    layout = Settings().layout()
    assert layout.title_font_size == 16
    assert layout.summary_label_width == 500
    assert layout.column_widths == {"PKP_details": {2: 80}, "Car_results": {1: 40}}


def test_dotenv_in_working_directory(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text("PKP_REPORT_STATUS_COLUMN_WIDTH=22\n", encoding="utf-8")
    (tmp_path / ".env.local").write_text("PKP_REPORT_TITLE_FONT_SIZE=12\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    layout = Settings().layout()
    assert layout.status_column_width == 22
    assert layout.title_font_size == 12
