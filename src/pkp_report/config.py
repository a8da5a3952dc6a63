from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pkp_report.services.xlsx.layout import LayoutConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PKP_REPORT_",
        extra="ignore",
        # `.env` / `.env.local` in the working directory; real env vars win.
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
    )

    log_level: str = "INFO"

    # Summary sheet (PKP)
    title_font_size: int = 14
    summary_label_width: float = 100
    status_column_width: float = 30

    # Per-sheet column widths for the tabular sheets, zero-based column index.
    # Env override is JSON, e.g. PKP_REPORT_COLUMN_WIDTHS='{"PKP_details": {"2": 80}}'
    column_widths: dict[str, dict[int, float]] = Field(
        default_factory=lambda: {"PKP_details": {2: 100}},
    )

    def layout(self) -> LayoutConfig:
        return LayoutConfig(
            title_font_size=self.title_font_size,
            summary_label_width=self.summary_label_width,
            status_column_width=self.status_column_width,
            column_widths={sheet: dict(widths) for sheet, widths in self.column_widths.items()},
        )


settings = Settings()
