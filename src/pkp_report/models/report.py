from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pkp_report.models.records import (
    ChildDetail,
    ChildSummary,
    ExcludedEntity,
    ParentDetail,
    RootSummary,
    ScoredEntity,
    ThresholdEntity,
)


class ReportInput(BaseModel):
    """Everything one workbook is built from.

    Lists may be given as `null`; they are normalized to empty lists here so the
    layout code never has to tell "absent" from "empty".
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    root: RootSummary = Field(validation_alias=AliasChoices("root", "pkp"))
    pks: list[ChildSummary] = Field(default_factory=list)
    pkp_details: list[ParentDetail] = Field(default_factory=list)
    pks_details: list[ChildDetail] = Field(default_factory=list)
    car_results: list[ScoredEntity] = Field(default_factory=list)
    excluded_cars: list[ExcludedEntity] = Field(default_factory=list)
    car_thresholds: list[ThresholdEntity] = Field(default_factory=list)

    @field_validator(
        "pks",
        "pkp_details",
        "pks_details",
        "car_results",
        "excluded_cars",
        "car_thresholds",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v


def suggested_filename(root: RootSummary) -> str:
    date_part = root.pkp_date.isoformat() if root.pkp_date is not None else "unknown_date"
    return f"{root.pkp_name}_{date_part}.xlsx"
