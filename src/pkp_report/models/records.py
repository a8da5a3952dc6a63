from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, model_serializer, model_validator


class StatusCategory(str, Enum):
    RED = "red"
    AMBER = "amber"
    GREEN = "green"
    UNKNOWN = "unknown"


def _category_of(text: str) -> StatusCategory:
    v = (text or "").strip().lower()
    if v == "red":
        return StatusCategory.RED
    if v == "amber":
        return StatusCategory.AMBER
    if v == "green":
        return StatusCategory.GREEN
    return StatusCategory.UNKNOWN


class StatusLabel(BaseModel):
    """RAG status label as entered upstream.

    Accepts either:
    - plain string: "Red", " amber ", "n/a"
    - dict: {"text": "Red"}

    `text` is kept verbatim for display; `category` is decoded once from the
    trimmed, lower-cased text. Serializes back to the plain text.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    category: StatusCategory = StatusCategory.UNKNOWN

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, v: Any) -> Any:
        if isinstance(v, StatusLabel):
            return {"text": v.text, "category": v.category}
        if isinstance(v, str):
            return {"text": v, "category": _category_of(v)}
        if isinstance(v, dict):
            text = str(v.get("text") or "")
            return {"text": text, "category": _category_of(text)}
        raise ValueError(f"invalid status label: {v!r}")

    @model_serializer(mode="plain")
    def _dump(self) -> str:
        return self.text

    @classmethod
    def parse(cls, value: str | None) -> StatusLabel | None:
        if value is None:
            return None
        return cls.model_validate(value)


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


OptionalDate = Annotated[date | None, BeforeValidator(_blank_to_none)]
OptionalFloat = Annotated[float | None, BeforeValidator(_blank_to_none)]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class RootSummary(_Record):
    """PKP header block for the summary sheet (one per report)."""

    pkp_name: str = Field(validation_alias=AliasChoices("pkp_name", "name"))
    pkp_date: OptionalDate = Field(default=None, validation_alias=AliasChoices("pkp_date", "date"))
    pkp_comment: str | None = Field(default=None, validation_alias=AliasChoices("pkp_comment", "comment"))
    pkp_comment_timestamp: str | None = Field(
        default=None,
        validation_alias=AliasChoices("pkp_comment_timestamp", "comment_timestamp"),
    )
    pkp_comment_uuid: str | None = Field(
        default=None,
        validation_alias=AliasChoices("pkp_comment_uuid", "comment_uuid", "comment_id"),
    )

    accuracy: StatusLabel | None = None
    completeness: StatusLabel | None = None
    consistency: StatusLabel | None = None
    timeliness: StatusLabel | None = None

    accuracy_amended: StatusLabel | None = None
    completeness_amended: StatusLabel | None = None
    consistency_amended: StatusLabel | None = None
    timeliness_amended: StatusLabel | None = None

    def system_based(self) -> tuple[StatusLabel | None, ...]:
        return (self.accuracy, self.completeness, self.consistency, self.timeliness)

    def adjusted(self) -> tuple[StatusLabel | None, ...]:
        return (
            self.accuracy_amended,
            self.completeness_amended,
            self.consistency_amended,
            self.timeliness_amended,
        )


class ChildSummary(_Record):
    pks_name: str | None = Field(default=None, validation_alias=AliasChoices("pks_name", "name"))
    accuracy: StatusLabel | None = None
    completeness: StatusLabel | None = None
    consistency: StatusLabel | None = None
    timeliness: StatusLabel | None = None

    def statuses(self) -> tuple[StatusLabel | None, ...]:
        return (self.accuracy, self.completeness, self.consistency, self.timeliness)


class ParentDetail(_Record):
    """PKP_details row."""

    pkp_id: int
    pkp_date: OptionalDate = None
    pkp_name: str | None = None
    dimension: str | None = None
    red: int = 0
    amber: int = 0
    green: int = 0
    na: int = 0
    pkp_status: str | None = None
    pkp_status_amended: str | None = None


class ChildDetail(_Record):
    """PKS_details row."""

    pkp_id: int
    pks_id: int
    pkp_date: OptionalDate = None
    pks_name: str | None = None
    dimension: str | None = None
    red: int = 0
    amber: int = 0
    green: int = 0
    na: int = 0
    rag_status: str | None = None


class ScoredEntity(_Record):
    """Car_results row. `red`/`amber` are labels here, not counts."""

    car_id: int
    car_name: str | None = None
    dimension: str | None = None
    red: str | None = None
    amber: str | None = None
    car_score: OptionalFloat = None
    car_status: str | None = None


class ExcludedEntity(_Record):
    car_id: int
    car_name: str | None = None
    exclusion_reason: str | None = None


class ThresholdEntity(_Record):
    car_name: str | None = None
    accuracy: int = 0
    completeness: int = 0
    consistency: int = 0
    timeliness: int = 0
