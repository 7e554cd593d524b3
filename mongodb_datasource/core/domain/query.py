"""
Query Domain Model - Panel targets and the request envelope sent to the backend.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mongodb_datasource.core.domain.settings import VARIANTS, VariantProfile


def epoch_ms(value: datetime) -> str:
    """Epoch milliseconds as the string the backend expects."""
    return str(int(value.timestamp() * 1000))


class TimeRange(BaseModel):
    """Resolved dashboard time range."""
    model_config = ConfigDict(populate_by_name=True)

    from_: datetime = Field(alias="from")
    to: datetime
    raw: dict[str, str] | None = None  # e.g. {"from": "now-6h", "to": "now"}


class Target(BaseModel):
    """
    One query row of a panel, as edited by the host's query editor.
    """
    model_config = ConfigDict(populate_by_name=True)

    ref_id: str = Field(default="A", alias="refId")
    target: str = "select metric"
    collection: str = ""
    type: Literal["timeserie", "table"] = "timeserie"
    hide: bool = False
    raw_query: bool = Field(default=True, alias="rawQuery")

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, value: Any) -> Any:
        return value or "timeserie"

    @classmethod
    def blank(cls, profile: VariantProfile = VARIANTS["current"], **fields) -> "Target":
        """A new, unconfigured row for the given backend variant."""
        fields.setdefault("target", profile.placeholder)
        return cls(**fields)

    def toggle_editor_mode(self) -> None:
        self.raw_query = not self.raw_query


class QueryOptions(BaseModel):
    """Query request handed to the adapter by a panel."""
    model_config = ConfigDict(populate_by_name=True)

    range: TimeRange
    targets: list[Target] = Field(default_factory=list)
    scoped_vars: dict[str, Any] = Field(default_factory=dict, alias="scopedVars")
    interval_ms: int | None = Field(default=None, alias="intervalMs")
    max_data_points: int | None = Field(default=None, alias="maxDataPoints")


class QueryDescriptor(BaseModel):
    """A target translated for the backend."""
    model_config = ConfigDict(populate_by_name=True)

    query_type: str = Field(alias="queryType")
    target: str
    collection: str = ""
    ref_id: str = Field(alias="refId")
    hide: bool = False
    type: str = "timeserie"
    datasource_id: int = Field(alias="datasourceId")
    interval_ms: int | None = Field(default=None, alias="intervalMs")
    max_data_points: int | None = Field(default=None, alias="maxDataPoints")
    db: dict[str, str] = Field(default_factory=dict)


class RequestEnvelope(BaseModel):
    """Body of one POST to the backend query proxy."""
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    queries: list[QueryDescriptor] = Field(default_factory=list)

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AnnotationDefinition(BaseModel):
    """Annotation as configured on a dashboard."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    datasource: str | None = None
    enable: bool = True
    icon_color: str | None = Field(default=None, alias="iconColor")
    query: str = ""


class AnnotationQueryOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    range: TimeRange
    annotation: AnnotationDefinition
    range_raw: dict[str, str] | None = Field(default=None, alias="rangeRaw")
