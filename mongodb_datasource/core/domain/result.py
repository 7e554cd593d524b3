"""
Result Domain Models - Backend replies and the render items handed to the host.
"""

from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator


class Series(BaseModel):
    """A named point series; points are [value, epoch_ms] pairs."""

    name: str
    points: list[list[Any]] = Field(default_factory=list)

    @field_validator("points", mode="before")
    @classmethod
    def null_points_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class TableColumn(BaseModel):
    text: str


class Table(BaseModel):
    columns: list[TableColumn] = Field(default_factory=list)
    rows: list[list[Any]] = Field(default_factory=list)

    @field_validator("columns", "rows", mode="before")
    @classmethod
    def null_lists_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class QueryResult(BaseModel):
    """Result entry of one query, keyed by its refId in the backend reply."""
    model_config = ConfigDict(populate_by_name=True)

    ref_id: str | None = Field(default=None, alias="refId")
    series: list[Series] | None = None
    tables: list[Table] | None = None
    error: str | None = None


class BackendResult(BaseModel):
    """Full JSON payload of a backend query reply."""

    results: dict[str, QueryResult] = Field(default_factory=dict)


class TimeSeriesItem(BaseModel):
    """Render item for a point series. The host reads series without a type tag."""

    type: Literal["timeserie"] = Field(default="timeserie", exclude=True)
    target: str
    datapoints: list[list[Any]] = Field(default_factory=list)


class TableItem(BaseModel):
    """Render item for a table, tagged with the refId it came from."""
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["table"] = "table"
    ref_id: str | None = Field(default=None, alias="refId")
    columns: list[TableColumn] = Field(default_factory=list)
    rows: list[list[Any]] = Field(default_factory=list)


def _render_kind(value: Any) -> str:
    # series items are serialized without their tag
    if isinstance(value, dict):
        return value.get("type") or "timeserie"
    return getattr(value, "type", "timeserie")


RenderItem = Annotated[
    Union[Annotated[TimeSeriesItem, Tag("timeserie")], Annotated[TableItem, Tag("table")]],
    Discriminator(_render_kind),
]


class QueryResponse(BaseModel):
    """What a panel query returns to the host."""

    data: list[RenderItem] = Field(default_factory=list)

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


@dataclass
class MetricFindValue:
    """A text/value option for template variable population."""

    text: Any
    value: Any


@dataclass
class HealthCheckResult:
    """Outcome of a connectivity check."""

    status: Literal["success", "error"]
    message: str
    title: str
