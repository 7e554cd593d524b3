"""
Datasource Settings - Connection parameters entered by the operator.

Uses Pydantic for defaulting and (de)serialization of the persisted config.
"""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class VariantProfile:
    """Wire conventions of one generation of the backend."""

    placeholder: str
    query_type: str
    search_query_type: str


VARIANTS: dict[str, VariantProfile] = {
    "current": VariantProfile(
        placeholder="select metric",
        query_type="timeSeriesQuery",
        search_query_type="metricsQuery",
    ),
    "legacy": VariantProfile(
        placeholder="[]",
        query_type="query",
        search_query_type="search",
    ),
}


class Stage(BaseModel):
    """A named aggregation stage macro. Stored for the editor, never interpreted."""

    name: str = ""
    stage: str = ""


class MongoDBConfig(BaseModel):
    """
    The datasource's jsonData block.
    """
    mongodb_url: str = Field(default="mongodb://localhost:27017", description="MongoDB connection URL")
    mongodb_db: str = Field(default="", description="MongoDB database name")
    stages: list[Stage] = Field(default_factory=list, description="Named stage macros")

    def locator(self) -> dict[str, str]:
        """Database locator forwarded with every backend query."""
        return {"url": self.mongodb_url, "db": self.mongodb_db}

    def add_stage(self) -> Stage:
        stage = Stage()
        self.stages.append(stage)
        return stage

    def remove_stage(self, stage: Stage) -> None:
        # identity match; blank stages compare equal by value
        for i, existing in enumerate(self.stages):
            if existing is stage:
                del self.stages[i]
                return
        self.stages.remove(stage)


class DatasourceSettings(BaseModel):
    """
    Instance settings handed over by the host when the datasource is created.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: int = 0
    name: str = "MongoDB"
    type: str = "mongodb-datasource"
    url: str = Field(default="", description="Host proxy URL of this datasource instance")
    basic_auth: str | None = Field(default=None, alias="basicAuth")
    variant: Literal["current", "legacy"] = Field(default="current", description="Backend wire variant")
    json_data: MongoDBConfig = Field(default_factory=MongoDBConfig, alias="jsonData")

    @property
    def profile(self) -> VariantProfile:
        return VARIANTS[self.variant]

    def headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.basic_auth:
            headers["Authorization"] = self.basic_auth
        return headers


class RuntimeSettings(BaseModel):
    """
    Settings for running the adapter outside the host.
    """
    host_url: str = Field(default="http://localhost:3000", description="Base URL of the dashboarding host")
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    datasource: DatasourceSettings = Field(default_factory=DatasourceSettings)
