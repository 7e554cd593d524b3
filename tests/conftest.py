"""
Shared fixtures for the datasource adapter tests.
"""
from datetime import datetime, timezone

import pytest

from mongodb_datasource.core.domain.query import TimeRange
from mongodb_datasource.core.domain.settings import DatasourceSettings, MongoDBConfig


@pytest.fixture
def time_range():
    return TimeRange(
        from_=datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc),
        to=datetime(2024, 1, 1, 6, 0, tzinfo=timezone.utc),
        raw={"from": "now-6h", "to": "now"},
    )


@pytest.fixture
def settings():
    return DatasourceSettings(
        id=7,
        name="mongo-metrics",
        url="/api/datasources/proxy/7",
        json_data=MongoDBConfig(mongodb_url="mongodb://db:27017", mongodb_db="metrics"),
    )
