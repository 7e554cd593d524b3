"""
Response Mapper - Reshapes backend replies for the host.

Returns pydantic render items; ``series_frame`` additionally exposes series as
a long-form DataFrame (['unique_id', 'ds', 'y']) for analysis callers.
"""

import logging
from typing import Any

import pandas as pd

from mongodb_datasource.core.domain.result import (
    BackendResult,
    MetricFindValue,
    RenderItem,
    TableItem,
    TimeSeriesItem,
)

logger = logging.getLogger(__name__)

SEARCH_REF_ID = "search"


class BackendQueryError(RuntimeError):
    """A query the backend accepted but failed to execute."""

    def __init__(self, ref_id: str, message: str):
        super().__init__(f"Query '{ref_id}' failed: {message}")
        self.ref_id = ref_id
        self.message = message


def parse_result(data: Any) -> BackendResult:
    """Validate a raw reply body. An empty body is an empty result."""
    if not data:
        return BackendResult()
    return BackendResult.model_validate(data)


def map_results(result: BackendResult) -> list[RenderItem]:
    """Flatten every result entry into render items, in enumeration order."""
    items: list[RenderItem] = []
    for key, entry in result.results.items():
        ref_id = entry.ref_id or key
        if entry.error:
            raise BackendQueryError(ref_id, entry.error)

        for series in entry.series or []:
            items.append(TimeSeriesItem(target=series.name, datapoints=series.points))
        for table in entry.tables or []:
            items.append(TableItem(ref_id=ref_id, columns=table.columns, rows=table.rows))

    logger.debug(f"Mapped {len(result.results)} results into {len(items)} items")
    return items


def map_to_text_value(result: BackendResult) -> list[MetricFindValue]:
    """
    Map the first table of the search result into text/value options.

    Rows with two or more cells map to (cell 0, cell 1). A single structured
    cell maps to (cell, row index) so the value stays distinct; any other
    single cell is used as both text and value.
    """
    entry = result.results.get(SEARCH_REF_ID)
    if entry is not None and entry.error:
        raise BackendQueryError(SEARCH_REF_ID, entry.error)
    if entry is None or not entry.tables:
        return []

    values = []
    for i, row in enumerate(entry.tables[0].rows):
        if len(row) > 1:
            values.append(MetricFindValue(text=row[0], value=row[1]))
        elif row and isinstance(row[0], (dict, list)):
            values.append(MetricFindValue(text=row[0], value=i))
        elif row:
            values.append(MetricFindValue(text=row[0], value=row[0]))
    return values


def series_frame(items: list[RenderItem]) -> pd.DataFrame:
    """Long-form DataFrame of all series items; tables are ignored."""
    frames = []
    for item in items:
        if not isinstance(item, TimeSeriesItem) or not item.datapoints:
            continue

        df_series = pd.DataFrame(item.datapoints, columns=["value", "timestamp"])
        df_series["ds"] = pd.to_datetime(df_series["timestamp"].astype("int64"), unit="ms")
        df_series["y"] = pd.to_numeric(df_series["value"], errors="coerce")
        df_series["unique_id"] = item.target
        frames.append(df_series[["unique_id", "ds", "y"]])

    if not frames:
        return pd.DataFrame(columns=["unique_id", "ds", "y"])

    return pd.concat(frames, ignore_index=True)
