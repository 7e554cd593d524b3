import argparse
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from mongodb_datasource import main
from mongodb_datasource.adapters.backend.httpx_backend import HttpxBackendService
from mongodb_datasource.adapters.host.templating import VariableTemplateService
from mongodb_datasource.adapters.host.time_range import RelativeTimeService
from mongodb_datasource.core.domain.result import HealthCheckResult, MetricFindValue, QueryResponse, TimeSeriesItem
from mongodb_datasource.core.domain.settings import DatasourceSettings, RuntimeSettings


def test_create_datasource_wiring():
    settings = RuntimeSettings(
        host_url="http://grafana:3000/",
        timeout=10.0,
        datasource=DatasourceSettings(name="mongo"),
    )

    datasource = main.create_datasource(settings)

    assert isinstance(datasource.backend, HttpxBackendService)
    assert datasource.backend.base_url == "http://grafana:3000"
    assert datasource.backend.timeout == 10.0
    assert isinstance(datasource.templates, VariableTemplateService)
    assert isinstance(datasource.time, RelativeTimeService)
    assert datasource.settings.name == "mongo"


@pytest.fixture
def mock_datasource():
    datasource = MagicMock()
    datasource.backend.close = AsyncMock()
    with patch("mongodb_datasource.main.create_datasource", return_value=datasource), \
         patch("mongodb_datasource.main.load_settings", return_value=RuntimeSettings()):
        yield datasource


@pytest.mark.asyncio
async def test_run_test_command(mock_datasource, capsys):
    mock_datasource.test_datasource = AsyncMock(
        return_value=HealthCheckResult(status="error", message="auth failed", title="Error")
    )

    code = await main._run(argparse.Namespace(config=None, command="test"))

    assert code == 1
    assert '"auth failed"' in capsys.readouterr().out
    mock_datasource.backend.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_run_search_command(mock_datasource, capsys):
    mock_datasource.metric_find_query = AsyncMock(return_value=[MetricFindValue(text="cpu", value="cpu")])

    code = await main._run(argparse.Namespace(config=None, command="search", query="list_collections"))

    assert code == 0
    assert '"text": "cpu"' in capsys.readouterr().out
    mock_datasource.metric_find_query.assert_awaited_once_with("list_collections")


@pytest.mark.asyncio
async def test_run_query_command_as_frame(mock_datasource, time_range, capsys):
    mock_datasource.time.time_range.return_value = time_range
    mock_datasource.query = AsyncMock(return_value=QueryResponse(data=[
        TimeSeriesItem(target="cpu", datapoints=[[0.5, 1704067200000], [0.7, 1704067260000]]),
    ]))
    args = argparse.Namespace(
        config=None, command="query", collection="cpu", target="[]", type="timeserie", frame=True,
    )

    code = await main._run(args)

    assert code == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "unique_id,ds,y"
    assert lines[1] == "cpu,2024-01-01 00:00:00,0.5"
    assert len(lines) == 3
    options = mock_datasource.query.await_args.args[0]
    assert options.targets[0].collection == "cpu"
    assert options.range == time_range


@pytest.mark.asyncio
async def test_run_query_command_as_json(mock_datasource, time_range, capsys):
    mock_datasource.time.time_range.return_value = time_range
    mock_datasource.query = AsyncMock(return_value=QueryResponse(data=[
        TimeSeriesItem(target="cpu", datapoints=[[1, 1000]]),
    ]))
    args = argparse.Namespace(
        config=None, command="query", collection="cpu", target="[]", type="timeserie", frame=False,
    )

    assert await main._run(args) == 0
    assert '"target": "cpu"' in capsys.readouterr().out
