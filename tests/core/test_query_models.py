from datetime import datetime, timezone

from mongodb_datasource.core.domain.query import (
    QueryDescriptor,
    QueryOptions,
    RequestEnvelope,
    Target,
    epoch_ms,
)
from mongodb_datasource.core.domain.result import QueryResponse, TableItem, TimeSeriesItem
from mongodb_datasource.core.domain.settings import VARIANTS


def test_epoch_ms():
    assert epoch_ms(datetime(2024, 1, 1, tzinfo=timezone.utc)) == "1704067200000"


def test_blank_target_per_variant():
    current = Target.blank()
    legacy = Target.blank(VARIANTS["legacy"], ref_id="B")

    assert current.target == "select metric"
    assert current.type == "timeserie"
    assert current.raw_query is True
    assert legacy.target == "[]"
    assert legacy.ref_id == "B"


def test_toggle_editor_mode():
    target = Target.blank()
    target.toggle_editor_mode()
    assert target.raw_query is False
    target.toggle_editor_mode()
    assert target.raw_query is True


def test_query_options_from_host_payload():
    options = QueryOptions.model_validate({
        "range": {"from": "2024-01-01T00:00:00Z", "to": "2024-01-01T01:00:00Z"},
        "targets": [{"refId": "A", "target": "[]", "collection": "cpu", "rawQuery": True}],
        "scopedVars": {"host": {"text": "a", "value": "a"}},
        "intervalMs": 15000,
        "maxDataPoints": 500,
    })

    assert options.targets[0].ref_id == "A"
    assert options.interval_ms == 15000
    assert options.range.from_.year == 2024


def test_envelope_payload_uses_wire_names():
    envelope = RequestEnvelope(
        from_="1000",
        to="2000",
        queries=[QueryDescriptor(
            query_type="timeSeriesQuery",
            target="[]",
            collection="cpu",
            ref_id="A",
            datasource_id=3,
            db={"url": "mongodb://localhost:27017", "db": "metrics"},
        )],
    )

    assert envelope.payload() == {
        "from": "1000",
        "to": "2000",
        "queries": [{
            "queryType": "timeSeriesQuery",
            "target": "[]",
            "collection": "cpu",
            "refId": "A",
            "hide": False,
            "type": "timeserie",
            "datasourceId": 3,
            "db": {"url": "mongodb://localhost:27017", "db": "metrics"},
        }],
    }


def test_render_items_are_tagged():
    response = QueryResponse(data=[
        TimeSeriesItem(target="cpu", datapoints=[[1, 1000]]),
        TableItem(ref_id="B", columns=[{"text": "host"}], rows=[["a"]]),
    ])

    assert response.payload() == {
        "data": [
            {"target": "cpu", "datapoints": [[1, 1000]]},
            {"type": "table", "refId": "B", "columns": [{"text": "host"}], "rows": [["a"]]},
        ]
    }


def test_render_items_validate_from_wire():
    response = QueryResponse.model_validate({
        "data": [{"type": "table", "refId": "A", "rows": [[1]]}],
    })

    assert isinstance(response.data[0], TableItem)
    assert response.data[0].ref_id == "A"


def test_render_items_validate_from_payload():
    response = QueryResponse(data=[
        TimeSeriesItem(target="cpu", datapoints=[[1, 1000]]),
        TableItem(ref_id="B", rows=[["a"]]),
    ])

    restored = QueryResponse.model_validate(response.payload())

    assert restored == response
    assert isinstance(restored.data[0], TimeSeriesItem)
    assert isinstance(restored.data[1], TableItem)


def test_target_type_falsy_values_default():
    assert Target(type="").type == "timeserie"
    assert Target.model_validate({"refId": "A", "type": None}).type == "timeserie"
    assert Target(type="table").type == "table"
