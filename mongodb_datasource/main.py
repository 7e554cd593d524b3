import argparse
import asyncio
import json
import logging
from dataclasses import asdict

from mongodb_datasource.adapters.backend.httpx_backend import HttpxBackendService
from mongodb_datasource.adapters.config.settings_loader import load_settings
from mongodb_datasource.adapters.host.templating import VariableTemplateService
from mongodb_datasource.adapters.host.time_range import RelativeTimeService
from mongodb_datasource.core.domain.query import QueryOptions, Target
from mongodb_datasource.core.domain.settings import RuntimeSettings
from mongodb_datasource.core.ports.host_services import TemplateService, TimeService
from mongodb_datasource.core.services.datasource import MongoDBDatasource
from mongodb_datasource.core.services.response_mapper import series_frame

logger = logging.getLogger(__name__)


def create_datasource(
    settings: RuntimeSettings | None = None,
    templates: TemplateService | None = None,
    time: TimeService | None = None,
) -> MongoDBDatasource:
    """
    Wire a datasource with the standalone host services.
    """
    settings = settings or load_settings()
    backend = HttpxBackendService(base_url=settings.host_url, timeout=settings.timeout)
    return MongoDBDatasource(
        settings.datasource,
        backend=backend,
        templates=templates or VariableTemplateService(),
        time=time or RelativeTimeService(),
    )


async def _run(args: argparse.Namespace) -> int:
    datasource = create_datasource(load_settings(args.config))
    try:
        if args.command == "test":
            result = await datasource.test_datasource()
            print(json.dumps(asdict(result)))
            return 0 if result.status == "success" else 1

        if args.command == "query":
            options = QueryOptions(
                range=datasource.time.time_range(),
                targets=[Target(target=args.target, collection=args.collection, type=args.type)],
            )
            response = await datasource.query(options)
            if args.frame:
                print(series_frame(response.data).to_csv(index=False), end="")
            else:
                print(json.dumps(response.payload()))
            return 0

        values = await datasource.metric_find_query(args.query)
        print(json.dumps([asdict(v) for v in values], default=str))
        return 0
    finally:
        await datasource.backend.close()


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="MongoDB datasource adapter")
    parser.add_argument("--config", default=None, help="Path to the datasource YAML file")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("test", help="Check backend connectivity")
    search = subparsers.add_parser("search", help="Run a variable query")
    search.add_argument("query", help="Query text, e.g. list_collections")
    query = subparsers.add_parser("query", help="Run a panel query over the current time range")
    query.add_argument("collection", help="Collection to aggregate")
    query.add_argument("target", help="Aggregation pipeline as extended JSON")
    query.add_argument("--type", choices=["timeserie", "table"], default="timeserie")
    query.add_argument("--frame", action="store_true", help="Print series as CSV (unique_id, ds, y)")

    args = parser.parse_args()
    raise SystemExit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
