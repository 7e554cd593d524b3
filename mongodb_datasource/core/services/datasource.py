"""
MongoDB Datasource - The query adapter the host talks to.

Each operation builds one request, awaits one call through the host's
BackendService and reshapes the reply:
1. Panel queries -> /api/tsdb/query -> render items
2. Variable queries and connectivity probes -> /api/tsdb/query -> text/value options
3. Annotations and ad-hoc tag lookups -> <datasource url>/... -> raw payload
"""

import logging
from typing import Any

from mongodb_datasource.core.domain.query import AnnotationQueryOptions, QueryOptions, RequestEnvelope
from mongodb_datasource.core.domain.result import HealthCheckResult, MetricFindValue, QueryResponse
from mongodb_datasource.core.domain.settings import DatasourceSettings
from mongodb_datasource.core.ports.backend_service import (
    BackendRequest,
    BackendRequestError,
    BackendResponse,
    BackendService,
)
from mongodb_datasource.core.ports.host_services import TemplateService, TimeService
from mongodb_datasource.core.services.query_builder import QueryBuilder
from mongodb_datasource.core.services.response_mapper import (
    map_results,
    map_to_text_value,
    parse_result,
)

logger = logging.getLogger(__name__)

QUERY_PATH = "/api/tsdb/query"
PROBE_TARGET = "ping"


class MongoDBDatasource:
    """
    Query adapter for one configured datasource instance.
    """

    def __init__(
        self,
        settings: DatasourceSettings,
        backend: BackendService,
        templates: TemplateService,
        time: TimeService,
    ):
        """
        Initialize the adapter.

        Args:
            settings: Instance settings, including the MongoDB config
            backend: Port to send requests through the host
            templates: Port to interpolate dashboard variables
            time: Port to read the dashboard time range
        """
        self.settings = settings
        self.backend = backend
        self.templates = templates
        self.time = time
        self.builder = QueryBuilder(settings, templates)

    async def query(self, options: QueryOptions) -> QueryResponse:
        """Run a panel query and return the render list."""
        envelope = self.builder.build(options)
        if not envelope.queries:
            return QueryResponse()

        response = await self._do_request(envelope)
        return QueryResponse(data=map_results(parse_result(response.data)))

    async def metric_find_query(self, query: str) -> list[MetricFindValue]:
        """Resolve a variable query into text/value options."""
        envelope = self.builder.build_search(query, self.time.time_range())
        response = await self._do_request(envelope)
        return map_to_text_value(parse_result(response.data))

    async def test_datasource(self) -> HealthCheckResult:
        """
        Probe the backend and database.

        Never raises for backend failures; they are reported in the result.
        """
        envelope = self.builder.build_search(PROBE_TARGET, self.time.time_range())
        try:
            response = await self._do_request(envelope)
        except BackendRequestError as e:
            message = e.backend_message or (f"HTTP {e.status}" if e.status else e.message)
            logger.warning(f"Connectivity check for '{self.settings.name}' failed: {message}")
            return HealthCheckResult(status="error", message=message, title="Error")

        result = parse_result(response.data)
        errors = [entry.error for entry in result.results.values() if entry.error]
        if errors:
            logger.warning(f"Connectivity check for '{self.settings.name}' failed: {errors[0]}")
            return HealthCheckResult(status="error", message=errors[0], title="Error")

        return HealthCheckResult(status="success", message="Data source is working", title="Success")

    async def annotation_query(self, options: AnnotationQueryOptions) -> Any:
        """Fetch annotation events from the backend annotations endpoint."""
        annotation = options.annotation
        query = self.templates.replace(annotation.query, {}, "glob")

        get_adhoc_filters = getattr(self.templates, "get_adhoc_filters", None)
        adhoc_filters = get_adhoc_filters(self.settings.name) if get_adhoc_filters else []

        payload = {
            "range": options.range.model_dump(mode="json", by_alias=True, exclude_none=True),
            "rangeRaw": options.range_raw,
            "annotation": {
                "name": annotation.name,
                "datasource": annotation.datasource,
                "enable": annotation.enable,
                "iconColor": annotation.icon_color,
                "query": query,
            },
            "adhocFilters": adhoc_filters,
        }

        response = await self._do_direct_request("/annotations", payload)
        return response.data

    async def get_tag_keys(self, options: dict[str, Any] | None = None) -> Any:
        response = await self._do_direct_request("/tag-keys", options or {})
        return response.data

    async def get_tag_values(self, options: dict[str, Any] | None = None) -> Any:
        response = await self._do_direct_request("/tag-values", options or {})
        return response.data

    async def _do_request(self, envelope: RequestEnvelope) -> BackendResponse:
        logger.info(f"Querying '{self.settings.name}' with {len(envelope.queries)} queries")
        return await self.backend.datasource_request(BackendRequest(
            url=QUERY_PATH,
            method="POST",
            data=envelope.payload(),
        ))

    async def _do_direct_request(self, path: str, data: Any) -> BackendResponse:
        url = self.settings.url.rstrip("/") + path
        logger.info(f"POST {url}")
        return await self.backend.datasource_request(BackendRequest(
            url=url,
            method="POST",
            data=data,
            headers=self.settings.headers(),
        ))
