"""
Query Builder - Translates panel targets into a backend request envelope.
"""

import json
import logging
from typing import Any

from mongodb_datasource.core.domain.query import (
    QueryDescriptor,
    QueryOptions,
    RequestEnvelope,
    TimeRange,
    epoch_ms,
)
from mongodb_datasource.core.domain.settings import DatasourceSettings
from mongodb_datasource.core.ports.host_services import TemplateService

logger = logging.getLogger(__name__)


def quote_multi_value(value: Any) -> str:
    """
    Format callback for variable interpolation.

    Multi-valued variables become a comma-joined list of JSON strings so the
    backend receives a valid list literal, e.g. ``[10, 20]`` -> ``"10","20"``.
    """
    if isinstance(value, (list, tuple)):
        return ",".join(json.dumps(str(v)) for v in value)
    return str(value)


class QueryBuilder:
    """
    Builds request envelopes for one datasource instance.
    """

    def __init__(self, settings: DatasourceSettings, templates: TemplateService):
        self.settings = settings
        self.templates = templates

    def build(self, options: QueryOptions) -> RequestEnvelope:
        """
        Translate a panel query into a request envelope.

        Placeholder, hidden and incomplete targets are dropped; the returned
        envelope may therefore hold no queries.
        """
        profile = self.settings.profile
        db = self.settings.json_data.locator()
        queries = []

        for target in options.targets:
            if target.target == profile.placeholder:
                continue
            if target.hide:
                logger.debug(f"Skipping hidden target '{target.ref_id}'")
                continue

            collection = self.templates.replace(target.collection, options.scoped_vars, quote_multi_value)
            if not collection or not target.ref_id:
                logger.debug(f"Skipping target '{target.ref_id}' without collection")
                continue

            queries.append(QueryDescriptor(
                query_type=profile.query_type,
                target=self.templates.replace(target.target, options.scoped_vars, quote_multi_value),
                collection=collection,
                ref_id=target.ref_id,
                hide=target.hide,
                type=target.type or "timeserie",
                datasource_id=self.settings.id,
                interval_ms=options.interval_ms,
                max_data_points=options.max_data_points,
                db=db,
            ))

        logger.debug(f"Built {len(queries)} of {len(options.targets)} targets for '{self.settings.name}'")
        return RequestEnvelope(
            from_=epoch_ms(options.range.from_),
            to=epoch_ms(options.range.to),
            queries=queries,
        )

    def build_search(self, query: str, time_range: TimeRange, ref_id: str = "search") -> RequestEnvelope:
        """Envelope for a variable-population or probe query."""
        descriptor = QueryDescriptor(
            query_type=self.settings.profile.search_query_type,
            target=self.templates.replace(query, None, quote_multi_value),
            ref_id=ref_id,
            datasource_id=self.settings.id,
            db=self.settings.json_data.locator(),
        )
        return RequestEnvelope(
            from_=epoch_ms(time_range.from_),
            to=epoch_ms(time_range.to),
            queries=[descriptor],
        )
