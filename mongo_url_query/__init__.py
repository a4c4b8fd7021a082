"""
Translate url query parameters into MongoDB aggregation pipelines.

Filters use the grammar ``field|type|operator|value`` or the short form
``field|value``; pagination, sorting and counting are wrapped around an
aggregation on a motor collection.
"""

from .fetch.fetch_item_methods import fetch_item_by_field, fetch_item_by_id
from .fetch.fetch_list_methods import fetch_list, fetch_unified_list
from .models import (
    BetweenOperatorValue,
    FetchListResult,
    FetchOptions,
    FilterOperator,
    FilterType,
    FilterValue,
    MultiSourceConfig,
    QueryRequest,
    QueryUrlOptions,
    SUPPORTED_OPERATORS,
)
from .query.filter_parser import parse_filter, parse_filters
from .query.pipeline_builder import IdentifierRepresentations, compile_pipeline, compile_pipeline_with_percent
from .query.url_methods import (
    RequestInput,
    build_query_url,
    extract_filters_from_url,
    get_url_from_request,
    parse_query_request,
)
from .routers.query_routes import create_query_router

__all__ = [
    "BetweenOperatorValue",
    "FetchListResult",
    "FetchOptions",
    "FilterOperator",
    "FilterType",
    "FilterValue",
    "IdentifierRepresentations",
    "MultiSourceConfig",
    "QueryRequest",
    "QueryUrlOptions",
    "RequestInput",
    "SUPPORTED_OPERATORS",
    "build_query_url",
    "compile_pipeline",
    "compile_pipeline_with_percent",
    "create_query_router",
    "extract_filters_from_url",
    "fetch_item_by_field",
    "fetch_item_by_id",
    "fetch_list",
    "fetch_unified_list",
    "get_url_from_request",
    "parse_filter",
    "parse_filters",
    "parse_query_request",
]
