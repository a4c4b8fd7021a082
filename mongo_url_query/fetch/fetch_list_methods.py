import math
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection

from ..collections.helper_methods import count_pipeline, get_collection_name, has_stage, run_pipeline
from ..logger_manager import LoggerManager
from ..models import FetchListResult, FetchOptions, MultiSourceConfig, QueryRequest
from ..query.pipeline_builder import compile_pipeline, compile_pipeline_with_percent
from ..query.url_methods import RequestInput, extract_filters_from_url, get_url_from_request, parse_query_request

# Logging
logger_instance = LoggerManager()
logger = logger_instance.get_logger("UrlQuery Fetch")


## helper methods

def resolve_sort_stage(query: QueryRequest, options: FetchOptions) -> Dict[str, Any]:
    field = query.sort_field or options.sort_field

    match (query.sort_direction or "").lower():
        case "asc":
            direction = 1
        case "desc":
            direction = -1
        case _:
            direction = 1 if options.sort_dir == "asc" else -1

    return {"$sort": {field: direction}}


def pagination_stages(query: QueryRequest) -> List[Dict[str, Any]]:
    if query.export or query.limit <= 0:
        return []
    return [{"$skip": query.skip}, {"$limit": query.limit}]


def build_list_result(query: QueryRequest, total: int, items: List[Dict]) -> FetchListResult:
    if query.export or query.limit <= 0:
        total_pages = 1 if total else 0
    else:
        total_pages = math.ceil(total / query.limit)

    has_next_page = query.page < total_pages
    has_prev_page = query.page > 1

    return FetchListResult(
        page=query.page,
        limit=query.limit,
        total=total,
        total_pages=total_pages,
        has_next_page=has_next_page,
        has_prev_page=has_prev_page,
        next_page=query.page + 1 if has_next_page else None,
        prev_page=query.page - 1 if has_prev_page else None,
        items=items,
    )


def empty_list_result(options: FetchOptions) -> FetchListResult:
    return build_list_result(QueryRequest(page=1, limit=options.limit), 0, [])


## fetch methods

async def fetch_list(
    request: RequestInput,
    collection: AsyncIOMotorCollection,
    options: Optional[FetchOptions] = None,
    initial_pipeline: Optional[List[Dict[str, Any]]] = None,
    final_pipeline: Optional[List[Dict[str, Any]]] = None,
) -> FetchListResult:
    """
    Fetch one page of ``collection`` as described by the request url.

    Runs a count over the filtered pipeline first, then the page itself.
    Percent filters add one count per filter before that.
    """
    options = options or FetchOptions()
    url = get_url_from_request(request)
    query = parse_query_request(url, options)

    # build filter pipeline
    filters = extract_filters_from_url(url, options.tenant_value, options.tenant_field)
    filter_pipeline = await compile_pipeline_with_percent(filters, collection)

    pipeline = [*(initial_pipeline or []), *filter_pipeline]

    # get total
    total = await count_pipeline(collection, pipeline)

    if query.count_only:
        return build_list_result(query, total, [])

    if not has_stage(pipeline, "$sort"):
        pipeline.append(resolve_sort_stage(query, options))

    pipeline.extend(final_pipeline or [])
    pipeline.extend(pagination_stages(query))

    items = await run_pipeline(collection, pipeline)

    logger.info(f"list of {get_collection_name(collection)} fetched: page {query.page}, {len(items)} of {total}")
    return build_list_result(query, total, items)


async def fetch_unified_list(
    request: RequestInput,
    sources: List[MultiSourceConfig],
    options: Optional[FetchOptions] = None,
) -> FetchListResult:
    """
    Fetch one page over several collections combined with $unionWith.

    The first source is the base collection, every document is tagged
    with the name of its collection in ``options.source_field``.
    """
    options = options or FetchOptions()
    if not sources:
        return empty_list_result(options)

    url = get_url_from_request(request)
    query = parse_query_request(url, options)

    base, *others = sources
    base_collection = base.collection
    source_field = options.source_field

    filters = extract_filters_from_url(url, options.tenant_value, options.tenant_field)
    filter_pipeline = compile_pipeline(filters)

    # base pipeline
    pipeline = [
        *base.initial_pipeline,
        *filter_pipeline,
        {"$addFields": {source_field: get_collection_name(base_collection)}},
    ]

    # weitere Collections anhängen
    for source in others:
        collection_name = get_collection_name(source.collection)
        pipeline.append({
            "$unionWith": {
                "coll": collection_name,
                "pipeline": [
                    *source.initial_pipeline,
                    *filter_pipeline,
                    {"$addFields": {source_field: collection_name}},
                    *source.final_pipeline,
                ],
            }
        })

    pipeline.extend(base.final_pipeline)

    # get total
    total = await count_pipeline(base_collection, pipeline)

    if query.count_only:
        return build_list_result(query, total, [])

    pipeline.append(resolve_sort_stage(query, options))
    pipeline.extend(pagination_stages(query))

    items = await run_pipeline(base_collection, pipeline)

    logger.info(f"unified list over {len(sources)} collections fetched: page {query.page}, {len(items)} of {total}")
    return build_list_result(query, total, items)
