import re
from typing import List, Optional, Union

from fastapi import Request
from fastapi.datastructures import URL, QueryParams

from .. import config
from ..models import FetchOptions, FilterOperator, FilterType, FilterValue, QueryRequest, QueryUrlOptions
from .filter_parser import parse_filters

RequestInput = Union[Request, str]

FALSE_FLAGS = ("0", "false", "no", "off")


def get_url_from_request(request: RequestInput) -> str:
    if isinstance(request, str):
        return request
    return str(request.url)


def get_query_params(url: str) -> QueryParams:
    return QueryParams(URL(url).query)


def is_flag_set(value: Optional[str]) -> bool:
    return bool(value) and value.strip().lower() not in FALSE_FLAGS


def _to_int(value: Optional[str], default: int) -> int:
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def parse_query_request(url: str, options: Optional[FetchOptions] = None) -> QueryRequest:
    options = options or FetchOptions()
    params = get_query_params(url)

    limit = min(_to_int(params.get("limit"), options.limit), options.limit)
    page = max(_to_int(params.get("page"), 1), 1)

    sort_field, sort_direction = None, None
    if params.get("sort"):
        sort_field, _, sort_direction = params["sort"].partition("|")

    return QueryRequest(
        page=page,
        limit=limit,
        sort_field=sort_field or None,
        sort_direction=sort_direction or None,
        filters=params.getlist("filter"),
        id=params.get("id") or None,
        export=is_flag_set(params.get("export")),
        count_only=is_flag_set(params.get("countResultOnly")),
    )


def extract_filters_from_url(
    url: str,
    tenant_value: Optional[str] = None,
    tenant_field: str = config.TENANT_FIELD,
) -> List[FilterValue]:
    """
    Parse all ``filter`` parameters of the url. With a tenant value the
    tenant filter goes first and client filters on the tenant field are
    discarded, so a request can never widen its own scope.
    """
    filters = parse_filters(get_query_params(url).getlist("filter"))

    if tenant_value and tenant_field:
        filters = [f for f in filters if f.field != tenant_field]
        filters.insert(0, FilterValue(
            field=tenant_field,
            type=FilterType.STRING,
            operator=FilterOperator.EQ,
            value=re.escape(tenant_value),
        ))

    return filters


def build_query_url(base_url: str, options: Optional[QueryUrlOptions] = None) -> str:
    """
    Build a list/item url for the client side, e.g.
    ``build_query_url("/api/products", QueryUrlOptions(page=1, filters=["price|amount|gt|100"]))``.
    Parameters already on ``base_url`` are kept unless ``options`` sets them.
    """
    options = options or QueryUrlOptions()
    url = URL(base_url)

    params = []
    if options.page is not None:
        params.append(("page", str(options.page)))
    if options.limit is not None:
        params.append(("limit", str(options.limit)))
    if options.sort:
        params.append(("sort", options.sort))
    for filter_string in options.filters:
        params.append(("filter", filter_string))
    if options.id:
        params.append(("id", options.id))
    if options.export:
        params.append(("export", "true"))
    if options.count_only:
        params.append(("countResultOnly", "true"))

    overridden = {key for key, _ in params}
    existing = [(k, v) for k, v in QueryParams(url.query).multi_items() if k not in overridden]

    query = str(QueryParams(existing + params))
    return str(url.replace(query=query))
