from typing import Any, Dict, List, Optional, Union

from motor.motor_asyncio import AsyncIOMotorCollection

from ..collections.helper_methods import first_of_pipeline, get_collection_name
from ..logger_manager import LoggerManager
from ..query.pipeline_builder import IdentifierRepresentations
from ..query.url_methods import RequestInput, get_query_params, get_url_from_request

# Logging
logger_instance = LoggerManager()
logger = logger_instance.get_logger("UrlQuery Fetch")


async def fetch_item_by_id(
    request: RequestInput,
    collection: AsyncIOMotorCollection,
    initial_pipeline: Optional[List[Dict[str, Any]]] = None,
    final_pipeline: Optional[List[Dict[str, Any]]] = None,
    item_id: Optional[Union[str, int]] = None,
) -> Optional[Dict]:
    """
    Fetch a single document by id, taken from ``item_id`` or the ``id``
    query parameter. Returns None when there is no id or no match.
    """
    if item_id is None or item_id == "":
        item_id = get_query_params(get_url_from_request(request)).get("id")

    if not item_id and item_id != 0:
        logger.debug(f"no id given for {get_collection_name(collection)}")
        return None

    pipeline = [
        *(initial_pipeline or []),
        {"$match": IdentifierRepresentations(item_id).to_match()},
        *(final_pipeline or []),
    ]

    return await first_of_pipeline(collection, pipeline)


async def fetch_item_by_field(
    collection: AsyncIOMotorCollection,
    field: str,
    value: Any,
    pipeline: Optional[List[Dict[str, Any]]] = None,
) -> Optional[Dict]:
    return await first_of_pipeline(collection, [*(pipeline or []), {"$match": {field: value}}])
