from typing import Callable, List, Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.encoders import jsonable_encoder
from motor.motor_asyncio import AsyncIOMotorCollection

from ..fetch.fetch_item_methods import fetch_item_by_id
from ..fetch.fetch_list_methods import fetch_list
from ..logger_manager import LoggerManager
from ..models import FetchOptions

# Logging
logger_instance = LoggerManager()
logger = logger_instance.get_logger("UrlQuery Router")


def to_json(data):
    # ObjectId in String umwandeln
    return jsonable_encoder(data, custom_encoder={ObjectId: str})


def create_query_router(
    get_collection: Callable[..., AsyncIOMotorCollection],
    options: Optional[FetchOptions] = None,
    prefix: str = "",
    tags: Optional[List[str]] = None,
) -> APIRouter:
    """
    Router with list and item endpoints for the collection returned by the
    ``get_collection`` dependency. The list endpoint reads its query
    parameters from the url as a whole, they are listed in its description.
    """
    options = options or FetchOptions()

    router = APIRouter(
        prefix=prefix,
        tags=tags or ["query"],
        responses={status.HTTP_404_NOT_FOUND: {"description": "Not found"}},
    )

    items_description = (
        "Query-Parameter: `page` (ab 1), "
        f"`limit` (maximal {options.limit}), "
        "`sort` wie 'price|asc', "
        "`filter` wie 'price|amount|gt|100' oder 'name|apfel' (mehrfach erlaubt), "
        "`export=true` für alle Items ohne Pagination, "
        "`countResultOnly=true` nur für die Anzahl"
    )

    @router.get("/items", description=items_description)
    async def get_items(
        request: Request,
        collection: AsyncIOMotorCollection = Depends(get_collection),
    ):
        result = await fetch_list(request, collection, options)
        return to_json(result.model_dump())

    @router.get("/item")
    async def get_item(
        request: Request,
        id: Optional[str] = Query(None, description="id, _id oder numerische id des Items"),
        collection: AsyncIOMotorCollection = Depends(get_collection),
    ):
        item = await fetch_item_by_id(request, collection)

        if item is None:
            logger.warning(f"item {id} not in collection {collection.name}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")

        return to_json(item)

    return router
