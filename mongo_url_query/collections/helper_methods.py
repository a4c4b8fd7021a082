from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection

from ..logger_manager import LoggerManager

# Logging
logger_instance = LoggerManager()
logger = logger_instance.get_logger("UrlQuery Fetch")


def get_collection_name(collection: AsyncIOMotorCollection) -> str:
    return collection.name


async def count_pipeline(collection: AsyncIOMotorCollection, pipeline: List[Dict[str, Any]]) -> int:
    result = await collection.aggregate([*pipeline, {"$count": "total"}]).to_list(length=1)
    total = result[0]["total"] if result else 0

    logger.debug(f"count on {get_collection_name(collection)}: {total}")
    return total


async def run_pipeline(collection: AsyncIOMotorCollection, pipeline: List[Dict[str, Any]]) -> List[Dict]:
    logger.debug(f"aggregate on {get_collection_name(collection)}: {pipeline}")
    return await collection.aggregate(pipeline).to_list(length=None)


async def first_of_pipeline(collection: AsyncIOMotorCollection, pipeline: List[Dict[str, Any]]) -> Optional[Dict]:
    result = await collection.aggregate([*pipeline, {"$limit": 1}]).to_list(length=1)
    return result[0] if result else None


def has_stage(pipeline: List[Dict[str, Any]], operator: str) -> bool:
    return any(operator in stage for stage in pipeline)
