import math
import re
from datetime import datetime, time, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from bson import ObjectId
from bson.regex import Regex
from motor.motor_asyncio import AsyncIOMotorCollection

from ..collections.helper_methods import count_pipeline
from ..logger_manager import LoggerManager
from ..models import BetweenOperatorValue, FilterOperator, FilterType, FilterValue, is_supported

ID_FIELDS = ("id", "_id")

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")
DAY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
INTEGER_PATTERN = re.compile(r"^-?\d+$")

END_OF_DAY = time(23, 59, 59, 999000)

# Logging
logger_instance = LoggerManager()
logger = logger_instance.get_logger("UrlQuery")


## value helpers

def to_object_id(value: str) -> Union[ObjectId, str]:
    """Promote 24 hex characters to an ObjectId, keep everything else."""
    if isinstance(value, str) and OBJECT_ID_PATTERN.match(value):
        return ObjectId(value)
    return value


def to_date(value: Union[str, datetime]) -> datetime:
    if isinstance(value, datetime):
        date = value
    elif DAY_PATTERN.match(value):
        date = datetime.strptime(value, "%Y-%m-%d")
    else:
        date = datetime.fromisoformat(value)

    if date.tzinfo is None:
        return date.replace(tzinfo=timezone.utc)
    return date.astimezone(timezone.utc)


def start_of_day(value: Union[str, datetime]) -> datetime:
    return datetime.combine(to_date(value).date(), time.min, tzinfo=timezone.utc)


def end_of_day(value: Union[str, datetime]) -> datetime:
    return datetime.combine(to_date(value).date(), END_OF_DAY, tzinfo=timezone.utc)


def to_number(value: str) -> Optional[Union[int, float]]:
    if INTEGER_PATTERN.match(value.strip()):
        return int(value)
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


class IdentifierRepresentations:
    """
    The forms an identifier can be stored in: as string ``id``, as numeric
    ``id`` or as ObjectId ``_id``. Matching any of them counts as a hit.
    """

    def __init__(self, raw: Union[str, int]):
        self.raw = str(raw)

    @property
    def string_id(self) -> str:
        return self.raw

    @property
    def numeric_id(self) -> Optional[Union[int, float]]:
        return to_number(self.raw)

    @property
    def object_id(self) -> Union[ObjectId, str]:
        return to_object_id(self.raw)

    def to_match(self) -> Dict[str, Any]:
        conditions: List[Dict[str, Any]] = [{"id": self.string_id}]
        if self.numeric_id is not None:
            conditions.append({"id": self.numeric_id})
        conditions.append({"_id": self.object_id})
        return {"$or": conditions}


## stage builders

def _prepare_value(value: Union[str, BetweenOperatorValue], filter_type: FilterType, operator: FilterOperator) -> Any:
    is_range = operator == FilterOperator.RANGE
    if is_range and not isinstance(value, BetweenOperatorValue):
        raise ValueError(f"range needs 'from~to', got {value!r}")
    if not is_range and isinstance(value, BetweenOperatorValue):
        raise ValueError(f"{operator.value} takes a single value")

    if filter_type == FilterType.DATE:
        if is_range:
            return [start_of_day(value.from_), end_of_day(value.to)]
        return [start_of_day(value), end_of_day(value)]

    if filter_type == FilterType.AMOUNT:
        if is_range:
            return [float(value.from_), float(value.to)]
        return float(value)

    return value


def _exact(value: str) -> Regex:
    return Regex(f"^{value}$", "i")


def _one_of(value: str) -> Regex:
    return Regex(f"^({'|'.join(value.split(','))})$", "i")


def _id_list(value: str) -> List[Union[ObjectId, str]]:
    return [to_object_id(item) for item in value.split(",")]


def build_match(filter_value: FilterValue) -> Optional[Dict[str, Any]]:
    """
    Build the $match stage for one filter, or None when the filter is
    incomplete, its type/operator pair is unsupported or its value
    cannot be converted.

    ``has``/``nh`` and the string variants of ``eq``/``ne``/``any``/``none``
    use the value verbatim as a regular expression.
    """
    field = filter_value.field
    filter_type = filter_value.type
    operator = filter_value.operator
    value = filter_value.value

    if not field or value is None:
        return None
    if not is_supported(filter_type, operator):
        return None

    try:
        v = _prepare_value(value, filter_type, operator)
    except (ValueError, TypeError) as e:
        logger.debug(f"filter on {field} dropped: {e}")
        return None

    match operator:
        case FilterOperator.EQ:
            if filter_type == FilterType.DATE:
                return {"$match": {"$and": [{field: {"$gte": v[0]}}, {field: {"$lte": v[1]}}]}}
            if filter_type == FilterType.STRING:
                if field in ID_FIELDS:
                    return {"$match": IdentifierRepresentations(v).to_match()}
                return {"$match": {field: {"$regex": _exact(v)}}}
            return {"$match": {field: {"$eq": v}}}

        case FilterOperator.NE:
            if filter_type == FilterType.STRING:
                return {"$match": {field: {"$not": _exact(v)}}}
            return {"$match": {field: {"$ne": v}}}

        case FilterOperator.HAS:
            return {"$match": {field: {"$regex": Regex(v, "i")}}}

        case FilterOperator.NH:
            return {"$match": {field: {"$not": Regex(v, "i")}}}

        case FilterOperator.ANY:
            if filter_type == FilterType.ARRAY:
                return {"$match": {field: {"$in": _id_list(v)}}}
            return {"$match": {field: {"$regex": _one_of(v)}}}

        case FilterOperator.NONE:
            if filter_type == FilterType.ARRAY:
                return {"$match": {field: {"$nin": _id_list(v)}}}
            return {"$match": {field: {"$not": _one_of(v)}}}

        case FilterOperator.RANGE:
            return {"$match": {"$and": [{field: {"$gte": v[0]}}, {field: {"$lte": v[1]}}]}}

        case FilterOperator.LT | FilterOperator.BEFORE:
            return {"$match": {field: {"$lt": v[0] if filter_type == FilterType.DATE else v}}}

        case FilterOperator.GT | FilterOperator.AFTER:
            return {"$match": {field: {"$gt": v[1] if filter_type == FilterType.DATE else v}}}

    return None


def compile_pipeline(filters: Iterable[FilterValue]) -> List[Dict[str, Any]]:
    pipeline = []
    for filter_value in filters:
        stage = build_match(filter_value)
        if stage:
            pipeline.append(stage)
        else:
            logger.debug(f"filter {filter_value} skipped")
    return pipeline


def percent_stages(total: int, percent: float) -> List[Dict[str, Any]]:
    """
    Stages keeping ``percent`` of ``total`` documents, counted from the
    front for positive and from the back for negative values.
    """
    if not total:
        return []

    if percent >= 0:
        keep = math.ceil(total * percent / 100)
    else:
        keep = math.floor(total * -percent / 100)

    # $limit 0 wird von MongoDB abgelehnt
    if keep <= 0:
        return [{"$match": {"$expr": False}}]

    stages = []
    if percent < 0:
        stages.append({"$skip": total - keep})
    stages.append({"$limit": keep})
    return stages


async def compile_pipeline_with_percent(
    filters: Iterable[FilterValue], collection: AsyncIOMotorCollection
) -> List[Dict[str, Any]]:
    pipeline: List[Dict[str, Any]] = []

    for filter_value in filters:
        stage = build_match(filter_value)
        if not stage:
            logger.debug(f"filter {filter_value} skipped")
            continue

        pipeline.append(stage)

        if not filter_value.percent_of_result:
            continue

        try:
            percent = float(filter_value.percent_of_result)
            if not math.isfinite(percent):
                raise ValueError(filter_value.percent_of_result)
        except ValueError:
            logger.warning(f"percentOfResult '{filter_value.percent_of_result}' on {filter_value.field} ignored")
            continue

        total = await count_pipeline(collection, pipeline)
        stages = percent_stages(total, percent)
        logger.debug(f"percentOfResult {percent} of {total} on {filter_value.field}: {stages}")
        pipeline.extend(stages)

    return pipeline
