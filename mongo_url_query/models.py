from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from . import config


## filter models

class FilterType(str, Enum):
    STRING = "string"
    DATE = "date"
    AMOUNT = "amount"
    ARRAY = "array"

    @classmethod
    def from_string(cls, value: Optional[str]) -> Optional["FilterType"]:
        try:
            return cls(value)
        except ValueError:
            return None


class FilterOperator(str, Enum):
    EQ = "eq"
    NE = "ne"
    HAS = "has"
    NH = "nh"
    ANY = "any"
    NONE = "none"
    RANGE = "range"
    LT = "lt"
    GT = "gt"
    BEFORE = "before"
    AFTER = "after"

    @classmethod
    def from_string(cls, value: Optional[str]) -> Optional["FilterOperator"]:
        try:
            return cls(value)
        except ValueError:
            return None


# erlaubte Operatoren pro Typ
SUPPORTED_OPERATORS: Dict[FilterType, frozenset] = {
    FilterType.STRING: frozenset({
        FilterOperator.EQ, FilterOperator.NE, FilterOperator.HAS,
        FilterOperator.NH, FilterOperator.ANY, FilterOperator.NONE,
    }),
    FilterType.AMOUNT: frozenset({
        FilterOperator.EQ, FilterOperator.NE, FilterOperator.RANGE,
        FilterOperator.LT, FilterOperator.GT,
    }),
    FilterType.DATE: frozenset({
        FilterOperator.EQ, FilterOperator.RANGE, FilterOperator.BEFORE,
        FilterOperator.AFTER,
    }),
    FilterType.ARRAY: frozenset({
        FilterOperator.EQ, FilterOperator.NE, FilterOperator.ANY,
        FilterOperator.NONE,
    }),
}


def is_supported(filter_type: Optional[FilterType], operator: Optional[FilterOperator]) -> bool:
    if filter_type is None or operator is None:
        return False
    return operator in SUPPORTED_OPERATORS.get(filter_type, frozenset())


class BetweenOperatorValue(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str


class FilterValue(BaseModel):
    """One parsed filter. Members stay None when the input was malformed."""
    field: Optional[str] = None
    type: Optional[FilterType] = None
    operator: Optional[FilterOperator] = None
    value: Optional[Union[str, BetweenOperatorValue]] = None
    percent_of_result: Optional[str] = None


## request models

SortDirection = Literal["asc", "desc"]


class FetchOptions(BaseModel):
    limit: int = config.MAX_LIMIT
    sort_field: str = config.DEFAULT_SORT_FIELD
    sort_dir: SortDirection = config.DEFAULT_SORT_DIR
    tenant_field: str = config.TENANT_FIELD
    tenant_value: Optional[str] = None
    source_field: str = config.SOURCE_FIELD


class QueryRequest(BaseModel):
    page: int = 1
    limit: int = config.MAX_LIMIT
    sort_field: Optional[str] = None
    sort_direction: Optional[str] = None
    filters: List[str] = []
    id: Optional[str] = None
    export: bool = False
    count_only: bool = False

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class MultiSourceConfig(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    # AsyncIOMotorCollection
    collection: Any
    initial_pipeline: List[Dict[str, Any]] = []
    final_pipeline: List[Dict[str, Any]] = []


class QueryUrlOptions(BaseModel):
    page: Optional[int] = None
    limit: Optional[int] = None
    # "field|asc" oder "field|desc"
    sort: Optional[str] = None
    filters: List[str] = []
    id: Optional[str] = None
    export: bool = False
    count_only: bool = False


## result models

class FetchListResult(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
    next_page: Optional[int] = None
    prev_page: Optional[int] = None
    items: List[Dict[str, Any]] = []
