import re
from typing import Iterable, List, Optional, Tuple, Union

from ..models import BetweenOperatorValue, FilterOperator, FilterType, FilterValue

FORCE_STRING_FIELDS = ("name", "id", "cancellationType")
FORCE_EQUAL_FIELDS = ("id", "_id")

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}(~\d{4}-\d{2}-\d{2})?$")
AMOUNT_PATTERN = re.compile(r"^[\d.]+$")


def parse_filter(param: str) -> FilterValue:
    """
    Parse a filter string into a FilterValue.

    Accepted shapes are ``field|type|operator|value`` and the short form
    ``field|value`` where type and operator are guessed from the value.
    An optional fifth token is kept as ``percent_of_result``. Malformed
    input never raises, it leaves the affected members as None.
    """
    tokens = (param or "").split("|")[:5]
    tokens += [None] * (5 - len(tokens))
    field, p2, p3, p4, percent_of_result = tokens

    filter_type: Optional[FilterType]
    operator: Optional[FilterOperator]
    value: Optional[Union[str, BetweenOperatorValue]]

    if p4 is None and (p2 is not None or p3 is not None):
        # Kurzform: field|value
        value = p3 or p2
        filter_type, operator = _detect_type_and_operator(field, value)
    else:
        filter_type = FilterType.from_string(p2)
        operator = FilterOperator.from_string(p3)
        value = p4

    if operator == FilterOperator.RANGE and isinstance(value, str) and "~" in value:
        start, _, end = value.partition("~")
        value = BetweenOperatorValue(from_=start, to=end)

    return FilterValue(
        field=field or None,
        type=filter_type,
        operator=operator,
        value=value,
        percent_of_result=percent_of_result or None,
    )


def parse_filters(params: Iterable[str]) -> List[FilterValue]:
    return [parse_filter(param) for param in params]


def _detect_type_and_operator(field: str, value: str) -> Tuple[FilterType, FilterOperator]:
    if DATE_PATTERN.match(value):
        filter_type = FilterType.DATE
    elif AMOUNT_PATTERN.match(value) and field not in FORCE_STRING_FIELDS:
        filter_type = FilterType.AMOUNT
    else:
        filter_type = FilterType.STRING

    # comma wins over date/amount detection
    if "," in value:
        filter_type = FilterType.ARRAY
        operator = FilterOperator.ANY
    elif "~" in value:
        operator = FilterOperator.RANGE
    elif field in FORCE_EQUAL_FIELDS:
        operator = FilterOperator.EQ
    else:
        operator = FilterOperator.HAS

    return filter_type, operator
