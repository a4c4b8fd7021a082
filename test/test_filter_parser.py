import pytest

from mongo_url_query.models import BetweenOperatorValue, FilterOperator, FilterType
from mongo_url_query.query.filter_parser import parse_filter, parse_filters


class TestParseFilter:

    def test_forced_exact_field(self):
        # when
        result = parse_filter("id|abc123")

        # then
        assert result.field == "id"
        assert result.type == FilterType.STRING
        assert result.operator == FilterOperator.EQ
        assert result.value == "abc123"

    def test_amount_defaults_to_has(self):
        result = parse_filter("price|100")

        assert result.type == FilterType.AMOUNT
        assert result.operator == FilterOperator.HAS
        assert result.value == "100"

    def test_comma_makes_array(self):
        result = parse_filter("tags|a,b,c")

        assert result.type == FilterType.ARRAY
        assert result.operator == FilterOperator.ANY
        assert result.value == "a,b,c"

    def test_comma_wins_over_amount(self):
        result = parse_filter("price|1,2")

        assert result.type == FilterType.ARRAY
        assert result.operator == FilterOperator.ANY

    def test_date_range(self):
        result = parse_filter("createdAt|2024-01-01~2024-12-31")

        assert result.type == FilterType.DATE
        assert result.operator == FilterOperator.RANGE
        assert result.value == BetweenOperatorValue(from_="2024-01-01", to="2024-12-31")

    def test_single_date_defaults_to_has(self):
        result = parse_filter("createdAt|2024-01-01")

        assert result.type == FilterType.DATE
        assert result.operator == FilterOperator.HAS

    @pytest.mark.parametrize("field", ["name", "id", "cancellationType"])
    def test_forced_string_fields(self, field):
        assert parse_filter(f"{field}|42").type == FilterType.STRING

    def test_underscore_id_is_exact(self):
        result = parse_filter("_id|507f1f77bcf86cd799439011")

        assert result.type == FilterType.STRING
        assert result.operator == FilterOperator.EQ

    def test_numeric_underscore_id_is_an_amount(self):
        result = parse_filter("_id|42")

        assert result.type == FilterType.AMOUNT
        assert result.operator == FilterOperator.EQ

    def test_plain_string(self):
        result = parse_filter("status|active")

        assert result.type == FilterType.STRING
        assert result.operator == FilterOperator.HAS

    def test_full_form(self):
        result = parse_filter("price|amount|range|10~20")

        assert result.field == "price"
        assert result.type == FilterType.AMOUNT
        assert result.operator == FilterOperator.RANGE
        assert result.value == BetweenOperatorValue(from_="10", to="20")
        assert result.percent_of_result is None

    def test_range_splits_on_first_tilde(self):
        result = parse_filter("code|string|range|a~b~c")

        assert result.value == BetweenOperatorValue(from_="a", to="b~c")

    def test_percent_of_result(self):
        result = parse_filter("price|amount|gt|0|-10")

        assert result.operator == FilterOperator.GT
        assert result.value == "0"
        assert result.percent_of_result == "-10"

    @pytest.mark.parametrize("param", ["", "price", "|amount|gt|1", "price|bogus|gt|1", "price|amount|bogus|1"])
    def test_malformed_input_does_not_raise(self, param):
        result = parse_filter(param)

        assert None in (result.field, result.type, result.operator, result.value)

    def test_parse_filters_keeps_order(self):
        result = parse_filters(["status|active", "price|amount|gt|5"])

        assert [f.field for f in result] == ["status", "price"]

    @pytest.mark.parametrize("param,filter_type,operator", [
        ("createdAt|2024-01-01~2024-02-01", FilterType.DATE, FilterOperator.RANGE),
        ("price|1,2", FilterType.ARRAY, FilterOperator.ANY),
        ("_id|abc", FilterType.STRING, FilterOperator.EQ),
        ("price|12.5", FilterType.AMOUNT, FilterOperator.HAS),
    ])
    def test_short_form_detection(self, param, filter_type, operator):
        result = parse_filter(param)

        assert isinstance(result.type, FilterType)
        assert isinstance(result.operator, FilterOperator)
        assert (result.type, result.operator) == (filter_type, operator)
