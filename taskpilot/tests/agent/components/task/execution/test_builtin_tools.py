"""Tests for the built-in tools, executed through the registry."""

import pytest

from taskpilot.agent.components.task.execution.tool_implementations.dates import parse_iso_datetime, to_iso_z
from taskpilot.agent.components.task.execution.tool_implementations.json_transform import (
    flatten_object,
    get_nested_value,
)


class TestAnalyzeText:
    """Test analyze_text."""

    @pytest.mark.asyncio
    async def test_statistics(self, registry):
        """Test counts for a small two-paragraph text."""
        text = "Hello world. This is great!\n\nSecond paragraph here."

        result = await registry.execute("analyze_text", {"text": text})

        assert result.success
        stats = result.data
        assert stats["word_count"] == 8
        assert stats["sentence_count"] == 3
        assert stats["paragraph_count"] == 2
        assert stats["character_count"] == len(text)
        assert stats["character_count_no_spaces"] == len(text.replace(" ", "").replace("\n", ""))
        assert "top_words" not in stats

    @pytest.mark.asyncio
    async def test_word_frequency(self, registry):
        """Test case-folded, punctuation-stripped frequencies."""
        result = await registry.execute(
            "analyze_text",
            {"text": "The cat. the dog! THE end", "include_word_frequency": True},
        )

        assert result.data["top_words"]["the"] == 3
        assert result.data["top_words"]["cat"] == 1

    @pytest.mark.asyncio
    async def test_empty_text(self, registry):
        """Test averages on empty input."""
        result = await registry.execute("analyze_text", {"text": ""})

        assert result.data["word_count"] == 0
        assert result.data["average_word_length"] == 0
        assert result.data["average_sentence_length"] == 0

    @pytest.mark.asyncio
    async def test_non_string_text(self, registry):
        result = await registry.execute("analyze_text", {"text": 42})

        assert result.success is False


class TestTransformJson:
    """Test transform_json."""

    @pytest.mark.asyncio
    async def test_extract(self, registry):
        data = {"a": {"b": {"c": 7}}}

        result = await registry.execute("transform_json", {"data": data, "operation": "extract", "path": "a.b.c"})

        assert result.data == 7

    @pytest.mark.asyncio
    async def test_extract_missing_path_segment(self, registry):
        result = await registry.execute(
            "transform_json", {"data": {"a": 1}, "operation": "extract", "path": "a.b"}
        )

        assert result.success
        assert result.data is None

    @pytest.mark.asyncio
    async def test_extract_requires_path(self, registry):
        result = await registry.execute("transform_json", {"data": {}, "operation": "extract"})

        assert result.error == "Path is required for extract operation"

    @pytest.mark.asyncio
    async def test_filter(self, registry):
        data = [{"id": 1, "name": "a", "x": 0}, {"id": 2, "x": 1}, 5]

        result = await registry.execute(
            "transform_json", {"data": data, "operation": "filter", "fields": ["id", "name"]}
        )

        assert result.data == [{"id": 1, "name": "a"}, {"id": 2}, 5]

    @pytest.mark.asyncio
    async def test_filter_requires_array(self, registry):
        result = await registry.execute(
            "transform_json", {"data": {"id": 1}, "operation": "filter", "fields": ["id"]}
        )

        assert result.error == "Data must be an array for filter operation"

    @pytest.mark.asyncio
    async def test_flatten(self, registry):
        result = await registry.execute(
            "transform_json", {"data": {"user": {"name": "Ada", "tags": [1]}, "ok": True}, "operation": "flatten"}
        )

        assert result.data == {"user.name": "Ada", "user.tags": [1], "ok": True}

    @pytest.mark.asyncio
    async def test_unknown_operation(self, registry):
        result = await registry.execute("transform_json", {"data": {}, "operation": "sort"})

        assert result.error == "Unknown operation: sort"

    def test_helpers(self):
        assert get_nested_value({"a": [1]}, "a.0") is None
        assert flatten_object({"a": {}}) == {}


class TestCalculateDate:
    """Test calculate_date."""

    @pytest.mark.asyncio
    async def test_add_days(self, registry):
        """Test adding days to a UTC date."""
        result = await registry.execute(
            "calculate_date",
            {"operation": "add", "date": "2024-01-01T00:00:00Z", "amount": 10, "unit": "days"},
        )

        assert result.success
        assert result.data["result"] == "2024-01-11T00:00:00Z"
        assert result.data["original"] == "2024-01-01T00:00:00Z"

    @pytest.mark.asyncio
    async def test_subtract_defaults_to_days(self, registry):
        result = await registry.execute(
            "calculate_date", {"operation": "subtract", "date": "2024-03-01T12:00:00Z", "amount": 1}
        )

        assert result.data["result"] == "2024-02-29T12:00:00Z"
        assert result.data["unit"] == "days"

    @pytest.mark.asyncio
    async def test_difference(self, registry):
        result = await registry.execute(
            "calculate_date",
            {"operation": "difference", "date": "2024-01-01T00:00:00Z", "end_date": "2024-01-02T06:00:00Z"},
        )

        difference = result.data["difference"]
        assert difference["days"] == 1
        assert difference["hours"] == 30
        assert difference["milliseconds"] == 30 * 60 * 60 * 1000

    @pytest.mark.asyncio
    async def test_format(self, registry):
        result = await registry.execute("calculate_date", {"operation": "format", "date": "2024-01-01T09:30:00Z"})

        assert result.data["date"] == "2024-01-01"
        assert result.data["time"] == "09:30:00"
        assert result.data["weekday"] == "Monday"

    @pytest.mark.asyncio
    async def test_now(self, registry):
        result = await registry.execute("calculate_date", {"operation": "now"})

        assert result.data["iso"].endswith("Z")
        assert isinstance(result.data["unix"], int)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params, error", [
        ({"operation": "add", "date": "not a date", "amount": 1}, "Invalid date format"),
        ({"operation": "add", "date": "2024-01-01"}, "Amount is required for add/subtract"),
        ({"operation": "add", "amount": "3"}, "Amount must be a number"),
        ({"operation": "difference", "date": "2024-01-01"}, "End date is required for difference"),
        ({"operation": "shift"}, "Unknown operation: shift"),
    ])
    async def test_errors(self, registry, params, error):
        result = await registry.execute("calculate_date", params)

        assert result.success is False
        assert result.error == error

    @pytest.mark.asyncio
    async def test_unknown_unit(self, registry):
        result = await registry.execute(
            "calculate_date", {"operation": "add", "date": "2024-01-01", "amount": 1, "unit": "weeks"}
        )

        assert result.error.startswith("Unknown unit: weeks")

    def test_date_helpers(self):
        parsed = parse_iso_datetime("2024-05-06T07:08:09.500+02:00")

        assert to_iso_z(parsed) == "2024-05-06T05:08:09.500Z"
        assert parse_iso_datetime("yesterday") is None


class TestHttpRequest:
    """Test the simulated http_request tool."""

    @pytest.mark.asyncio
    async def test_simulated_response(self, registry):
        result = await registry.execute("http_request", {"method": "post", "url": "https://x.test", "body": {"a": 1}})

        assert result.data["simulated"] is True
        assert result.data["request"]["method"] == "POST"
        assert result.data["request"]["body"] == {"a": 1}
        assert result.data["response"]["status"] == 200

    @pytest.mark.asyncio
    async def test_unsupported_method(self, registry):
        result = await registry.execute("http_request", {"method": "TRACE", "url": "https://x.test"})

        assert result.error == "Unsupported HTTP method: TRACE"


class TestValidateData:
    """Test validate_data."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value, kind, expected", [
        ("user@example.com", "email", True),
        ("user@", "email", False),
        ("https://example.com/a", "url", True),
        ("ftp://example.com", "url", False),
        ("+1 (555) 123-4567", "phone", True),
        ("123", "phone", False),
        ("123E4567-e89b-12d3-a456-426614174000", "uuid", True),
        ("2024-01-31", "date", True),
        ("-12.5", "number", True),
        ("12.", "number", False),
    ])
    async def test_patterns(self, registry, value, kind, expected):
        result = await registry.execute("validate_data", {"value": value, "type": kind})

        assert result.success
        assert result.data["is_valid"] is expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value, kind", [
        ("user@example.com\n", "email"),
        ("https://example.com\n", "url"),
        ("2024-01-31\n", "date"),
        ("42\n", "number"),
    ])
    async def test_trailing_newline_rejected(self, registry, value, kind):
        """Test that the whole value must match, not just a prefix before a newline."""
        result = await registry.execute("validate_data", {"value": value, "type": kind})

        assert result.data["is_valid"] is False

    @pytest.mark.asyncio
    async def test_unknown_type(self, registry):
        result = await registry.execute("validate_data", {"value": "x", "type": "ssn"})

        assert result.success is False
        assert result.error.startswith("Unknown validation type: ssn")
