"""Tests for quasi-JSON repair of model output."""

import json

import pytest

from launchpact.llm import extract_structured, parse_structured
from launchpact.utils.errors import MalformedStructuredOutputError


class TestExtractStructured:
    """extract_structured is a pure text -> text function."""

    @pytest.mark.parametrize(
        "value",
        [
            {"a": 1},
            {"productName": "Foo", "nested": {"list": [1, 2, {"x": None}]}},
            [{"id": 1}, {"id": 2}],
            {"text": "braces } and [ brackets ] inside a string"},
            {"quote": "she said \"hi\" {"},
        ],
    )
    def test_valid_json_round_trips(self, value):
        text = json.dumps(value)
        assert json.loads(extract_structured(text)) == value

    def test_strips_markdown_fence(self):
        assert extract_structured('```json\n{"a":1}\n```') == '{"a":1}'

    def test_strips_bare_fence(self):
        assert extract_structured('```\n{"a":1}\n```') == '{"a":1}'

    def test_drops_leading_and_trailing_prose(self):
        raw = 'Sure! Here is your plan:\n{"a": {"b": 2}}\nLet me know if you need more.'
        assert extract_structured(raw) == '{"a": {"b": 2}}'

    def test_array_before_object_is_kept_whole(self):
        raw = 'Result: [{"id": 1}, {"id": 2}] done'
        assert json.loads(extract_structured(raw)) == [{"id": 1}, {"id": 2}]

    def test_closes_truncated_array_and_object(self):
        repaired = extract_structured('{"a":[1,2,3')
        parsed = json.loads(repaired)
        assert parsed["a"][:3] == [1, 2, 3]

    def test_closes_unterminated_string(self):
        parsed = json.loads(extract_structured('{"name": "Lau'))
        assert parsed == {"name": "Lau"}

    def test_drops_dangling_escape_in_truncated_string(self):
        parsed = json.loads(extract_structured('{"name": "a\\'))
        assert parsed == {"name": "a"}

    def test_drops_trailing_comma_before_closing(self):
        parsed = json.loads(extract_structured('{"tasks": [{"id": 1},'))
        assert parsed == {"tasks": [{"id": 1}]}

    def test_wraps_bare_key_value_pairs(self):
        parsed = json.loads(extract_structured('"text": "hello", "mode": "chat"'))
        assert parsed == {"text": "hello", "mode": "chat"}

    def test_plain_prose_yields_empty_object(self):
        assert extract_structured("I could not do that, sorry") == "{}"

    @pytest.mark.parametrize("raw", ["", None])
    def test_empty_input_yields_empty_object(self, raw):
        assert extract_structured(raw) == "{}"


class TestParseStructured:
    def test_returns_parsed_value(self):
        assert parse_structured('```json\n{"productName":"Foo"}\n```') == {"productName": "Foo"}

    def test_unrepairable_text_raises(self):
        with pytest.raises(MalformedStructuredOutputError) as exc_info:
            parse_structured('{"a": 1, "b": }')
        assert exc_info.value.raw_text == '{"a": 1, "b": }'
