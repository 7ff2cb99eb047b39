# tests/unit/generation/test_unit_parsing.py - v1
"""Tests for generation/parsing.py: cleanup pass and JSON loading."""

from __future__ import annotations

import pytest

from topicforge.core.errors import GenerationParseError
from topicforge.generation.parsing import clean_json_text, load_json, load_json_object


class TestCleanJsonText:
    def test_strips_fences(self):
        assert clean_json_text('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_removes_trailing_commas(self):
        assert load_json('{"a": [1, 2,], "b": 3,}') == {"a": [1, 2], "b": 3}

    def test_collapses_whitespace(self):
        assert clean_json_text('{\n  "a":\r\n   1\n}') == '{ "a": 1 }'


class TestLoadJson:
    def test_invalid_json_keeps_both_texts(self):
        raw = "```json\nnot json at all\n```"
        with pytest.raises(GenerationParseError) as exc_info:
            load_json(raw)
        assert exc_info.value.raw_text == raw
        assert exc_info.value.cleaned_text == "not json at all"

    def test_list_yields_first_object(self):
        assert load_json_object('[{"a": 1}, {"a": 2}]') == {"a": 1}

    def test_empty_list_yields_none(self):
        assert load_json_object("[]") is None

    def test_object_passthrough(self):
        assert load_json_object('{"caption": "c"}') == {"caption": "c"}
