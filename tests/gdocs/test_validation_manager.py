"""
Tests for ValidationManager.
"""

import json
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

from gdocs.docs_helpers import ParagraphIndexTarget, RangeTarget, TextTarget
from gdocs.managers.validation_manager import ValidationManager


@pytest.fixture
def validator():
    return ValidationManager()


def error_code(error_json: str) -> str:
    return json.loads(error_json)["code"]


class TestIndexValidation:
    """Tests for document id and index checks."""

    @pytest.mark.parametrize("document_id", ["", "   ", None, 123])
    def test_invalid_document_id(self, validator, document_id):
        is_valid, error = validator.validate_document_id(document_id)
        assert not is_valid
        assert error_code(error) == "INVALID_DOCUMENT_ID"

    def test_valid_document_id(self, validator):
        assert validator.validate_document_id("1AbC-xyz_123") == (True, None)

    @pytest.mark.parametrize("index", [0, -1, 1.5, "3", True, None])
    def test_invalid_index(self, validator, index):
        is_valid, error = validator.validate_index(index, "index")
        assert not is_valid
        assert error_code(error) == "INVALID_INDEX_TYPE"

    def test_valid_index(self, validator):
        assert validator.validate_index(1) == (True, None)

    @pytest.mark.parametrize("start,end", [(5, 5), (10, 5)])
    def test_end_must_exceed_start(self, validator, start, end):
        is_valid, error = validator.validate_index_range(start, end)
        assert not is_valid
        assert error_code(error) == "INVALID_INDEX_RANGE"

    def test_valid_range(self, validator):
        assert validator.validate_index_range(1, 2) == (True, None)


class TestSearchValidation:
    """Tests for validate_search_params."""

    def test_empty_text(self, validator):
        is_valid, error = validator.validate_search_params("")
        assert not is_valid
        assert error_code(error) == "EMPTY_SEARCH_TEXT"

    @pytest.mark.parametrize("match_instance", [0, -2, 1.0])
    def test_invalid_match_instance(self, validator, match_instance):
        is_valid, error = validator.validate_search_params("text", match_instance)
        assert not is_valid
        assert error_code(error) == "INVALID_PARAM_VALUE"


class TestStyleValidation:
    """Tests for text and paragraph style checks."""

    def test_none_values_ignored(self, validator):
        assert validator.validate_text_style_params({"bold": None, "font_size": None}) == (True, None)

    def test_invalid_color(self, validator):
        is_valid, error = validator.validate_text_style_params({"foreground_color": "#12345"})
        assert not is_valid
        assert error_code(error) == "INVALID_COLOR_FORMAT"

    @pytest.mark.parametrize("options", [
        {"bold": "yes"},
        {"font_size": 0},
        {"font_size": "12"},
        {"font_family": "  "},
        {"link_url": 5},
        {"sparkle": True},
    ])
    def test_invalid_text_options(self, validator, options):
        is_valid, error = validator.validate_text_style_params(options)
        assert not is_valid
        assert error_code(error) == "INVALID_PARAM_VALUE"

    def test_valid_text_options(self, validator):
        options = {
            "bold": True,
            "font_size": 10.5,
            "font_family": "Arial",
            "background_color": "#FF0",
            "link_url": "",
        }
        assert validator.validate_text_style_params(options) == (True, None)

    @pytest.mark.parametrize("options", [
        {"alignment": "MIDDLE"},
        {"named_style_type": "HEADING_7"},
        {"indent_start": -1},
        {"space_below": "6"},
        {"keep_with_next": 1},
    ])
    def test_invalid_paragraph_options(self, validator, options):
        is_valid, error = validator.validate_paragraph_style_params(options)
        assert not is_valid
        assert error_code(error) == "INVALID_PARAM_VALUE"

    def test_valid_paragraph_options(self, validator):
        options = {
            "alignment": "JUSTIFIED",
            "named_style_type": "HEADING_6",
            "indent_start": 0,
            "space_above": 12.5,
            "keep_with_next": False,
        }
        assert validator.validate_paragraph_style_params(options) == (True, None)


class TestTableValidation:
    """Tests for validate_table_dimensions."""

    @pytest.mark.parametrize("rows,columns", [(0, 2), (2, 0), (-1, 3)])
    def test_requires_at_least_one_row_and_column(self, validator, rows, columns):
        is_valid, error = validator.validate_table_dimensions(rows, columns)
        assert not is_valid
        assert "at least 1 row and 1 column" in json.loads(error)["message"]

    def test_valid_dimensions(self, validator):
        assert validator.validate_table_dimensions(1, 1) == (True, None)


class TestBuildTarget:
    """Tests for build_target."""

    def test_range_target(self, validator):
        assert validator.build_target(start_index=2, end_index=9) == (RangeTarget(2, 9), None)

    def test_text_target(self, validator):
        target, error = validator.build_target(text_to_find="hello", match_instance=2)
        assert error is None
        assert target == TextTarget("hello", 2)

    def test_paragraph_index_target(self, validator):
        target, error = validator.build_target(index_within_paragraph=12, allow_paragraph_index=True)
        assert error is None
        assert target == ParagraphIndexTarget(12)

    def test_paragraph_index_not_allowed(self, validator):
        target, error = validator.build_target(index_within_paragraph=12)
        assert target is None
        assert error_code(error) == "CONFLICTING_PARAMS"

    def test_multiple_targets_conflict(self, validator):
        target, error = validator.build_target(start_index=1, end_index=5, text_to_find="x")
        assert target is None
        assert error_code(error) == "CONFLICTING_PARAMS"

    def test_no_target(self, validator):
        target, error = validator.build_target()
        assert target is None
        assert error_code(error) == "MISSING_REQUIRED_PARAM"

    def test_half_range(self, validator):
        target, error = validator.build_target(start_index=4)
        assert target is None
        assert error_code(error) == "MISSING_REQUIRED_PARAM"
        assert "end_index" in json.loads(error)["message"]

    def test_reversed_range(self, validator):
        target, error = validator.build_target(start_index=9, end_index=4)
        assert target is None
        assert error_code(error) == "INVALID_INDEX_RANGE"

    def test_empty_search_text(self, validator):
        target, error = validator.build_target(text_to_find="")
        assert target is None
        assert error_code(error) == "EMPTY_SEARCH_TEXT"
