"""
Tests for color parsing and style request building.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

from gdocs.docs_helpers import (
    PARAGRAPH_STYLE_OPTIONS,
    TEXT_STYLE_OPTIONS,
    build_update_paragraph_style_request,
    build_update_text_style_request,
    create_delete_range_request,
    create_insert_page_break_request,
    create_insert_table_request,
    create_insert_text_request,
    hex_to_rgb_color,
    is_valid_hex_color,
)
from gdocs.docs_structure import LocatedRange
from gdocs.errors import (
    ErrorCode,
    InvalidColorError,
    InvalidParameterError,
    InvalidRangeError,
)


class TestHexColors:
    """Tests for is_valid_hex_color and hex_to_rgb_color."""

    @pytest.mark.parametrize("color", ["#FF0000", "#F00", "FF0000", "f00", "#aBc123"])
    def test_valid_colors(self, color):
        assert is_valid_hex_color(color)

    @pytest.mark.parametrize("color", ["", "bad!", "#GGG", "#FFFF", "#FF00000", "red", "#FFF\n", None])
    def test_invalid_colors(self, color):
        assert not is_valid_hex_color(color)
        assert hex_to_rgb_color(color) is None

    def test_short_hex_expands(self):
        assert hex_to_rgb_color("#F00") == {"red": 1.0, "green": 0.0, "blue": 0.0}

    def test_without_hash(self):
        assert hex_to_rgb_color("00FF00") == {"red": 0.0, "green": 1.0, "blue": 0.0}

    def test_channel_precision(self):
        rgb = hex_to_rgb_color("#800080")
        assert rgb["red"] == 0.5019607843137255
        assert rgb["green"] == 0.0
        assert rgb["blue"] == 0.5019607843137255

    def test_three_letter_word_is_shorthand_hex(self):
        # "bad" is a valid 3-digit hex code, not an invalid color
        assert hex_to_rgb_color("bad") == {
            "red": 0xBB / 255,
            "green": 0xAA / 255,
            "blue": 0xDD / 255,
        }


class TestBuildUpdateTextStyleRequest:
    """Tests for build_update_text_style_request."""

    def setup_method(self):
        self.located = LocatedRange(5, 10)

    def test_foreground_color(self):
        result = build_update_text_style_request(self.located, {"foreground_color": "#F00"})

        assert result.fields == ["foregroundColor"]
        assert result.request == {
            "updateTextStyle": {
                "range": {"startIndex": 5, "endIndex": 10},
                "textStyle": {
                    "foregroundColor": {
                        "color": {"rgbColor": {"red": 1.0, "green": 0.0, "blue": 0.0}}
                    }
                },
                "fields": "foregroundColor",
            }
        }

    def test_empty_options_is_noop(self):
        assert build_update_text_style_request(self.located, {}) is None

    def test_all_none_options_is_noop(self):
        options = {option.name: None for option in TEXT_STYLE_OPTIONS}
        assert build_update_text_style_request(self.located, options) is None

    def test_invalid_color_raises(self):
        with pytest.raises(InvalidColorError) as exc_info:
            build_update_text_style_request(self.located, {"bold": True, "background_color": "bad!"})

        assert exc_info.value.code == ErrorCode.INVALID_COLOR_FORMAT.value
        assert str(exc_info.value) == "Invalid background_color hex color format: bad!"

    def test_fields_follow_option_table_order(self):
        result = build_update_text_style_request(
            self.located,
            {"font_family": "Arial", "font_size": 14, "bold": True},
        )

        assert result.fields == ["bold", "fontSize", "weightedFontFamily"]
        text_style = result.request["updateTextStyle"]["textStyle"]
        assert text_style["fontSize"] == {"magnitude": 14, "unit": "PT"}
        assert text_style["weightedFontFamily"] == {"fontFamily": "Arial"}
        assert result.request["updateTextStyle"]["fields"] == "bold,fontSize,weightedFontFamily"

    def test_false_values_are_applied(self):
        result = build_update_text_style_request(self.located, {"italic": False})

        assert result.fields == ["italic"]
        assert result.request["updateTextStyle"]["textStyle"] == {"italic": False}

    def test_link(self):
        result = build_update_text_style_request(self.located, {"link_url": "https://example.com"})

        assert result.request["updateTextStyle"]["textStyle"] == {"link": {"url": "https://example.com"}}

    def test_empty_link_clears_link(self):
        result = build_update_text_style_request(self.located, {"link_url": ""})

        assert result.fields == ["link"]
        assert result.request["updateTextStyle"]["textStyle"] == {}

    def test_unknown_option_raises(self):
        with pytest.raises(InvalidParameterError):
            build_update_text_style_request(self.located, {"blink": True})


class TestBuildUpdateParagraphStyleRequest:
    """Tests for build_update_paragraph_style_request."""

    def test_alignment_and_spacing(self):
        result = build_update_paragraph_style_request(
            LocatedRange(1, 20), {"space_above": 6, "alignment": "CENTER"}
        )

        assert result.fields == ["alignment", "spaceAbove"]
        assert result.request == {
            "updateParagraphStyle": {
                "range": {"startIndex": 1, "endIndex": 20},
                "paragraphStyle": {
                    "alignment": "CENTER",
                    "spaceAbove": {"magnitude": 6, "unit": "PT"},
                },
                "fields": "alignment,spaceAbove",
            }
        }

    def test_all_paragraph_options(self):
        options = {
            "alignment": "JUSTIFIED",
            "indent_start": 36,
            "indent_end": 18,
            "space_above": 0,
            "space_below": 12,
            "named_style_type": "HEADING_2",
            "keep_with_next": True,
        }

        result = build_update_paragraph_style_request(LocatedRange(1, 2), options)

        assert result.fields == [option.api_field for option in PARAGRAPH_STYLE_OPTIONS]
        style = result.request["updateParagraphStyle"]["paragraphStyle"]
        assert style["indentStart"] == {"magnitude": 36, "unit": "PT"}
        assert style["spaceAbove"] == {"magnitude": 0, "unit": "PT"}
        assert style["namedStyleType"] == "HEADING_2"
        assert style["keepWithNext"] is True

    def test_empty_options_is_noop(self):
        assert build_update_paragraph_style_request(LocatedRange(1, 2), {}) is None


class TestRequestBuilders:
    """Tests for the simple request constructors."""

    def test_insert_text(self):
        assert create_insert_text_request(3, "Hi") == {
            "insertText": {"location": {"index": 3}, "text": "Hi"}
        }

    def test_delete_range(self):
        assert create_delete_range_request(3, 8) == {
            "deleteContentRange": {"range": {"startIndex": 3, "endIndex": 8}}
        }

    @pytest.mark.parametrize("start,end", [(8, 8), (8, 3)])
    def test_delete_range_rejects_empty_or_reversed(self, start, end):
        with pytest.raises(InvalidRangeError):
            create_delete_range_request(start, end)

    def test_insert_table(self):
        assert create_insert_table_request(5, 2, 3) == {
            "insertTable": {"location": {"index": 5}, "rows": 2, "columns": 3}
        }

    def test_insert_page_break(self):
        assert create_insert_page_break_request(5) == {
            "insertPageBreak": {"location": {"index": 5}}
        }
