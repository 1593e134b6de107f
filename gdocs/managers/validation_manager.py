"""
Validation Manager

This module provides centralized validation logic for Google Docs operations,
extracting validation patterns from individual tool functions.

Every check runs before any network call and returns (is_valid, error_json), where
error_json is a StructuredError serialized for the agent.
"""
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from gdocs.docs_helpers import (
    PARAGRAPH_STYLE_OPTION_NAMES,
    TEXT_STYLE_OPTION_NAMES,
    ParagraphIndexTarget,
    RangeTarget,
    Target,
    TextTarget,
    is_valid_hex_color,
)
from gdocs.errors import (
    DocsErrorBuilder,
    format_error,
)

logger = logging.getLogger(__name__)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ValidationManager:
    """
    Centralized validation manager for Google Docs operations.

    Provides consistent validation patterns and error messages across
    all document operations.
    """

    def __init__(self):
        """Initialize the validation manager."""
        self.validation_rules = self._setup_validation_rules()

    def _setup_validation_rules(self) -> Dict[str, Any]:
        """Setup validation rules and constraints."""
        return {
            'min_index': 1,
            'min_font_size': 1,
            'valid_alignments': ["LEFT", "CENTER", "RIGHT", "JUSTIFIED"],
            'valid_named_style_types': [
                "NORMAL_TEXT", "TITLE", "SUBTITLE",
                "HEADING_1", "HEADING_2", "HEADING_3",
                "HEADING_4", "HEADING_5", "HEADING_6",
            ],
            'text_boolean_options': ["bold", "italic", "underline", "strikethrough"],
            'paragraph_dimension_options': ["indent_start", "indent_end", "space_above", "space_below"],
        }

    def validate_document_id(self, document_id: str) -> Tuple[bool, Optional[str]]:
        """
        Validate Google Docs document ID.

        Returns:
            Tuple of (is_valid, structured_error_json or None)
        """
        if not isinstance(document_id, str) or not document_id.strip():
            return False, format_error(DocsErrorBuilder.invalid_document_id(document_id))
        return True, None

    def validate_index(self, index: Any, param_name: str = "index") -> Tuple[bool, Optional[str]]:
        """
        Validate a single document index (an integer >= 1).

        Returns:
            Tuple of (is_valid, structured_error_json or None)
        """
        if not _is_int(index) or index < self.validation_rules['min_index']:
            return False, format_error(DocsErrorBuilder.invalid_index_type(param_name, index))
        return True, None

    def validate_index_range(
        self,
        start_index: Any,
        end_index: Any
    ) -> Tuple[bool, Optional[str]]:
        """
        Validate a half-open index range: both indices >= 1 and end > start.

        Returns:
            Tuple of (is_valid, structured_error_json or None)
        """
        for value, name in [(start_index, "start_index"), (end_index, "end_index")]:
            is_valid, error = self.validate_index(value, name)
            if not is_valid:
                return False, error

        if end_index <= start_index:
            return False, format_error(DocsErrorBuilder.invalid_index_range(start_index, end_index))

        return True, None

    def validate_search_params(
        self,
        text_to_find: Any,
        match_instance: Any = 1
    ) -> Tuple[bool, Optional[str]]:
        """
        Validate search text and occurrence number.

        Returns:
            Tuple of (is_valid, structured_error_json or None)
        """
        if not isinstance(text_to_find, str) or text_to_find == "":
            return False, format_error(DocsErrorBuilder.empty_search_text())

        if not _is_int(match_instance) or match_instance < 1:
            return False, format_error(DocsErrorBuilder.invalid_param_value(
                "match_instance", match_instance, ["an integer >= 1"]
            ))

        return True, None

    def validate_text_style_params(self, options: Mapping[str, Any]) -> Tuple[bool, Optional[str]]:
        """
        Validate text style options. Options set to None are ignored.

        Returns:
            Tuple of (is_valid, structured_error_json or None)
        """
        for name, value in options.items():
            if value is None:
                continue
            if name not in TEXT_STYLE_OPTION_NAMES:
                return False, format_error(DocsErrorBuilder.invalid_param_value(
                    "text style option", name, list(TEXT_STYLE_OPTION_NAMES)
                ))

            if name in self.validation_rules['text_boolean_options']:
                if not isinstance(value, bool):
                    return False, format_error(DocsErrorBuilder.invalid_param_value(
                        name, value, ["True", "False"]
                    ))
            elif name == 'font_size':
                if not _is_number(value) or value < self.validation_rules['min_font_size']:
                    return False, format_error(DocsErrorBuilder.invalid_param_value(
                        name, value, [f"a number >= {self.validation_rules['min_font_size']}"],
                        "Font size is in points."
                    ))
            elif name == 'font_family':
                if not isinstance(value, str) or not value.strip():
                    return False, format_error(DocsErrorBuilder.invalid_param_value(
                        name, value, ["a font name such as 'Arial'"]
                    ))
            elif name in ('foreground_color', 'background_color'):
                if not is_valid_hex_color(value):
                    return False, format_error(DocsErrorBuilder.invalid_color_format(value, name))
            elif name == 'link_url':
                # Empty string is allowed (removes link)
                if not isinstance(value, str):
                    return False, format_error(DocsErrorBuilder.invalid_param_value(
                        name, value, ["a URL string", "'' to remove a link"]
                    ))

        return True, None

    def validate_paragraph_style_params(self, options: Mapping[str, Any]) -> Tuple[bool, Optional[str]]:
        """
        Validate paragraph style options. Options set to None are ignored.

        Returns:
            Tuple of (is_valid, structured_error_json or None)
        """
        for name, value in options.items():
            if value is None:
                continue
            if name not in PARAGRAPH_STYLE_OPTION_NAMES:
                return False, format_error(DocsErrorBuilder.invalid_param_value(
                    "paragraph style option", name, list(PARAGRAPH_STYLE_OPTION_NAMES)
                ))

            if name == 'alignment':
                if value not in self.validation_rules['valid_alignments']:
                    return False, format_error(DocsErrorBuilder.invalid_param_value(
                        name, value, self.validation_rules['valid_alignments']
                    ))
            elif name == 'named_style_type':
                if value not in self.validation_rules['valid_named_style_types']:
                    return False, format_error(DocsErrorBuilder.invalid_param_value(
                        name, value, self.validation_rules['valid_named_style_types']
                    ))
            elif name in self.validation_rules['paragraph_dimension_options']:
                if not _is_number(value) or value < 0:
                    return False, format_error(DocsErrorBuilder.invalid_param_value(
                        name, value, ["a number of points >= 0"]
                    ))
            elif name == 'keep_with_next':
                if not isinstance(value, bool):
                    return False, format_error(DocsErrorBuilder.invalid_param_value(
                        name, value, ["True", "False"]
                    ))

        return True, None

    def validate_table_dimensions(self, rows: Any, columns: Any) -> Tuple[bool, Optional[str]]:
        """
        Validate table dimensions (at least 1 row and 1 column).

        Returns:
            Tuple of (is_valid, structured_error_json or None)
        """
        for value, name in [(rows, "rows"), (columns, "columns")]:
            if not _is_int(value) or value < 1:
                return False, format_error(DocsErrorBuilder.invalid_param_value(
                    name, value, ["an integer >= 1"],
                    "Table must have at least 1 row and 1 column."
                ))
        return True, None

    def build_target(
        self,
        start_index: Optional[int] = None,
        end_index: Optional[int] = None,
        text_to_find: Optional[str] = None,
        match_instance: int = 1,
        index_within_paragraph: Optional[int] = None,
        allow_paragraph_index: bool = False
    ) -> Tuple[Optional[Target], Optional[str]]:
        """
        Turn a tool's targeting parameters into exactly one target.

        Args:
            start_index, end_index: Explicit range mode (both required together)
            text_to_find, match_instance: Text mode
            index_within_paragraph: Paragraph-index mode
            allow_paragraph_index: Whether the tool accepts paragraph-index mode

        Returns:
            Tuple of (target or None, structured_error_json or None)
        """
        has_range = start_index is not None or end_index is not None
        has_text = text_to_find is not None
        has_index = index_within_paragraph is not None

        if has_index and not allow_paragraph_index:
            return None, format_error(DocsErrorBuilder.conflicting_params(
                ["index_within_paragraph"],
                "index_within_paragraph is not supported by this tool"
            ))

        given = [
            name for name, present in [
                ("start_index/end_index", has_range),
                ("text_to_find", has_text),
                ("index_within_paragraph", has_index),
            ] if present
        ]
        if len(given) > 1:
            return None, format_error(DocsErrorBuilder.conflicting_params(
                given, f"Provide only one targeting method, got: {', '.join(given)}"
            ))
        if not given:
            valid = ["start_index + end_index", "text_to_find"]
            if allow_paragraph_index:
                valid.append("index_within_paragraph")
            return None, format_error(DocsErrorBuilder.missing_required_param(
                "target", "to choose what to format", valid
            ))

        if has_range:
            if start_index is None or end_index is None:
                missing = "end_index" if end_index is None else "start_index"
                return None, format_error(DocsErrorBuilder.missing_required_param(
                    missing, "when targeting an explicit range"
                ))
            is_valid, error = self.validate_index_range(start_index, end_index)
            if not is_valid:
                return None, error
            return RangeTarget(start_index, end_index), None

        if has_text:
            is_valid, error = self.validate_search_params(text_to_find, match_instance)
            if not is_valid:
                return None, error
            return TextTarget(text_to_find, match_instance), None

        is_valid, error = self.validate_index(index_within_paragraph, "index_within_paragraph")
        if not is_valid:
            return None, error
        return ParagraphIndexTarget(index_within_paragraph), None
