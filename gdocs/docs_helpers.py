"""
Google Docs Helper Functions

This module provides the text-location and request-building functions used by the
document editing tools:

- finding the Nth occurrence of text in a document and mapping it back to native
  indices, even when the match spans several text runs
- resolving a tool's target (explicit range, search text, or index within a
  paragraph) to a single LocatedRange
- building updateTextStyle / updateParagraphStyle requests with their field masks
- building the other batchUpdate request bodies the tools send
"""
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from gdocs.docs_structure import (
    FragmentCollection,
    LocatedRange,
    TextFragment,
    collect_text_fragments,
    find_paragraph_range,
    utf16_length,
)
from gdocs.errors import (
    DocsErrorBuilder,
    InvalidColorError,
    InvalidParameterError,
    TargetNotFoundError,
    UnimplementedError,
)

logger = logging.getLogger(__name__)

HEX_COLOR_PATTERN = re.compile(r'^#?([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$')


# =============================================================================
# Occurrence location and index mapping
# =============================================================================


def find_nth_occurrence(
    logical_text: str,
    search_text: str,
    occurrence: int = 1,
    start_from: int = 0
) -> Optional[Tuple[int, int]]:
    """
    Find the Nth occurrence of search_text in logical_text.

    Each search resumes one character after the previous match's start, the same
    way a repeated ``str.find`` scan would. Matching is exact and case-sensitive.

    Args:
        logical_text: Text to search in
        search_text: Text to search for (must be non-empty)
        occurrence: Which occurrence to find (1=first)
        start_from: Logical position to start scanning at

    Returns:
        Half-open (start, end) span in logical_text, or None if there are fewer
        than ``occurrence`` matches
    """
    if not search_text or occurrence < 1:
        return None

    pos = start_from
    found = 0
    while True:
        match_start = logical_text.find(search_text, pos)
        if match_start == -1:
            return None
        found += 1
        if found == occurrence:
            return (match_start, match_start + len(search_text))
        pos = match_start + 1


def map_logical_span(
    fragments: Sequence[TextFragment],
    logical_start: int,
    logical_end: int
) -> Optional[LocatedRange]:
    """
    Map a span of the logical text back to native document indices.

    The start maps into the fragment whose logical span contains it
    (``fragment_start <= start < fragment_end``); the end maps into the first
    fragment with ``fragment_start < end <= fragment_end``, so an end that falls
    exactly on a fragment boundary resolves to the earlier fragment's end index.

    A span that continues from one fragment into a fragment whose native start is
    not the previous fragment's native end would cover content that is not text
    (a table cell boundary, an inline object) and cannot be mapped.

    Args:
        fragments: Fragments in logical order
        logical_start: Start of the span in the logical text
        logical_end: End of the span in the logical text (exclusive)

    Returns:
        LocatedRange in native indices, or None if either boundary cannot be mapped
    """
    if logical_end <= logical_start:
        return None

    native_start = None
    native_end = None
    previous = None
    cursor = 0

    for fragment in fragments:
        fragment_start = cursor
        fragment_end = cursor + len(fragment.text)

        if native_start is None:
            if fragment_start <= logical_start < fragment_end:
                native_start = fragment.start_index + utf16_length(
                    fragment.text[:logical_start - fragment_start]
                )
        elif previous.end_index != fragment.start_index:
            logger.debug(
                f"Span {logical_start}-{logical_end} crosses a gap between native "
                f"{previous.end_index} and {fragment.start_index}"
            )
            return None

        if native_start is not None and fragment_start < logical_end <= fragment_end:
            native_end = fragment.start_index + utf16_length(
                fragment.text[:logical_end - fragment_start]
            )
            break

        previous = fragment
        cursor = fragment_end

    if native_start is None or native_end is None:
        return None
    return LocatedRange(native_start, native_end)


def locate_in_fragments(
    collection: FragmentCollection,
    search_text: str,
    occurrence: int = 1
) -> Optional[LocatedRange]:
    """
    Find the Nth occurrence of search_text and map it to native indices.

    If the Nth match cannot be mapped, it is not counted and the search resumes one
    character past its start, so the next match that maps cleanly takes its place.
    """
    span = find_nth_occurrence(collection.logical_text, search_text, occurrence)
    while span is not None:
        located = map_logical_span(collection.fragments, span[0], span[1])
        if located is not None:
            return located
        logger.debug(f"Match at logical {span[0]} for '{search_text}' did not map, trying the next one")
        span = find_nth_occurrence(collection.logical_text, search_text, 1, span[0] + 1)
    return None


def locate_text_range(
    doc_data: Dict[str, Any],
    search_text: str,
    occurrence: int = 1
) -> Optional[LocatedRange]:
    """
    Find text in document and return its native range.

    Args:
        doc_data: Raw document data from Google Docs API
        search_text: Text to search for
        occurrence: Which occurrence to find (1=first, 2=second, ...)

    Returns:
        LocatedRange or None if not found
    """
    return locate_in_fragments(collect_text_fragments(doc_data), search_text, occurrence)


def find_all_text_ranges(doc_data: Dict[str, Any], search_text: str) -> List[LocatedRange]:
    """Native ranges of every occurrence of search_text that maps cleanly."""
    collection = collect_text_fragments(doc_data)
    results = []
    span = find_nth_occurrence(collection.logical_text, search_text)
    while span is not None:
        located = map_logical_span(collection.fragments, span[0], span[1])
        if located is not None:
            results.append(located)
        span = find_nth_occurrence(collection.logical_text, search_text, 1, span[0] + 1)
    return results


def extract_document_text(doc_data: Dict[str, Any]) -> str:
    """All text of the document body, table cells included, in document order."""
    return collect_text_fragments(doc_data).logical_text


# =============================================================================
# Targets
# =============================================================================


@dataclass(frozen=True)
class RangeTarget:
    """Explicit native range supplied by the caller."""
    start_index: int
    end_index: int


@dataclass(frozen=True)
class TextTarget:
    """The Nth occurrence of some text."""
    text: str
    occurrence: int = 1


@dataclass(frozen=True)
class ParagraphIndexTarget:
    """Any native index inside the paragraph to target."""
    index: int


Target = Union[RangeTarget, TextTarget, ParagraphIndexTarget]


def resolve_target(
    doc_data: Optional[Dict[str, Any]],
    target: Target,
    containing_paragraph: bool = False
) -> LocatedRange:
    """
    Resolve a target to a native range.

    Args:
        doc_data: Raw document data from Google Docs API; not read for RangeTarget
        target: The target to resolve
        containing_paragraph: For TextTarget, widen the match to its whole paragraph

    Returns:
        LocatedRange for the target

    Raises:
        InvalidRangeError: RangeTarget with end_index <= start_index
        TargetNotFoundError: the text occurrence or enclosing paragraph does not exist
    """
    if isinstance(target, RangeTarget):
        return LocatedRange(target.start_index, target.end_index)

    elif isinstance(target, TextTarget):
        located = locate_text_range(doc_data, target.text, target.occurrence)
        if located is None:
            total = len(find_all_text_ranges(doc_data, target.text))
            raise TargetNotFoundError(
                DocsErrorBuilder.search_text_not_found(target.text, target.occurrence, total)
            )
        if not containing_paragraph:
            return located
        paragraph = find_paragraph_range(doc_data, located.start_index)
        if paragraph is None:
            raise TargetNotFoundError(DocsErrorBuilder.paragraph_not_found(located.start_index))
        return paragraph

    elif isinstance(target, ParagraphIndexTarget):
        paragraph = find_paragraph_range(doc_data, target.index)
        if paragraph is None:
            raise TargetNotFoundError(DocsErrorBuilder.paragraph_not_found(target.index))
        return paragraph

    raise TypeError(f"Unhandled target: {target!r}")


# =============================================================================
# Colors and style requests
# =============================================================================


def is_valid_hex_color(color: str) -> bool:
    """Check a color against the #RGB / #RRGGBB pattern (leading '#' optional)."""
    return isinstance(color, str) and HEX_COLOR_PATTERN.fullmatch(color) is not None


def hex_to_rgb_color(hex_color: str) -> Optional[Dict[str, float]]:
    """
    Convert a hex color string to a Google Docs API RgbColor.

    Args:
        hex_color: Color as hex, e.g. "#FF0000", "#F00" or "FF0000"

    Returns:
        {'red': r, 'green': g, 'blue': b} with channels in 0.0-1.0, or None if invalid
    """
    if not is_valid_hex_color(hex_color):
        return None
    hex_clean = hex_color.lstrip('#')
    # Handle short hex (#F00 -> #FF0000)
    if len(hex_clean) == 3:
        hex_clean = ''.join(c * 2 for c in hex_clean)
    return {
        'red': int(hex_clean[0:2], 16) / 255,
        'green': int(hex_clean[2:4], 16) / 255,
        'blue': int(hex_clean[4:6], 16) / 255,
    }


def _as_is(value: Any, option_name: str) -> Any:
    return value


def _as_points(value: Any, option_name: str) -> Dict[str, Any]:
    return {'magnitude': value, 'unit': 'PT'}


def _as_font_family(value: Any, option_name: str) -> Dict[str, Any]:
    return {'fontFamily': value}


def _as_color(value: Any, option_name: str) -> Dict[str, Any]:
    rgb_color = hex_to_rgb_color(value)
    if rgb_color is None:
        raise InvalidColorError(DocsErrorBuilder.invalid_color_format(value, option_name))
    return {'color': {'rgbColor': rgb_color}}


def _as_link(value: Any, option_name: str) -> Optional[Dict[str, Any]]:
    # Empty string removes an existing link
    if value == "":
        return None
    return {'url': value}


@dataclass(frozen=True)
class StyleOption:
    """One style option: its parameter name, API field name, and value converter."""
    name: str
    api_field: str
    convert: Callable[[Any, str], Any]


TEXT_STYLE_OPTIONS: Tuple[StyleOption, ...] = (
    StyleOption('bold', 'bold', _as_is),
    StyleOption('italic', 'italic', _as_is),
    StyleOption('underline', 'underline', _as_is),
    StyleOption('strikethrough', 'strikethrough', _as_is),
    StyleOption('font_size', 'fontSize', _as_points),
    StyleOption('font_family', 'weightedFontFamily', _as_font_family),
    StyleOption('foreground_color', 'foregroundColor', _as_color),
    StyleOption('background_color', 'backgroundColor', _as_color),
    StyleOption('link_url', 'link', _as_link),
)

PARAGRAPH_STYLE_OPTIONS: Tuple[StyleOption, ...] = (
    StyleOption('alignment', 'alignment', _as_is),
    StyleOption('indent_start', 'indentStart', _as_points),
    StyleOption('indent_end', 'indentEnd', _as_points),
    StyleOption('space_above', 'spaceAbove', _as_points),
    StyleOption('space_below', 'spaceBelow', _as_points),
    StyleOption('named_style_type', 'namedStyleType', _as_is),
    StyleOption('keep_with_next', 'keepWithNext', _as_is),
)

TEXT_STYLE_OPTION_NAMES = tuple(option.name for option in TEXT_STYLE_OPTIONS)
PARAGRAPH_STYLE_OPTION_NAMES = tuple(option.name for option in PARAGRAPH_STYLE_OPTIONS)


@dataclass
class StyleRequest:
    """A single update*Style request and the field mask it carries."""
    request: Dict[str, Any]
    fields: List[str]


def build_style(
    options: Mapping[str, Any],
    option_table: Sequence[StyleOption]
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Convert a sparse option record into an API style object and its field mask.

    Options set to None are left out. Each option's value and its field name come
    from the same StyleOption entry.

    Returns:
        Tuple of (style_dict, list_of_field_names)
    """
    known = {option.name for option in option_table}
    unknown = sorted(name for name in options if name not in known)
    if unknown:
        raise InvalidParameterError(
            DocsErrorBuilder.invalid_param_value("style option", unknown[0], sorted(known))
        )

    style = {}
    fields = []
    for option in option_table:
        value = options.get(option.name)
        if value is None:
            continue
        converted = option.convert(value, option.name)
        # A field in the mask with no value clears it
        if converted is not None:
            style[option.api_field] = converted
        fields.append(option.api_field)
    return style, fields


def build_update_text_style_request(
    located_range: LocatedRange,
    options: Mapping[str, Any]
) -> Optional[StyleRequest]:
    """
    Create an updateTextStyle request for Google Docs API.

    Args:
        located_range: Range of text to format
        options: Sparse text style options (bold, italic, underline, strikethrough,
            font_size, font_family, foreground_color, background_color, link_url)

    Returns:
        StyleRequest, or None if no option was set
    """
    text_style, fields = build_style(options, TEXT_STYLE_OPTIONS)
    if not fields:
        return None
    return StyleRequest(
        request={
            'updateTextStyle': {
                'range': located_range.to_api_range(),
                'textStyle': text_style,
                'fields': ','.join(fields),
            }
        },
        fields=fields,
    )


def build_update_paragraph_style_request(
    located_range: LocatedRange,
    options: Mapping[str, Any]
) -> Optional[StyleRequest]:
    """
    Create an updateParagraphStyle request for Google Docs API.

    Args:
        located_range: Range covering the paragraph(s) to style
        options: Sparse paragraph style options (alignment, indent_start, indent_end,
            space_above, space_below, named_style_type, keep_with_next)

    Returns:
        StyleRequest, or None if no option was set
    """
    paragraph_style, fields = build_style(options, PARAGRAPH_STYLE_OPTIONS)
    if not fields:
        return None
    return StyleRequest(
        request={
            'updateParagraphStyle': {
                'range': located_range.to_api_range(),
                'paragraphStyle': paragraph_style,
                'fields': ','.join(fields),
            }
        },
        fields=fields,
    )


# =============================================================================
# Other request builders
# =============================================================================


def create_insert_text_request(index: int, text: str) -> Dict[str, Any]:
    """
    Create an insertText request for Google Docs API.

    Args:
        index: Position to insert text
        text: Text to insert

    Returns:
        Dictionary representing the insertText request
    """
    return {
        'insertText': {
            'location': {'index': index},
            'text': text
        }
    }


def create_delete_range_request(start_index: int, end_index: int) -> Dict[str, Any]:
    """
    Create a deleteContentRange request for Google Docs API.

    Raises:
        InvalidRangeError: if end_index <= start_index
    """
    return {
        'deleteContentRange': {
            'range': LocatedRange(start_index, end_index).to_api_range()
        }
    }


def create_insert_table_request(index: int, rows: int, columns: int) -> Dict[str, Any]:
    """Create an insertTable request for Google Docs API."""
    return {
        'insertTable': {
            'location': {'index': index},
            'rows': rows,
            'columns': columns
        }
    }


def create_insert_page_break_request(index: int) -> Dict[str, Any]:
    """Create an insertPageBreak request for Google Docs API."""
    return {
        'insertPageBreak': {
            'location': {'index': index}
        }
    }


# =============================================================================
# Reserved capabilities
# =============================================================================


def find_paragraphs_matching_style(criteria: Mapping[str, Any]) -> List[LocatedRange]:
    """Find paragraphs whose computed style matches criteria. Not implemented."""
    logger.warning("find_paragraphs_matching_style is not implemented.")
    raise UnimplementedError(
        DocsErrorBuilder.not_implemented("Finding paragraphs by style criteria")
    )


def detect_list_paragraphs(
    start_index: Optional[int] = None,
    end_index: Optional[int] = None
) -> List[Dict[str, Any]]:
    """Detect list-like paragraphs and build bullet requests for them. Not implemented."""
    logger.warning("detect_list_paragraphs is not implemented.")
    raise UnimplementedError(
        DocsErrorBuilder.not_implemented("Automatic list detection and formatting")
    )
