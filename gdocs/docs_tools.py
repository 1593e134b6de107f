"""
Google Docs MCP Tools

This module provides MCP tools for reading and editing Google Docs: inserting and
deleting content, and applying text or paragraph styles to a range, to the Nth
occurrence of some text, or to the paragraph around an index.

Each tool validates its parameters, then delegates to an ``_..._impl`` coroutine
that takes the Docs service directly.
"""

import logging
from typing import Any, Dict, Literal, Optional

# Auth & server utilities
from auth.service_decorator import require_google_service
from core.utils import handle_http_errors
from core.server import server

# Import helper functions for document operations
from gdocs.docs_helpers import (
    PARAGRAPH_STYLE_OPTIONS,
    TEXT_STYLE_OPTIONS,
    build_style,
    build_update_paragraph_style_request,
    build_update_text_style_request,
    create_delete_range_request,
    create_insert_page_break_request,
    create_insert_table_request,
    create_insert_text_request,
    detect_list_paragraphs,
    extract_document_text,
    find_paragraphs_matching_style,
)
from gdocs.docs_structure import get_document_end_index

# Import operation managers
from gdocs.managers import (
    BatchOperationManager,
    RangeResolutionManager,
    ValidationManager,
)

logger = logging.getLogger(__name__)

DEFAULT_READ_MAX_LENGTH = 2000
NO_FORMATTING_MESSAGE = "No formatting options were specified."

Alignment = Literal["LEFT", "CENTER", "RIGHT", "JUSTIFIED"]
NamedStyleType = Literal[
    "NORMAL_TEXT", "TITLE", "SUBTITLE",
    "HEADING_1", "HEADING_2", "HEADING_3", "HEADING_4", "HEADING_5", "HEADING_6",
]


def _has_options(options: Dict[str, Any]) -> bool:
    return any(value is not None for value in options.values())


# =============================================================================
# Implementations
# =============================================================================


async def _read_google_doc_impl(
    service, document_id: str, max_length: int = DEFAULT_READ_MAX_LENGTH
) -> str:
    """Implementation for reading the text of a document."""
    logger.info(f"[read_google_doc] Document ID: '{document_id}'")
    validator = ValidationManager()
    is_valid, error = validator.validate_document_id(document_id)
    if not is_valid:
        return error
    is_valid, error = validator.validate_index(max_length, "max_length")
    if not is_valid:
        return error

    doc_data = await RangeResolutionManager(service).get_document(
        document_id, fields="body(content)"
    )
    text = extract_document_text(doc_data)
    if not text.strip():
        return "Document found, but appears empty."

    if len(text) > max_length:
        text = text[:max_length] + "... [truncated]"
    return f"Content:\n---\n{text}"


async def _append_to_google_doc_impl(service, document_id: str, text: str) -> str:
    """Implementation for appending text at the end of the document body."""
    logger.info(f"[append_to_google_doc] Document ID: '{document_id}', length: {len(text or '')}")
    is_valid, error = ValidationManager().validate_document_id(document_id)
    if not is_valid:
        return error
    if not text:
        return "No text provided; nothing was appended."

    doc_data = await RangeResolutionManager(service).get_document(
        document_id, fields="body(content(startIndex,endIndex))"
    )
    # The body always ends with a newline that cannot be written past
    insert_index = max(get_document_end_index(doc_data) - 1, 1)
    if insert_index > 1 and not text.startswith("\n"):
        text = "\n" + text

    await BatchOperationManager(service).execute_batch_update(
        document_id, [create_insert_text_request(insert_index, text)]
    )
    return f"Successfully appended text to document {document_id}."


async def _insert_text_impl(service, document_id: str, text: str, index: int) -> str:
    """Implementation for inserting text at an index."""
    logger.info(f"[insert_text] Document ID: '{document_id}', index: {index}")
    validator = ValidationManager()
    is_valid, error = validator.validate_document_id(document_id)
    if not is_valid:
        return error
    is_valid, error = validator.validate_index(index, "index")
    if not is_valid:
        return error
    if not text:
        return "No text provided; nothing was inserted."

    await BatchOperationManager(service).execute_batch_update(
        document_id, [create_insert_text_request(index, text)]
    )
    return f"Successfully inserted {len(text)} characters at index {index} in document {document_id}."


async def _delete_range_impl(
    service, document_id: str, start_index: int, end_index: int
) -> str:
    """Implementation for deleting a range of content."""
    logger.info(f"[delete_range] Document ID: '{document_id}', range: {start_index}-{end_index}")
    validator = ValidationManager()
    is_valid, error = validator.validate_document_id(document_id)
    if not is_valid:
        return error
    is_valid, error = validator.validate_index_range(start_index, end_index)
    if not is_valid:
        return error

    await BatchOperationManager(service).execute_batch_update(
        document_id, [create_delete_range_request(start_index, end_index)]
    )
    return f"Successfully deleted range {start_index}-{end_index} in document {document_id}."


async def _apply_text_style_impl(
    service,
    document_id: str,
    options: Dict[str, Any],
    start_index: Optional[int] = None,
    end_index: Optional[int] = None,
    text_to_find: Optional[str] = None,
    match_instance: int = 1,
) -> str:
    """Implementation for applying text style to a range or a text occurrence."""
    logger.info(
        f"[apply_text_style] Document ID: '{document_id}', range: {start_index}-{end_index}, "
        f"text: {text_to_find!r} (#{match_instance})"
    )
    validator = ValidationManager()
    is_valid, error = validator.validate_document_id(document_id)
    if not is_valid:
        return error
    is_valid, error = validator.validate_text_style_params(options)
    if not is_valid:
        return error
    target, error = validator.build_target(
        start_index=start_index,
        end_index=end_index,
        text_to_find=text_to_find,
        match_instance=match_instance,
    )
    if error:
        return error

    if not _has_options(options):
        logger.warning("[apply_text_style] No formatting options provided")
        return NO_FORMATTING_MESSAGE
    # Surface bad values before touching the document
    build_style(options, TEXT_STYLE_OPTIONS)

    located = await RangeResolutionManager(service).resolve(document_id, target)
    style_request = build_update_text_style_request(located, options)

    await BatchOperationManager(service).execute_batch_update(
        document_id, [style_request.request]
    )
    return (
        f"Successfully applied text style ({', '.join(style_request.fields)}) to range "
        f"{located.start_index}-{located.end_index} in document {document_id}."
    )


async def _apply_paragraph_style_impl(
    service,
    document_id: str,
    options: Dict[str, Any],
    start_index: Optional[int] = None,
    end_index: Optional[int] = None,
    text_to_find: Optional[str] = None,
    match_instance: int = 1,
    index_within_paragraph: Optional[int] = None,
) -> str:
    """Implementation for applying paragraph style to a range or the paragraph around a target."""
    logger.info(
        f"[apply_paragraph_style] Document ID: '{document_id}', range: {start_index}-{end_index}, "
        f"text: {text_to_find!r} (#{match_instance}), index: {index_within_paragraph}"
    )
    validator = ValidationManager()
    is_valid, error = validator.validate_document_id(document_id)
    if not is_valid:
        return error
    is_valid, error = validator.validate_paragraph_style_params(options)
    if not is_valid:
        return error
    target, error = validator.build_target(
        start_index=start_index,
        end_index=end_index,
        text_to_find=text_to_find,
        match_instance=match_instance,
        index_within_paragraph=index_within_paragraph,
        allow_paragraph_index=True,
    )
    if error:
        return error

    if not _has_options(options):
        logger.warning("[apply_paragraph_style] No paragraph style options provided")
        return NO_FORMATTING_MESSAGE
    build_style(options, PARAGRAPH_STYLE_OPTIONS)

    located = await RangeResolutionManager(service).resolve(
        document_id, target, containing_paragraph=True
    )
    style_request = build_update_paragraph_style_request(located, options)

    await BatchOperationManager(service).execute_batch_update(
        document_id, [style_request.request]
    )
    return (
        f"Successfully applied paragraph style ({', '.join(style_request.fields)}) to range "
        f"{located.start_index}-{located.end_index} in document {document_id}."
    )


async def _insert_table_impl(
    service, document_id: str, rows: int, columns: int, index: int
) -> str:
    """Implementation for inserting an empty table."""
    logger.info(f"[insert_table] Document ID: '{document_id}', {rows}x{columns} at {index}")
    validator = ValidationManager()
    is_valid, error = validator.validate_document_id(document_id)
    if not is_valid:
        return error
    is_valid, error = validator.validate_table_dimensions(rows, columns)
    if not is_valid:
        return error
    is_valid, error = validator.validate_index(index, "index")
    if not is_valid:
        return error

    await BatchOperationManager(service).execute_batch_update(
        document_id, [create_insert_table_request(index, rows, columns)]
    )
    return f"Successfully inserted a {rows}x{columns} table at index {index} in document {document_id}."


async def _insert_page_break_impl(service, document_id: str, index: int) -> str:
    """Implementation for inserting a page break."""
    logger.info(f"[insert_page_break] Document ID: '{document_id}', index: {index}")
    validator = ValidationManager()
    is_valid, error = validator.validate_document_id(document_id)
    if not is_valid:
        return error
    is_valid, error = validator.validate_index(index, "index")
    if not is_valid:
        return error

    await BatchOperationManager(service).execute_batch_update(
        document_id, [create_insert_page_break_request(index)]
    )
    return f"Successfully inserted a page break at index {index} in document {document_id}."


# =============================================================================
# Tools
# =============================================================================


@server.tool()
@handle_http_errors("read_google_doc", is_read_only=True, service_type="docs")
@require_google_service("docs", "docs_read")
async def read_google_doc(
    service: Any,
    document_id: str,
    max_length: int = DEFAULT_READ_MAX_LENGTH,
) -> str:
    """
    Reads the text content of a Google Doc, including text inside tables.

    Args:
        document_id: The ID of the Google Doc (from its URL)
        max_length: Maximum number of characters to return; longer content is truncated

    Returns:
        str: The document text, or a note that the document is empty.
    """
    return await _read_google_doc_impl(service, document_id, max_length)


@server.tool()
@handle_http_errors("append_to_google_doc", service_type="docs")
@require_google_service("docs", "docs_write")
async def append_to_google_doc(
    service: Any,
    document_id: str,
    text: str,
) -> str:
    """
    Appends text to the end of a Google Doc, starting on a new line.

    Args:
        document_id: The ID of the Google Doc
        text: The text to append
    """
    return await _append_to_google_doc_impl(service, document_id, text)


@server.tool()
@handle_http_errors("insert_text", service_type="docs")
@require_google_service("docs", "docs_write")
async def insert_text(
    service: Any,
    document_id: str,
    text: str,
    index: int,
) -> str:
    """
    Inserts text at a specific index in a Google Doc.

    Indices are 1-based; index 1 is the start of the document body.

    Args:
        document_id: The ID of the Google Doc
        text: The text to insert
        index: Index to insert at (>= 1)
    """
    return await _insert_text_impl(service, document_id, text, index)


@server.tool()
@handle_http_errors("delete_range", service_type="docs")
@require_google_service("docs", "docs_write")
async def delete_range(
    service: Any,
    document_id: str,
    start_index: int,
    end_index: int,
) -> str:
    """
    Deletes the content between start_index (inclusive) and end_index (exclusive).

    Args:
        document_id: The ID of the Google Doc
        start_index: First index to delete (>= 1)
        end_index: Index just past the last character to delete (> start_index)
    """
    return await _delete_range_impl(service, document_id, start_index, end_index)


@server.tool()
@handle_http_errors("format_text", service_type="docs")
@require_google_service("docs", "docs_write")
async def format_text(
    service: Any,
    document_id: str,
    start_index: int,
    end_index: int,
    bold: Optional[bool] = None,
    italic: Optional[bool] = None,
    underline: Optional[bool] = None,
    strikethrough: Optional[bool] = None,
    font_size: Optional[float] = None,
    font_family: Optional[str] = None,
    foreground_color: Optional[str] = None,
    background_color: Optional[str] = None,
    link_url: Optional[str] = None,
) -> str:
    """
    Applies character formatting to an explicit index range.

    Use apply_text_style to target text by content instead of by index.

    Args:
        document_id: The ID of the Google Doc
        start_index: Start of the range (inclusive, >= 1)
        end_index: End of the range (exclusive, > start_index)
        bold, italic, underline, strikethrough: Toggle the style on (True) or off (False)
        font_size: Font size in points
        font_family: Font name, e.g. "Arial"
        foreground_color: Text color as hex, e.g. "#FF0000" or "#F00"
        background_color: Highlight color as hex
        link_url: URL to link the text to; "" removes an existing link
    """
    options = {
        'bold': bold,
        'italic': italic,
        'underline': underline,
        'strikethrough': strikethrough,
        'font_size': font_size,
        'font_family': font_family,
        'foreground_color': foreground_color,
        'background_color': background_color,
        'link_url': link_url,
    }
    return await _apply_text_style_impl(
        service, document_id, options, start_index=start_index, end_index=end_index
    )


@server.tool()
@handle_http_errors("apply_text_style", service_type="docs")
@require_google_service("docs", "docs_write")
async def apply_text_style(
    service: Any,
    document_id: str,
    start_index: Optional[int] = None,
    end_index: Optional[int] = None,
    text_to_find: Optional[str] = None,
    match_instance: int = 1,
    bold: Optional[bool] = None,
    italic: Optional[bool] = None,
    underline: Optional[bool] = None,
    strikethrough: Optional[bool] = None,
    font_size: Optional[float] = None,
    font_family: Optional[str] = None,
    foreground_color: Optional[str] = None,
    background_color: Optional[str] = None,
    link_url: Optional[str] = None,
) -> str:
    """
    Applies character formatting to a range or to the Nth occurrence of some text.

    Target exactly one of:
    - start_index + end_index: an explicit range
    - text_to_find (+ match_instance): the Nth exact, case-sensitive match, which may
      span differently formatted runs or sit inside a table cell

    Args:
        document_id: The ID of the Google Doc
        start_index: Start of the range (inclusive, >= 1)
        end_index: End of the range (exclusive, > start_index)
        text_to_find: Text to format
        match_instance: Which occurrence of text_to_find to format (1 = first)
        bold, italic, underline, strikethrough: Toggle the style on (True) or off (False)
        font_size: Font size in points
        font_family: Font name, e.g. "Arial"
        foreground_color: Text color as hex, e.g. "#FF0000" or "#F00"
        background_color: Highlight color as hex
        link_url: URL to link the text to; "" removes an existing link

    Returns:
        str: Confirmation with the range that was formatted, or a structured error.
    """
    options = {
        'bold': bold,
        'italic': italic,
        'underline': underline,
        'strikethrough': strikethrough,
        'font_size': font_size,
        'font_family': font_family,
        'foreground_color': foreground_color,
        'background_color': background_color,
        'link_url': link_url,
    }
    return await _apply_text_style_impl(
        service,
        document_id,
        options,
        start_index=start_index,
        end_index=end_index,
        text_to_find=text_to_find,
        match_instance=match_instance,
    )


@server.tool()
@handle_http_errors("apply_paragraph_style", service_type="docs")
@require_google_service("docs", "docs_write")
async def apply_paragraph_style(
    service: Any,
    document_id: str,
    start_index: Optional[int] = None,
    end_index: Optional[int] = None,
    text_to_find: Optional[str] = None,
    match_instance: int = 1,
    index_within_paragraph: Optional[int] = None,
    alignment: Optional[Alignment] = None,
    indent_start: Optional[float] = None,
    indent_end: Optional[float] = None,
    space_above: Optional[float] = None,
    space_below: Optional[float] = None,
    named_style_type: Optional[NamedStyleType] = None,
    keep_with_next: Optional[bool] = None,
) -> str:
    """
    Applies paragraph formatting (alignment, indents, spacing, heading style).

    Target exactly one of:
    - start_index + end_index: every paragraph overlapping the range
    - text_to_find (+ match_instance): the whole paragraph containing that occurrence
    - index_within_paragraph: the whole paragraph containing that index

    Args:
        document_id: The ID of the Google Doc
        start_index: Start of the range (inclusive, >= 1)
        end_index: End of the range (exclusive, > start_index)
        text_to_find: Text inside the paragraph to style
        match_instance: Which occurrence of text_to_find to use (1 = first)
        index_within_paragraph: Any index inside the paragraph to style
        alignment: LEFT, CENTER, RIGHT or JUSTIFIED
        indent_start: Start-side indent in points
        indent_end: End-side indent in points
        space_above: Space above the paragraph in points
        space_below: Space below the paragraph in points
        named_style_type: NORMAL_TEXT, TITLE, SUBTITLE or HEADING_1 .. HEADING_6
        keep_with_next: Keep the paragraph on the same page as the next one

    Returns:
        str: Confirmation with the paragraph range that was styled, or a structured error.
    """
    options = {
        'alignment': alignment,
        'indent_start': indent_start,
        'indent_end': indent_end,
        'space_above': space_above,
        'space_below': space_below,
        'named_style_type': named_style_type,
        'keep_with_next': keep_with_next,
    }
    return await _apply_paragraph_style_impl(
        service,
        document_id,
        options,
        start_index=start_index,
        end_index=end_index,
        text_to_find=text_to_find,
        match_instance=match_instance,
        index_within_paragraph=index_within_paragraph,
    )


@server.tool()
@handle_http_errors("insert_table", service_type="docs")
@require_google_service("docs", "docs_write")
async def insert_table(
    service: Any,
    document_id: str,
    rows: int,
    columns: int,
    index: int,
) -> str:
    """
    Inserts an empty table at an index.

    Args:
        document_id: The ID of the Google Doc
        rows: Number of rows (>= 1)
        columns: Number of columns (>= 1)
        index: Index to insert at (>= 1)
    """
    return await _insert_table_impl(service, document_id, rows, columns, index)


@server.tool()
@handle_http_errors("insert_page_break", service_type="docs")
@require_google_service("docs", "docs_write")
async def insert_page_break(
    service: Any,
    document_id: str,
    index: int,
) -> str:
    """
    Inserts a page break at an index.

    Args:
        document_id: The ID of the Google Doc
        index: Index to insert at (>= 1)
    """
    return await _insert_page_break_impl(service, document_id, index)


@server.tool()
@handle_http_errors("find_paragraphs_by_style", is_read_only=True, service_type="docs")
async def find_paragraphs_by_style(
    document_id: str,
    named_style_type: Optional[NamedStyleType] = None,
    alignment: Optional[Alignment] = None,
    bold: Optional[bool] = None,
    italic: Optional[bool] = None,
) -> str:
    """
    Finds paragraphs matching style criteria. Not yet implemented; always returns an error.

    Args:
        document_id: The ID of the Google Doc
        named_style_type: Paragraph style to match
        alignment: Alignment to match
        bold: Match paragraphs whose text is bold
        italic: Match paragraphs whose text is italic
    """
    logger.info(f"[find_paragraphs_by_style] Document ID: '{document_id}'")
    criteria = {
        'named_style_type': named_style_type,
        'alignment': alignment,
        'bold': bold,
        'italic': italic,
    }
    ranges = find_paragraphs_matching_style({k: v for k, v in criteria.items() if v is not None})
    return "\n".join(f"{r.start_index}-{r.end_index}" for r in ranges)


@server.tool()
@handle_http_errors("detect_and_format_lists", service_type="docs")
async def detect_and_format_lists(
    document_id: str,
    start_index: Optional[int] = None,
    end_index: Optional[int] = None,
) -> str:
    """
    Detects list-like paragraphs and converts them to real lists. Not yet implemented;
    always returns an error without changing the document.

    Args:
        document_id: The ID of the Google Doc
        start_index: Optional start of the range to scan
        end_index: Optional end of the range to scan
    """
    logger.info(f"[detect_and_format_lists] Document ID: '{document_id}'")
    requests = detect_list_paragraphs(start_index, end_index)
    return f"Prepared {len(requests)} list formatting request(s)."
