"""
Google Docs Document Structure Parsing

This module turns the raw ``body.content`` list returned by the Google Docs API into
a closed set of structural element kinds and walks it for two purposes:

- collecting the ordered text fragments (text runs with their native indices) that make
  up the document's searchable text, including text nested inside table cells
- resolving the paragraph that encloses a given native index

Native indices are the API's own 1-based UTF-16 code-unit positions. Ranges are
half-open: ``end_index`` is excluded.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Union

from gdocs.errors import DocsErrorBuilder, InvalidRangeError

logger = logging.getLogger(__name__)


def utf16_length(text: str) -> int:
    """Length of text in UTF-16 code units, the unit Google Docs indices count in."""
    return len(text.encode("utf-16-le")) // 2


@dataclass(frozen=True)
class LocatedRange:
    """A resolved, half-open native index range ready to be sent in a request."""

    start_index: int
    end_index: int

    def __post_init__(self):
        if self.end_index <= self.start_index:
            raise InvalidRangeError(
                DocsErrorBuilder.invalid_index_range(self.start_index, self.end_index)
            )

    def to_api_range(self) -> dict[str, int]:
        return {"startIndex": self.start_index, "endIndex": self.end_index}


@dataclass(frozen=True)
class TextFragment:
    """One contiguous run of text and the native indices it occupies."""

    text: str
    start_index: int
    end_index: int


@dataclass(frozen=True)
class FragmentCollection:
    """Ordered fragments plus their concatenation (the logical text)."""

    fragments: tuple[TextFragment, ...]
    logical_text: str


@dataclass(frozen=True)
class ParagraphElement:
    start_index: Optional[int]
    end_index: Optional[int]
    paragraph: dict[str, Any]


@dataclass(frozen=True)
class TableElement:
    start_index: Optional[int]
    end_index: Optional[int]
    table: dict[str, Any]

    def iter_cell_contents(self) -> Iterator[list[dict[str, Any]]]:
        """Yield each cell's content list, row by row, left to right within a row."""
        for row in self.table.get("tableRows", []):
            for cell in row.get("tableCells", []):
                yield cell.get("content", [])


@dataclass(frozen=True)
class OtherElement:
    """Section breaks, tables of contents and anything else without editable text."""

    start_index: Optional[int]
    end_index: Optional[int]
    kind: str


StructuralElement = Union[ParagraphElement, TableElement, OtherElement]


def classify_element(element: dict[str, Any]) -> StructuralElement:
    """Wrap a raw structural element dict in its element kind."""
    start_index = element.get("startIndex")
    end_index = element.get("endIndex")

    if "paragraph" in element:
        return ParagraphElement(start_index, end_index, element["paragraph"])
    if "table" in element:
        return TableElement(start_index, end_index, element["table"])

    kind = next((key for key in element if key not in ("startIndex", "endIndex")), "unknown")
    return OtherElement(start_index, end_index, kind)


def _contains(element: StructuralElement, index: int) -> bool:
    if element.start_index is None or element.end_index is None:
        return False
    return element.start_index <= index < element.end_index


def _body_content(doc_data: dict[str, Any]) -> list[dict[str, Any]]:
    return doc_data.get("body", {}).get("content", [])


# =============================================================================
# Fragment collection
# =============================================================================


def _paragraph_fragments(paragraph: ParagraphElement) -> Iterator[TextFragment]:
    for para_element in paragraph.paragraph.get("elements", []):
        text = para_element.get("textRun", {}).get("content")
        start_idx = para_element.get("startIndex")
        if not text or start_idx is None:
            continue
        # A run occupies exactly as many positions as it has code units.
        end_idx = start_idx + utf16_length(text)
        if para_element.get("endIndex", end_idx) != end_idx:
            logger.warning(
                f"Text run at {start_idx} reports endIndex {para_element['endIndex']} "
                f"but has {utf16_length(text)} code units; using {end_idx}"
            )
        yield TextFragment(text, start_idx, end_idx)


def _collect_from_content(content: list[dict[str, Any]]) -> Iterator[TextFragment]:
    for raw in content:
        element = classify_element(raw)
        if isinstance(element, ParagraphElement):
            yield from _paragraph_fragments(element)
        elif isinstance(element, TableElement):
            for cell_content in element.iter_cell_contents():
                yield from _collect_from_content(cell_content)
        elif isinstance(element, OtherElement):
            continue
        else:
            raise TypeError(f"Unhandled structural element: {element!r}")


def collect_text_fragments(doc_data: dict[str, Any]) -> FragmentCollection:
    """
    Collect every text run in document order with its native indices.

    Table cells are walked row by row, left to right, recursing into nested tables.
    Elements without text contribute nothing, so the logical text only ever contains
    characters that have a known native position.

    Args:
        doc_data: Raw document data from Google Docs API

    Returns:
        FragmentCollection with the fragments and their concatenated logical text
    """
    fragments = tuple(_collect_from_content(_body_content(doc_data)))
    logical_text = "".join(fragment.text for fragment in fragments)
    logger.debug(f"Collected {len(fragments)} text fragments ({len(logical_text)} chars)")
    return FragmentCollection(fragments, logical_text)


# =============================================================================
# Paragraph resolution
# =============================================================================


def _find_paragraph_in_content(
    content: list[dict[str, Any]], index: int
) -> Optional[LocatedRange]:
    for raw in content:
        element = classify_element(raw)
        if not _contains(element, index):
            continue

        if isinstance(element, ParagraphElement):
            return LocatedRange(element.start_index, element.end_index)
        elif isinstance(element, TableElement):
            for cell_content in element.iter_cell_contents():
                found = _find_paragraph_in_content(cell_content, index)
                if found is not None:
                    return found
            return None
        elif isinstance(element, OtherElement):
            logger.debug(f"Index {index} falls inside a {element.kind} element")
            return None
        else:
            raise TypeError(f"Unhandled structural element: {element!r}")

    return None


def find_paragraph_range(doc_data: dict[str, Any], index: int) -> Optional[LocatedRange]:
    """
    Find the smallest paragraph enclosing a native index.

    Paragraphs inside table cells are found by recursing through the table, to any
    nesting depth. An index that lands in a structural element that is neither a
    paragraph nor a table (a section break, a table of contents) has no enclosing
    paragraph.

    Args:
        doc_data: Raw document data from Google Docs API
        index: Native index within the document

    Returns:
        LocatedRange of the paragraph, or None if no paragraph contains the index
    """
    return _find_paragraph_in_content(_body_content(doc_data), index)


def get_document_end_index(doc_data: dict[str, Any]) -> int:
    """Index just past the last structural element of the body (1 for an empty body)."""
    content = _body_content(doc_data)
    if not content:
        return 1
    return content[-1].get("endIndex", 1)
