"""
Unit tests for locating text in a Google Doc and mapping it to document indices.

Covers:
- collect_text_fragments
- find_nth_occurrence
- map_logical_span
- locate_text_range / find_all_text_ranges
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

from gdocs.docs_helpers import (
    find_all_text_ranges,
    find_nth_occurrence,
    locate_in_fragments,
    locate_text_range,
    map_logical_span,
)
from gdocs.docs_structure import (
    LocatedRange,
    TextFragment,
    collect_text_fragments,
    utf16_length,
)


def create_text_run(text: str, start_index: int, end_index: int = None):
    """Create a mock paragraph element holding a text run."""
    if end_index is None:
        end_index = start_index + len(text)
    return {
        "startIndex": start_index,
        "endIndex": end_index,
        "textRun": {"content": text},
    }


def create_paragraph(runs):
    """Create a mock paragraph from (text, start_index) pairs."""
    elements = [create_text_run(text, start) for text, start in runs]
    return {
        "startIndex": elements[0]["startIndex"],
        "endIndex": elements[-1]["endIndex"],
        "paragraph": {"elements": elements},
    }


def create_table(start_index: int, end_index: int, rows):
    """Create a mock table; rows is a list of rows, each a list of cell content lists."""
    return {
        "startIndex": start_index,
        "endIndex": end_index,
        "table": {
            "tableRows": [
                {"tableCells": [{"content": cell} for cell in row]}
                for row in rows
            ]
        },
    }


def create_mock_document(elements):
    """Create a mock document with given elements."""
    return {"title": "Test Document", "body": {"content": elements}}


def native_text(doc, located):
    """Text covered by a native range, read back from the document's runs."""
    collection = collect_text_fragments(doc)
    pieces = []
    for fragment in collection.fragments:
        for offset, char in enumerate(fragment.text):
            if located.start_index <= fragment.start_index + offset < located.end_index:
                pieces.append(char)
    return "".join(pieces)


class TestCollectTextFragments:
    """Tests for collect_text_fragments."""

    def test_single_paragraph(self):
        doc = create_mock_document([create_paragraph([("Hello world\n", 1)])])

        collection = collect_text_fragments(doc)

        assert collection.logical_text == "Hello world\n"
        assert collection.fragments == (TextFragment("Hello world\n", 1, 13),)

    def test_multiple_runs_in_order(self):
        doc = create_mock_document([
            create_paragraph([("This ", 1), ("is a ", 6), ("test case", 11)]),
        ])

        collection = collect_text_fragments(doc)

        assert collection.logical_text == "This is a test case"
        assert [f.start_index for f in collection.fragments] == [1, 6, 11]

    def test_skips_elements_without_text(self):
        paragraph = create_paragraph([("Before", 1)])
        paragraph["paragraph"]["elements"].append(
            {"startIndex": 7, "endIndex": 8, "inlineObjectElement": {"inlineObjectId": "img1"}}
        )
        paragraph["paragraph"]["elements"].append(create_text_run("", 8, 8))
        doc = create_mock_document([
            {"endIndex": 1, "sectionBreak": {"sectionStyle": {}}},
            paragraph,
        ])

        collection = collect_text_fragments(doc)

        assert collection.logical_text == "Before"
        assert len(collection.fragments) == 1

    def test_skips_runs_without_start_index(self):
        paragraph = {
            "paragraph": {
                "elements": [
                    {"textRun": {"content": "orphan"}},
                    create_text_run("kept", 10),
                ]
            }
        }
        doc = create_mock_document([paragraph])

        collection = collect_text_fragments(doc)

        assert collection.logical_text == "kept"

    def test_table_cells_in_row_major_order(self):
        doc = create_mock_document([
            create_paragraph([("Intro\n", 1)]),
            create_table(7, 30, [
                [[create_paragraph([("A1\n", 9)])], [create_paragraph([("B1\n", 13)])]],
                [[create_paragraph([("A2\n", 18)])], [create_paragraph([("B2\n", 22)])]],
            ]),
            create_paragraph([("Outro\n", 30)]),
        ])

        collection = collect_text_fragments(doc)

        assert collection.logical_text == "Intro\nA1\nB1\nA2\nB2\nOutro\n"

    def test_nested_tables(self):
        inner = create_table(12, 20, [[[create_paragraph([("deep\n", 14)])]]])
        doc = create_mock_document([
            create_table(1, 30, [[[create_paragraph([("outer\n", 3)]), inner]]]),
        ])

        collection = collect_text_fragments(doc)

        assert collection.logical_text == "outer\ndeep\n"
        assert collection.fragments[-1] == TextFragment("deep\n", 14, 19)

    def test_empty_document(self):
        collection = collect_text_fragments({})

        assert collection.fragments == ()
        assert collection.logical_text == ""

    def test_end_index_follows_utf16_length(self):
        text = "smile 😀\n"
        doc = create_mock_document([
            {"startIndex": 1, "endIndex": 10, "paragraph": {"elements": [create_text_run(text, 1, 10)]}},
        ])

        collection = collect_text_fragments(doc)

        assert utf16_length(text) == 9
        assert collection.fragments[0].end_index == 10


class TestFindNthOccurrence:
    """Tests for find_nth_occurrence."""

    def test_first_occurrence(self):
        assert find_nth_occurrence("hello world", "world") == (6, 11)

    def test_nth_occurrence(self):
        text = "Test test test. This is a test sentence."
        assert find_nth_occurrence(text, "test", 1) == (5, 9)
        assert find_nth_occurrence(text, "test", 3) == (26, 30)

    def test_case_sensitive(self):
        assert find_nth_occurrence("Test", "test") is None

    def test_beyond_count_returns_none(self):
        assert find_nth_occurrence("a test here", "test", 2) is None

    def test_resumes_one_past_match_start(self):
        assert find_nth_occurrence("aaa", "aa", 1) == (0, 2)
        assert find_nth_occurrence("aaa", "aa", 2) == (1, 3)
        assert find_nth_occurrence("aaa", "aa", 3) is None

    def test_adjacent_matches_all_counted(self):
        assert find_nth_occurrence("abab", "ab", 2) == (2, 4)

    def test_start_from(self):
        assert find_nth_occurrence("one two one", "one", 1, start_from=1) == (8, 11)

    @pytest.mark.parametrize("search_text,occurrence", [("", 1), ("x", 0), ("x", -1)])
    def test_invalid_input_returns_none(self, search_text, occurrence):
        assert find_nth_occurrence("xxx", search_text, occurrence) is None


class TestMapLogicalSpan:
    """Tests for map_logical_span."""

    def setup_method(self):
        self.fragments = (
            TextFragment("This ", 1, 6),
            TextFragment("is a ", 6, 11),
            TextFragment("test case", 11, 20),
        )

    def test_span_within_one_fragment(self):
        assert map_logical_span(self.fragments, 0, 4) == LocatedRange(1, 5)

    def test_span_across_fragments(self):
        # "a test" starts in "is a " and ends in "test case"
        assert map_logical_span(self.fragments, 8, 14) == LocatedRange(9, 15)

    def test_end_on_fragment_boundary_uses_earlier_fragment(self):
        assert map_logical_span(self.fragments, 0, 5) == LocatedRange(1, 6)

    def test_start_on_fragment_boundary_uses_later_fragment(self):
        assert map_logical_span(self.fragments, 5, 7) == LocatedRange(6, 8)

    def test_span_covering_everything(self):
        assert map_logical_span(self.fragments, 0, 19) == LocatedRange(1, 20)

    def test_span_past_end_returns_none(self):
        assert map_logical_span(self.fragments, 15, 25) is None

    def test_empty_span_returns_none(self):
        assert map_logical_span(self.fragments, 3, 3) is None

    def test_span_across_gap_returns_none(self):
        fragments = (TextFragment("ab", 1, 3), TextFragment("cd", 5, 7))

        assert map_logical_span(fragments, 1, 3) is None
        assert map_logical_span(fragments, 2, 4) == LocatedRange(5, 7)

    def test_utf16_offsets(self):
        fragments = (TextFragment("héllo 😀 world\n", 1, 16),)

        assert map_logical_span(fragments, 6, 7) == LocatedRange(7, 9)
        assert map_logical_span(fragments, 8, 13) == LocatedRange(10, 15)


class TestLocateTextRange:
    """Tests for locate_text_range."""

    def test_third_occurrence(self):
        doc = create_mock_document([
            create_paragraph([("Test test test. This is a test sentence.", 1)]),
        ])

        assert locate_text_range(doc, "test", 3) == LocatedRange(27, 31)

    def test_first_occurrence_in_sentence(self):
        doc = create_mock_document([create_paragraph([("This is a test sentence.", 1)])])

        assert locate_text_range(doc, "test") == LocatedRange(11, 15)

    def test_not_found(self):
        doc = create_mock_document([create_paragraph([("This is a sample sentence.", 1)])])

        assert locate_text_range(doc, "test") is None

    def test_occurrence_beyond_count(self):
        doc = create_mock_document([
            create_paragraph([("Test test test. This is a test sentence.", 1)]),
        ])

        assert locate_text_range(doc, "test", 4) is None

    def test_match_spanning_runs(self):
        doc = create_mock_document([
            create_paragraph([("This ", 1), ("is a ", 6), ("test case", 11)]),
        ])

        assert locate_text_range(doc, "a test") == LocatedRange(9, 15)

    def test_text_inside_table_cell(self):
        doc = create_mock_document([
            create_paragraph([("Intro\n", 1)]),
            create_table(7, 18, [
                [[create_paragraph([("A1\n", 9)])], [create_paragraph([("B1\n", 13)])]],
            ]),
        ])

        assert locate_text_range(doc, "B1") == LocatedRange(13, 15)

    def test_unmappable_match_is_skipped(self):
        # "ab" first matches across the gap between 3 and 10, then cleanly at 12
        doc = create_mock_document([
            create_paragraph([("xa", 1)]),
            create_paragraph([("bz", 10), ("ab", 12)]),
        ])

        assert locate_text_range(doc, "ab", 1) == LocatedRange(12, 14)
        assert locate_text_range(doc, "ab", 3) is None

    def test_recovers_search_text_for_every_occurrence(self):
        doc = create_mock_document([
            create_paragraph([("one fish ", 1), ("two fish ", 10)]),
            create_paragraph([("red fi", 19), ("sh blue fish\n", 25)]),
        ])
        collection = collect_text_fragments(doc)
        total = collection.logical_text.count("fish")

        for occurrence in range(1, total + 1):
            located = locate_in_fragments(collection, "fish", occurrence)
            assert located is not None
            assert native_text(doc, located) == "fish"
        assert locate_in_fragments(collection, "fish", total + 1) is None

    def test_find_all_text_ranges(self):
        doc = create_mock_document([
            create_paragraph([("Test test test. This is a test sentence.", 1)]),
        ])

        ranges = find_all_text_ranges(doc, "test")

        assert ranges == [LocatedRange(6, 10), LocatedRange(11, 15), LocatedRange(27, 31)]
