"""Test document assembly, grouping and draft filtering"""

from datetime import datetime

import pytest

from tiddlymd.tiddlers.assembler import (
    EMPTY_SNIPPET,
    arrange,
    convert,
    filter_drafts,
    is_draft,
    snippet,
)
from tiddlymd.tiddlers.errors import AmbiguousReferenceError, MalformedInputError
from tiddlymd.tiddlers.models import ConversionOptions, MarkdownDocument


def _doc(title: str, day: int, tags=(), dated_tag=None) -> MarkdownDocument:
    return MarkdownDocument(
        title=title,
        content="",
        tags=list(tags),
        create_date=datetime(2024, 1, day),
        modification_date=datetime(2024, 1, day),
        dated_tag=dated_tag,
    )


class TestDrafts:
    """Test draft detection and filtering"""

    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("Draft of 'X'", True),
            ("Draft 2 of 'My Note'", True),
            ("Draft of ''", True),
            ("draft of 'X'", False),
            ("Draft of X", False),
            ("Drafting notes", False),
        ],
    )
    def test_is_draft(self, title, expected) -> None:
        assert is_draft(title) is expected

    def test_snippet(self) -> None:
        assert snippet("") == EMPTY_SNIPPET
        assert snippet("  \n ") == EMPTY_SNIPPET
        assert snippet("first line\nsecond") == "first line"
        assert snippet("x" * 100, length=10) == "x" * 10 + "..."

    def test_drafts_removed_by_default(self, make_tiddler) -> None:
        kept, ignored = filter_drafts(
            [make_tiddler("X", "final"), make_tiddler("Draft of 'X'", "")],
            ConversionOptions(),
        )

        assert [t.title for t in kept] == ["X"]
        assert [(i.title, i.snippet) for i in ignored] == [("Draft of 'X'", "(Empty)")]

    def test_keep_drafts(self, make_tiddler) -> None:
        tiddlers = [make_tiddler("X"), make_tiddler("Draft of 'X'")]
        kept, ignored = filter_drafts(tiddlers, ConversionOptions(keep_drafts=True))

        assert kept == tiddlers
        assert ignored == []


class TestArrange:
    """Test output grouping"""

    def test_dated_first_then_categories_then_default(self) -> None:
        documents = [
            _doc("late work", 9, ["Work"]),
            _doc("diary", 5, ["Journal", "Work"], dated_tag="Journal"),
            _doc("idea", 3, ["Ideas", "Work"]),
            _doc("early work", 1, ["Work"]),
            _doc("misc", 2),
        ]
        options = ConversionOptions(output_categories=("Work", "Ideas"))

        groups = arrange(documents, options)

        assert [(g.name, [d.title for d in g.documents]) for g in groups] == [
            ("Journal", ["diary"]),
            ("Work", ["early work", "idea", "late work"]),
            ("Ideas", []),
            ("Others", ["misc"]),
        ]

    def test_each_document_placed_once(self) -> None:
        documents = [_doc(str(n), n, ["Work", "Ideas"]) for n in range(1, 6)]
        groups = arrange(documents, ConversionOptions(output_categories=("Ideas", "Work")))

        placed = [d.title for g in groups for d in g.documents]
        assert sorted(placed) == sorted(d.title for d in documents)
        assert len(groups[1].documents) == 5

    def test_default_bucket_sorted_by_creation(self) -> None:
        documents = [_doc("c", 3), _doc("a", 1), _doc("b", 2)]
        groups = arrange(documents, ConversionOptions(default_category="Rest"))

        assert groups[-1].name == "Rest"
        assert [d.title for d in groups[-1].documents] == ["a", "b", "c"]

    def test_category_repeating_dated_tag_is_not_duplicated(self) -> None:
        groups = arrange(
            [_doc("d", 1, ["Journal"])],
            ConversionOptions(output_categories=("Journal", "Work")),
        )

        assert [g.name for g in groups] == ["Journal", "Work", "Others"]

    def test_category_named_like_default_bucket_merges(self) -> None:
        groups = arrange(
            [_doc("b", 2), _doc("a", 1, ["Others"])],
            ConversionOptions(output_categories=("Others", "Work")),
        )

        assert [g.name for g in groups] == ["Journal", "Work", "Others"]
        assert [d.title for d in groups[-1].documents] == ["a", "b"]


class TestConvert:
    """Test whole-export conversion"""

    def test_draft_excluded_from_catalog_and_output(self, make_tiddler) -> None:
        tiddlers = [
            make_tiddler("Home", "Go to [[Draft of 'X']]"),
            make_tiddler("Draft of 'X'", "work in progress"),
        ]

        result = convert(tiddlers, ConversionOptions(highlight_links=True))

        assert [d.title for d in result.documents] == ["Home"]
        assert result.documents[0].content == "Go to [Draft of 'X'](EMPTY REFERENCE)"
        assert [i.title for i in result.ignored] == ["Draft of 'X'"]
        assert result.ignored[0].snippet == "work in progress"
        assert result.summary.ignored == 1

    def test_documents_carry_metadata(self, make_tiddler) -> None:
        result = convert(
            [
                make_tiddler(
                    "Day one",
                    "''hi''",
                    tags="Journal [[Big Topic]] Journal",
                    created="20240301080000000",
                    modified="20240302080000000",
                )
            ],
            ConversionOptions(),
        )

        document = result.documents[0]
        assert document.content == "**hi**"
        assert document.tags == ("Journal", "Big Topic")
        assert document.create_date == datetime(2024, 3, 1)
        assert document.modification_date == datetime(2024, 3, 2)
        assert document.display_title == "20240301 Day one"

    def test_summary_counts(self, make_tiddler) -> None:
        result = convert(
            [
                make_tiddler("A", tags="x y"),
                make_tiddler("B", tags="y Work"),
                make_tiddler("C", tags="Journal"),
            ],
            ConversionOptions(output_categories=("Work",)),
        )

        assert result.summary.converted == 3
        assert result.summary.tag_counts == {"Journal": 1, "Work": 1, "x": 1, "y": 2}
        assert result.summary.category_counts == {"Journal": 1, "Work": 1, "Others": 1}

    def test_summary_counts_merged_default_bucket(self, make_tiddler) -> None:
        result = convert(
            [make_tiddler("A", tags="Others"), make_tiddler("B")],
            ConversionOptions(output_categories=("Others",)),
        )

        assert [g.name for g in result.groups] == ["Journal", "Others"]
        assert result.summary.category_counts == {"Journal": 0, "Others": 2}

    def test_duplicate_titles_abort(self, make_tiddler) -> None:
        with pytest.raises(AmbiguousReferenceError):
            convert([make_tiddler("A"), make_tiddler("A")], ConversionOptions())

    def test_bad_date_aborts(self, make_tiddler) -> None:
        with pytest.raises(MalformedInputError):
            convert([make_tiddler("A", created="yesterday")], ConversionOptions())

    def test_markdown_tiddlers_pass_through(self, make_tiddler) -> None:
        result = convert(
            [make_tiddler("md", "# Already *markdown*", type="text/x-markdown")],
            ConversionOptions(),
        )

        assert result.documents[0].content == "# Already *markdown*"
