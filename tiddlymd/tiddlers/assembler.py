"""
Turns a tiddler export into ordered, grouped Markdown documents
"""

import re
from collections import Counter
from collections.abc import Iterable

from tiddlymd.tiddlers.catalog import Catalog
from tiddlymd.tiddlers.markup import render_tiddler
from tiddlymd.tiddlers.models import (
    ConversionOptions,
    ConversionResult,
    ConversionSummary,
    DocumentGroup,
    IgnoredTiddler,
    MarkdownDocument,
    Tiddler,
)

# "Draft of 'Title'", "Draft 2 of 'Title'"
DRAFT_TITLE_RE = re.compile(r"Draft \d* ?of '.*?'")
EMPTY_SNIPPET = "(Empty)"
SNIPPET_LENGTH = 80


def is_draft(title: str) -> bool:
    return DRAFT_TITLE_RE.search(title) is not None


def snippet(text: str, length: int = SNIPPET_LENGTH) -> str:
    """First line of ``text``, shortened for reports"""
    if not text or text.isspace():
        return EMPTY_SNIPPET
    first_line = text.strip().splitlines()[0]
    if len(first_line) > length:
        return first_line[:length] + "..."
    return first_line


def filter_drafts(
    tiddlers: Iterable[Tiddler], options: ConversionOptions
) -> tuple[list[Tiddler], list[IgnoredTiddler]]:
    """Separate draft tiddlers from the ones to convert.

    Drafts are only removed when ``options.keep_drafts`` is off.

    Returns:
        ``(kept, ignored)``
    """
    items = list(tiddlers)
    if options.keep_drafts:
        return items, []

    kept: list[Tiddler] = []
    ignored: list[IgnoredTiddler] = []
    for tiddler in items:
        if is_draft(tiddler.title):
            ignored.append(
                IgnoredTiddler(title=tiddler.title, snippet=snippet(tiddler.text))
            )
        else:
            kept.append(tiddler)
    return kept, ignored


def to_document(
    tiddler: Tiddler, catalog: Catalog, options: ConversionOptions
) -> MarkdownDocument:
    tags = tiddler.tag_list
    return MarkdownDocument(
        title=tiddler.title,
        content=render_tiddler(tiddler, catalog, options),
        tags=tags,
        create_date=tiddler.created_date,
        modification_date=tiddler.modified_date,
        dated_tag=options.dated_tag if options.dated_tag in tags else None,
    )


def _by_creation(documents: Iterable[MarkdownDocument]) -> tuple[MarkdownDocument, ...]:
    return tuple(sorted(documents, key=lambda d: d.create_date))


def arrange(
    documents: Iterable[MarkdownDocument], options: ConversionOptions
) -> list[DocumentGroup]:
    """Group documents for output.

    Dated documents come first, then one group per configured category in
    configured order, then the default bucket. A document is placed in the
    first group it matches only. Each group is ordered by creation date.
    """
    remaining = list(documents)

    buckets: list[tuple[str, list[MarkdownDocument]]] = []
    candidates = dict.fromkeys([options.dated_tag, *options.output_categories])
    # A category named like the default bucket merges into it
    candidates.pop(options.default_category, None)
    for name in candidates:
        matched = [d for d in remaining if name in d.tags]
        remaining = [d for d in remaining if name not in d.tags]
        buckets.append((name, matched))
    buckets.append((options.default_category, remaining))

    return [
        DocumentGroup(name=name, documents=_by_creation(matched))
        for name, matched in buckets
    ]


def summarize(
    documents: Iterable[MarkdownDocument],
    ignored: Iterable[IgnoredTiddler],
    groups: Iterable[DocumentGroup],
) -> ConversionSummary:
    docs = list(documents)
    counts: Counter[str] = Counter(tag for d in docs for tag in d.tags)
    return ConversionSummary(
        converted=len(docs),
        ignored=len(list(ignored)),
        tag_counts={tag: counts[tag] for tag in sorted(counts)},
        category_counts={g.name: len(g.documents) for g in groups},
    )


def convert(
    tiddlers: Iterable[Tiddler], options: ConversionOptions
) -> ConversionResult:
    """Convert a whole export.

    Raises:
        AmbiguousReferenceError: Two kept tiddlers share a title
        MalformedInputError: A kept tiddler has an unreadable date
    """
    kept, ignored = filter_drafts(tiddlers, options)
    catalog = Catalog(kept)
    documents = [to_document(t, catalog, options) for t in kept]
    groups = arrange(documents, options)

    return ConversionResult(
        documents=tuple(documents),
        groups=tuple(groups),
        ignored=tuple(ignored),
        summary=summarize(documents, ignored, groups),
    )
