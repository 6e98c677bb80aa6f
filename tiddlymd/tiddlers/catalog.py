"""
Title index over the tiddlers of one conversion run
"""

from collections import Counter
from collections.abc import Iterable, Iterator

from tiddlymd.tiddlers.errors import AmbiguousReferenceError
from tiddlymd.tiddlers.models import Tiddler


class Catalog:
    """Read-only Title -> Tiddler lookup.

    Titles must be unique; a duplicate raises ``AmbiguousReferenceError``
    when the catalog is built, so every lookup resolves to at most one
    tiddler.
    """

    def __init__(self, tiddlers: Iterable[Tiddler]):
        items = list(tiddlers)

        counts = Counter(t.title for t in items)
        duplicates = sorted(title for title, count in counts.items() if count > 1)
        if duplicates:
            raise AmbiguousReferenceError(duplicates)

        self._by_title: dict[str, Tiddler] = {t.title: t for t in items}
        self._tags: dict[str, frozenset[str]] = {
            t.title: frozenset(t.tag_list) for t in items
        }

    def get(self, title: str) -> Tiddler | None:
        return self._by_title.get(title)

    def tags_of(self, title: str) -> frozenset[str]:
        return self._tags.get(title, frozenset())

    def tagged(self, tag: str) -> list[Tiddler]:
        """Tiddlers whose tag set contains ``tag``, in catalog order"""
        return [t for t in self._by_title.values() if tag in self._tags[t.title]]

    def __contains__(self, title: object) -> bool:
        return title in self._by_title

    def __iter__(self) -> Iterator[Tiddler]:
        return iter(self._by_title.values())

    def __len__(self) -> int:
        return len(self._by_title)


def build_catalog(tiddlers: Iterable[Tiddler]) -> Catalog:
    """Build the catalog for an already filtered tiddler set"""
    return Catalog(tiddlers)
