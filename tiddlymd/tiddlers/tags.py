"""
TiddlyWiki tag field tokenizer

Tags are stored as one string: plain tags are separated by whitespace and a
tag containing spaces is wrapped in double brackets, e.g.
``tag1 [[a b c]] tag2``.
"""

_OPEN = "[["
_CLOSE = "]]"


def parse_tags(raw: str | None) -> list[str]:
    """Split a raw tag field into tag names.

    Tags come back in order of appearance and duplicates are kept. An
    unterminated ``[[`` takes the rest of the string as its tag.

    Args:
        raw: The tiddler's ``tags`` field

    Returns:
        List of tag names
    """
    if not raw or raw.isspace():
        return []

    tags: list[str] = []
    pos = 0
    length = len(raw)

    while pos < length:
        if raw[pos].isspace():
            pos += 1
            continue

        if raw.startswith(_OPEN, pos):
            start = pos + len(_OPEN)
            end = raw.find(_CLOSE, start)
            if end == -1:
                tags.append(raw[start:])
                break
            tags.append(raw[start:end])
            pos = end + len(_CLOSE)
            continue

        start = pos
        while pos < length and not raw[pos].isspace():
            pos += 1
        tags.append(raw[start:pos])

    return tags


def unique_tags(tags: list[str]) -> tuple[str, ...]:
    """De-duplicate tags, keeping first occurrence order"""
    return tuple(dict.fromkeys(tags))
