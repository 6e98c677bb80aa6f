"""
Reads TiddlyWiki JSON exports
"""

import json
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from tiddlymd.tiddlers.errors import MalformedInputError
from tiddlymd.tiddlers.models import Tiddler

_TIDDLER_LIST = TypeAdapter(list[Tiddler])


def parse_tiddlers(raw: str) -> list[Tiddler]:
    """Parse the JSON array produced by "Export all > JSON file".

    Raises:
        MalformedInputError: Invalid JSON or records that are not tiddlers
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"Export is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise MalformedInputError(
            f"Export must be a JSON array of tiddlers, got {type(data).__name__}"
        )

    try:
        return _TIDDLER_LIST.validate_python(data)
    except ValidationError as e:
        raise MalformedInputError(f"Export contains invalid tiddlers: {e}") from e


def load_tiddlers(path: Path) -> list[Tiddler]:
    """Read and parse an export file"""
    try:
        raw = Path(path).read_text(encoding="utf-8-sig")
    except OSError as e:
        raise MalformedInputError(f"Cannot read export {path}: {e}") from e
    return parse_tiddlers(raw)
