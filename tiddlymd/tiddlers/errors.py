"""
Error types raised while converting tiddlers
"""

from pathlib import Path


class TiddlyConverterError(Exception):
    """Base class for conversion errors"""


class MalformedInputError(TiddlyConverterError):
    """The export or one of its tiddlers cannot be read"""

    def __init__(self, message: str, title: str | None = None):
        super().__init__(message)
        self.title = title


class AmbiguousReferenceError(TiddlyConverterError):
    """More than one tiddler shares a title"""

    def __init__(self, titles: list[str]):
        super().__init__(
            "Duplicate tiddler titles: " + ", ".join(repr(t) for t in titles)
        )
        self.titles = titles


class UnknownOptionError(TiddlyConverterError):
    """A flag name that the option table does not know"""

    def __init__(self, flag: str):
        super().__init__(f"Unknown option flag: {flag}")
        self.flag = flag


class OutputWriteError(TiddlyConverterError):
    """A document could not be written, not even under a fallback name"""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path
