"""
TiddlyWiki to Markdown conversion
"""

from tiddlymd.tiddlers.assembler import arrange, convert, filter_drafts
from tiddlymd.tiddlers.catalog import Catalog, build_catalog
from tiddlymd.tiddlers.errors import (
    AmbiguousReferenceError,
    MalformedInputError,
    OutputWriteError,
    TiddlyConverterError,
    UnknownOptionError,
)
from tiddlymd.tiddlers.loader import load_tiddlers, parse_tiddlers
from tiddlymd.tiddlers.markup import render
from tiddlymd.tiddlers.models import (
    ConversionOptions,
    ConversionResult,
    ConversionSummary,
    DocumentGroup,
    IgnoredTiddler,
    MarkdownDocument,
    Tiddler,
)
from tiddlymd.tiddlers.options import OPTION_FLAGS, apply_flags
from tiddlymd.tiddlers.tags import parse_tags

__all__ = [
    # Models
    "Tiddler",
    "MarkdownDocument",
    "ConversionOptions",
    "ConversionResult",
    "ConversionSummary",
    "DocumentGroup",
    "IgnoredTiddler",
    # Conversion
    "parse_tags",
    "Catalog",
    "build_catalog",
    "render",
    "filter_drafts",
    "arrange",
    "convert",
    "load_tiddlers",
    "parse_tiddlers",
    "OPTION_FLAGS",
    "apply_flags",
    # Errors
    "TiddlyConverterError",
    "MalformedInputError",
    "AmbiguousReferenceError",
    "UnknownOptionError",
    "OutputWriteError",
]
