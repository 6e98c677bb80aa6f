"""
Command line flags for conversion options

Each flag maps to a pure function returning an updated copy of the options.
"""

from collections.abc import Callable, Iterable

from tiddlymd.tiddlers.errors import UnknownOptionError
from tiddlymd.tiddlers.models import ConversionOptions

OptionUpdater = Callable[[ConversionOptions], ConversionOptions]

OPTION_FLAGS: dict[str, OptionUpdater] = {
    "--keep-drafts": lambda o: o.model_copy(update={"keep_drafts": True}),
    "--highlight-links": lambda o: o.model_copy(update={"highlight_links": True}),
    "--frontmatter": lambda o: o.model_copy(update={"frontmatter": True}),
}

FLAG_HELP: dict[str, str] = {
    "--keep-drafts": "Convert \"Draft of '...'\" tiddlers instead of skipping them",
    "--highlight-links": "Render [[links]] as Markdown links instead of plain text",
    "--frontmatter": "Write YAML frontmatter instead of the plain metadata block",
}


def apply_flags(options: ConversionOptions, flags: Iterable[str]) -> ConversionOptions:
    """Apply flags left to right.

    Raises:
        UnknownOptionError: A flag is not in ``OPTION_FLAGS``
    """
    for flag in flags:
        updater = OPTION_FLAGS.get(flag)
        if updater is None:
            raise UnknownOptionError(flag)
        options = updater(options)
    return options


def with_categories(
    options: ConversionOptions, categories: Iterable[str]
) -> ConversionOptions:
    """Replace the output categories, dropping repeats"""
    return options.model_copy(
        update={"output_categories": tuple(dict.fromkeys(categories))}
    )
