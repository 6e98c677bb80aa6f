"""
TiddlyWiki markup to Markdown conversion

The conversion is an ordered list of rules. Each rule is a pure
``(text, context) -> text`` function; later rules rely on the output shape
of earlier ones (headers are rewritten before header emphasis is stripped,
``[[...]]`` inside a table of contents is gone before links are resolved).
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from tiddlymd.tiddlers.catalog import Catalog
from tiddlymd.tiddlers.models import MARKDOWN_TYPE, ConversionOptions, Tiddler

EMPTY_REFERENCE = "EMPTY REFERENCE"
BIG_QUOTE_MARKER = ".tc-big-quote"

BOLD_RE = re.compile(r"''(.*?)''")
ITALIC_RE = re.compile(r"//(.*?)//")
NUMBERED_ITEM_RE = re.compile(r"^# (.*)$", flags=re.MULTILINE)
HASH_BULLET_RE = re.compile(r"^#(\*+) (.*)$", flags=re.MULTILINE)
STAR_BULLET_RE = re.compile(r"^\*(\*+) (.*)$", flags=re.MULTILINE)
QUOTE_RE = re.compile(r"<<<(.*?)<<<", flags=re.DOTALL)
HEADER_RE = re.compile(r"^(!+) (.*)$", flags=re.MULTILINE)
HEADER_EMPHASIS_RE = re.compile(r"^(#+) \*\*(.*)\*\*$", flags=re.MULTILINE)
TOC_RE = re.compile(r'<div class="tc-table-of-contents">(.*?)</div>', flags=re.DOTALL)
# <<toc 'tag'>>, <<toc-expandable "tag">>, <<toc [[Big Tag]]>>, <<toc Tag>> ...
TOC_MACRO_RE = re.compile(
    r"""<<toc[\w-]*\s+"""
    r"""(?:'(?P<single>.*?)'|"(?P<double>.*?)"|\[\[(?P<brackets>.*?)\]\]|(?P<bare>[^\s>]+))"""
)
LINK_RE = re.compile(r"\[\[(.*?)\]\]")
TRANSCLUSION_RE = re.compile(r"\{\{(.*?)\}\}")


@dataclass(frozen=True)
class RenderContext:
    """Read-only state shared by all rules of one render call"""

    catalog: Catalog
    options: ConversionOptions


@dataclass(frozen=True)
class MarkupRule:
    name: str
    apply: Callable[[str, RenderContext], str]


def replace_bold(text: str, context: RenderContext) -> str:
    return BOLD_RE.sub(r"**\1**", text)


def replace_italic(text: str, context: RenderContext) -> str:
    return ITALIC_RE.sub(r"*\1*", text)


def replace_numbered_items(text: str, context: RenderContext) -> str:
    return NUMBERED_ITEM_RE.sub(r"1. \1", text)


def _nested_bullet(match: re.Match[str]) -> str:
    depth = len(match.group(1))
    return "\t" * depth + "* " + match.group(2)


def replace_hash_bullets(text: str, context: RenderContext) -> str:
    return HASH_BULLET_RE.sub(_nested_bullet, text)


def replace_star_bullets(text: str, context: RenderContext) -> str:
    return STAR_BULLET_RE.sub(_nested_bullet, text)


def escape_tilde_runs(text: str, context: RenderContext) -> str:
    # Four tildes read as an empty strikethrough
    return text.replace("~~~~", "~~ ~~")


def _quote_block(match: re.Match[str]) -> str:
    content = match.group(1).strip()
    if content.startswith(BIG_QUOTE_MARKER):
        content = content[len(BIG_QUOTE_MARKER):].strip()
    return "\n".join(f"> {line}" for line in content.split("\n"))


def replace_quotes(text: str, context: RenderContext) -> str:
    return QUOTE_RE.sub(_quote_block, text)


def _header(match: re.Match[str]) -> str:
    level = len(match.group(1))
    return f"{'#' * level} {match.group(2)}\n"


def replace_headers(text: str, context: RenderContext) -> str:
    return HEADER_RE.sub(_header, text)


def strip_header_emphasis(text: str, context: RenderContext) -> str:
    return HEADER_EMPHASIS_RE.sub(r"\1 \2", text)


def table_of_contents_key(content: str) -> str:
    """Tag named by the toc macro inside a table of contents block.

    Returns an empty string when the block has no recognizable macro.
    """
    match = TOC_MACRO_RE.search(content)
    if match is None:
        return ""
    return next((v for v in match.groupdict().values() if v is not None), "")


def replace_table_of_contents(text: str, context: RenderContext) -> str:
    def toc(match: re.Match[str]) -> str:
        key = table_of_contents_key(match.group(1).strip())
        tagged = context.catalog.tagged(key) if key else []
        entries = "".join(f"* {tiddler.title}\n" for tiddler in tagged)
        return f"TABLE OF CONTENTS ({key}):\n\n{entries}"

    return TOC_RE.sub(toc, text)


def _split_link(content: str) -> tuple[str, str]:
    # [[label|Target]] shows the label and points at the target
    if "|" in content:
        label, target = content.split("|", 1)
        return label, target
    return content, content


def replace_links(text: str, context: RenderContext) -> str:
    def link(match: re.Match[str]) -> str:
        label, target = _split_link(match.group(1))
        if not context.options.highlight_links:
            return label
        if target not in context.catalog:
            return f"[{label}]({EMPTY_REFERENCE})"
        return f"[{label}](./{target})"

    return LINK_RE.sub(link, text)


def replace_transclusions(text: str, context: RenderContext) -> str:
    def transclusion(match: re.Match[str]) -> str:
        title = match.group(1)
        if title not in context.catalog:
            return f"{{{{{title} ({EMPTY_REFERENCE})}}}}"
        return f"{{{{{title}}}}}"

    return TRANSCLUSION_RE.sub(transclusion, text)


MARKUP_RULES: tuple[MarkupRule, ...] = (
    MarkupRule("bold", replace_bold),
    MarkupRule("italic", replace_italic),
    MarkupRule("numbered_items", replace_numbered_items),
    MarkupRule("hash_bullets", replace_hash_bullets),
    MarkupRule("star_bullets", replace_star_bullets),
    MarkupRule("tilde_runs", escape_tilde_runs),
    MarkupRule("quotes", replace_quotes),
    MarkupRule("headers", replace_headers),
    MarkupRule("header_emphasis", strip_header_emphasis),
    MarkupRule("table_of_contents", replace_table_of_contents),
    MarkupRule("links", replace_links),
    MarkupRule("transclusions", replace_transclusions),
)


def render(
    type: str | None,
    text: str,
    catalog: Catalog,
    options: ConversionOptions,
    rules: tuple[MarkupRule, ...] = MARKUP_RULES,
) -> str:
    """Convert a tiddler body to Markdown.

    Args:
        type: Tiddler type; Markdown tiddlers are returned untouched
        text: Raw tiddler body
        catalog: Tiddlers that links, transclusions and tables of contents
            resolve against
        options: Conversion options
        rules: Rules to apply, in order

    Returns:
        Markdown text with surrounding whitespace removed
    """
    if type == MARKDOWN_TYPE:
        return text

    context = RenderContext(catalog=catalog, options=options)
    for rule in rules:
        text = rule.apply(text, context)
    return text.strip()


def render_tiddler(
    tiddler: Tiddler, catalog: Catalog, options: ConversionOptions
) -> str:
    return render(tiddler.type, tiddler.text, catalog, options)
