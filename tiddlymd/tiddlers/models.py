"""
Tiddler and Markdown document models
"""

from datetime import datetime

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from tiddlymd.tiddlers.errors import MalformedInputError
from tiddlymd.tiddlers.tags import parse_tags, unique_tags

MARKDOWN_TYPE = "text/x-markdown"


def parse_timestamp(value: str | None, field: str, title: str) -> datetime:
    """Parse the ``YYYYMMDD`` prefix of a TiddlyWiki timestamp"""
    prefix = (value or "")[:8]
    if len(prefix) != 8 or not prefix.isdigit():
        raise MalformedInputError(
            f"Tiddler {title!r} has no valid {field} date: {value!r}", title=title
        )
    try:
        return datetime.strptime(prefix, "%Y%m%d")
    except ValueError as e:
        raise MalformedInputError(
            f"Tiddler {title!r} has an invalid {field} date: {value!r}", title=title
        ) from e


class Tiddler(BaseModel):
    """One record of a TiddlyWiki JSON export"""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    title: str
    text: str = ""
    type: str = ""
    # Space delimited, [[...]] for tags with spaces
    tags: str = ""
    created: str | None = None
    modified: str | None = None
    list_field: str | None = Field(default=None, alias="list")
    icon: str | None = None
    color: str | None = None

    @field_validator("text", "type", "tags", mode="before")
    @classmethod
    def validate_optional_text(cls, v: object) -> object:
        """Exports write missing strings as null"""
        return "" if v is None else v

    @property
    def tag_list(self) -> list[str]:
        return parse_tags(self.tags)

    @property
    def created_date(self) -> datetime:
        return parse_timestamp(self.created, "created", self.title)

    @property
    def modified_date(self) -> datetime:
        return parse_timestamp(self.modified, "modified", self.title)

    @property
    def is_markdown(self) -> bool:
        return self.type == MARKDOWN_TYPE


class ConversionOptions(BaseModel):
    """Options that change how tiddlers are converted"""

    model_config = ConfigDict(frozen=True)

    keep_drafts: bool = False
    highlight_links: bool = False
    output_categories: tuple[str, ...] = ()
    dated_tag: str = "Journal"
    default_category: str = "Others"
    frontmatter: bool = False


class MarkdownDocument(BaseModel):
    """A converted tiddler ready to be written"""

    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    tags: tuple[str, ...] = ()
    create_date: datetime
    modification_date: datetime
    dated_tag: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: object) -> object:
        """Tags form an ordered set"""
        if isinstance(v, (list, tuple)):
            return unique_tags(list(v))
        return v

    @property
    def is_dated(self) -> bool:
        return self.dated_tag is not None and self.dated_tag in self.tags

    @property
    def display_title(self) -> str:
        if self.is_dated:
            return f"{self.create_date:%Y%m%d} {self.title}"
        return self.title

    @property
    def display_tags(self) -> list[str]:
        return sorted(t for t in self.tags if not (self.is_dated and t == self.dated_tag))

    def to_markdown(self, frontmatter: bool = False) -> str:
        """Render the document as Markdown text"""
        lines: list[str] = []

        if frontmatter:
            data = {
                "title": self.display_title,
                "tags": self.display_tags,
                "created": f"{self.create_date:%Y-%m-%d}",
                "modified": f"{self.modification_date:%Y-%m-%d}",
            }
            lines.append("---")
            lines.append(
                yaml.dump(
                    data, default_flow_style=False, allow_unicode=True, sort_keys=False
                ).rstrip("\n")
            )
            lines.append("---")
            lines.append("")

        lines.append(f"# {self.display_title}")
        lines.append("")

        if not frontmatter:
            if self.display_tags:
                lines.append(f"Tags: {', '.join(self.display_tags)}")
                lines.append("")
            lines.append(f"Creation: {self.create_date:%Y-%m-%d}  ")
            lines.append(f"Last Modification: {self.modification_date:%Y-%m-%d}")
            lines.append("")

        if self.content:
            lines.append(self.content)
            lines.append("")

        return "\n".join(lines) + "\n"


class IgnoredTiddler(BaseModel):
    """A draft left out of the conversion"""

    model_config = ConfigDict(frozen=True)

    title: str
    snippet: str


class DocumentGroup(BaseModel):
    """Documents that share an output destination"""

    model_config = ConfigDict(frozen=True)

    name: str
    documents: tuple[MarkdownDocument, ...] = ()


class ConversionSummary(BaseModel):
    """Run statistics"""

    model_config = ConfigDict(frozen=True)

    converted: int = 0
    ignored: int = 0
    tag_counts: dict[str, int] = Field(default_factory=dict)
    category_counts: dict[str, int] = Field(default_factory=dict)

    @property
    def unique_tags(self) -> int:
        return len(self.tag_counts)

    def to_markdown(self) -> str:
        lines = [
            f"Number of tiddlers: {self.converted}  ",
            f"Number of ignored drafts: {self.ignored}  ",
            f"Number of tags: {self.unique_tags}  ",
            "Tags: "
            + ", ".join(f"{tag} ({count})" for tag, count in self.tag_counts.items())
            + "  ",
        ]
        if self.category_counts:
            lines.append(
                "Categories: "
                + ", ".join(
                    f"{name} ({count})" for name, count in self.category_counts.items()
                )
                + "  "
            )
        return "\n".join(lines) + "\n"


class ConversionResult(BaseModel):
    """Everything a run hands over to the writer"""

    model_config = ConfigDict(frozen=True)

    documents: tuple[MarkdownDocument, ...]
    groups: tuple[DocumentGroup, ...]
    ignored: tuple[IgnoredTiddler, ...]
    summary: ConversionSummary
