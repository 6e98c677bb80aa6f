"""Writes converted documents to disk."""

import re
from collections.abc import Iterable
from pathlib import Path

import aiofiles
from pydantic import BaseModel, Field

from tiddlymd.tiddlers.errors import OutputWriteError
from tiddlymd.tiddlers.models import ConversionSummary, DocumentGroup, MarkdownDocument
from tiddlymd.utils.mixins import LoggerMixin

# File systems limit names in bytes, not characters
MAX_FILENAME_BYTES = 200
FALLBACK_STEM = "document"
SUMMARY_FILENAME = "_summary.md"


class WriteFailure(BaseModel):
    """A document that could not be written under its own name"""

    title: str
    path: Path
    error: str
    fallback_path: Path | None = None


class WriteReport(BaseModel):
    """Outcome of writing a set of documents"""

    written: list[Path] = Field(default_factory=list)
    failures: list[WriteFailure] = Field(default_factory=list)

    @property
    def lost(self) -> list[WriteFailure]:
        """Failures that the fallback name did not recover"""
        return [f for f in self.failures if f.fallback_path is None]


def sanitize_filename(title: str) -> str:
    """Convert a document title to a safe file stem."""
    safe_title = re.sub(r'[<>:"/\\|?*\x00-\x1f]', "_", title)
    # Lone surrogates from broken JSON escapes cannot be encoded
    safe_title = re.sub(r"[\ud800-\udfff]", "_", safe_title)
    safe_title = re.sub(r"\s+", "_", safe_title.strip())
    # Hidden files and trailing dots are trouble on some platforms
    safe_title = safe_title.strip(".")

    encoded = safe_title.encode("utf-8")
    if len(encoded) > MAX_FILENAME_BYTES:
        safe_title = encoded[:MAX_FILENAME_BYTES].decode("utf-8", errors="ignore")

    return safe_title


class MarkdownWriter(LoggerMixin):
    """Writes documents as one Markdown file or as a folder tree."""

    def __init__(self, frontmatter: bool = False):
        self.frontmatter = frontmatter

    async def write_single(
        self,
        path: Path,
        groups: Iterable[DocumentGroup],
        summary: ConversionSummary | None = None,
    ) -> Path:
        """Concatenate all documents into one file, in group order.

        Raises:
            OutputWriteError: The file could not be written
        """
        parts: list[str] = []
        if summary is not None:
            parts.append(summary.to_markdown())
        documents = [d for group in groups for d in group.documents]
        parts.extend(d.to_markdown() for d in documents)

        if not path.suffix:
            path = path.with_suffix(".md")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await self._write_file(path, "\n".join(parts))
        except (OSError, ValueError) as e:
            self.logger.error("Failed to write output file", path=str(path), error=str(e))
            raise OutputWriteError(f"Cannot write {path}: {e}", path=path) from e

        self.logger.info("Output written", path=str(path), documents=len(documents))
        return path

    async def write_split(
        self,
        output_dir: Path,
        groups: Iterable[DocumentGroup],
        summary: ConversionSummary | None = None,
    ) -> WriteReport:
        """Write one folder per group and one file per document.

        The run summary, when given, goes to ``SUMMARY_FILENAME`` at the top
        of ``output_dir``.

        A document that cannot be written under its title is retried under a
        numbered fallback name; the failure is recorded in the report and the
        remaining documents are still written.

        Raises:
            OutputWriteError: A group folder could not be created
        """
        report = WriteReport()
        used: set[str] = set()
        index = 0

        if summary is not None:
            summary_path = self._unique_path(output_dir / SUMMARY_FILENAME, used)
            try:
                output_dir.mkdir(parents=True, exist_ok=True)
                await self._write_file(summary_path, summary.to_markdown())
            except (OSError, ValueError) as e:
                raise OutputWriteError(
                    f"Cannot write {summary_path}: {e}", path=summary_path
                ) from e

        for group in groups:
            if not group.documents:
                continue

            folder = output_dir / (sanitize_filename(group.name) or FALLBACK_STEM)
            try:
                folder.mkdir(parents=True, exist_ok=True)
            except (OSError, ValueError) as e:
                raise OutputWriteError(
                    f"Cannot create folder {folder}: {e}", path=folder
                ) from e

            for document in group.documents:
                index += 1
                await self._write_document(document, folder, index, used, report)

        self.logger.info(
            "Documents written",
            output_dir=str(output_dir),
            written=len(report.written),
            failures=len(report.failures),
        )
        return report

    async def _write_document(
        self,
        document: MarkdownDocument,
        folder: Path,
        index: int,
        used: set[str],
        report: WriteReport,
    ) -> None:
        content = document.to_markdown(frontmatter=self.frontmatter)
        stem = sanitize_filename(document.display_title) or f"{FALLBACK_STEM}_{index:04d}"
        path = self._unique_path(folder / f"{stem}.md", used)

        try:
            await self._write_file(path, content)
            report.written.append(path)
            return
        except (OSError, ValueError) as e:
            failure = WriteFailure(title=document.title, path=path, error=str(e))

        fallback = self._unique_path(folder / f"{FALLBACK_STEM}_{index:04d}.md", used)
        try:
            await self._write_file(fallback, content)
        except (OSError, ValueError) as e:
            self.logger.error(
                "Failed to write document",
                title=document.title,
                path=str(path),
                fallback_path=str(fallback),
                error=str(e),
            )
        else:
            failure.fallback_path = fallback
            report.written.append(fallback)
            self.logger.warning(
                "Document written under fallback name",
                title=document.title,
                path=str(path),
                fallback_path=str(fallback),
                error=failure.error,
            )
        report.failures.append(failure)

    @staticmethod
    def _unique_path(file_path: Path, used: set[str]) -> Path:
        """Add a counter to the stem until the path is unused in this run."""
        candidate = file_path
        counter = 1
        # Case-insensitive file systems treat A.md and a.md as one file
        while str(candidate).casefold() in used:
            candidate = file_path.parent / f"{file_path.stem}_{counter}{file_path.suffix}"
            counter += 1
        used.add(str(candidate).casefold())
        return candidate

    @staticmethod
    async def _write_file(path: Path, content: str) -> None:
        # Characters UTF-8 cannot encode (lone surrogates) become "?"
        async with aiofiles.open(path, "w", encoding="utf-8", errors="replace") as f:
            await f.write(content)
