"""Domain models for mdbook-chapter-path."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from chapterpath.core.errors import MalformedReferenceError

ChapterLocation = tuple[int, ...]
"""Position of a chapter in the nested book, one index per nesting level."""


class Chapter(BaseModel):
    """A named document in the book with a file path and Markdown content."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(description="Display name from SUMMARY.md")
    content: str = Field(default="", description="Markdown source text")
    number: list[int] | None = Field(default=None, description="Section number, e.g. [1, 2]")
    sub_items: list[BookItem] = Field(default_factory=list, description="Nested items")
    path: str | None = Field(default=None, description="Path relative to src/, None for drafts")
    source_path: str | None = Field(default=None, description="Path of the source file")
    parent_names: list[str] = Field(default_factory=list, description="Names of ancestors")


class Separator(BaseModel):
    """A horizontal separator in the table of contents."""


class PartTitle(BaseModel):
    """A part heading in the table of contents."""

    title: str


BookItem = Union[Chapter, Separator, PartTitle]

Chapter.model_rebuild()


class Book(BaseModel):
    """An mdBook book: an ordered, nested list of items."""

    sections: list[BookItem] = Field(default_factory=list)

    def iter_chapters(self) -> Iterator[tuple[ChapterLocation, Chapter]]:
        """Yield every chapter depth-first, in table of contents order."""
        yield from _walk(self.sections, ())

    def chapter_contents(self) -> dict[ChapterLocation, str]:
        """Map each chapter location to its current content."""
        return {location: chapter.content for location, chapter in self.iter_chapters()}

    def with_contents(self, contents: Mapping[ChapterLocation, str]) -> Book:
        """Return a copy of the book with the given chapters' content replaced.

        Chapters whose location is not in ``contents`` keep their content.
        The book itself is left untouched.
        """
        return Book(sections=_replace(self.sections, (), contents))


def _walk(items: Sequence[BookItem], prefix: ChapterLocation) -> Iterator[tuple[ChapterLocation, Chapter]]:
    for i, item in enumerate(items):
        if isinstance(item, Chapter):
            location = (*prefix, i)
            yield location, item
            yield from _walk(item.sub_items, location)


def _replace(
    items: Sequence[BookItem],
    prefix: ChapterLocation,
    contents: Mapping[ChapterLocation, str],
) -> list[BookItem]:
    replaced: list[BookItem] = []
    for i, item in enumerate(items):
        if not isinstance(item, Chapter):
            replaced.append(item)
            continue
        location = (*prefix, i)
        update: dict[str, Any] = {"sub_items": _replace(item.sub_items, location, contents)}
        if location in contents:
            update["content"] = contents[location]
        replaced.append(item.model_copy(update=update))
    return replaced


class PreprocessorContext(BaseModel):
    """Run context mdBook passes to every preprocessor."""

    model_config = ConfigDict(extra="allow")

    root: str = Field(default="", description="Book root directory")
    config: dict[str, Any] = Field(default_factory=dict, description="Parsed book.toml")
    renderer: str = Field(default="html", description="Renderer the book is built for")
    mdbook_version: str = Field(default="", description="Version of the calling mdBook")


class Reference(BaseModel):
    """Chapter name and optional anchor parsed from a placeholder."""

    model_config = ConfigDict(frozen=True)

    name: str
    anchor: str | None = None

    @classmethod
    def parse(cls, text: str) -> Reference:
        """Split ``name#anchor`` on '#'.

        Raises:
            MalformedReferenceError: If the text contains more than one '#'.
        """
        parts = text.split("#")
        if len(parts) > 2:
            raise MalformedReferenceError(text)
        anchor = parts[1] if len(parts) == 2 else None
        return cls(name=parts[0], anchor=anchor)

    @property
    def key(self) -> str:
        """Lowercased name used for index lookups."""
        return self.name.lower()


class DuplicatePolicy(str, Enum):
    """What to do when two chapters have the same name."""

    LENIENT = "lenient"
    STRICT = "strict"

    @classmethod
    def from_strict(cls, strict_mode: bool) -> DuplicatePolicy:
        return cls.STRICT if strict_mode else cls.LENIENT


class DiagnosticLevel(str, Enum):
    """Severity of a diagnostic."""

    WARNING = "warning"
    ERROR = "error"


class Diagnostic(BaseModel):
    """A human-readable problem report about the book."""

    level: DiagnosticLevel
    message: str

    def __str__(self) -> str:
        return f"{self.level.value.capitalize()}: {self.message}"


class NameIndex(BaseModel):
    """Lowercased chapter name -> chapter path, built once per run."""

    model_config = ConfigDict(frozen=True)

    entries: dict[str, str] = Field(default_factory=dict)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    def lookup(self, name: str) -> str | None:
        """Find a chapter path by name, ignoring case."""
        return self.entries.get(name.lower())
