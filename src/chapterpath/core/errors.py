"""Error hierarchy for mdbook-chapter-path."""

from __future__ import annotations


class ChapterPathError(Exception):
    """Base exception for all mdbook-chapter-path errors."""

    pass


class ConfigError(ChapterPathError):
    """Configuration loading or validation error."""

    pass


class BookFormatError(ChapterPathError):
    """Input from mdBook is not a valid [context, book] payload."""

    pass


class DuplicateChapterNameError(ChapterPathError):
    """Two chapters share a name once case is ignored (strict mode only)."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Duplicate chapter name: {name!r}")
        self.name = name


class ChapterNotFoundError(ChapterPathError):
    """A placeholder names a chapter that is not in the book."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No chapter named {name!r} found")
        self.name = name


class MalformedReferenceError(ChapterPathError):
    """A placeholder reference contains more than one '#'."""

    def __init__(self, reference: str) -> None:
        super().__init__(f"Invalid link {reference!r}: multiple '#' characters")
        self.reference = reference
