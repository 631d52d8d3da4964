"""Name index: maps chapter display names to chapter paths."""

from __future__ import annotations

import logging

from chapterpath.core.errors import DuplicateChapterNameError
from chapterpath.core.models import Book, Diagnostic, DiagnosticLevel, DuplicatePolicy, NameIndex

logger = logging.getLogger(__name__)


def build_index(book: Book, policy: DuplicatePolicy = DuplicatePolicy.LENIENT) -> NameIndex:
    """Build the case-insensitive name index for a book.

    Chapters without a path (drafts) are skipped. When two chapters share
    a name, the first one in table of contents order keeps the entry.

    Args:
        book: The book to index. It is not modified.
        policy: LENIENT records a warning for duplicates, STRICT raises.

    Returns:
        NameIndex with the entries and any duplicate-name warnings.

    Raises:
        DuplicateChapterNameError: On the first duplicate under STRICT.
    """
    entries: dict[str, str] = {}
    diagnostics: list[Diagnostic] = []

    for _, chapter in book.iter_chapters():
        if chapter.path is None:
            continue

        key = chapter.name.lower()
        existing = entries.get(key)
        if existing is None:
            entries[key] = chapter.path
            continue

        if policy is DuplicatePolicy.STRICT:
            raise DuplicateChapterNameError(key)

        message = (
            f"Found duplicate chapter name {chapter.name} at {chapter.path} "
            f"(existing chapter at {existing})"
        )
        logger.warning("%s", message)
        diagnostics.append(Diagnostic(level=DiagnosticLevel.WARNING, message=message))

    logger.debug("Indexed %d chapter names", len(entries))
    return NameIndex(entries=entries, diagnostics=diagnostics)
