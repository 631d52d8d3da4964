"""Preprocessor: rewrites {{#path_for ...}} placeholders across a whole book."""

from __future__ import annotations

import logging

from chapterpath.config import PREPROCESSOR_NAME, ChapterPathConfig
from chapterpath.core.errors import (
    ChapterNotFoundError,
    DuplicateChapterNameError,
    MalformedReferenceError,
)
from chapterpath.core.models import (
    Book,
    ChapterLocation,
    Diagnostic,
    DiagnosticLevel,
    DuplicatePolicy,
    PreprocessorContext,
)
from chapterpath.links.index import build_index
from chapterpath.links.resolver import find_references, resolve

logger = logging.getLogger(__name__)

SUPPORTED_RENDERERS = frozenset({"html"})

# mdBook release series whose JSON protocol this preprocessor speaks
SUPPORTED_MDBOOK_VERSION = "0.4"


class Preprocessor:
    """mdBook preprocessor resolving chapter links by chapter name.

    One run builds the name index once, then resolves every chapter
    against it. Any error aborts the run so no book with broken links
    is handed back to mdBook.
    """

    name = PREPROCESSOR_NAME

    def __init__(self, config: ChapterPathConfig | None = None) -> None:
        self._config = config or ChapterPathConfig()

    @property
    def config(self) -> ChapterPathConfig:
        """Settings used for every run."""
        return self._config

    def supports_renderer(self, renderer: str) -> bool:
        """Whether links produced by this preprocessor make sense for ``renderer``."""
        return renderer in SUPPORTED_RENDERERS

    def run(self, context: PreprocessorContext, book: Book) -> Book:
        """Resolve every placeholder in the book.

        Returns:
            A new book with rewritten chapter content.

        Raises:
            DuplicateChapterNameError: Duplicate names in strict mode.
            ChapterNotFoundError: A placeholder names an unknown chapter.
            MalformedReferenceError: A reference contains more than one '#'.
        """
        self._check_mdbook_version(context)
        logger.info("Site path is: %s", self._config.site_path)

        try:
            index = build_index(book, DuplicatePolicy.from_strict(self._config.strict_mode))
        except DuplicateChapterNameError as e:
            logger.error("Duplicate chapter name %r (strict mode)", e.name)
            raise

        rewritten: dict[ChapterLocation, str] = {}
        for location, chapter in book.iter_chapters():
            try:
                rewritten[location] = resolve(chapter.content, index.entries, self._config.site_path)
            except ChapterNotFoundError as e:
                logger.error(
                    "Found request to replace link with %r in chapter %r, "
                    "but no chapter with that name found.",
                    e.name,
                    chapter.name,
                )
                raise
            except MalformedReferenceError as e:
                logger.error("Invalid link %r in chapter %r", e.reference, chapter.name)
                raise

        return book.with_contents(rewritten)

    def check(self, book: Book) -> list[Diagnostic]:
        """Report every link problem in the book without stopping at the first.

        Duplicate names are errors in strict mode and warnings otherwise.
        """
        diagnostics: list[Diagnostic] = []

        index = build_index(book, DuplicatePolicy.LENIENT)
        diagnostics.extend(index.diagnostics)
        if self._config.strict_mode:
            diagnostics = [d.model_copy(update={"level": DiagnosticLevel.ERROR}) for d in diagnostics]

        for _, chapter in book.iter_chapters():
            try:
                references = find_references(chapter.content)
            except MalformedReferenceError as e:
                diagnostics.append(
                    Diagnostic(
                        level=DiagnosticLevel.ERROR,
                        message=f"Invalid link {e.reference!r} in chapter {chapter.name!r}",
                    )
                )
                continue

            for reference in references:
                if index.lookup(reference.name) is None:
                    diagnostics.append(
                        Diagnostic(
                            level=DiagnosticLevel.ERROR,
                            message=(
                                f"No chapter named {reference.key!r} "
                                f"(referenced from chapter {chapter.name!r})"
                            ),
                        )
                    )

        return diagnostics

    def _check_mdbook_version(self, context: PreprocessorContext) -> None:
        version = context.mdbook_version
        if version and not version.startswith(f"{SUPPORTED_MDBOOK_VERSION}."):
            logger.warning(
                "The %s preprocessor was written for mdbook %s.x, "
                "but is being called from version %s",
                self.name,
                SUPPORTED_MDBOOK_VERSION,
                version,
            )
