"""Port interfaces for mdbook-chapter-path (hexagonal architecture)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TextIO

from chapterpath.core.models import Book, PreprocessorContext


class BookIOPort(ABC):
    """Port for exchanging books with the host build tool."""

    @abstractmethod
    def read(self, stream: TextIO) -> tuple[PreprocessorContext, Book]:
        """Read the run context and the book from the host.

        Args:
            stream: Text stream the host writes its payload to.

        Returns:
            The preprocessor context and the book to process.
        """

    @abstractmethod
    def write(self, book: Book, stream: TextIO) -> None:
        """Hand the processed book back to the host.

        Args:
            book: The rewritten book.
            stream: Text stream the host reads the result from.
        """
