"""mdBook preprocessor protocol: JSON over stdin/stdout.

mdBook writes a two-element JSON array ``[context, book]`` to the
preprocessor's stdin and reads the processed book back from stdout.
Book items are externally tagged:

    {"Chapter": {"name": ..., "content": ..., "sub_items": [...], ...}}
    "Separator"
    {"PartTitle": "..."}
"""

from __future__ import annotations

import json
import logging
from typing import Any, TextIO

from pydantic import ValidationError

from chapterpath.core.errors import BookFormatError
from chapterpath.core.interfaces import BookIOPort
from chapterpath.core.models import Book, BookItem, Chapter, PartTitle, PreprocessorContext, Separator

logger = logging.getLogger(__name__)


class MdbookJsonIO(BookIOPort):
    """Reads and writes books in mdBook's preprocessor JSON format."""

    def read(self, stream: TextIO) -> tuple[PreprocessorContext, Book]:
        """Parse the ``[context, book]`` payload mdBook sends."""
        try:
            payload = json.load(stream)
        except json.JSONDecodeError as e:
            raise BookFormatError(f"Invalid JSON from mdBook: {e}") from e

        if not isinstance(payload, list) or len(payload) != 2:
            raise BookFormatError("Expected a [context, book] JSON array")

        raw_context, raw_book = payload
        context = _context_from_json(raw_context)
        book = _book_from_json(raw_book)
        logger.debug(
            "Read book with %d top-level items for renderer %s",
            len(book.sections),
            context.renderer,
        )
        return context, book

    def write(self, book: Book, stream: TextIO) -> None:
        """Serialize the book the way mdBook expects it back."""
        json.dump(book_to_json(book), stream)


def book_to_json(book: Book) -> dict[str, Any]:
    """Convert a book to mdBook's JSON structure."""
    return {
        "sections": [_item_to_json(item) for item in book.sections],
        "__non_exhaustive": None,
    }


def _context_from_json(raw: Any) -> PreprocessorContext:
    if not isinstance(raw, dict):
        raise BookFormatError("Preprocessor context must be a JSON object")
    try:
        return PreprocessorContext(**raw)
    except ValidationError as e:
        raise BookFormatError(f"Invalid preprocessor context: {e}") from e


def _book_from_json(raw: Any) -> Book:
    if not isinstance(raw, dict) or not isinstance(raw.get("sections"), list):
        raise BookFormatError("Book must be a JSON object with a 'sections' list")
    return Book(sections=[_item_from_json(item) for item in raw["sections"]])


def _item_from_json(raw: Any) -> BookItem:
    if raw == "Separator":
        return Separator()
    if isinstance(raw, dict) and len(raw) == 1:
        if "Chapter" in raw:
            return _chapter_from_json(raw["Chapter"])
        if "PartTitle" in raw and isinstance(raw["PartTitle"], str):
            return PartTitle(title=raw["PartTitle"])
    raise BookFormatError(f"Unrecognized book item: {raw!r}")


def _chapter_from_json(raw: Any) -> Chapter:
    if not isinstance(raw, dict):
        raise BookFormatError(f"Chapter must be a JSON object, got {raw!r}")

    data = dict(raw)
    sub_items = data.pop("sub_items", None) or []
    if not isinstance(sub_items, list):
        raise BookFormatError(f"sub_items of chapter {data.get('name')!r} must be a list")

    try:
        return Chapter(**data, sub_items=[_item_from_json(item) for item in sub_items])
    except ValidationError as e:
        raise BookFormatError(f"Invalid chapter: {e}") from e


def _item_to_json(item: BookItem) -> Any:
    if isinstance(item, Chapter):
        data = item.model_dump(exclude={"sub_items"})
        data["sub_items"] = [_item_to_json(sub) for sub in item.sub_items]
        return {"Chapter": data}
    if isinstance(item, PartTitle):
        return {"PartTitle": item.title}
    return "Separator"
