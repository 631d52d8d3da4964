"""Resolve {{#path_for ...}} placeholders into chapter links."""

from __future__ import annotations

import re
from collections.abc import Mapping

from chapterpath.core.errors import ChapterNotFoundError
from chapterpath.core.models import Reference

# {{#path_for name}} or {{#path_for name#anchor}}; the first "}}" closes it
PLACEHOLDER_PATTERN = re.compile(r"\{\{#path_for (?P<reference>.+?)\}\}")


def resolve(content: str, index: Mapping[str, str], site_path: str) -> str:
    """Replace every placeholder in ``content`` with its chapter link.

    Each placeholder becomes ``site_path + chapter_path``, plus ``#anchor``
    when the reference has one. The path and anchor are copied verbatim;
    only the lookup key is lowercased. Text outside placeholders is kept
    exactly as it is.

    Args:
        content: Markdown source of one chapter.
        index: Lowercased chapter name -> chapter path.
        site_path: Prefix for every link, expected to end with '/'.

    Returns:
        The rewritten content.

    Raises:
        ChapterNotFoundError: If a placeholder names an unknown chapter.
        MalformedReferenceError: If a reference contains more than one '#'.
    """
    pieces: list[str] = []
    last_end = 0

    for match in PLACEHOLDER_PATTERN.finditer(content):
        reference = Reference.parse(match.group("reference"))
        path = index.get(reference.key)
        if path is None:
            raise ChapterNotFoundError(reference.key)

        pieces.append(content[last_end : match.start()])
        pieces.append(site_path)
        pieces.append(path)
        if reference.anchor is not None:
            pieces.append("#")
            pieces.append(reference.anchor)
        last_end = match.end()

    if last_end == 0:
        return content

    pieces.append(content[last_end:])
    return "".join(pieces)


def find_references(content: str) -> list[Reference]:
    """Parse every placeholder in ``content``, in order of appearance.

    Raises:
        MalformedReferenceError: If a reference contains more than one '#'.
    """
    return [Reference.parse(m.group("reference")) for m in PLACEHOLDER_PATTERN.finditer(content)]
