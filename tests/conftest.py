"""Shared test fixtures for mdbook-chapter-path."""

from __future__ import annotations

from typing import Any

import pytest

from chapterpath.core.models import Book, BookItem, Chapter, PartTitle, PreprocessorContext, Separator


def make_chapter(
    name: str = "Foo",
    path: str | None = "something/Foo.md",
    content: str = "",
    sub_items: list[BookItem] | None = None,
    **kwargs: Any,
) -> Chapter:
    """Factory for creating test chapters."""
    return Chapter(
        name=name,
        path=path,
        source_path=path,
        content=content,
        sub_items=sub_items or [],
        **kwargs,
    )


def make_context(config: dict[str, Any] | None = None, **kwargs: Any) -> PreprocessorContext:
    """Factory for creating a preprocessor context."""
    defaults: dict[str, Any] = {
        "root": "/tmp/book",
        "config": config or {"book": {"title": "Test Book"}},
        "renderer": "html",
        "mdbook_version": "0.4.40",
    }
    defaults.update(kwargs)
    return PreprocessorContext(**defaults)


@pytest.fixture()
def sample_book() -> Book:
    """A small nested book with a separator and a part title."""
    return Book(
        sections=[
            make_chapter("Introduction", "intro.md", "Welcome. See {{#path_for Setup}}."),
            PartTitle(title="Guide"),
            make_chapter(
                "Setup",
                "guide/setup.md",
                "Back to [intro]({{#path_for introduction#top}}).",
                sub_items=[
                    make_chapter("Advanced Setup", "guide/advanced.md", "Plain text."),
                ],
            ),
            Separator(),
            make_chapter("Appendix", None, "Draft linking {{#path_for Advanced Setup}}"),
        ]
    )


@pytest.fixture()
def sample_context() -> PreprocessorContext:
    """Context for an html build with no extra configuration."""
    return make_context()


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove environment overrides that would leak into config loading."""
    monkeypatch.delenv("CHAPTERPATH_SITE_PATH", raising=False)
    monkeypatch.delenv("CHAPTERPATH_STRICT", raising=False)
