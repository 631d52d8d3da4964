"""Tests for core domain models."""

from __future__ import annotations

import pytest

from chapterpath.core.errors import MalformedReferenceError
from chapterpath.core.models import (
    Book,
    Chapter,
    Diagnostic,
    DiagnosticLevel,
    DuplicatePolicy,
    NameIndex,
    PartTitle,
    Reference,
    Separator,
)


def nested_book() -> Book:
    return Book(
        sections=[
            Chapter(name="A", path="a.md", content="a"),
            Separator(),
            Chapter(
                name="B",
                path="b.md",
                content="b",
                sub_items=[
                    Chapter(name="B1", path="b/1.md", content="b1"),
                    PartTitle(title="Inner"),
                    Chapter(name="B2", path="b/2.md", content="b2"),
                ],
            ),
        ]
    )


class TestReference:
    """Tests for Reference.parse()."""

    def test_name_only(self) -> None:
        ref = Reference.parse("Foo")
        assert ref.name == "Foo"
        assert ref.anchor is None

    def test_name_and_anchor(self) -> None:
        ref = Reference.parse("Foo#Bar-Baz")
        assert ref.name == "Foo"
        assert ref.anchor == "Bar-Baz"

    def test_empty_anchor_is_kept(self) -> None:
        ref = Reference.parse("Foo#")
        assert ref.anchor == ""

    def test_multiple_hashes_raise(self) -> None:
        with pytest.raises(MalformedReferenceError) as exc_info:
            Reference.parse("Foo#bar#baz")
        assert exc_info.value.reference == "Foo#bar#baz"

    def test_key_is_lowercased(self) -> None:
        assert Reference.parse("Getting Started#Top").key == "getting started"


class TestBook:
    """Tests for chapter traversal and content replacement."""

    def test_iter_chapters_depth_first(self) -> None:
        locations = [(loc, ch.name) for loc, ch in nested_book().iter_chapters()]
        assert locations == [
            ((0,), "A"),
            ((2,), "B"),
            ((2, 0), "B1"),
            ((2, 2), "B2"),
        ]

    def test_chapter_contents(self) -> None:
        contents = nested_book().chapter_contents()
        assert contents[(2, 2)] == "b2"
        assert len(contents) == 4

    def test_with_contents_replaces_only_given_chapters(self) -> None:
        book = nested_book()
        updated = book.with_contents({(2, 0): "new b1", (0,): "new a"})

        contents = updated.chapter_contents()
        assert contents == {(0,): "new a", (2,): "b", (2, 0): "new b1", (2, 2): "b2"}

    def test_with_contents_does_not_mutate_original(self) -> None:
        book = nested_book()
        book.with_contents({(2, 0): "changed"})
        assert book.chapter_contents()[(2, 0)] == "b1"

    def test_with_contents_keeps_structure(self) -> None:
        updated = nested_book().with_contents({})
        assert isinstance(updated.sections[1], Separator)
        inner = updated.sections[2]
        assert isinstance(inner, Chapter)
        assert isinstance(inner.sub_items[1], PartTitle)
        assert inner.sub_items[1].title == "Inner"

    def test_with_contents_keeps_extra_chapter_fields(self) -> None:
        book = Book(sections=[Chapter(name="A", path="a.md", custom_field=7)])
        updated = book.with_contents({(0,): "x"})
        chapter = updated.sections[0]
        assert isinstance(chapter, Chapter)
        assert chapter.model_dump()["custom_field"] == 7


class TestNameIndex:
    """Tests for NameIndex lookups."""

    def test_lookup_ignores_case(self) -> None:
        index = NameIndex(entries={"foo": "something/Foo.md"})
        assert index.lookup("FOO") == "something/Foo.md"
        assert index.lookup("Missing") is None


class TestEnums:
    """Tests for policy and diagnostic helpers."""

    def test_policy_from_strict(self) -> None:
        assert DuplicatePolicy.from_strict(True) is DuplicatePolicy.STRICT
        assert DuplicatePolicy.from_strict(False) is DuplicatePolicy.LENIENT

    def test_diagnostic_str(self) -> None:
        diagnostic = Diagnostic(level=DiagnosticLevel.WARNING, message="two Intros")
        assert str(diagnostic) == "Warning: two Intros"
