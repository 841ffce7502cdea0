"""Tests for moddoc.doc.js_doc."""

from __future__ import annotations

from moddoc.doc import parse_js_doc
from moddoc.doc.js_doc import is_js_doc_comment


def test_summary_and_tags() -> None:
    js_doc = parse_js_doc(
        """/**
         * Greets someone by name.
         *
         * Second paragraph.
         *
         * @param {string} name - the person to greet
         * @param [greeting="hi"] optional greeting
         * @returns {string} the greeting
         * @deprecated use `welcome` instead
         */"""
    )

    assert js_doc is not None
    assert js_doc.summary == "Greets someone by name.\n\nSecond paragraph."
    kinds = [tag.kind for tag in js_doc.tags]
    assert kinds == ["param", "param", "return", "deprecated"]
    name_tag, optional_tag, returns_tag, deprecated_tag = js_doc.tags
    assert (name_tag.name, name_tag.type, name_tag.doc) == ("name", "string", "the person to greet")
    assert optional_tag.name == "greeting" and optional_tag.optional is True
    assert optional_tag.doc == "optional greeting"
    assert (returns_tag.type, returns_tag.doc) == ("string", "the greeting")
    assert deprecated_tag.doc == "use `welcome` instead"


def test_single_line_comment() -> None:
    js_doc = parse_js_doc("/** Returns the answer. */")

    assert js_doc is not None
    assert js_doc.summary == "Returns the answer."
    assert js_doc.tags == []


def test_example_code_fences_keep_at_signs() -> None:
    js_doc = parse_js_doc(
        """/**
         * @example
         * ```ts
         * @decorator
         * class A {}
         * ```
         * @see https://example.com
         */"""
    )

    assert js_doc is not None
    assert [tag.kind for tag in js_doc.tags] == ["example", "see"]
    assert "@decorator" in js_doc.tags[0].doc
    assert js_doc.tags[1].doc == "https://example.com"


def test_template_and_throws_tags() -> None:
    js_doc = parse_js_doc(
        """/**
         * @template T the element type
         * @throws {RangeError} when empty
         */"""
    )

    assert js_doc is not None
    template, throws = js_doc.tags
    assert (template.kind, template.name, template.doc) == ("template", "T", "the element type")
    assert (throws.kind, throws.type, throws.doc) == ("throws", "RangeError", "when empty")


def test_non_doc_comments_are_ignored() -> None:
    assert not is_js_doc_comment("/* plain */")
    assert not is_js_doc_comment("/**/")
    assert parse_js_doc("// line") is None
    assert parse_js_doc("/** */") is None
