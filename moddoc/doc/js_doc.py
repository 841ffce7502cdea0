"""Parsing of ``/** ... */`` documentation comments into summary and tags."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .node import JsDoc, JsDocTag

_TAG_RE = re.compile(r"^@([A-Za-z][\w-]*)\s*(.*)$", re.DOTALL)

_TAG_ALIASES = {
    "arg": "param",
    "argument": "param",
    "prop": "property",
    "return": "return",
    "returns": "return",
    "exception": "throws",
    "desc": "description",
}

_NAMED_TAGS = {"param", "property", "typedef", "callback"}
_TYPED_TAGS = {"return", "throws", "type", "enum", "this", "yields"}


def is_js_doc_comment(text: str) -> bool:
    return text.startswith("/**") and not text.startswith("/**/")


def parse_js_doc(comment: str) -> Optional[JsDoc]:
    """Return the parsed comment, or ``None`` when it carries no content."""
    if not is_js_doc_comment(comment):
        return None
    body = comment[3:]
    if body.endswith("*/"):
        body = body[:-2]

    summary_lines: List[str] = []
    blocks: List[List[str]] = []
    in_fence = False
    for line in _clean_lines(body):
        if line.lstrip().startswith("```"):
            in_fence = not in_fence
        if not in_fence and line.startswith("@"):
            blocks.append([line])
        elif blocks:
            blocks[-1].append(line)
        else:
            summary_lines.append(line)

    summary = "\n".join(summary_lines).strip() or None
    tags = [_parse_tag(block) for block in blocks]
    if summary is None and not tags:
        return None
    return JsDoc(summary=summary, tags=tags)


def _clean_lines(body: str) -> List[str]:
    lines: List[str] = []
    for raw in body.splitlines():
        line = raw.lstrip()
        if line.startswith("*"):
            line = line[1:]
            if line.startswith(" "):
                line = line[1:]
        lines.append(line.rstrip())
    return lines


def _parse_tag(block: List[str]) -> JsDocTag:
    match = _TAG_RE.match("\n".join(block))
    assert match is not None
    raw_kind, rest = match.group(1), match.group(2)
    kind = _TAG_ALIASES.get(raw_kind, raw_kind)

    if kind in _NAMED_TAGS:
        type_text, rest = _take_type(rest)
        name, optional, rest = _take_name(rest)
        return JsDocTag(kind=kind, name=name, type=type_text, doc=_doc(rest), optional=optional)
    if kind in _TYPED_TAGS:
        type_text, rest = _take_type(rest)
        return JsDocTag(kind=kind, type=type_text, doc=_doc(rest))
    if kind == "template":
        first, _, remainder = rest.partition("\n")
        names, _, description = first.strip().partition(" ")
        doc = "\n".join(part for part in (description, remainder) if part)
        return JsDocTag(kind=kind, name=names or None, doc=_doc(doc))
    return JsDocTag(kind=kind, doc=_doc(rest))


def _take_type(text: str) -> Tuple[Optional[str], str]:
    stripped = text.lstrip()
    if not stripped.startswith("{"):
        return None, text
    depth = 0
    for index, char in enumerate(stripped):
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return stripped[1:index].strip(), stripped[index + 1 :]
    return None, text


def _take_name(text: str) -> Tuple[Optional[str], bool, str]:
    stripped = text.lstrip()
    if not stripped:
        return None, False, ""
    if stripped.startswith("["):
        end = stripped.find("]")
        if end != -1:
            name = stripped[1:end].split("=", 1)[0].strip()
            return name or None, True, stripped[end + 1 :]
    token = re.match(r"\S+", stripped)
    assert token is not None
    return token.group(0), False, stripped[token.end() :]


def _doc(text: str) -> Optional[str]:
    cleaned = text.strip()
    if cleaned.startswith("- "):
        cleaned = cleaned[2:].lstrip()
    return cleaned or None


__all__ = ["is_js_doc_comment", "parse_js_doc"]
