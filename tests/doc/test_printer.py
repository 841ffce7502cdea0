"""Tests for moddoc.doc.printer."""

from __future__ import annotations

from moddoc.doc import DeclarationKind, DocNode, DocNodeKind, DocPrinter, JsDoc, JsDocTag, Location


def _location(line: int) -> Location:
    return Location("file:///p/mod.ts", line, 0)


NODES = [
    DocNode(
        name="Widget",
        kind=DocNodeKind.CLASS,
        location=_location(10),
        signature="class Widget",
        children=[
            DocNode(
                name="render",
                kind=DocNodeKind.FUNCTION,
                location=_location(11),
                signature="render(): string",
                js_doc=JsDoc(summary="Render it."),
            ),
            DocNode(
                name="secret",
                kind=DocNodeKind.VARIABLE,
                location=_location(12),
                declaration_kind=DeclarationKind.PRIVATE,
                signature="private secret: number",
            ),
        ],
    ),
    DocNode(
        name="greet",
        kind=DocNodeKind.FUNCTION,
        location=_location(1),
        signature="function greet(name: string): string",
        js_doc=JsDoc(
            summary="Say hello.",
            tags=[
                JsDocTag(kind="param", name="name", type="string", doc="who to greet"),
                JsDocTag(kind="param", name="loud", optional=True),
            ],
        ),
    ),
]


def test_plain_output_sorts_by_kind_and_includes_docs() -> None:
    output = DocPrinter(NODES, use_color=False).format()

    assert output.index("function greet") < output.index("class Widget")
    assert "Defined in file:///p/mod.ts:1:0\n\nfunction greet(name: string): string\n" in output
    assert "  Say hello.\n" in output
    assert "  @param {string} name\n      who to greet\n" in output
    assert "  @param [loud]\n" in output
    assert "  render(): string\n    Render it.\n" in output
    assert "\x1b[" not in output


def test_private_members_hidden_unless_requested() -> None:
    assert "secret" not in DocPrinter(NODES).format()
    assert "private secret: number" in DocPrinter(NODES, private=True).format()


def test_colored_output_emits_ansi_styles(monkeypatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    output = DocPrinter(NODES, use_color=True).format()

    assert "\x1b[" in output
    assert "greet" in output


def test_str_matches_format() -> None:
    printer = DocPrinter(NODES)

    assert str(printer) == printer.format()
