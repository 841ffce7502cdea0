"""Documentation extraction, lookup and rendering."""

from .extractor import DeclarationExtractor, ImportBinding, ModuleDoc, Reexport
from .find import find_nodes_by_name_recursively
from .js_doc import parse_js_doc
from .node import (
    DeclarationKind,
    DocNode,
    DocNodeKind,
    ImportDef,
    JsDoc,
    JsDocTag,
    Location,
    nodes_from_json,
    nodes_to_json,
)
from .parser import DocParser
from .printer import DocPrinter

__all__ = [
    "DeclarationExtractor",
    "DeclarationKind",
    "DocNode",
    "DocNodeKind",
    "DocParser",
    "DocPrinter",
    "ImportBinding",
    "ImportDef",
    "JsDoc",
    "JsDocTag",
    "Location",
    "ModuleDoc",
    "Reexport",
    "find_nodes_by_name_recursively",
    "nodes_from_json",
    "nodes_to_json",
    "parse_js_doc",
]
