"""Documentation node data model and its JSON shape."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class DocNodeKind(str, Enum):
    FUNCTION = "function"
    VARIABLE = "variable"
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    TYPE_ALIAS = "typeAlias"
    NAMESPACE = "namespace"
    IMPORT = "import"

    @property
    def is_container(self) -> bool:
        return self in (
            DocNodeKind.CLASS,
            DocNodeKind.INTERFACE,
            DocNodeKind.ENUM,
            DocNodeKind.NAMESPACE,
        )


class DeclarationKind(str, Enum):
    EXPORT = "export"
    DECLARE = "declare"
    PRIVATE = "private"


@dataclass
class Location:
    specifier: str
    line: int
    col: int

    def to_dict(self) -> Dict[str, Any]:
        return {"specifier": self.specifier, "line": self.line, "col": self.col}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Location":
        return cls(
            specifier=str(payload["specifier"]),
            line=int(payload.get("line", 0)),
            col=int(payload.get("col", 0)),
        )

    def __str__(self) -> str:
        return f"{self.specifier}:{self.line}:{self.col}"


@dataclass
class JsDocTag:
    """A single ``@tag`` annotation from a documentation comment."""

    kind: str
    name: Optional[str] = None
    type: Optional[str] = None
    doc: Optional[str] = None
    optional: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind}
        if self.name is not None:
            data["name"] = self.name
        if self.type is not None:
            data["type"] = self.type
        if self.doc is not None:
            data["doc"] = self.doc
        if self.optional:
            data["optional"] = True
        return data

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "JsDocTag":
        return cls(
            kind=str(payload["kind"]),
            name=payload.get("name"),
            type=payload.get("type"),
            doc=payload.get("doc"),
            optional=bool(payload.get("optional", False)),
        )


@dataclass
class JsDoc:
    summary: Optional[str] = None
    tags: List[JsDocTag] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.summary and not self.tags

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.summary is not None:
            data["summary"] = self.summary
        if self.tags:
            data["tags"] = [tag.to_dict() for tag in self.tags]
        return data

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "JsDoc":
        return cls(
            summary=payload.get("summary"),
            tags=[JsDocTag.from_dict(tag) for tag in payload.get("tags", [])],
        )


@dataclass
class ImportDef:
    """Where an ``import`` node's binding comes from."""

    src: str
    imported: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"src": self.src}
        if self.imported is not None:
            data["imported"] = self.imported
        return data

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ImportDef":
        return cls(src=str(payload["src"]), imported=payload.get("imported"))


@dataclass
class DocNode:
    """One documented symbol; children are owned, there is no parent link."""

    name: str
    kind: DocNodeKind
    location: Location
    declaration_kind: DeclarationKind = DeclarationKind.EXPORT
    js_doc: Optional[JsDoc] = None
    signature: Optional[str] = None
    import_def: Optional[ImportDef] = None
    children: List["DocNode"] = field(default_factory=list)

    def clone(self, *, name: Optional[str] = None) -> "DocNode":
        duplicate = copy.deepcopy(self)
        if name is not None:
            duplicate.name = name
        return duplicate

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "kind": self.kind.value,
            "name": self.name,
            "location": self.location.to_dict(),
            "declarationKind": self.declaration_kind.value,
        }
        if self.js_doc is not None and not self.js_doc.is_empty():
            data["jsDoc"] = self.js_doc.to_dict()
        if self.signature is not None:
            data["signature"] = self.signature
        if self.import_def is not None:
            data["importDef"] = self.import_def.to_dict()
        data["children"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DocNode":
        js_doc = payload.get("jsDoc")
        import_def = payload.get("importDef")
        return cls(
            name=str(payload["name"]),
            kind=DocNodeKind(payload["kind"]),
            location=Location.from_dict(payload["location"]),
            declaration_kind=DeclarationKind(payload.get("declarationKind", "export")),
            js_doc=JsDoc.from_dict(js_doc) if js_doc else None,
            signature=payload.get("signature"),
            import_def=ImportDef.from_dict(import_def) if import_def else None,
            children=[cls.from_dict(child) for child in payload.get("children", [])],
        )


def nodes_to_json(nodes: List[DocNode]) -> List[Dict[str, Any]]:
    return [node.to_dict() for node in nodes]


def nodes_from_json(payload: List[Mapping[str, Any]]) -> List[DocNode]:
    return [DocNode.from_dict(item) for item in payload]


__all__ = [
    "DeclarationKind",
    "DocNode",
    "DocNodeKind",
    "ImportDef",
    "JsDoc",
    "JsDocTag",
    "Location",
    "nodes_from_json",
    "nodes_to_json",
]
