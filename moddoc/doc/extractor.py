"""Turns a parsed module into documentation nodes, imports and re-exports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from tree_sitter import Node

from ..logging import get_logger
from ..parser.dependencies import import_source_node
from ..parser.tree_sitter import ParsedSource, position, string_value
from .js_doc import is_js_doc_comment, parse_js_doc
from .node import DeclarationKind, DocNode, DocNodeKind, ImportDef, JsDoc, Location

_LOGGER = get_logger("doc.extractor")

_FUNCTION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
}
_CLASS_TYPES = {"class_declaration", "abstract_class_declaration", "class"}
_NAMESPACE_TYPES = {"internal_module", "module"}
_VARIABLE_TYPES = {"lexical_declaration", "variable_declaration"}


@dataclass
class ImportBinding:
    """A local name bound by an import statement."""

    local: str
    src: str
    imported: Optional[str]
    location: Location
    signature: str
    js_doc: Optional[JsDoc] = None
    reexported: bool = False


@dataclass
class Reexport:
    """``export * from``, ``export * as ns from`` or ``export {a as b} from``."""

    src: str
    kind: str
    name: Optional[str] = None
    alias: Optional[str] = None
    js_doc: Optional[JsDoc] = None
    location: Optional[Location] = None


@dataclass
class _Declaration:
    local: str
    node: DocNode
    exported: bool


@dataclass
class ModuleDoc:
    """Everything documentation needs from one module, before flattening."""

    specifier: str
    nodes: List[DocNode] = field(default_factory=list)
    imports: List[ImportBinding] = field(default_factory=list)
    reexports: List[Reexport] = field(default_factory=list)

    def import_nodes(self) -> List[DocNode]:
        return [
            DocNode(
                name=binding.local,
                kind=DocNodeKind.IMPORT,
                location=binding.location,
                declaration_kind=DeclarationKind.PRIVATE,
                js_doc=binding.js_doc,
                signature=binding.signature,
                import_def=ImportDef(src=binding.src, imported=binding.imported),
            )
            for binding in self.imports
            if not binding.reexported
        ]


class DeclarationExtractor:
    """Walks the top level of a module's syntax tree.

    Exported declarations always produce nodes; non-exported ones only when
    ``private`` is set. A declaration file without import or export
    statements is a global script, so all of its declarations are public.
    """

    def __init__(self, parsed: ParsedSource, *, private: bool = False) -> None:
        self.parsed = parsed
        self.private = private
        self.specifier = str(parsed.specifier)
        self._declarations: List[_Declaration] = []
        self._imports: List[ImportBinding] = []
        self._reexports: List[Reexport] = []
        self._export_clauses: List[Tuple[str, str, Optional[JsDoc], Location]] = []

    def extract(self) -> ModuleDoc:
        root = self.parsed.root
        is_script = self.parsed.media_type.is_declaration and not any(
            child.type in ("import_statement", "export_statement") for child in root.named_children
        )
        for child in root.named_children:
            self._module_statement(child, is_script)
        self._apply_export_clauses()

        nodes: List[DocNode] = []
        for declaration in self._declarations:
            if declaration.exported or self.private:
                nodes.append(declaration.node)
        return ModuleDoc(
            specifier=self.specifier,
            nodes=nodes,
            imports=self._imports,
            reexports=self._reexports,
        )

    # ------------------------------------------------------------------
    # Module level

    def _module_statement(self, node: Node, is_script: bool) -> None:
        if node.type == "comment":
            return
        if node.type == "import_statement":
            self._import(node)
            return
        if node.type == "export_statement":
            self._export(node)
            return
        ambient = node.type == "ambient_declaration"
        for doc_node in self._declaration(node, anchor=node, ambient=ambient):
            if is_script or ambient:
                doc_node.declaration_kind = DeclarationKind.DECLARE
            else:
                doc_node.declaration_kind = DeclarationKind.PRIVATE
            self._declarations.append(_Declaration(doc_node.name, doc_node, exported=is_script))

    def _import(self, node: Node) -> None:
        source = import_source_node(node)
        if source is None:
            return
        src = string_value(self.parsed, source)
        location = self._location(node)
        signature = _normalize(self.parsed.text(node))
        js_doc = self._js_doc(node)

        def bind(local: Optional[Node], imported: Optional[str]) -> None:
            name = self.parsed.text(local)
            if name:
                self._imports.append(
                    ImportBinding(
                        local=name,
                        src=src,
                        imported=imported,
                        location=location,
                        signature=signature,
                        js_doc=js_doc,
                    )
                )

        for child in node.named_children:
            if child.type == "import_require_clause":
                bind(next((c for c in child.named_children if c.type == "identifier"), None), None)
            elif child.type == "import_clause":
                for part in child.named_children:
                    if part.type == "identifier":
                        bind(part, "default")
                    elif part.type == "namespace_import":
                        bind(next((c for c in part.named_children if c.type == "identifier"), None), None)
                    elif part.type == "named_imports":
                        for specifier in part.named_children:
                            if specifier.type != "import_specifier":
                                continue
                            name_node = specifier.child_by_field_name("name")
                            alias_node = specifier.child_by_field_name("alias")
                            bind(alias_node or name_node, _name_text(self.parsed, name_node))

    def _export(self, node: Node) -> None:
        js_doc = self._js_doc(node)
        source = node.child_by_field_name("source")
        if source is not None:
            self._reexport(node, string_value(self.parsed, source), js_doc)
            return

        is_default = any(child.type == "default" for child in node.children)
        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            ambient = declaration.type == "ambient_declaration"
            for doc_node in self._declaration(declaration, anchor=node, ambient=ambient):
                if is_default:
                    doc_node.name = "default"
                doc_node.declaration_kind = DeclarationKind.EXPORT
                self._declarations.append(_Declaration(doc_node.name, doc_node, exported=True))
            return

        clause = next((c for c in node.named_children if c.type == "export_clause"), None)
        if clause is not None:
            for specifier in clause.named_children:
                if specifier.type != "export_specifier":
                    continue
                name_node = specifier.child_by_field_name("name")
                alias_node = specifier.child_by_field_name("alias")
                local = _name_text(self.parsed, name_node)
                if local:
                    exported = _name_text(self.parsed, alias_node) or local
                    self._export_clauses.append((local, exported, js_doc, self._location(node)))
            return

        value = node.child_by_field_name("value")
        if value is None:
            # ``export = x`` has no field name; the expression follows ``=``.
            seen_equals = False
            for child in node.children:
                if child.type == "=":
                    seen_equals = True
                elif seen_equals and child.is_named:
                    value = child
                    break
        if value is None:
            _LOGGER.debug("Unhandled export statement in %s: %s", self.specifier, self.parsed.text(node))
            return
        self._default_value(node, value, js_doc)

    def _reexport(self, node: Node, src: str, js_doc: Optional[JsDoc]) -> None:
        location = self._location(node)
        namespace_export = next((c for c in node.named_children if c.type == "namespace_export"), None)
        if namespace_export is not None:
            alias = next(
                (self.parsed.text(c) for c in namespace_export.named_children if c.type in ("identifier", "string")),
                None,
            )
            self._reexports.append(
                Reexport(src=src, kind="namespace", alias=_unquote(alias), js_doc=js_doc, location=location)
            )
            return
        clause = next((c for c in node.named_children if c.type == "export_clause"), None)
        if clause is None:
            self._reexports.append(Reexport(src=src, kind="all", js_doc=js_doc, location=location))
            return
        for specifier in clause.named_children:
            if specifier.type != "export_specifier":
                continue
            name = _name_text(self.parsed, specifier.child_by_field_name("name"))
            alias = _name_text(self.parsed, specifier.child_by_field_name("alias"))
            if name:
                self._reexports.append(
                    Reexport(src=src, kind="named", name=name, alias=alias or name, js_doc=js_doc, location=location)
                )

    def _default_value(self, anchor: Node, value: Node, js_doc: Optional[JsDoc]) -> None:
        if value.type == "identifier":
            self._export_clauses.append((self.parsed.text(value), "default", js_doc, self._location(anchor)))
            return
        if value.type in _CLASS_TYPES:
            doc_node = self._class(value, anchor, name="default")
        elif value.type in ("function_expression", "function", "arrow_function", "generator_function"):
            doc_node = self._function(value, anchor, name="default")
        else:
            doc_node = DocNode(
                name="default",
                kind=DocNodeKind.VARIABLE,
                location=self._location(anchor),
                js_doc=js_doc,
                signature="default",
            )
        doc_node.declaration_kind = DeclarationKind.EXPORT
        self._declarations.append(_Declaration("default", doc_node, exported=True))

    def _apply_export_clauses(self) -> None:
        imports_by_local: Dict[str, ImportBinding] = {binding.local: binding for binding in self._imports}
        for local, exported, js_doc, location in self._export_clauses:
            matches = [
                declaration
                for declaration in self._declarations
                if declaration.local == local and declaration.node.name == local
            ]
            if matches:
                for declaration in matches:
                    if exported == declaration.node.name and not declaration.exported:
                        declaration.exported = True
                        declaration.node.declaration_kind = DeclarationKind.EXPORT
                    elif exported != declaration.node.name:
                        alias = declaration.node.clone(name=exported)
                        alias.declaration_kind = DeclarationKind.EXPORT
                        self._declarations.append(_Declaration(local, alias, exported=True))
                continue
            binding = imports_by_local.get(local)
            if binding is not None:
                binding.reexported = True
                if binding.imported is None:
                    self._reexports.append(
                        Reexport(src=binding.src, kind="namespace", alias=exported, js_doc=js_doc, location=location)
                    )
                else:
                    self._reexports.append(
                        Reexport(
                            src=binding.src,
                            kind="named",
                            name=binding.imported,
                            alias=exported,
                            js_doc=js_doc,
                            location=location,
                        )
                    )
                continue
            _LOGGER.debug("Export of unknown binding %r in %s", local, self.specifier)

    # ------------------------------------------------------------------
    # Declarations

    def _declaration(self, node: Node, *, anchor: Node, ambient: bool) -> List[DocNode]:
        node_type = node.type
        if node_type == "ambient_declaration":
            return self._ambient(node, anchor)
        if node_type == "expression_statement":
            inner = next((c for c in node.named_children if c.type in _NAMESPACE_TYPES), None)
            if inner is None:
                return []
            return [self._namespace(inner, anchor, ambient=ambient)]
        if node_type in _FUNCTION_TYPES:
            return [self._function(node, anchor)]
        if node_type in _CLASS_TYPES:
            return [self._class(node, anchor)]
        if node_type == "interface_declaration":
            return [self._interface(node, anchor)]
        if node_type == "enum_declaration":
            return [self._enum(node, anchor)]
        if node_type == "type_alias_declaration":
            return [self._type_alias(node, anchor)]
        if node_type in _VARIABLE_TYPES:
            return self._variables(node, anchor)
        if node_type in _NAMESPACE_TYPES:
            return [self._namespace(node, anchor, ambient=ambient)]
        return []

    def _ambient(self, node: Node, anchor: Node) -> List[DocNode]:
        for child in node.named_children:
            if child.type == "comment":
                continue
            if child.type == "statement_block":
                namespace = DocNode(
                    name="global",
                    kind=DocNodeKind.NAMESPACE,
                    location=self._location(anchor),
                    declaration_kind=DeclarationKind.DECLARE,
                    js_doc=self._js_doc(anchor),
                    signature="declare global",
                    children=self._members(child, ambient=True),
                )
                return [namespace]
            return self._declaration(child, anchor=anchor, ambient=True)
        return []

    def _function(self, node: Node, anchor: Node, *, name: Optional[str] = None) -> DocNode:
        return DocNode(
            name=name or _name_text(self.parsed, node.child_by_field_name("name")) or "default",
            kind=DocNodeKind.FUNCTION,
            location=self._location(anchor),
            js_doc=self._js_doc(anchor),
            signature=self._header(node, node.child_by_field_name("body")),
        )

    def _class(self, node: Node, anchor: Node, *, name: Optional[str] = None) -> DocNode:
        body = node.child_by_field_name("body")
        children: List[DocNode] = []
        if body is not None:
            for member in body.named_children:
                child = self._class_member(member)
                if child is not None:
                    children.append(child)
        return DocNode(
            name=name or _name_text(self.parsed, node.child_by_field_name("name")) or "default",
            kind=DocNodeKind.CLASS,
            location=self._location(anchor),
            js_doc=self._js_doc(anchor),
            signature=self._header(node, body),
            children=children,
        )

    def _class_member(self, member: Node) -> Optional[DocNode]:
        member_type = member.type
        if member_type in ("comment", "decorator", "class_static_block"):
            return None
        if self._is_private_member(member) and not self.private:
            return None
        name_node = member.child_by_field_name("name")
        if member_type == "method_definition":
            return self._member(member, DocNodeKind.FUNCTION, name_node, stop=member.child_by_field_name("body"))
        if member_type in ("method_signature", "abstract_method_signature"):
            return self._member(member, DocNodeKind.FUNCTION, name_node)
        if member_type == "public_field_definition":
            return self._member(member, DocNodeKind.VARIABLE, name_node, stop=_initializer(member))
        if member_type == "index_signature":
            return self._index_signature(member)
        _LOGGER.debug("Unhandled class member %s in %s", member_type, self.specifier)
        return None

    def _interface(self, node: Node, anchor: Node) -> DocNode:
        body = node.child_by_field_name("body") or next(
            (c for c in node.named_children if c.type in ("interface_body", "object_type")), None
        )
        children: List[DocNode] = []
        if body is not None:
            for member in body.named_children:
                member_type = member.type
                if member_type == "property_signature":
                    children.append(self._member(member, DocNodeKind.VARIABLE, member.child_by_field_name("name")))
                elif member_type == "method_signature":
                    children.append(self._member(member, DocNodeKind.FUNCTION, member.child_by_field_name("name")))
                elif member_type == "call_signature":
                    children.append(self._member(member, DocNodeKind.FUNCTION, None, name="()"))
                elif member_type == "construct_signature":
                    children.append(self._member(member, DocNodeKind.FUNCTION, None, name="new"))
                elif member_type == "index_signature":
                    children.append(self._index_signature(member))
        return DocNode(
            name=_name_text(self.parsed, node.child_by_field_name("name")),
            kind=DocNodeKind.INTERFACE,
            location=self._location(anchor),
            js_doc=self._js_doc(anchor),
            signature=self._header(node, body),
            children=children,
        )

    def _enum(self, node: Node, anchor: Node) -> DocNode:
        body = node.child_by_field_name("body") or next(
            (c for c in node.named_children if c.type == "enum_body"), None
        )
        children: List[DocNode] = []
        if body is not None:
            for member in body.named_children:
                if member.type == "comment":
                    continue
                if member.type == "enum_assignment":
                    name_node = member.child_by_field_name("name") or (
                        member.named_children[0] if member.named_children else None
                    )
                else:
                    name_node = member
                name = _unquote(self.parsed.text(name_node))
                if not name:
                    continue
                children.append(
                    DocNode(
                        name=name,
                        kind=DocNodeKind.VARIABLE,
                        location=self._location(member),
                        js_doc=self._js_doc(member),
                        signature=_normalize(self.parsed.text(member)),
                    )
                )
        return DocNode(
            name=_name_text(self.parsed, node.child_by_field_name("name")),
            kind=DocNodeKind.ENUM,
            location=self._location(anchor),
            js_doc=self._js_doc(anchor),
            signature=self._header(node, body),
            children=children,
        )

    def _type_alias(self, node: Node, anchor: Node) -> DocNode:
        return DocNode(
            name=_name_text(self.parsed, node.child_by_field_name("name")),
            kind=DocNodeKind.TYPE_ALIAS,
            location=self._location(anchor),
            js_doc=self._js_doc(anchor),
            signature=_normalize(self.parsed.text(node)),
        )

    def _variables(self, node: Node, anchor: Node) -> List[DocNode]:
        keyword = self.parsed.text(node.children[0]) if node.children else "var"
        js_doc = self._js_doc(anchor)
        nodes: List[DocNode] = []
        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            if name_node is None or name_node.type != "identifier":
                _LOGGER.debug("Skipping destructured declaration in %s", self.specifier)
                continue
            value = declarator.child_by_field_name("value")
            declared = self._header(declarator, _initializer(declarator))
            if declarator.child_by_field_name("type") is None and value is not None:
                inferred = _literal_type(value.type)
                if inferred:
                    declared = f"{declared}: {inferred}"
            nodes.append(
                DocNode(
                    name=self.parsed.text(name_node),
                    kind=DocNodeKind.VARIABLE,
                    location=self._location(anchor if len(node.named_children) == 1 else declarator),
                    js_doc=js_doc,
                    signature=f"{keyword} {declared}",
                )
            )
        return nodes

    def _namespace(self, node: Node, anchor: Node, *, ambient: bool) -> DocNode:
        body = node.child_by_field_name("body") or next(
            (c for c in node.named_children if c.type == "statement_block"), None
        )
        name_node = node.child_by_field_name("name")
        return DocNode(
            name=_unquote(self.parsed.text(name_node)),
            kind=DocNodeKind.NAMESPACE,
            location=self._location(anchor),
            js_doc=self._js_doc(anchor),
            signature=self._header(node, body),
            children=self._members(body, ambient=ambient) if body is not None else [],
        )

    def _members(self, block: Node, *, ambient: bool) -> List[DocNode]:
        """Declarations inside a namespace body."""
        members: List[DocNode] = []
        for statement in block.named_children:
            if statement.type == "comment":
                continue
            if statement.type == "export_statement":
                declaration = statement.child_by_field_name("declaration")
                if declaration is None:
                    continue
                for doc_node in self._declaration(declaration, anchor=statement, ambient=ambient):
                    doc_node.declaration_kind = DeclarationKind.EXPORT
                    members.append(doc_node)
                continue
            is_ambient = ambient or statement.type == "ambient_declaration"
            for doc_node in self._declaration(statement, anchor=statement, ambient=is_ambient):
                if ambient:
                    doc_node.declaration_kind = DeclarationKind.DECLARE
                    members.append(doc_node)
                elif self.private:
                    doc_node.declaration_kind = DeclarationKind.PRIVATE
                    members.append(doc_node)
        return members

    # ------------------------------------------------------------------
    # Helpers

    def _member(
        self,
        member: Node,
        kind: DocNodeKind,
        name_node: Optional[Node],
        *,
        stop: Optional[Node] = None,
        name: Optional[str] = None,
    ) -> DocNode:
        return DocNode(
            name=name or _unquote(self.parsed.text(name_node)) or "constructor",
            kind=kind,
            location=self._location(member),
            declaration_kind=DeclarationKind.PRIVATE if self._is_private_member(member) else DeclarationKind.EXPORT,
            js_doc=self._js_doc(member),
            signature=self._header(member, stop),
        )

    def _index_signature(self, member: Node) -> DocNode:
        text = _normalize(self.parsed.text(member))
        closing = text.find("]")
        name = text[: closing + 1] if closing != -1 else text
        return DocNode(
            name=name,
            kind=DocNodeKind.VARIABLE,
            location=self._location(member),
            js_doc=self._js_doc(member),
            signature=text,
        )

    def _is_private_member(self, member: Node) -> bool:
        for child in member.children:
            if child.type == "accessibility_modifier" and self.parsed.text(child) == "private":
                return True
        name_node = member.child_by_field_name("name")
        return name_node is not None and name_node.type == "private_property_identifier"

    def _header(self, node: Node, stop: Optional[Node]) -> str:
        end = stop.start_byte if stop is not None else node.end_byte
        text = self.parsed.source_bytes[node.start_byte : end].decode("utf-8", errors="replace")
        return _normalize(text)

    def _location(self, node: Node) -> Location:
        line, col = position(node)
        return Location(specifier=self.specifier, line=line, col=col)

    def _js_doc(self, node: Node) -> Optional[JsDoc]:
        previous = node.prev_named_sibling
        if previous is None or previous.type != "comment":
            return None
        text = self.parsed.text(previous)
        if not is_js_doc_comment(text):
            return None
        return parse_js_doc(text)


def _initializer(node: Node) -> Optional[Node]:
    """The ``=`` token that starts a declarator's or field's initializer."""
    value = node.child_by_field_name("value")
    if value is None:
        return None
    for child in node.children:
        if child.type == "=":
            return child
    return value


def _literal_type(node_type: str) -> Optional[str]:
    if node_type == "number":
        return "number"
    if node_type in ("string", "template_string"):
        return "string"
    if node_type in ("true", "false"):
        return "boolean"
    return None


def _name_text(parsed: ParsedSource, node: Optional[Node]) -> str:
    return _unquote(parsed.text(node))


def _unquote(text: Optional[str]) -> str:
    if not text:
        return ""
    if len(text) >= 2 and text[0] in "\"'" and text[-1] == text[0]:
        return text[1:-1]
    return text


def _normalize(text: str) -> str:
    collapsed = " ".join(text.split())
    return collapsed.rstrip(";,").rstrip()


__all__ = ["DeclarationExtractor", "ImportBinding", "ModuleDoc", "Reexport"]
