"""Java parser using tree-sitter."""

from __future__ import annotations

import re

import tree_sitter_java as tsjava
from tree_sitter import Language, Parser

from ..models import DeclarationInfo, FileOutline, ImportInfo

JAVA_LANGUAGE = Language(tsjava.language())

# tree-sitter node types that represent Java type declarations.
_TYPE_DECL_TYPES = {
    "class_declaration": "class",
    "interface_declaration": "interface",
    "enum_declaration": "enum",
    "record_declaration": "record",
    "annotation_type_declaration": "annotation",
}

# Older grammars emit "comment"; newer ones split line/block comments.
_COMMENT_TYPES = {"comment", "line_comment", "block_comment"}

_BODY_TYPES = {"class_body", "interface_body", "enum_body", "enum_body_declarations", "annotation_type_body"}

_GENERIC_ARGS = re.compile(r"<[^<>]*>")


def _text(node) -> str:
    return node.text.decode("utf-8", errors="replace")


def _strip_type_arguments(name: str) -> str:
    previous = None
    while previous != name:
        previous = name
        name = _GENERIC_ARGS.sub("", name)
    return "".join(name.split())


class JavaParser:
    """Parse Java source using tree-sitter."""

    def _parse(self, source: str):
        parser = Parser(JAVA_LANGUAGE)
        return parser.parse(source.encode("utf-8"))

    def get_outline(self, source: str, file_path: str = "File.java") -> FileOutline:
        """Extract package, imports, type declarations and type references."""
        tree = self._parse(source)
        root = tree.root_node
        outline = FileOutline(
            path=file_path,
            language="java",
            line_count=len(source.splitlines()),
        )

        for node in root.children:
            if node.type == "package_declaration":
                outline.package = self._dotted_name(node)
                outline.package_text = _text(node)
            elif node.type == "import_declaration":
                info = self._import_info(node)
                if info:
                    outline.imports.append(info)
            elif node.type in _TYPE_DECL_TYPES:
                decl = self._type_declaration(node, parent_name="")
                if decl:
                    outline.declarations.append(decl)

        if outline.package is None:
            outline.package = ""
        outline.references = self._collect_references(root)
        return outline

    def _dotted_name(self, node) -> str | None:
        for child in node.children:
            if child.type in ("scoped_identifier", "identifier"):
                return "".join(_text(child).split())
        return None

    def _import_info(self, node) -> ImportInfo | None:
        name = self._dotted_name(node)
        if not name:
            return None
        child_types = {child.type for child in node.children}
        return ImportInfo(
            name=name,
            line=node.start_point[0] + 1,
            text=_text(node),
            is_static="static" in child_types,
            is_wildcard="asterisk" in child_types,
        )

    def _type_declaration(self, node, parent_name: str) -> DeclarationInfo | None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None

        simple_name = _text(name_node)
        name = f"{parent_name}.{simple_name}" if parent_name else simple_name
        kind = _TYPE_DECL_TYPES[node.type]

        body = node.child_by_field_name("body")
        children: list[DeclarationInfo] = []
        if body is not None:
            children = self._nested_types(body, name)

        return DeclarationInfo(
            name=name,
            kind=kind,
            line=node.start_point[0] + 1,
            line_end=node.end_point[0] + 1,
            signature=self._signature(node, body),
            text=_text(node),
            doc_comment=self._doc_comment(node),
            supertypes=self._supertypes(node),
            is_interface_like=kind in ("interface", "annotation") or self._is_abstract(node),
            children=children,
        )

    def _nested_types(self, body, parent_name: str) -> list[DeclarationInfo]:
        nested: list[DeclarationInfo] = []
        for child in body.children:
            if child.type in _TYPE_DECL_TYPES:
                decl = self._type_declaration(child, parent_name)
                if decl:
                    nested.append(decl)
            elif child.type in _BODY_TYPES:
                nested.extend(self._nested_types(child, parent_name))
        return nested

    def _signature(self, node, body) -> str:
        source = node.text
        if body is not None:
            source = source[: body.start_byte - node.start_byte]
        return " ".join(source.decode("utf-8", errors="replace").split())

    def _doc_comment(self, node) -> str | None:
        """Return the Javadoc block directly above *node*, if any."""
        previous = node.prev_named_sibling
        if previous is None or previous.type not in _COMMENT_TYPES:
            return None
        text = _text(previous)
        if not text.startswith("/**"):
            return None
        # Must sit right above the declaration, not somewhere earlier in the file.
        if node.start_point[0] - previous.end_point[0] > 1:
            return None
        return text

    def _is_abstract(self, node) -> bool:
        for child in node.children:
            if child.type == "modifiers":
                return any(m.type == "abstract" for m in child.children)
        return False

    def _supertypes(self, node) -> list[str]:
        supertypes: list[str] = []
        for child in node.children:
            if child.type in ("superclass", "super_interfaces", "extends_interfaces"):
                supertypes.extend(self._type_names(child))
        return supertypes

    def _type_names(self, node) -> list[str]:
        """Names of the types listed under an extends/implements clause."""
        names: list[str] = []
        for child in node.named_children:
            if child.type == "type_list":
                names.extend(self._type_names(child))
            elif child.type in ("type_identifier", "scoped_type_identifier"):
                names.append(_strip_type_arguments(_text(child)))
            elif child.type == "generic_type":
                names.append(_strip_type_arguments(_text(child.named_children[0])))
        return names

    def _collect_references(self, root) -> list[str]:
        """Every type name used in the file, as written, in first-seen order."""
        type_params: set[str] = set()
        found: list[str] = []
        seen: set[str] = set()

        def add(name: str) -> None:
            if name and name not in seen:
                seen.add(name)
                found.append(name)

        stack = [root]
        while stack:
            node = stack.pop()
            node_type = node.type

            if node_type in ("package_declaration", "import_declaration") or node_type in _COMMENT_TYPES:
                continue

            if node_type == "type_parameter":
                for child in node.named_children:
                    if child.type in ("type_identifier", "identifier"):
                        type_params.add(_text(child))
                        break
            elif node_type == "type_identifier":
                if node.parent is None or node.parent.type != "scoped_type_identifier":
                    add(_text(node))
            elif node_type == "scoped_type_identifier":
                if node.parent is None or node.parent.type != "scoped_type_identifier":
                    add(_strip_type_arguments(_text(node)))
                    continue
            elif node_type in ("marker_annotation", "annotation"):
                name_node = node.child_by_field_name("name")
                if name_node is not None:
                    add("".join(_text(name_node).split()))
            elif node_type in ("method_invocation", "field_access"):
                target = node.child_by_field_name("object")
                if target is not None and target.type == "identifier":
                    name = _text(target)
                    # Static access goes through a type name: Foo.bar()
                    if name[:1].isupper():
                        add(name)

            # Reverse keeps document order when popping.
            stack.extend(reversed(node.children))

        return [name for name in found if name not in type_params]
