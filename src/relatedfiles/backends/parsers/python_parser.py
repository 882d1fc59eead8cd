"""Python parser using stdlib ast module."""

from __future__ import annotations

import ast

from ..models import DeclarationInfo, FileOutline, ImportInfo

# Base classes / metaclasses that make a class an abstract contract.
_ABSTRACT_BASES = {"ABC", "ABCMeta", "Protocol"}


def _dotted(node: ast.AST) -> str | None:
    """``a.b.c`` for a Name/Attribute chain, None for anything else."""
    parts: list[str] = []
    while isinstance(node, ast.Attribute):
        parts.append(node.attr)
        node = node.value
    if isinstance(node, ast.Name):
        parts.append(node.id)
        return ".".join(reversed(parts))
    return None


class _ReferenceVisitor(ast.NodeVisitor):
    """Collect loaded names and attribute chains in document order."""

    def __init__(self) -> None:
        self.found: list[str] = []
        self._seen: set[str] = set()

    def _add(self, name: str | None) -> None:
        if name and name not in self._seen:
            self._seen.add(name)
            self.found.append(name)

    def visit_Import(self, node: ast.Import) -> None:
        return

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        return

    def visit_Attribute(self, node: ast.Attribute) -> None:
        chain = _dotted(node)
        if chain is not None:
            self._add(chain)
            return
        self.generic_visit(node)

    def visit_Name(self, node: ast.Name) -> None:
        if isinstance(node.ctx, ast.Load):
            self._add(node.id)


class PythonParser:
    """Parse Python source using stdlib ast."""

    def get_outline(self, source: str, file_path: str = "module.py") -> FileOutline:
        """Extract imports, top-level declarations and referenced names."""
        lines = source.splitlines()
        outline = FileOutline(path=file_path, language="python", line_count=len(lines))

        try:
            tree = ast.parse(source)
        except SyntaxError:
            outline.parsed = False
            return outline

        outline.module_doc = self._module_doc(tree, lines)
        outline.imports = self._imports(tree, lines)

        for node in tree.body:
            decl = self._declaration(node, lines)
            if decl:
                outline.declarations.append(decl)

        visitor = _ReferenceVisitor()
        visitor.visit(tree)
        outline.references = visitor.found
        return outline

    def _module_doc(self, tree: ast.Module, lines: list[str]) -> str | None:
        if ast.get_docstring(tree) is None:
            return None
        first = tree.body[0]
        return "\n".join(lines[first.lineno - 1 : first.end_lineno or first.lineno])

    def _imports(self, tree: ast.Module, lines: list[str]) -> list[ImportInfo]:
        top_level = {id(node) for node in tree.body}
        imports: list[ImportInfo] = []

        for node in ast.walk(tree):
            if not isinstance(node, ast.Import | ast.ImportFrom):
                continue
            text = "\n".join(lines[node.lineno - 1 : node.end_lineno or node.lineno])
            nested = id(node) not in top_level

            if isinstance(node, ast.Import):
                for alias in node.names:
                    imports.append(ImportInfo(
                        name=alias.name,
                        line=node.lineno,
                        text=text,
                        alias=alias.asname,
                        nested=nested,
                    ))
                continue

            base = "." * node.level + (node.module or "")
            for alias in node.names:
                if alias.name == "*":
                    imports.append(ImportInfo(
                        name=base,
                        line=node.lineno,
                        text=text,
                        is_wildcard=True,
                        nested=nested,
                    ))
                    continue
                separator = "" if base.endswith(".") or not base else "."
                imports.append(ImportInfo(
                    name=f"{base}{separator}{alias.name}",
                    line=node.lineno,
                    text=text,
                    alias=alias.asname or alias.name,
                    nested=nested,
                ))

        imports.sort(key=lambda info: info.line)
        return imports

    def _declaration(self, node: ast.stmt, lines: list[str], parent: str = "") -> DeclarationInfo | None:
        if isinstance(node, ast.ClassDef):
            name = f"{parent}.{node.name}" if parent else node.name
            children = [
                child_decl
                for child in node.body
                if isinstance(child, ast.ClassDef)
                for child_decl in [self._declaration(child, lines, parent=name)]
                if child_decl
            ]
            return self._make(
                node, lines, name, "class",
                supertypes=[b for b in (_dotted(base) for base in node.bases) if b],
                is_interface_like=self._is_abstract(node),
                children=children,
            )
        if isinstance(node, ast.FunctionDef | ast.AsyncFunctionDef):
            return self._make(node, lines, node.name, "function")
        if isinstance(node, ast.Assign | ast.AnnAssign):
            targets = node.targets if isinstance(node, ast.Assign) else [node.target]
            names = [t.id for t in targets if isinstance(t, ast.Name)]
            if not names:
                return None
            return self._make(node, lines, names[0], "variable")
        return None

    def _make(self, node, lines: list[str], name: str, kind: str, **extra) -> DeclarationInfo:
        decorators = getattr(node, "decorator_list", [])
        start = min([node.lineno] + [d.lineno for d in decorators])
        end = node.end_lineno or node.lineno
        return DeclarationInfo(
            name=name,
            kind=kind,
            line=start,
            line_end=end,
            signature=lines[node.lineno - 1].strip(),
            text="\n".join(lines[start - 1 : end]),
            doc_comment=self._leading_comment(lines, start),
            **extra,
        )

    def _leading_comment(self, lines: list[str], start: int) -> str | None:
        """Contiguous ``#`` comment lines directly above line *start*."""
        index = start - 2
        block: list[str] = []
        while index >= 0 and lines[index].lstrip().startswith("#"):
            block.append(lines[index])
            index -= 1
        if not block:
            return None
        return "\n".join(reversed(block))

    def _is_abstract(self, node: ast.ClassDef) -> bool:
        for base in node.bases:
            name = _dotted(base)
            if name and name.rsplit(".", 1)[-1] in _ABSTRACT_BASES:
                return True
        for keyword in node.keywords:
            if keyword.arg == "metaclass":
                name = _dotted(keyword.value)
                if name and name.rsplit(".", 1)[-1] == "ABCMeta":
                    return True
        for child in node.body:
            if isinstance(child, ast.FunctionDef | ast.AsyncFunctionDef):
                for decorator in child.decorator_list:
                    name = _dotted(decorator)
                    if name and name.rsplit(".", 1)[-1] == "abstractmethod":
                        return True
        return False
