"""Java symbol resolver over tree-sitter outlines.

Builds a project-wide index of type declarations on first use and resolves
type names the way javac does for the common cases: same file, single-type
imports, same package, on-demand imports, then fully qualified names.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

from ..backends import DeclarationInfo, FileOutline
from ..models import SourceFile, Symbol

if TYPE_CHECKING:
    from ..file_access import SmartFileAccess
    from .javap import JavapDecompiler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _IndexedType:
    qualified_name: str
    file: SourceFile
    declaration: DeclarationInfo


def _qualify(package: str, name: str) -> str:
    return f"{package}.{name}" if package else name


class JavaSymbolResolver:
    """Resolve Java type references across a project."""

    def __init__(
        self,
        access: SmartFileAccess,
        decompiler: JavapDecompiler | None = None,
    ) -> None:
        self._access = access
        self._decompiler = decompiler
        self._types: dict[str, _IndexedType] | None = None
        self._subtypes: dict[str, list[str]] | None = None

    # -- index -------------------------------------------------------------

    def _index(self) -> dict[str, _IndexedType]:
        if self._types is not None:
            return self._types

        types: dict[str, _IndexedType] = {}
        for path in self._access.walk_files({".java"}):
            outline = self._access.get_outline(path)
            if outline is None or not outline.parsed:
                continue
            file = SourceFile.from_path(path)
            for top_level in outline.declarations:
                for decl in top_level.walk():
                    name = _qualify(outline.package or "", decl.name)
                    types.setdefault(name, _IndexedType(name, file, decl))

        logger.debug("Indexed %d Java types", len(types))
        self._types = types
        return types

    def _subtype_index(self) -> dict[str, list[str]]:
        if self._subtypes is not None:
            return self._subtypes

        subtypes: dict[str, list[str]] = {}
        for indexed in self._index().values():
            for supertype in indexed.declaration.supertypes:
                resolved = self._resolve_type_name(indexed.file.path, supertype)
                if resolved is not None:
                    subtypes.setdefault(resolved.qualified_name, []).append(indexed.qualified_name)

        self._subtypes = subtypes
        return subtypes

    def _outline(self, file: SourceFile | str) -> FileOutline | None:
        path = file.path if isinstance(file, SourceFile) else file
        outline = self._access.get_outline(path)
        if outline is None or outline.language != "java":
            return None
        return outline

    def _symbol(self, qualified_name: str) -> Symbol:
        indexed = self._index().get(qualified_name)
        if indexed is not None:
            return Symbol(
                qualified_name=qualified_name,
                is_interface_like=indexed.declaration.is_interface_like,
                file=indexed.file,
            )
        return Symbol(
            qualified_name=qualified_name,
            decompilable=bool(self._decompiler and self._decompiler.available),
        )

    # -- name resolution ---------------------------------------------------

    def _resolve_type_name(self, path: str, name: str) -> Symbol | None:
        outline = self._outline(path)
        if outline is None:
            return None

        if "." in name:
            head, rest = name.split(".", 1)
            if head[:1].isupper():
                # Outer.Inner or Map.Entry: resolve the outer type first
                outer = self._resolve_simple_name(outline, head)
                if outer is None:
                    return None
                return self._symbol(f"{outer.qualified_name}.{rest}")
            # Fully qualified name as written
            return self._symbol(name)

        return self._resolve_simple_name(outline, name)

    def _resolve_simple_name(self, outline: FileOutline, name: str) -> Symbol | None:
        index = self._index()
        package = outline.package or ""

        for top_level in outline.declarations:
            for decl in top_level.walk():
                if decl.name.rsplit(".", 1)[-1] == name:
                    return self._symbol(_qualify(package, decl.name))

        for imp in outline.imports:
            if not imp.is_static and not imp.is_wildcard and imp.name.rsplit(".", 1)[-1] == name:
                return self._symbol(imp.name)

        same_package = _qualify(package, name)
        if same_package in index:
            return self._symbol(same_package)

        for imp in outline.imports:
            if imp.is_wildcard:
                candidate = f"{imp.name}.{name}"
                if candidate in index:
                    return self._symbol(candidate)

        return None

    # -- SymbolResolver ----------------------------------------------------

    def file_for_path(self, path: str) -> SourceFile | None:
        file = SourceFile.from_path(path)
        if not self._access.file_backend.file_exists(file.path):
            return None
        return file

    def reference_tokens(self, file: SourceFile) -> list[str]:
        outline = self._outline(file)
        return list(outline.references) if outline else []

    def import_tokens(self, file: SourceFile) -> list[str]:
        outline = self._outline(file)
        return [imp.name for imp in outline.imports] if outline else []

    def declared_symbols(self, file: SourceFile) -> list[Symbol]:
        outline = self._outline(file)
        if outline is None:
            return []
        return [
            self._symbol(_qualify(outline.package or "", decl.name))
            for top_level in outline.declarations
            for decl in top_level.walk()
        ]

    def resolve_reference(self, file: SourceFile, token: str) -> Symbol | None:
        return self._resolve_type_name(file.path, token)

    def resolve_import(self, file: SourceFile, token: str) -> Symbol | None:
        outline = self._outline(file)
        if outline is None:
            return None
        index = self._index()

        for imp in outline.imports:
            if imp.name != token:
                continue
            if imp.is_static:
                # import static a.b.Util.helper / a.b.Util.* both point at Util
                if token in index and not imp.is_wildcard:
                    return self._symbol(token)
                owner = token if imp.is_wildcard else token.rsplit(".", 1)[0]
                return self._symbol(owner)
            if imp.is_wildcard:
                # On-demand imports name a package, not a type
                return None
            return self._symbol(token)

        return None

    def find_implementers(self, symbol: Symbol, scope: str = "") -> Iterator[Symbol]:
        subtypes = self._subtype_index()
        seen: set[str] = set()
        queue = deque(subtypes.get(symbol.qualified_name, []))
        while queue:
            name = queue.popleft()
            if name in seen:
                continue
            seen.add(name)
            queue.extend(subtypes.get(name, []))
            if name.startswith(scope):
                yield self._symbol(name)

    def get_owning_file(self, symbol: Symbol) -> SourceFile | None:
        indexed = self._index().get(symbol.qualified_name)
        if indexed is not None:
            return indexed.file
        return symbol.file

    def get_decompiled_text(self, symbol: Symbol) -> str | None:
        if self._decompiler is None or not self._decompiler.available:
            return None
        return self._decompiler.decompile(symbol.qualified_name)

    def get_package_of(self, file: SourceFile) -> str | None:
        outline = self._outline(file)
        if outline is None or not outline.parsed:
            return None
        return outline.package or ""
