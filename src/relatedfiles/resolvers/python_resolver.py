"""Python symbol resolver over ast outlines.

Qualified names are dotted module paths (``pkg.mod``) and module-level
classes (``pkg.mod.Class``). Names are resolved through each module's
import bindings; anything imported from outside the project is reported as
a library symbol without source.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Iterator

from ..backends import DeclarationInfo, FileOutline
from ..models import SourceFile, Symbol

if TYPE_CHECKING:
    from ..file_access import SmartFileAccess

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_ROOTS = ("src", "")


@dataclass(frozen=True)
class _IndexedModule:
    name: str
    file: SourceFile
    is_package: bool


@dataclass(frozen=True)
class _IndexedClass:
    qualified_name: str
    module: str
    declaration: DeclarationInfo


class PythonSymbolResolver:
    """Resolve Python imports and names across a project."""

    def __init__(
        self,
        access: SmartFileAccess,
        source_roots: tuple[str, ...] = DEFAULT_SOURCE_ROOTS,
    ) -> None:
        self._access = access
        self._source_roots = source_roots
        self._modules: dict[str, _IndexedModule] | None = None
        self._by_path: dict[str, _IndexedModule] = {}
        self._classes: dict[str, _IndexedClass] = {}
        self._bindings: dict[str, tuple[dict[str, str], list[str]]] = {}
        self._subtypes: dict[str, list[str]] | None = None

    # -- index -------------------------------------------------------------

    def module_name(self, path: str) -> str | None:
        """Dotted module name for a project-relative ``.py`` path."""
        pure = PurePosixPath(path)
        if pure.suffix != ".py":
            return None
        for root in self._source_roots:
            if root and not path.startswith(root + "/"):
                continue
            relative = pure.relative_to(root) if root else pure
            parts = list(relative.with_suffix("").parts)
            if parts and parts[-1] == "__init__":
                parts = parts[:-1]
            if not parts:
                return None
            return ".".join(parts)
        return None

    def _index(self) -> dict[str, _IndexedModule]:
        if self._modules is not None:
            return self._modules

        modules: dict[str, _IndexedModule] = {}
        for path in self._access.walk_files({".py"}):
            name = self.module_name(path)
            if name is None or name in modules:
                continue
            module = _IndexedModule(
                name=name,
                file=SourceFile.from_path(path),
                is_package=PurePosixPath(path).name == "__init__.py",
            )
            modules[name] = module
            self._by_path[module.file.path] = module

            outline = self._access.get_outline(path)
            if outline is None or not outline.parsed:
                continue
            for top_level in outline.declarations:
                if top_level.kind != "class":
                    continue
                for decl in top_level.walk():
                    qualified = f"{name}.{decl.name}"
                    self._classes[qualified] = _IndexedClass(qualified, name, decl)

        logger.debug("Indexed %d Python modules, %d classes", len(modules), len(self._classes))
        self._modules = modules
        return modules

    def _module_for(self, file: SourceFile) -> _IndexedModule | None:
        self._index()
        return self._by_path.get(file.path)

    def _outline(self, file: SourceFile) -> FileOutline | None:
        outline = self._access.get_outline(file.path)
        if outline is None or outline.language != "python" or not outline.parsed:
            return None
        return outline

    def _package_of_module(self, module: _IndexedModule) -> str:
        if module.is_package:
            return module.name
        return module.name.rsplit(".", 1)[0] if "." in module.name else ""

    def _absolute(self, module: _IndexedModule, name: str) -> str:
        """Turn a relative import target (``..pkg.Name``) into an absolute one."""
        level = len(name) - len(name.lstrip("."))
        if level == 0:
            return name
        package = self._package_of_module(module)
        base = package.split(".") if package else []
        if level > 1:
            base = base[: len(base) - (level - 1)]
        rest = name[level:]
        return ".".join(part for part in base + ([rest] if rest else []) if part)

    def _file_bindings(self, file: SourceFile) -> tuple[dict[str, str], list[str]]:
        """Local name -> dotted target, plus the modules star-imported."""
        if file.path in self._bindings:
            return self._bindings[file.path]

        bindings: dict[str, str] = {}
        star_modules: list[str] = []
        module = self._module_for(file)
        outline = self._outline(file)
        if module is not None and outline is not None:
            for imp in outline.imports:
                target = self._absolute(module, imp.name)
                if imp.is_wildcard:
                    star_modules.append(target)
                elif imp.alias:
                    bindings[imp.alias] = target
                else:
                    # import a.b binds "a"
                    head = target.split(".", 1)[0]
                    bindings.setdefault(head, head)

        self._bindings[file.path] = (bindings, star_modules)
        return bindings, star_modules

    def _symbol_for(self, target: str) -> Symbol | None:
        """Longest indexed prefix of *target*: a class, else a module."""
        modules = self._index()
        parts = target.split(".")
        for end in range(len(parts), 0, -1):
            candidate = ".".join(parts[:end])
            indexed_class = self._classes.get(candidate)
            if indexed_class is not None:
                return Symbol(
                    qualified_name=candidate,
                    is_interface_like=indexed_class.declaration.is_interface_like,
                    file=modules[indexed_class.module].file,
                )
            indexed_module = modules.get(candidate)
            if indexed_module is not None:
                return Symbol(qualified_name=candidate, file=indexed_module.file)
        return None

    def _subtype_index(self) -> dict[str, list[str]]:
        if self._subtypes is not None:
            return self._subtypes

        modules = self._index()
        subtypes: dict[str, list[str]] = {}
        for indexed in list(self._classes.values()):
            file = modules[indexed.module].file
            for base in indexed.declaration.supertypes:
                resolved = self.resolve_reference(file, base)
                if resolved is not None and resolved.qualified_name in self._classes:
                    subtypes.setdefault(resolved.qualified_name, []).append(indexed.qualified_name)

        self._subtypes = subtypes
        return subtypes

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
        module = self._module_for(file)
        if module is None:
            return []
        return [
            symbol
            for name, indexed in self._classes.items()
            if indexed.module == module.name
            for symbol in [self._symbol_for(name)]
            if symbol is not None
        ]

    def resolve_reference(self, file: SourceFile, token: str) -> Symbol | None:
        module = self._module_for(file)
        if module is None:
            return None
        bindings, star_modules = self._file_bindings(file)
        head, _, rest = token.partition(".")

        if head in bindings:
            target = bindings[head] + (f".{rest}" if rest else "")
        elif f"{module.name}.{head}" in self._classes:
            target = f"{module.name}.{token}"
        else:
            for star in star_modules:
                if f"{star}.{head}" in self._classes:
                    target = f"{star}.{token}"
                    break
            else:
                return None

        symbol = self._symbol_for(target)
        if symbol is None:
            # Bound by an import, but not part of the project
            return Symbol(qualified_name=target)
        return symbol

    def resolve_import(self, file: SourceFile, token: str) -> Symbol | None:
        module = self._module_for(file)
        if module is None:
            return None
        target = self._absolute(module, token)
        if not target:
            return None
        symbol = self._symbol_for(target)
        if symbol is None:
            return Symbol(qualified_name=target)
        return symbol

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
                implementer = self._symbol_for(name)
                if implementer is not None:
                    yield implementer

    def get_owning_file(self, symbol: Symbol) -> SourceFile | None:
        resolved = self._symbol_for(symbol.qualified_name)
        if resolved is not None and resolved.qualified_name == symbol.qualified_name:
            return resolved.file
        return symbol.file

    def get_decompiled_text(self, symbol: Symbol) -> str | None:
        return None

    def get_package_of(self, file: SourceFile) -> str | None:
        module = self._module_for(file)
        if module is None or self._outline(file) is None:
            return None
        return self._package_of_module(module)
