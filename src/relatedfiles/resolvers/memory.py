"""In-memory symbol resolver for testing."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from ..errors import DecompilationError
from ..models import SourceFile, Symbol


@dataclass
class _FileEntry:
    file: SourceFile
    package: str | None
    references: list[str] = field(default_factory=list)
    imports: list[str] = field(default_factory=list)
    declares: list[str] = field(default_factory=list)
    broken: bool = False


class InMemorySymbolResolver:
    """Dict-backed resolver whose tokens are qualified names.

    Files and symbols are registered explicitly, which makes it possible to
    describe a reference graph in a few lines without any parsing.

    Example:
        resolver = InMemorySymbolResolver()
        resolver.add_symbol("com.acme.util.Helper", file="com/acme/util/Helper.java")
        resolver.add_symbol("com.acme.app.Service", file="com/acme/app/Service.java",
                            interface_like=True)
        resolver.add_file("com/acme/app/Service.java", package="com.acme.app",
                          imports=["com.acme.util.Helper"],
                          declares=["com.acme.app.Service"])
    """

    def __init__(self) -> None:
        self._files: dict[str, _FileEntry] = {}
        self._symbols: dict[str, Symbol] = {}
        self._implements: dict[str, list[str]] = {}
        self._decompiled: dict[str, str] = {}
        self._decompile_errors: dict[str, str] = {}
        self.resolve_calls: list[str] = []

    def add_file(
        self,
        path: str,
        package: str | None,
        references: Iterable[str] = (),
        imports: Iterable[str] = (),
        declares: Iterable[str] = (),
        broken: bool = False,
    ) -> SourceFile:
        """Register a file; ``broken`` files fail when scanned for references."""
        file = SourceFile.from_path(path)
        self._files[file.path] = _FileEntry(
            file=file,
            package=package,
            references=list(references),
            imports=list(imports),
            declares=list(declares),
            broken=broken,
        )
        return file

    def add_symbol(
        self,
        qualified_name: str,
        file: str | None = None,
        interface_like: bool = False,
        implements: Iterable[str] = (),
        decompiled_text: str | None = None,
        decompile_error: str | None = None,
    ) -> Symbol:
        """Register a symbol; symbols without *file* are library symbols."""
        symbol = Symbol(
            qualified_name=qualified_name,
            is_interface_like=interface_like,
            file=SourceFile.from_path(file) if file else None,
            decompilable=decompiled_text is not None or decompile_error is not None,
        )
        self._symbols[qualified_name] = symbol
        for supertype in implements:
            self._implements.setdefault(supertype, []).append(qualified_name)
        if decompiled_text is not None:
            self._decompiled[qualified_name] = decompiled_text
        if decompile_error is not None:
            self._decompile_errors[qualified_name] = decompile_error
        return symbol

    def _entry(self, file: SourceFile) -> _FileEntry | None:
        return self._files.get(file.path)

    def file_for_path(self, path: str) -> SourceFile | None:
        entry = self._files.get(SourceFile.from_path(path).path)
        return entry.file if entry else None

    def reference_tokens(self, file: SourceFile) -> Iterator[str]:
        entry = self._entry(file)
        if entry is None:
            return
        if entry.broken:
            raise RuntimeError(f"cannot scan {file.path}")
        yield from entry.references

    def import_tokens(self, file: SourceFile) -> list[str]:
        entry = self._entry(file)
        return list(entry.imports) if entry else []

    def declared_symbols(self, file: SourceFile) -> list[Symbol]:
        entry = self._entry(file)
        if entry is None:
            return []
        return [self._symbols[name] for name in entry.declares if name in self._symbols]

    def resolve_reference(self, file: SourceFile, token: str) -> Symbol | None:
        self.resolve_calls.append(token)
        return self._symbols.get(token)

    def resolve_import(self, file: SourceFile, token: str) -> Symbol | None:
        self.resolve_calls.append(token)
        return self._symbols.get(token)

    def find_implementers(self, symbol: Symbol, scope: str = "") -> Iterator[Symbol]:
        seen: set[str] = set()
        queue = deque(self._implements.get(symbol.qualified_name, []))
        while queue:
            name = queue.popleft()
            if name in seen:
                continue
            seen.add(name)
            queue.extend(self._implements.get(name, []))
            implementer = self._symbols.get(name)
            if implementer is not None and name.startswith(scope):
                yield implementer

    def get_owning_file(self, symbol: Symbol) -> SourceFile | None:
        known = self._symbols.get(symbol.qualified_name, symbol)
        return known.file

    def get_decompiled_text(self, symbol: Symbol) -> str | None:
        error = self._decompile_errors.get(symbol.qualified_name)
        if error is not None:
            raise DecompilationError(error, symbol.qualified_name)
        return self._decompiled.get(symbol.qualified_name)

    def get_package_of(self, file: SourceFile) -> str | None:
        entry = self._entry(file)
        return entry.package if entry else None
