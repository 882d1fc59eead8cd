"""Protocol definition for symbol resolvers.

A resolver is the host-side capability the traversal consumes: it knows how
to enumerate the references in a file and map them to symbols and files.
The traversal itself never parses anything.
"""

from __future__ import annotations
from typing import Iterable, Protocol, runtime_checkable, TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import SourceFile, Symbol


@runtime_checkable
class SymbolResolver(Protocol):
    """Protocol for symbol resolution backends."""

    def file_for_path(self, path: str) -> SourceFile | None:
        """Return the project file at *path* (project-relative), if it exists."""
        ...

    def reference_tokens(self, file: SourceFile) -> Iterable[str]:
        """Every symbol reference in *file*, as written in the source."""
        ...

    def import_tokens(self, file: SourceFile) -> Iterable[str]:
        """Every import-like declaration in *file*."""
        ...

    def declared_symbols(self, file: SourceFile) -> list[Symbol]:
        """Symbols declared by *file* (types, including nested ones)."""
        ...

    def resolve_reference(self, file: SourceFile, token: str) -> Symbol | None:
        """Resolve a reference token in the context of *file*."""
        ...

    def resolve_import(self, file: SourceFile, token: str) -> Symbol | None:
        """Resolve an import token in the context of *file*."""
        ...

    def find_implementers(self, symbol: Symbol, scope: str = "") -> Iterable[Symbol]:
        """All known implementers/subtypes of *symbol*, transitively.

        Args:
            symbol: An interface-like symbol.
            scope: Qualified-name prefix hint; empty means everything.
        """
        ...

    def get_owning_file(self, symbol: Symbol) -> SourceFile | None:
        """The project file defining *symbol*, or None for library symbols."""
        ...

    def get_decompiled_text(self, symbol: Symbol) -> str | None:
        """Source-like text for a library symbol.

        Returns None when nothing is available; raises DecompilationError
        when decompilation was attempted and failed.
        """
        ...

    def get_package_of(self, file: SourceFile) -> str | None:
        """Dot-separated package of *file*, or None when undeterminable."""
        ...
