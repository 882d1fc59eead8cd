"""Data models for structural file analysis."""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class ImportInfo:
    """One imported name.

    ``name`` is the dotted target as written (``com.acme.Foo``; ``com.acme``
    for a Java on-demand import; ``..pkg.mod.Name`` for a relative Python
    import). ``text`` is the source of the whole statement it came from.
    """

    name: str
    line: int
    text: str
    is_static: bool = False
    is_wildcard: bool = False
    alias: str | None = None
    nested: bool = False  # imported inside a function or class body


@dataclass
class DeclarationInfo:
    """A top-level (or nested type) declaration with its full source text."""

    name: str
    kind: str  # "class", "interface", "enum", "record", "annotation", "function", "variable"
    line: int
    line_end: int
    signature: str
    text: str = ""
    doc_comment: str | None = None
    supertypes: list[str] = field(default_factory=list)
    is_interface_like: bool = False
    children: list[DeclarationInfo] = field(default_factory=list)

    def walk(self):
        """Yield this declaration and every nested type, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class FileOutline:
    """Structure of one file: package, imports, declarations, referenced names."""

    path: str
    language: str
    package: str | None = None
    package_text: str | None = None
    module_doc: str | None = None
    imports: list[ImportInfo] = field(default_factory=list)
    declarations: list[DeclarationInfo] = field(default_factory=list)
    references: list[str] = field(default_factory=list)
    line_count: int = 0
    parsed: bool = True

    @property
    def is_structured(self) -> bool:
        """True when the outline is rich enough to prune the file."""
        return self.parsed and self.language in ("java", "python")
