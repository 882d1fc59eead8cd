"""Core data model for related-file traversal."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath

# Extension to language tag. These are the file kinds the traversal emits.
SOURCE_LANGUAGES: dict[str, str] = {
    ".java": "java",
    ".kt": "kotlin",
    ".scala": "scala",
    ".groovy": "groovy",
    ".py": "python",
}

# Library / compiled artifacts: never emitted as source, only decompiled.
BINARY_EXTENSIONS = {".class", ".jar"}


def language_for(path: str) -> str:
    """Return the language tag for *path* ("binary" / "unknown" if not source)."""
    suffix = PurePosixPath(path).suffix.lower()
    if suffix in SOURCE_LANGUAGES:
        return SOURCE_LANGUAGES[suffix]
    if suffix in BINARY_EXTENSIONS:
        return "binary"
    return "unknown"


@dataclass(frozen=True)
class SourceFile:
    """A file in the project, identified by its repository-relative path."""

    path: str
    language: str = "unknown"

    @classmethod
    def from_path(cls, path: str) -> SourceFile:
        normalized = str(PurePosixPath(path))
        return cls(path=normalized, language=language_for(normalized))

    @property
    def is_source(self) -> bool:
        return self.language in SOURCE_LANGUAGES.values()


@dataclass(frozen=True)
class Symbol:
    """A named symbol with a dot-separated qualified name.

    ``file`` is None for symbols defined outside the project (library code);
    ``decompilable`` says whether the resolver can produce text for them.
    """

    qualified_name: str
    is_interface_like: bool = False
    file: SourceFile | None = None
    decompilable: bool = False

    @property
    def simple_name(self) -> str:
        return self.qualified_name.rsplit(".", 1)[-1]


class ResolutionKind(str, Enum):
    """How a referenced name resolved."""

    SOURCE_FILE = "source_file"
    EXTERNAL_DECOMPILABLE = "external_decompilable"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class CollectedReference:
    """One distinct name referenced from a scanned file."""

    qualified_name: str
    kind: ResolutionKind
    symbol: Symbol | None = None


class BlockKind(str, Enum):
    SOURCE = "source"
    DECOMPILED = "decompiled"
    DECOMPILE_FAILED = "decompile_failed"


@dataclass
class OutputBlock:
    """One emitted unit of the aggregated output."""

    path: str
    content: str
    kind: BlockKind = BlockKind.SOURCE
    depth: int = 0

    def render(self) -> str:
        if self.kind is BlockKind.SOURCE:
            header = f"// File: {self.path}"
        else:
            header = f"// Decompiled: {self.path}"
        return f"{header}\n{self.content}\n\n"


@dataclass(frozen=True)
class FileError:
    """A per-file failure that was isolated during traversal."""

    path: str
    message: str


class RunStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class TraversalResult:
    """Everything a traversal run produced, in emission order."""

    blocks: list[OutputBlock] = field(default_factory=list)
    status: RunStatus = RunStatus.COMPLETED
    errors: list[FileError] = field(default_factory=list)
    direct_references: set[str] = field(default_factory=set)
    scope_prefix: str = ""

    @property
    def entries(self) -> list[tuple[str, str]]:
        """Ordered ``(path, content)`` pairs."""
        return [(block.path, block.content) for block in self.blocks]

    @property
    def file_count(self) -> int:
        return sum(1 for block in self.blocks if block.kind is BlockKind.SOURCE)

    @property
    def decompiled_count(self) -> int:
        return sum(1 for block in self.blocks if block.kind is BlockKind.DECOMPILED)

    @property
    def cancelled(self) -> bool:
        return self.status is RunStatus.CANCELLED

    def render(self) -> str:
        """Concatenate all blocks into the final text blob."""
        return "".join(block.render() for block in self.blocks)
