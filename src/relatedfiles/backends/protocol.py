"""Protocol definition for structural file analysis backends."""

from __future__ import annotations
from typing import Protocol, runtime_checkable, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import FileOutline


@runtime_checkable
class FileAnalysisBackend(Protocol):
    """Protocol for structural code analysis backends.

    Methods receive source code as a string parameter rather than
    reading files directly: this keeps the backend testable and
    decoupled from I/O concerns. SmartFileAccess handles file reading.
    """

    def get_outline(self, file_path: str, source: str) -> FileOutline:
        """Extract file outline: package, imports, declarations and references.

        Args:
            file_path: Used to detect language from extension.
            source: File content as string.

        Returns:
            FileOutline; languages the backend does not understand yield an
            outline with language "unknown" and no structure.
        """
        ...
