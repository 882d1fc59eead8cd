"""SmartFileAccess: unified layer for reading and outlining project files.

Composes a FileBackend (raw I/O) with a FileAnalysisBackend (structure).
Outlines are cached per path for the lifetime of the instance, so a single
traversal never parses the same file twice.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator

from .backends import ASTFileAnalysisBackend, FileOutline

if TYPE_CHECKING:
    from .backends.protocol import FileAnalysisBackend
    from .files.protocol import FileBackend

logger = logging.getLogger(__name__)


class SmartFileAccess:
    """Unified file access with cached structural outlines.

    Usage:
        access = SmartFileAccess(LocalFileBackend(project_root))

        text = access.read_text("src/main/java/com/acme/app/Service.java")
        outline = access.get_outline("src/main/java/com/acme/app/Service.java")
    """

    def __init__(
        self,
        file_backend: FileBackend,
        analysis_backend: FileAnalysisBackend | None = None,
    ) -> None:
        self._files = file_backend
        self._analysis = analysis_backend or ASTFileAnalysisBackend()
        self._outlines: dict[str, FileOutline | None] = {}

    @property
    def file_backend(self) -> FileBackend:
        return self._files

    def read_text(self, file_path: str) -> str | None:
        return self._files.read_file(file_path)

    def get_outline(self, file_path: str) -> FileOutline | None:
        """Get the file outline, or None when the file cannot be read."""
        if file_path in self._outlines:
            return self._outlines[file_path]

        source = self._files.read_file(file_path)
        outline = None
        if source is not None:
            outline = self._analysis.get_outline(file_path, source)
            if not outline.parsed:
                logger.debug("Could not parse %s; treating it as unstructured", file_path)
        self._outlines[file_path] = outline
        return outline

    def walk_files(self, suffixes: set[str] | None = None) -> Iterator[str]:
        """Walk project files, optionally limited to the given suffixes."""
        for path in self._files.walk_files():
            if suffixes is None or any(path.endswith(suffix) for suffix in suffixes):
                yield path

    def invalidate(self, file_path: str | None = None) -> None:
        """Drop cached outlines (all of them when *file_path* is None)."""
        if file_path is None:
            self._outlines.clear()
        else:
            self._outlines.pop(file_path, None)
