"""AST-based file analysis backend.

Uses tree-sitter for Java and stdlib ast for Python.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from .models import FileOutline
from .parsers import JavaParser, PythonParser

_JAVA_EXTS = {".java"}
_PYTHON_EXTS = {".py", ".pyi"}


class ASTFileAnalysisBackend:
    """Structural analysis using AST parsing.

    Java: tree-sitter. Python: stdlib ast.
    Falls back to an unstructured outline for other languages.
    """

    def __init__(self) -> None:
        self._java = JavaParser()
        self._python = PythonParser()

    def _detect_language(self, file_path: str) -> str:
        ext = PurePosixPath(file_path).suffix.lower()
        if ext in _JAVA_EXTS:
            return "java"
        if ext in _PYTHON_EXTS:
            return "python"
        return "unknown"

    def get_outline(self, file_path: str, source: str) -> FileOutline:
        language = self._detect_language(file_path)

        if language == "java":
            return self._java.get_outline(source, file_path)
        if language == "python":
            return self._python.get_outline(source, file_path)

        return FileOutline(
            path=file_path,
            language=language,
            line_count=len(source.splitlines()),
        )
