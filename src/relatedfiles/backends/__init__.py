"""Backend abstractions for structural file analysis."""

from .models import ImportInfo, DeclarationInfo, FileOutline
from .protocol import FileAnalysisBackend
from .ast_backend import ASTFileAnalysisBackend

__all__ = [
    "ImportInfo",
    "DeclarationInfo",
    "FileOutline",
    "FileAnalysisBackend",
    "ASTFileAnalysisBackend",
]
