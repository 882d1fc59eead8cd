"""Language-specific parsers for AST analysis."""

from .java_parser import JavaParser
from .python_parser import PythonParser

__all__ = ["JavaParser", "PythonParser"]
