"""Symbol resolvers: map references in a file to symbols and files."""

from .protocol import SymbolResolver
from .java_resolver import JavaSymbolResolver
from .python_resolver import PythonSymbolResolver
from .javap import JavapDecompiler
from .memory import InMemorySymbolResolver

__all__ = [
    "SymbolResolver",
    "JavaSymbolResolver",
    "PythonSymbolResolver",
    "JavapDecompiler",
    "InMemorySymbolResolver",
]
