"""Backend abstractions for file access.

This module provides pluggable backends for reading project files:
- Local filesystem access (default)
- In-memory backends for testing and embedding
"""

from .protocol import FileBackend
from .local import LocalFileBackend, DEFAULT_IGNORED_DIRS
from .memory import InMemoryFileBackend

__all__ = [
    "FileBackend",
    "LocalFileBackend",
    "InMemoryFileBackend",
    "DEFAULT_IGNORED_DIRS",
]
