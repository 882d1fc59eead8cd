"""In-memory file backend for tests and embedding."""

from pathlib import PurePosixPath
from typing import Iterator


class InMemoryFileBackend:
    """Dict-backed FileBackend that never touches the filesystem.

    Example:
        backend = InMemoryFileBackend("/fake/repo", {
            "src/com/acme/app/Service.java": "package com.acme.app; ...",
        })
        backend.read_file("src/com/acme/app/Service.java")
    """

    def __init__(
        self,
        repo_path: str = "/fake/repo",
        files: dict[str, str] | None = None,
    ):
        self._repo_path = repo_path
        self._files: dict[str, str] = {}
        for path, content in (files or {}).items():
            self.add_file(path, content)

    @property
    def repo_path(self) -> str:
        return self._repo_path

    def add_file(self, path: str, content: str) -> None:
        """Add or replace a file."""
        key = self._key(path)
        if key is None:
            raise ValueError(f"Path escapes the project: {path}")
        self._files[key] = content

    def remove_file(self, path: str) -> None:
        key = self._key(path)
        if key is not None:
            self._files.pop(key, None)

    @staticmethod
    def _key(path: str) -> str | None:
        """Collapse ``.``/``..`` segments; None when the path leaves the root."""
        parts: list[str] = []
        for part in PurePosixPath(path).parts:
            if part == "..":
                if not parts:
                    return None
                parts.pop()
            elif part not in (".", "/"):
                parts.append(part)
        return "/".join(parts)

    def relative_path(self, path: str) -> str | None:
        prefix = self._repo_path.rstrip("/") + "/"
        if path.startswith(prefix):
            path = path[len(prefix):]
        key = self._key(path)
        return key if key in self._files else None

    def read_file(self, path: str, max_size: int | None = None) -> str | None:
        key = self._key(path)
        content = self._files.get(key) if key is not None else None
        if content is None:
            return None
        if max_size is not None and len(content.encode()) > max_size:
            return None
        return content

    def file_exists(self, path: str) -> bool:
        key = self._key(path)
        return key is not None and key in self._files

    def walk_files(
        self,
        root: str = "",
        ignore_dirs: set[str] | None = None,
    ) -> Iterator[str]:
        ignored = ignore_dirs or set()
        prefix = self._key(root) if root else ""
        if prefix is None:
            return

        for path in sorted(self._files):
            if prefix and path != prefix and not path.startswith(prefix + "/"):
                continue
            # Only directory components are matched against ignored names
            if ignored.intersection(PurePosixPath(path).parts[:-1]):
                continue
            yield path
