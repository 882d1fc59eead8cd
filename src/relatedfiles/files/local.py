"""Local filesystem backend."""

import logging
import os
from pathlib import Path
from typing import Iterator

from pathspec import PathSpec
from pathspec.patterns.gitwildmatch import GitWildMatchPattern

from ..config import DEFAULT_IGNORED_DIRS as _CONFIG_IGNORED_DIRS

logger = logging.getLogger(__name__)

# Directories to always ignore when walking
DEFAULT_IGNORED_DIRS: set[str] = set(_CONFIG_IGNORED_DIRS) | {
    ".mypy_cache", ".ruff_cache", ".tox", ".nox", "out",
}


class LocalFileBackend:
    """Local filesystem backend with path traversal protection.

    All paths are relative to the project root. The backend ensures
    that file access cannot escape the project boundary, and honours the
    root ``.gitignore`` when walking.
    """

    def __init__(
        self,
        repo_path: str | Path,
        ignored_dirs: set[str] | None = None,
        max_file_size: int = 1_000_000,
        respect_gitignore: bool = True,
    ):
        """Initialize backend bound to a project root.

        Args:
            repo_path: Path to project root
            ignored_dirs: Directory names to skip (defaults to common ignores)
            max_file_size: Files larger than this are neither read nor walked
            respect_gitignore: Skip paths matched by the root .gitignore
        """
        self._repo_path = Path(repo_path).resolve()
        self._ignored_dirs = ignored_dirs or DEFAULT_IGNORED_DIRS
        self._max_file_size = max_file_size

        if not self._repo_path.is_dir():
            raise ValueError(f"Project path is not a directory: {repo_path}")

        self._gitignore = self._load_gitignore() if respect_gitignore else None

    @property
    def repo_path(self) -> str:
        """Root path of the project this backend is bound to."""
        return str(self._repo_path)

    def _load_gitignore(self) -> PathSpec | None:
        gitignore_path = self._repo_path / ".gitignore"
        if not gitignore_path.exists():
            return None

        try:
            patterns = gitignore_path.read_text().splitlines()
        except OSError:
            return None

        if not patterns:
            return None

        return PathSpec.from_lines(GitWildMatchPattern, patterns)

    def _resolve_safe_path(self, path: str) -> Path | None:
        """Resolve a relative path safely within the project boundary.

        Returns:
            Resolved absolute Path, or None if path escapes boundary or is invalid
        """
        try:
            full_path = (self._repo_path / path).resolve()
            try:
                full_path.relative_to(self._repo_path)
            except ValueError:
                return None
            return full_path
        except OSError:
            return None

    def relative_path(self, path: str | Path) -> str | None:
        """Convert an absolute or cwd-relative path into a project-relative one."""
        try:
            full_path = Path(path).resolve()
            return full_path.relative_to(self._repo_path).as_posix()
        except (OSError, ValueError):
            return None

    def read_file(self, path: str, max_size: int | None = None) -> str | None:
        """Read file content with path traversal protection."""
        full_path = self._resolve_safe_path(path)
        if full_path is None:
            return None

        limit = max_size if max_size is not None else self._max_file_size
        try:
            if not full_path.is_file():
                return None

            if full_path.stat().st_size > limit:
                logger.debug("Skipping %s: larger than %d bytes", path, limit)
                return None

            return full_path.read_text(encoding="utf-8", errors="ignore")

        except OSError:
            # Permissions, broken symlinks, etc.
            return None

    def file_exists(self, path: str) -> bool:
        full_path = self._resolve_safe_path(path)
        if full_path is None:
            return False

        try:
            return full_path.is_file()
        except OSError:
            return False

    def _is_gitignored(self, rel_path: str) -> bool:
        return bool(self._gitignore and self._gitignore.match_file(rel_path))

    def walk_files(
        self,
        root: str = "",
        ignore_dirs: set[str] | None = None,
    ) -> Iterator[str]:
        """Iterate over all files in a directory tree, sorted per directory."""
        ignored = self._ignored_dirs | (ignore_dirs or set())

        start_path = self._resolve_safe_path(root) if root else self._repo_path
        if start_path is None or not start_path.is_dir():
            return

        for dirpath, dirnames, filenames in os.walk(start_path):
            current = Path(dirpath)
            # Prune ignored directories (modifying in-place)
            dirnames[:] = sorted(
                d for d in dirnames
                if d not in ignored
                and not d.endswith(".egg-info")
                and not self._is_gitignored((current / d).relative_to(self._repo_path).as_posix() + "/")
            )

            for filename in sorted(filenames):
                rel_path = (current / filename).relative_to(self._repo_path).as_posix()
                if self._is_gitignored(rel_path):
                    continue
                yield rel_path
