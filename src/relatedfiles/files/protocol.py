"""Protocol definition for file access backends."""

from typing import Protocol, Iterator, runtime_checkable


@runtime_checkable
class FileBackend(Protocol):
    """Protocol for file access backends.

    Backends are initialized with a project root path. All file paths
    passed to methods are relative to that root and use forward slashes.

    Implementations must handle:
    - Path traversal protection (prevent escaping the project boundary)
    - Encoding issues (UTF-8 with error handling)
    - File size limits
    """

    @property
    def repo_path(self) -> str:
        """Root path of the project this backend is bound to."""
        ...

    def read_file(self, path: str, max_size: int | None = None) -> str | None:
        """Read file content.

        Args:
            path: Relative path within the project
            max_size: Maximum file size in bytes (backend default when None)

        Returns:
            File content as string, or None if:
            - File doesn't exist
            - Path escapes the project boundary
            - File exceeds max_size
            - File cannot be read (permissions, encoding, etc.)
        """
        ...

    def file_exists(self, path: str) -> bool:
        """Check if a file exists and is readable."""
        ...

    def walk_files(
        self,
        root: str = "",
        ignore_dirs: set[str] | None = None,
    ) -> Iterator[str]:
        """Iterate over all files in a directory tree.

        Args:
            root: Subdirectory to start from (relative to project root)
            ignore_dirs: Additional directory names to skip

        Yields:
            Relative file paths within the project
        """
        ...
