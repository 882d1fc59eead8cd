"""Project root detection."""

from pathlib import Path

PROJECT_MARKERS = (
    ".git",
    "pom.xml",
    "build.gradle",
    "build.gradle.kts",
    "settings.gradle",
    "settings.gradle.kts",
    "pyproject.toml",
)


def find_project_root(path: Path) -> Path:
    """Return the nearest ancestor of *path* holding a build or VCS marker.

    Falls back to the directory containing *path* when no marker is found.
    """
    path = path.resolve()
    start = path if path.is_dir() else path.parent
    for candidate in (start, *start.parents):
        if any((candidate / marker).exists() for marker in PROJECT_MARKERS):
            return candidate
    return start
