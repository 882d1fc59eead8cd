"""Package scope filtering."""

from typing import Iterable


def include_by_scope(
    qualified_name: str,
    scope_prefix: str,
    excluded_prefixes: Iterable[str],
) -> bool:
    """Decide whether a qualified name belongs to the traversal scope.

    Exclusions always win over scope inclusion. An empty *scope_prefix*
    means unrestricted; an empty *qualified_name* is never included.
    """
    if not qualified_name:
        return False
    if any(qualified_name.startswith(prefix) for prefix in excluded_prefixes if prefix):
        return False
    return not scope_prefix or qualified_name.startswith(scope_prefix)


def derive_scope_prefix(package: str, package_segments: int, include_dependencies: bool) -> str:
    """Leading *package_segments* segments of *package*, or "" when unrestricted.

    Examples:
        com.acme.app, 2 -> com.acme
        com.acme.app, 5 -> com.acme.app
    """
    if include_dependencies or not package:
        return ""
    return ".".join(package.split(".")[:package_segments])
