"""Dependency-closure traversal: the core of related-files."""

from .scope import include_by_scope, derive_scope_prefix
from .collector import ReferenceCollector, classify
from .policy import RelatednessRules
from .engine import DependencyTraversal, TraversalContext

__all__ = [
    "include_by_scope",
    "derive_scope_prefix",
    "ReferenceCollector",
    "classify",
    "RelatednessRules",
    "DependencyTraversal",
    "TraversalContext",
]
