"""Relatedness rules derived from a TraversalPolicy."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import RelatednessLevel, TraversalPolicy
from .scope import derive_scope_prefix, include_by_scope


@dataclass(frozen=True)
class RelatednessRules:
    """Decision functions the traversal consults at every step."""

    policy: TraversalPolicy

    @property
    def level(self) -> RelatednessLevel:
        return self.policy.relatedness_level

    @property
    def strict(self) -> bool:
        return self.level is RelatednessLevel.STRICT

    @property
    def max_depth(self) -> int:
        return self.policy.effective_max_depth

    @property
    def needs_direct_pass(self) -> bool:
        return self.policy.only_direct_references or self.strict

    @property
    def restrict_to_direct_references(self) -> bool:
        """Only names referenced by the root itself may be followed.

        Always true for STRICT. Below BROAD, ``only_direct_references`` keeps
        dependents from pulling in names the root never mentions.
        """
        if self.strict:
            return True
        return self.policy.only_direct_references and self.level is not RelatednessLevel.BROAD

    @property
    def include_dependents(self) -> bool:
        return not self.strict

    @property
    def expand_dependents(self) -> bool:
        """Pull in implementers of interface-like types the root declares."""
        return self.policy.include_implementations and not self.strict

    def may_expand(self, depth: int) -> bool:
        """Whether a file visited at *depth* may have its own references followed."""
        if depth >= self.max_depth:
            return False
        if self.level is RelatednessLevel.BROAD:
            return True
        if self.level is RelatednessLevel.MEDIUM:
            return depth < 1
        return False

    def scope_prefix(self, root_package: str) -> str:
        return derive_scope_prefix(
            root_package,
            self.policy.package_segments,
            self.policy.include_dependencies,
        )

    def in_scope(self, qualified_name: str, scope_prefix: str) -> bool:
        return include_by_scope(qualified_name, scope_prefix, self.policy.excluded_packages)

    def decompiled_allowed(self, decompiled_count: int) -> bool:
        return self.policy.include_decompiled and decompiled_count < self.policy.max_decompiled_files
