"""Dependency graph traversal.

Starting from a root file, computes the ordered, de-duplicated set of
related files under a TraversalPolicy:

1. derive the scope prefix from the root's package;
2. collect the root's direct references;
3. split them into direct dependencies, and find dependents (implementers
   of interface-like types the root declares);
4. emit dependencies, then the root, then dependents, expanding each file's
   own references recursively while depth and relatedness level allow.
   Direct dependencies sit one hop from the root; dependents sit at the
   root's depth.

A failure while handling one file is logged and recorded as a FileError;
the run carries on with the next reference.

All bookkeeping lives in a TraversalContext created per run, so two runs
never share state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..cancellation import NEVER_CANCELLED, CancellationToken
from ..config import TraversalPolicy
from ..errors import DecompilationError, RootFileError
from ..models import (
    BlockKind,
    CollectedReference,
    FileError,
    OutputBlock,
    ResolutionKind,
    RunStatus,
    SourceFile,
    Symbol,
    TraversalResult,
)
from .collector import ReferenceCollector, classify
from .policy import RelatednessRules

if TYPE_CHECKING:
    from ..extractor import ContentExtractor
    from ..progress import ProgressListener
    from ..resolvers.protocol import SymbolResolver

logger = logging.getLogger(__name__)


@dataclass
class TraversalContext:
    """Mutable state of one traversal run."""

    scope_prefix: str = ""
    visited_files: set[str] = field(default_factory=set)
    visited_symbols: set[str] = field(default_factory=set)
    direct_references: set[str] = field(default_factory=set)
    decompiled_count: int = 0
    blocks: list[OutputBlock] = field(default_factory=list)
    errors: list[FileError] = field(default_factory=list)
    total_estimate: int = 0


class DependencyTraversal:
    """Compute the related-file set for one root file."""

    def __init__(
        self,
        resolver: SymbolResolver,
        extractor: ContentExtractor,
        policy: TraversalPolicy | None = None,
        cancel_token: CancellationToken = NEVER_CANCELLED,
        progress: ProgressListener | None = None,
    ) -> None:
        self._resolver = resolver
        self._extractor = extractor
        self._policy = policy or TraversalPolicy()
        self._rules = RelatednessRules(self._policy)
        self._collector = ReferenceCollector(resolver)
        self._cancel = cancel_token
        self._progress = progress

    @property
    def rules(self) -> RelatednessRules:
        return self._rules

    def run(self, root: SourceFile) -> TraversalResult:
        """Traverse from *root* and return the emitted blocks in order.

        Raises:
            RootFileError: the root cannot be read or its package is unknown.
        """
        if self._extractor.read_text(root) is None:
            raise RootFileError(f"Cannot read root file: {root.path}")
        package = self._resolver.get_package_of(root)
        if package is None:
            raise RootFileError(f"Cannot determine package of root file: {root.path}")

        ctx = TraversalContext(scope_prefix=self._rules.scope_prefix(package))
        logger.debug("Detected base package: %s (scope prefix %r)", package, ctx.scope_prefix)

        try:
            root_references = self._collector.collect(root, self._cancel)
        except Exception as e:
            self._record_error(root.path, e, ctx)
            root_references = []
        if self._rules.needs_direct_pass:
            ctx.direct_references = {ref.qualified_name for ref in root_references}

        dependencies, dependents = self._identify_relationships(root, root_references, ctx)
        ctx.total_estimate = len(dependencies) + 1 + len(dependents)

        for ref in dependencies:
            if self._cancel.cancelled:
                break
            # One hop from the root, but emitted even when max_depth is 0
            try:
                self._emit(ref.symbol, ref.kind, depth=1, ctx=ctx, bounded=False)
            except Exception as e:
                self._record_error(root.path, e, ctx)

        self._process_file(root, 0, ctx)

        if self._rules.include_dependents:
            for symbol in dependents:
                if self._cancel.cancelled:
                    break
                try:
                    owner = self._resolver.get_owning_file(symbol)
                except Exception as e:
                    self._record_error(root.path, e, ctx)
                    continue
                if owner is not None and owner.path not in ctx.visited_files:
                    self._process_file(owner, 0, ctx)

        status = RunStatus.CANCELLED if self._cancel.cancelled else RunStatus.COMPLETED
        logger.debug(
            "Traversal %s: %d blocks, %d errors", status.value, len(ctx.blocks), len(ctx.errors)
        )
        return TraversalResult(
            blocks=ctx.blocks,
            status=status,
            errors=ctx.errors,
            direct_references=ctx.direct_references,
            scope_prefix=ctx.scope_prefix,
        )

    def _identify_relationships(
        self,
        root: SourceFile,
        root_references: list[CollectedReference],
        ctx: TraversalContext,
    ) -> tuple[list[CollectedReference], list[Symbol]]:
        """Split the root's neighbourhood into direct dependencies and dependents."""
        dependencies: list[CollectedReference] = []
        for ref in root_references:
            if ref.kind is ResolutionKind.UNRESOLVED:
                continue
            if not self._rules.in_scope(ref.qualified_name, ctx.scope_prefix):
                continue
            if self._rules.restrict_to_direct_references and ref.qualified_name not in ctx.direct_references:
                continue
            if ref.qualified_name in ctx.visited_symbols:
                continue
            ctx.visited_symbols.add(ref.qualified_name)
            dependencies.append(ref)

        declared = self._resolver.declared_symbols(root)
        ctx.visited_symbols.update(symbol.qualified_name for symbol in declared)

        dependents: list[Symbol] = []
        if self._rules.expand_dependents:
            for symbol in declared:
                if not symbol.is_interface_like:
                    continue
                try:
                    implementers = list(self._resolver.find_implementers(symbol, ctx.scope_prefix))
                except Exception as e:
                    self._record_error(root.path, e, ctx)
                    continue
                for implementer in implementers:
                    name = implementer.qualified_name
                    if name in ctx.visited_symbols or not self._rules.in_scope(name, ctx.scope_prefix):
                        continue
                    ctx.visited_symbols.add(name)
                    dependents.append(implementer)

        return dependencies, dependents

    def _process_file(
        self, file: SourceFile, depth: int, ctx: TraversalContext, bounded: bool = True
    ) -> None:
        if self._cancel.cancelled:
            return
        if file.path in ctx.visited_files or not file.is_source:
            return
        if bounded and depth > self._rules.max_depth:
            return
        # Mark first: cycles back to this file become no-ops.
        ctx.visited_files.add(file.path)
        logger.debug("Processing file: %s (depth %d)", file.path, depth)
        self._report(file.path, ctx)

        try:
            content = self._extractor.extract(
                file,
                include_javadoc=self._policy.include_javadoc,
                smart_pruning=self._policy.smart_pruning,
            )
            ctx.blocks.append(OutputBlock(path=file.path, content=content, depth=depth))

            if not self._rules.may_expand(depth):
                return

            references = self._collector.collect(file, self._cancel)
        except Exception as e:
            self._record_error(file.path, e, ctx)
            return

        for ref in references:
            if self._cancel.cancelled:
                return
            try:
                self._follow(ref, depth, ctx)
            except Exception as e:
                self._record_error(file.path, e, ctx)

    def _follow(self, ref: CollectedReference, depth: int, ctx: TraversalContext) -> None:
        name = ref.qualified_name
        if name in ctx.visited_symbols or not self._rules.in_scope(name, ctx.scope_prefix):
            return
        if self._rules.restrict_to_direct_references and name not in ctx.direct_references:
            return

        ctx.visited_symbols.add(name)
        logger.debug("Found reference: %s (%s)", name, ref.kind.value)
        ctx.total_estimate += 1
        self._emit(ref.symbol, ref.kind, depth + 1, ctx)

        symbol = ref.symbol
        if symbol is None or not symbol.is_interface_like or not self._policy.include_implementations:
            return

        for implementer in self._resolver.find_implementers(symbol, ctx.scope_prefix):
            if self._cancel.cancelled:
                return
            impl_name = implementer.qualified_name
            if impl_name in ctx.visited_symbols or not self._rules.in_scope(impl_name, ctx.scope_prefix):
                continue
            ctx.visited_symbols.add(impl_name)
            logger.debug("Found implementer of %s: %s", name, impl_name)
            self._emit(implementer, classify(self._resolver, implementer), depth + 1, ctx)

    def _emit(
        self,
        symbol: Symbol | None,
        kind: ResolutionKind,
        depth: int,
        ctx: TraversalContext,
        bounded: bool = True,
    ) -> None:
        if symbol is None:
            return
        if kind is ResolutionKind.SOURCE_FILE:
            owner = self._resolver.get_owning_file(symbol)
            if owner is not None:
                self._process_file(owner, depth, ctx, bounded=bounded)
        elif kind is ResolutionKind.EXTERNAL_DECOMPILABLE:
            self._emit_decompiled(symbol, depth, ctx)

    def _emit_decompiled(self, symbol: Symbol, depth: int, ctx: TraversalContext) -> None:
        if not self._rules.decompiled_allowed(ctx.decompiled_count):
            logger.debug("Skipping decompiled %s (disabled or cap reached)", symbol.qualified_name)
            return

        self._report(symbol.qualified_name, ctx)
        try:
            text = self._resolver.get_decompiled_text(symbol)
        except DecompilationError as e:
            logger.warning("Decompilation failed for %s: %s", symbol.qualified_name, e)
            ctx.blocks.append(OutputBlock(
                path=symbol.qualified_name,
                content=f"// Decompilation failed for {symbol.qualified_name}: {e}",
                kind=BlockKind.DECOMPILE_FAILED,
                depth=depth,
            ))
            return

        if text is None:
            return
        ctx.blocks.append(OutputBlock(
            path=symbol.qualified_name,
            content=text,
            kind=BlockKind.DECOMPILED,
            depth=depth,
        ))
        ctx.decompiled_count += 1

    def _record_error(self, path: str, error: Exception, ctx: TraversalContext) -> None:
        logger.warning("Error processing file %s: %s", path, error, exc_info=True)
        ctx.errors.append(FileError(path=path, message=str(error)))

    def _report(self, label: str, ctx: TraversalContext) -> None:
        if self._progress is None:
            return
        processed = len(ctx.visited_files) + ctx.decompiled_count
        ctx.total_estimate = max(ctx.total_estimate, processed)
        self._progress.update(processed, ctx.total_estimate, label)
