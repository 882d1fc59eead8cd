"""Reference collection for a single file."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..cancellation import NEVER_CANCELLED, CancellationToken
from ..models import CollectedReference, ResolutionKind, SourceFile, Symbol

if TYPE_CHECKING:
    from ..resolvers.protocol import SymbolResolver

logger = logging.getLogger(__name__)


def classify(resolver: SymbolResolver, symbol: Symbol | None) -> ResolutionKind:
    """Map a resolved symbol onto the three outcomes the traversal acts on."""
    if symbol is None:
        return ResolutionKind.UNRESOLVED
    if resolver.get_owning_file(symbol) is not None:
        return ResolutionKind.SOURCE_FILE
    if symbol.decompilable:
        return ResolutionKind.EXTERNAL_DECOMPILABLE
    return ResolutionKind.UNRESOLVED


class ReferenceCollector:
    """Scan one file and list the distinct names it references.

    Stateless apart from the resolver it reads from: the caller owns every
    piece of traversal bookkeeping.
    """

    def __init__(self, resolver: SymbolResolver) -> None:
        self._resolver = resolver

    def collect(
        self,
        file: SourceFile,
        cancel_token: CancellationToken = NEVER_CANCELLED,
    ) -> list[CollectedReference]:
        """Return one entry per qualified name, in first-seen order.

        Imports are scanned before in-body references. If *cancel_token*
        fires mid-scan the entries found so far are returned.
        """
        collected: dict[str, CollectedReference] = {}
        scans = (
            (self._resolver.import_tokens, self._resolver.resolve_import),
            (self._resolver.reference_tokens, self._resolver.resolve_reference),
        )

        for tokens, resolve in scans:
            for token in tokens(file):
                if cancel_token.cancelled:
                    logger.debug("Reference scan of %s cancelled", file.path)
                    return list(collected.values())

                symbol = resolve(file, token)
                name = symbol.qualified_name if symbol is not None else token
                if name in collected:
                    continue

                kind = classify(self._resolver, symbol)
                collected[name] = CollectedReference(name, kind, symbol)

        return list(collected.values())
