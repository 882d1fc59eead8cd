"""Host-facing entry points: wire a project together and run a traversal."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import TYPE_CHECKING

from .cancellation import CancellationToken
from .config import Config, TraversalPolicy
from .errors import RootFileError, UnsupportedSourceError
from .extractor import ContentExtractor
from .file_access import SmartFileAccess
from .files import LocalFileBackend
from .models import SourceFile, TraversalResult
from .project import find_project_root
from .resolvers.java_resolver import JavaSymbolResolver
from .resolvers.javap import JavapDecompiler
from .resolvers.python_resolver import PythonSymbolResolver
from .traversal import DependencyTraversal

if TYPE_CHECKING:
    from .progress import ProgressListener
    from .resolvers.protocol import SymbolResolver

logger = logging.getLogger(__name__)


def create_decompiler(config: Config) -> JavapDecompiler:
    return JavapDecompiler(config.classpath, javap_path=config.javap_path)


def create_resolver(
    root: SourceFile,
    access: SmartFileAccess,
    decompiler: JavapDecompiler | None = None,
) -> SymbolResolver:
    """Pick the symbol resolver for the root file's language.

    Raises:
        UnsupportedSourceError: no resolver handles the root's language.
    """
    if root.language == "java":
        return JavaSymbolResolver(access, decompiler=decompiler)
    if root.language == "python":
        return PythonSymbolResolver(access)
    raise UnsupportedSourceError(f"No resolver for {root.language} files: {root.path}")


def _locate(root_path: Path, repo: Path | None) -> Path:
    path = Path(root_path).resolve()
    if not path.is_file():
        raise RootFileError(f"Root file not found: {root_path}")
    return Path(repo).resolve() if repo is not None else find_project_root(path)


def run(
    root_path: Path,
    policy: TraversalPolicy | None = None,
    *,
    config: Config | None = None,
    resolver: SymbolResolver | None = None,
    progress: ProgressListener | None = None,
    cancel_token: CancellationToken | None = None,
    repo: Path | None = None,
) -> TraversalResult:
    """Collect the files related to *root_path*.

    Args:
        root_path: The file the user started from
        policy: Traversal rules (defaults to ``config.policy``)
        config: Application configuration (defaults to ``Config.from_env()``)
        resolver: Symbol resolver override (chosen by language otherwise)
        progress: Receives processed/total updates
        cancel_token: Checked cooperatively during the traversal
        repo: Project root override (detected from build markers otherwise)

    Raises:
        RootFileError: the root cannot be located, read, or placed in a package.
    """
    config = config or Config.from_env()
    policy = policy or config.policy

    project = _locate(root_path, repo)
    logger.debug("Project root: %s", project)

    backend = LocalFileBackend(
        project,
        ignored_dirs=set(config.ignored_dirs),
        max_file_size=config.max_file_size,
    )
    relative = backend.relative_path(root_path)
    if relative is None:
        raise RootFileError(f"{root_path} is outside project {project}")
    access = SmartFileAccess(backend)
    root = SourceFile.from_path(relative)

    decompiler = create_decompiler(config)
    if policy.include_decompiled and not decompiler.available:
        logger.warning("Decompiled sources requested but javap or classpath is not configured")
    resolver = resolver or create_resolver(root, access, decompiler)

    traversal = DependencyTraversal(
        resolver,
        ContentExtractor(access),
        policy,
        cancel_token=cancel_token or CancellationToken(),
        progress=progress,
    )
    return traversal.run(root)


def run_in_background(
    root_path: Path,
    policy: TraversalPolicy | None = None,
    *,
    cancel_token: CancellationToken | None = None,
    **kwargs,
) -> TraversalResult:
    """Run on a worker thread, keeping the calling thread interruptible.

    Ctrl-C in the caller cancels the traversal; the partial result is still
    returned, with a cancelled status.
    """
    token = cancel_token or CancellationToken()
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="related-files") as executor:
        future = executor.submit(run, root_path, policy, cancel_token=token, **kwargs)
        while True:
            try:
                return future.result(timeout=0.1)
            except FutureTimeoutError:
                continue
            except KeyboardInterrupt:
                logger.debug("Interrupted; cancelling traversal")
                token.cancel()
