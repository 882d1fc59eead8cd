"""related-files - Collect a source file together with the files it depends on."""

__version__ = "0.1.0"

from .config import Config, RelatednessLevel, TraversalPolicy
from .models import (
    SourceFile,
    Symbol,
    OutputBlock,
    TraversalResult,
    RunStatus,
)
from .cancellation import CancellationToken
from .errors import RelatedFilesError, RootFileError
from .runner import run, run_in_background

__all__ = [
    "Config",
    "RelatednessLevel",
    "TraversalPolicy",
    "SourceFile",
    "Symbol",
    "OutputBlock",
    "TraversalResult",
    "RunStatus",
    "CancellationToken",
    "RelatedFilesError",
    "RootFileError",
    "run",
    "run_in_background",
]
