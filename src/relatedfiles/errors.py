"""Exception types raised by related-files."""


class RelatedFilesError(Exception):
    """Base class for all related-files errors."""

    pass


class RootFileError(RelatedFilesError):
    """Raised when the root file cannot be read or its package is unknown.

    This is a terminal failure: nothing is emitted for the run.
    """

    pass


class UnsupportedSourceError(RootFileError):
    """Raised when no symbol resolver handles the root file's language."""

    pass


class DecompilationError(RelatedFilesError):
    """Raised when decompiled text for a library symbol cannot be produced."""

    def __init__(self, message: str, qualified_name: str | None = None):
        super().__init__(message)
        self.qualified_name = qualified_name


class DeliveryError(RelatedFilesError):
    """Raised when the aggregated text cannot be written to its destination."""

    pass
