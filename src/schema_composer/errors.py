"""Custom exceptions for schema composition."""


class ComposerError(Exception):
    """Base exception for all Schema Composer errors."""

    pass


class InvalidArgumentError(ComposerError, ValueError):
    """Raised when a call is rejected before any work is performed.

    Covers empty source sets, mismatched destination counts and missing
    names in the value-sampling heuristic.
    """

    pass


class CompositionStateError(ComposerError, RuntimeError):
    """Raised when an operation needs a composition that has not run yet."""

    pass


class SourceLoadError(ComposerError, ValueError):
    """Raised when a source's documents cannot be read or parsed."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        location = f" ({path})" if path else ""
        super().__init__(f"{message}{location}")
