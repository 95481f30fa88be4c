"""Exceptions raised by the bundling core and its collaborators."""


class BlitzError(Exception):
    """Base exception for all bundle-blitz operations."""


class StageError(BlitzError):
    """Raised when an optional transform or format stage fails."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(message)
        self.stage = stage
        self.message = message


class CollaboratorError(BlitzError):
    """Raised when an AI or static-analysis collaborator call fails."""


class BuildInProgressError(BlitzError):
    """Raised when a build is triggered while another one is still running."""


class InvariantViolation(BlitzError):
    """Raised when preview normalization leaves the document without a head."""


class UnknownFileError(BlitzError):
    """Raised when a workspace file id does not exist."""
