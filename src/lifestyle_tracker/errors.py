"""Error types raised by the tracker core."""


class TrackerError(Exception):
    """Base class for tracker errors."""


class NotFoundError(TrackerError):
    """Raised when a requested document does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Document not found: {path}")
        self.path = path


class ValidationError(TrackerError):
    """Raised when a plan or request is rejected before any persistence."""


class PartialPersistFailure(TrackerError):
    """One of the session/plan writes of a reconciliation step failed.

    The other write may already have been committed. Nothing is rolled back;
    reloading the week rebuilds the session references from the log.
    """

    def __init__(self, step: str, cause: BaseException):
        super().__init__(f"Failed to persist {step}: {cause}")
        self.step = step
        self.cause = cause
