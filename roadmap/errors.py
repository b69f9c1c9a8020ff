"""Error taxonomy for the progress sync layer.

Remote failures are classified once, in the remote client, so the gateway
can decide per class whether to recover locally, fall back to a create,
reset the session, or surface the failure to the caller.
"""


class SyncError(Exception):
    """Base class for every failure raised by the sync layer."""


class NetworkFailure(SyncError):
    """Raised when the remote store is unreachable, times out, or returns 5xx."""


class AuthRejected(SyncError):
    """Raised when the remote store rejects the bearer credential (401/403)."""


class RecordNotFound(SyncError):
    """Raised when an update targets a record the remote does not hold (404)."""


class RemoteError(SyncError):
    """Raised for any other client error reported by the remote store."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ValidationFailure(SyncError):
    """Raised when a payload, cached value or identifier mapping is malformed."""


class StepLocked(Exception):
    """Raised when navigating into a step the roadmap has not unlocked yet."""

    def __init__(self, step_id: int):
        super().__init__(f"Step {step_id} is locked")
        self.step_id = step_id
