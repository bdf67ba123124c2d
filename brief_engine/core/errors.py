"""Error taxonomy for brief analysis, merging and refinement."""


class BriefEngineError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str, recoverable: bool = False):
        super().__init__(message)
        self.recoverable = recoverable


class CollaboratorError(BriefEngineError):
    """Raised when an external generation collaborator cannot be used.

    Collaborator errors are recoverable: the session keeps its document and
    stays usable.
    """

    def __init__(self, message: str, collaborator: str | None = None):
        super().__init__(message, recoverable=True)
        self.collaborator = collaborator


class ValidationError(CollaboratorError):
    """Collaborator response parsed but has the wrong shape."""


class NetworkError(CollaboratorError):
    """Collaborator unreachable, timed out or rate limited."""


class ParseError(CollaboratorError):
    """Collaborator response is not JSON or is truncated."""


class InternalError(BriefEngineError):
    """Unexpected exception inside scoring or aggregation."""


class IllegalTransitionError(BriefEngineError):
    """Raised when a refinement event is not valid in the current state."""

    def __init__(self, state: str, event: str):
        super().__init__(f"Event '{event}' is not allowed in state '{state}'")
        self.state = state
        self.event = event


class SessionBusyError(BriefEngineError):
    """Raised when a session already has a request in flight."""
