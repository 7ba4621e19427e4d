"""
Error taxonomy for the content analysis pipeline.

Every error carries the HTTP status it maps to and a message that is safe
to show the caller. Internal detail stays in the server log.
"""


class PipelineError(Exception):
    """Base error for a rejected or failed analysis request."""

    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class ValidationError(PipelineError):
    """Missing or malformed request fields."""

    status_code = 400
    public_message = "Missing required parameters"


class AuthError(PipelineError):
    """Unknown or inactive integration key."""

    status_code = 401
    public_message = "Invalid integration key"


class CollaboratorError(PipelineError):
    """A registry, catalog or record store call failed or timed out."""

    status_code = 502
    public_message = "Upstream service unavailable"

    def __init__(self, collaborator: str, message: str = None, timed_out: bool = False):
        super().__init__(message or f"{collaborator} call failed")
        self.collaborator = collaborator
        self.timed_out = timed_out
        if timed_out:
            self.status_code = 503


class InternalError(PipelineError):
    """Unexpected failure while scoring. Never exposes detail to the caller."""

    status_code = 500
    public_message = "Internal server error"
