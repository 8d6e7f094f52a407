"""Errors raised by the debate services for input the caller must fix."""


class DebateInputError(ValueError):
    """Request content is unusable (missing user speech, unknown role, ...). Maps to HTTP 400."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
