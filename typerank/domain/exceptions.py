"""Error taxonomy shared by every use case.

Routes translate these into HTTP responses; nothing below the API layer
knows about status codes.
"""


class InvalidInputError(ValueError):
    """Request is malformed or self-contradictory."""


class NotFoundError(LookupError):
    """A referenced game mode, text or attempt does not exist."""

    def __init__(self, message: str, identifier: str | None = None):
        super().__init__(message)
        self.identifier = identifier


class InternalError(RuntimeError):
    """The record store failed. The message is safe to show to clients."""

    def __init__(self, message: str = "Internal server error."):
        super().__init__(message)
