class GolfBrainError(Exception):
    """Base for errors raised by the service layer.

    Each subclass carries the HTTP status the API answers with; the message is
    passed through to the client as ``detail``.
    """

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(GolfBrainError):
    """Input rejected before touching the database."""

    status_code = 400


class NotFoundError(GolfBrainError):
    """Row missing or owned by another user."""

    status_code = 404


class ConflictError(GolfBrainError):
    """Operation not allowed in the current state (e.g. round already complete)."""

    status_code = 409


class StoreError(GolfBrainError):
    """Database failure; message is the driver's."""

    status_code = 500
