"""
Domain exceptions raised by service functions.

Views translate these into ``{'error': message}`` responses.
"""


class FarmOperationError(Exception):
    """A business rule rejected the requested operation."""

    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class RecordNotFound(FarmOperationError):
    """A referenced record does not exist in the caller's farm."""

    status_code = 404
