"""Error taxonomy shared by the stores and the request handlers.

Stores raise these; ``backend.main`` turns them into JSON responses of the
form ``{"error": message}`` with the matching status code.
"""

from fastapi import status


class StoreError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationConflict(StoreError):
    """The write conflicts with existing data, e.g. a duplicate email."""
    status_code = status.HTTP_400_BAD_REQUEST


class AuthFailure(StoreError):
    """Unknown user or wrong password."""
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFound(StoreError):
    status_code = status.HTTP_404_NOT_FOUND


class StoreFailure(StoreError):
    """Unclassified persistence error. The driver error is kept as ``__cause__``."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
