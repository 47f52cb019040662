"""
Domain errors shared by every feature package.

Each error carries the message that is safe to show to the client. The app
factory registers one handler per class that renders `{"error": message}`.
"""

from __future__ import annotations


class ApiError(RuntimeError):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(ApiError):
    status_code = 401
    default_message = "Invalid token"


class InvalidPayload(ApiError):
    status_code = 400
    default_message = "Invalid input"


class InvalidCredentials(ApiError):
    # Same response for unknown username and wrong password.
    status_code = 401
    default_message = "Invalid credentials"


class StorageError(ApiError):
    status_code = 500
    default_message = "Server error"
