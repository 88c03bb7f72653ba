"""Error types shared by the store and the HTTP layer.

Each carries the HTTP status it renders as; the handlers registered in
``eunoia.app`` turn them into ``{"error": ..., "details": ...}`` bodies.
"""


class JournalError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {"error": self.message}


class ValidationError(JournalError):
    status_code = 400
    message = "Invalid request data"

    def __init__(self, message=None, details=None):
        super().__init__(message)
        self.details = details or []

    def to_dict(self):
        body = super().to_dict()
        if self.details:
            body["details"] = self.details
        return body


class AuthError(JournalError):
    status_code = 401
    message = "Not authenticated"


class AuthorizationError(JournalError):
    status_code = 403
    message = "Not authorized"


class NotFoundError(JournalError):
    status_code = 404
    message = "Not found"


class StorageError(JournalError):
    status_code = 500
    message = "Storage failure"
