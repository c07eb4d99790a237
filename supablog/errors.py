"""Error types shared by the backend, the containers and the pages."""


class BackendError(RuntimeError):
    """Raised when a call to the hosted backend fails."""


class DatabaseError(BackendError):
    """Raised when a row select/insert/update/delete is rejected."""


class AuthServiceError(BackendError):
    """Raised when the auth service rejects a sign up, sign in or sign out."""


class NetworkError(BackendError):
    """Raised when the backend cannot be reached."""


class RequestRejected(RuntimeError):
    """Raised by a thunk after it has stored a failure in its container.

    The message is the same string the container holds in its ``error`` field.
    """

    def __init__(self, action: str, message: str):
        super().__init__(message)
        self.action = action
        self.message = message
