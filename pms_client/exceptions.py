class ApiError(Exception):
    """A non-2xx response from the API."""

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class AuthenticationRequired(ApiError):
    """The token is missing, expired or invalid; the user must log in again."""


class PermissionDenied(ApiError):
    pass


class NotFound(ApiError):
    pass
