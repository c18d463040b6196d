# smartspend/exceptions.py
# Errors raised by the REST client (smartspend/client.py).
# Views catch ApiError and turn it into a flash message; the session
# middleware handles ApiAuthenticationError on its own.


class ApiError(Exception):
    """The SmartSpend API answered with an error (or could not be reached)."""

    default_message = "Server error occurred"

    def __init__(self, message=None, status=None, payload=None):
        self.detail = message                       # exactly what the API said (may be None)
        self.message = message or self.default_message
        self.status = status
        self.payload = payload
        super().__init__(self.message)

    @property
    def is_server_error(self):
        return self.status is not None and self.status >= 500


class ApiNetworkError(ApiError):
    """No response at all (DNS, refused connection, timeout)."""

    default_message = "Network error - unable to reach server"


class ApiValidationError(ApiError):
    """400: the API rejected the submitted data."""

    default_message = "Invalid request data"


class ApiAuthenticationError(ApiError):
    """401: missing, expired or revoked token."""

    default_message = "Your session has expired. Please sign in again."


class ApiNotFoundError(ApiError):
    default_message = "Not found"


class ApiConflictError(ApiError):
    """409: duplicate record (e.g. a bank account name already in use)."""

    default_message = "This record already exists"


# status code → exception class
STATUS_ERRORS = {
    400: ApiValidationError,
    401: ApiAuthenticationError,
    404: ApiNotFoundError,
    409: ApiConflictError,
}


def error_for_status(status, message=None, payload=None):
    """Build the right ApiError subclass for an HTTP status code."""
    cls = STATUS_ERRORS.get(status, ApiError)
    return cls(message, status=status, payload=payload)
