"""Errors raised by the backend API client."""

HTTP_UNAUTHORIZED = 401


class ApiError(Exception):
    """A backend call failed; the user may retry."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail

    def user_message(self, default: str) -> str:
        """The backend's own error text when it sent one, else the default."""
        return self.detail or default


class UnauthorizedError(ApiError):
    """The backend rejected the bearer token."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status_code=HTTP_UNAUTHORIZED)


class RequestTimeoutError(ApiError):
    """The backend did not answer in time."""


class ApiResponseError(ApiError):
    """The backend answered but reported failure in its envelope."""
