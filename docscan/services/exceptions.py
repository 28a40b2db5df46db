from typing import ClassVar


class ServiceCallError(Exception):
    """Base class for failures raised by the OCR and extraction boundaries."""

    retryable: ClassVar[bool] = False

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NetworkError(ServiceCallError):
    """Connection-level failure, including per-request timeouts."""

    retryable = True


class RateLimitedError(ServiceCallError):
    """Provider answered with HTTP 429."""

    retryable = True


class ServiceError(ServiceCallError):
    """Provider answered with HTTP 5xx or 408."""

    retryable = True


class ClientRequestError(ServiceCallError):
    """Provider rejected the request (HTTP 4xx other than 408/429)."""


class AuthenticationError(ClientRequestError):
    """Provider rejected the credentials (HTTP 401/403)."""


class MalformedResponseError(ServiceCallError):
    """Provider answered successfully but the payload is unusable."""


def classify_status(status_code: int, message: str) -> ServiceCallError:
    """Map an HTTP status code onto the boundary error taxonomy.

    Args:
        status_code: HTTP status returned by the provider.
        message: Human readable detail to carry on the error.

    Returns:
        The matching ServiceCallError subclass instance.
    """
    if status_code == 429:
        return RateLimitedError(message, status_code=status_code)
    if status_code == 408 or status_code >= 500:
        return ServiceError(message, status_code=status_code)
    if status_code in (401, 403):
        return AuthenticationError(message, status_code=status_code)
    return ClientRequestError(message, status_code=status_code)
