"""
Custom exception classes for the AWIS client and Lambda handlers.
"""
from typing import Optional, Any, Tuple


class MissingCredentialsError(ValueError):
    """Exception raised when no access key or secret key is configured."""

    def __init__(self, message: Optional[str] = None):
        """
        Initialize missing credentials error.

        Args:
            message: Error message (defaults to setup instructions)
        """
        message = message or (
            "AWS credentials are not set. Call set_secret_key(key, secret) "
            "or export AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY, then retry."
        )
        super().__init__(message)
        self.message = message


class CredentialsNotFoundError(Exception):
    """Exception raised when the provider chain yields no credentials."""

    def __init__(self, message: str, region: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.region = region


class AwisHTTPError(Exception):
    """Exception raised for AWIS responses with an HTTP error status."""

    def __init__(
        self,
        status_code: int,
        message: Optional[str] = None,
        url: Optional[str] = None
    ):
        """
        Initialize AWIS HTTP error.

        Args:
            status_code: HTTP status code of the response
            message: Error message (defaults to "HTTP failure: <code>")
            url: Requested URL if available
        """
        message = message or f"HTTP failure: {status_code}"
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url


class MalformedResponseError(KeyError):
    """Exception raised when a parsed response lacks an expected field."""

    def __init__(self, path: Tuple[str, ...], message: Optional[str] = None):
        """
        Initialize malformed response error.

        Args:
            path: Element path that could not be resolved
            message: Error message
        """
        message = message or (
            f"Response is missing field: {'.'.join(path) or '<root>'}"
        )
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        return self.message


class ValidationError(ValueError):
    """Exception raised for validation errors."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None
    ):
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation if available
            value: Invalid value if available
        """
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value
