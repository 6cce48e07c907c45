# easybit/core/exceptions.py

from typing import Optional


class EasyBitError(Exception):
    """Base class for every error raised by this library."""


class ConfigurationError(EasyBitError, ValueError):
    """Malformed base URL, empty secret or missing settings."""


class CredentialReleasedError(EasyBitError, RuntimeError):
    """The credential was released; no new request may borrow it."""


class AlreadyZeroizedError(CredentialReleasedError):
    """The secret buffer has been wiped and can never be read again."""


class NetworkError(EasyBitError):
    """
    Transport level failure (connection refused, timeout, TLS).
    The API is probably down or the base URL is wrong.
    """


class DeserializeError(EasyBitError):
    """
    The response body did not match the expected shape.
    Usually means the API changed and this library needs an update.
    """


class ApiError(EasyBitError):
    """The API answered with an error payload."""

    def __init__(self, error_code: int, error_message: str, status_code: Optional[int] = None):
        super().__init__(f"EasyBit {error_code}: {error_message}")
        self.error_code = error_code
        self.error_message = error_message
        self.status_code = status_code
