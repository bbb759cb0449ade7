"""Error taxonomy for the VaultSens API.

Upload / plan-limit errors:
- FILE_TOO_LARGE          413  file exceeds the plan's max file size
- STORAGE_LIMIT           413  total storage quota exceeded
- FILE_COUNT_LIMIT        403  plan's max file count reached
- MIME_TYPE_NOT_ALLOWED   415  file type blocked by plan
- COMPRESSION_NOT_ALLOWED 403  compression level not permitted by plan
- SUBSCRIPTION_INACTIVE   402  subscription is not active
- FOLDER_COUNT_LIMIT      403  plan's max folder count reached

Auth errors:
- EMAIL_ALREADY_REGISTERED 400  duplicate email on register
- EMAIL_NOT_VERIFIED       403  login attempted before verifying email
- INVALID_CREDENTIALS      400  wrong email or password
- INVALID_OTP              400  bad or expired verification code

Generic: UNAUTHORIZED (401), NOT_FOUND (404), TIMEOUT (408), UNKNOWN.
"""

from enum import Enum
from typing import Any, Optional


class VaultSensErrorCode(str, Enum):
    """Stable, machine-readable error codes."""
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    STORAGE_LIMIT = "STORAGE_LIMIT"
    FILE_COUNT_LIMIT = "FILE_COUNT_LIMIT"
    MIME_TYPE_NOT_ALLOWED = "MIME_TYPE_NOT_ALLOWED"
    COMPRESSION_NOT_ALLOWED = "COMPRESSION_NOT_ALLOWED"
    SUBSCRIPTION_INACTIVE = "SUBSCRIPTION_INACTIVE"
    FOLDER_COUNT_LIMIT = "FOLDER_COUNT_LIMIT"
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_OTP = "INVALID_OTP"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    TIMEOUT = "TIMEOUT"
    UNKNOWN = "UNKNOWN"


def resolve_error_code(status: int, message: str) -> VaultSensErrorCode:
    """Map an HTTP status and server message to an error code.

    Rules are checked in order and the first match wins; several rules
    share a status code and are told apart by substrings of the message.

    Args:
        status: HTTP status code (0 for transport failures).
        message: Server-provided message, matched case-insensitively.

    Returns:
        The resolved VaultSensErrorCode.
    """
    m = (message or "").lower()

    if status == 413 and "storage limit" in m:
        return VaultSensErrorCode.STORAGE_LIMIT
    if status == 413:
        return VaultSensErrorCode.FILE_TOO_LARGE
    if status == 415:
        return VaultSensErrorCode.MIME_TYPE_NOT_ALLOWED
    if status == 402:
        return VaultSensErrorCode.SUBSCRIPTION_INACTIVE
    if status == 403 and "compression" in m:
        return VaultSensErrorCode.COMPRESSION_NOT_ALLOWED
    if status == 403 and "folder" in m:
        return VaultSensErrorCode.FOLDER_COUNT_LIMIT
    if status == 403 and ("file" in m or "maximum" in m):
        return VaultSensErrorCode.FILE_COUNT_LIMIT
    if status == 403 and "email" in m:
        return VaultSensErrorCode.EMAIL_NOT_VERIFIED
    if status == 400 and "already registered" in m:
        return VaultSensErrorCode.EMAIL_ALREADY_REGISTERED
    if status == 400 and (
        "invalid email or password" in m or "invalid credentials" in m
    ):
        return VaultSensErrorCode.INVALID_CREDENTIALS
    if status == 400 and "otp" in m:
        return VaultSensErrorCode.INVALID_OTP
    if status == 401:
        return VaultSensErrorCode.UNAUTHORIZED
    if status == 404:
        return VaultSensErrorCode.NOT_FOUND
    if status == 408:
        return VaultSensErrorCode.TIMEOUT
    return VaultSensErrorCode.UNKNOWN


class VaultSensError(Exception):
    """Classified failure of a VaultSens API call.

    Attributes:
        message: Human-readable message.
        status: HTTP status code, 0 when no response was received.
        code: Error code resolved from status and message.
        data: Raw response payload, if any.
    """

    def __init__(self, message: str, status: int, data: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = resolve_error_code(status, message)
        self.data = data

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message} (status {self.status})"


class VaultSensTimeoutError(VaultSensError):
    """Every attempt of a request ran past the per-attempt timeout."""

    def __init__(self, message: str = "Request timed out"):
        super().__init__(message, 408)


class VaultSensTransportError(VaultSensError):
    """Request failed without an HTTP response (connection error, etc.)."""

    def __init__(self, message: str):
        super().__init__(message, 0)
