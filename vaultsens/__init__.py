"""Python client for the VaultSens file storage and image transform API."""

from .client import VaultSensClient
from .config import ClientConfig, load_config
from .errors import (
    VaultSensError,
    VaultSensErrorCode,
    VaultSensTimeoutError,
    VaultSensTransportError,
    resolve_error_code,
)
from .models import ApiResponse, CompressionLevel, FileRecord, Folder, Metrics
from .transport import RetryPolicy, default_retry_policy, no_retry_policy

__version__ = "0.1.0"

__all__ = [
    "VaultSensClient",
    "ClientConfig",
    "load_config",
    "VaultSensError",
    "VaultSensErrorCode",
    "VaultSensTimeoutError",
    "VaultSensTransportError",
    "resolve_error_code",
    "ApiResponse",
    "CompressionLevel",
    "FileRecord",
    "Folder",
    "Metrics",
    "RetryPolicy",
    "default_retry_policy",
    "no_retry_policy",
]
