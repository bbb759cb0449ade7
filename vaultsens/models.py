"""Data models for VaultSens API responses.

The service wraps every success payload in ``{status, message, data}``.
ApiResponse keeps that envelope and converts ``data`` into the records below.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class CompressionLevel(str, Enum):
    """Compression levels accepted on upload."""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


VALID_COMPRESSION_LEVELS = {e.value for e in CompressionLevel}


@dataclass
class FileRecord:
    """A stored file."""
    filename: str
    url: str
    size: int
    mime_type: str
    id: Optional[str] = None
    file_id: Optional[str] = None
    cloud_id: Optional[str] = None
    original_filename: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    folder_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FileRecord":
        return cls(
            filename=data.get("filename", ""),
            url=data.get("url", ""),
            size=data.get("size", 0),
            mime_type=data.get("mimeType", ""),
            id=data.get("_id"),
            file_id=data.get("fileId"),
            cloud_id=data.get("cloudId"),
            original_filename=data.get("originalFilename"),
            width=data.get("width"),
            height=data.get("height"),
            folder_id=data.get("folderId"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )


@dataclass
class Folder:
    """A folder grouping files."""
    id: str
    name: str
    parent_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Folder":
        return cls(
            id=data.get("_id", ""),
            name=data.get("name", ""),
            parent_id=data.get("parentId"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )


@dataclass
class Metrics:
    """Storage and upload usage for the account."""
    total_files: int = 0
    total_storage_bytes: int = 0
    average_file_size: float = 0
    storage_limit_bytes: int = 0
    storage_remaining_bytes: int = 0
    storage_used_percent: float = 0
    uploads_last_7_days: int = 0
    latest_upload_at: Optional[str] = None
    by_mime_type: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Metrics":
        return cls(
            total_files=data.get("totalFiles", 0),
            total_storage_bytes=data.get("totalStorageBytes", 0),
            average_file_size=data.get("averageFileSize", 0),
            storage_limit_bytes=data.get("storageLimitBytes", 0),
            storage_remaining_bytes=data.get("storageRemainingBytes", 0),
            storage_used_percent=data.get("storageUsedPercent", 0),
            uploads_last_7_days=data.get("uploadsLast7Days", 0),
            latest_upload_at=data.get("latestUploadAt"),
            by_mime_type=dict(data.get("byMimeType") or {}),
        )


@dataclass
class ApiResponse(Generic[T]):
    """Success envelope returned by every resource operation."""
    status: int
    message: str
    data: T
    raw: Any = None

    @classmethod
    def parse(
        cls,
        payload: Any,
        convert: Optional[Callable[[dict[str, Any]], Any]] = None,
        many: bool = False,
    ) -> "ApiResponse[T]":
        """Build an ApiResponse from a decoded payload.

        Args:
            payload: Decoded response body.
            convert: Record converter applied to ``data``.
            many: ``data`` is a list of records rather than one record.

        Returns:
            ApiResponse with the converted data. Non-mapping payloads
            (e.g. plain text) end up in ``data`` unchanged, as does a
            ``data`` field whose shape does not match the converter.
        """
        if not isinstance(payload, dict):
            return cls(status=200, message="", data=payload, raw=payload)

        data = payload.get("data")
        if convert is not None and _has_record_shape(data, many):
            data = [convert(item) for item in data] if many else convert(data)
        return cls(
            status=payload.get("status", 200),
            message=payload.get("message", ""),
            data=data,
            raw=payload,
        )


def _has_record_shape(data: Any, many: bool) -> bool:
    if many:
        return isinstance(data, list) and all(isinstance(item, dict) for item in data)
    return isinstance(data, dict)
