"""VaultSens API client.

Implements the VaultSens file API:
- POST   /api/v1/files/upload        - Upload one or many files
- GET    /api/v1/files               - List files (optionally by folder)
- GET    /api/v1/files/metadata/:id  - File metadata
- PUT    /api/v1/files/:id           - Replace a file
- DELETE /api/v1/files/:id           - Delete a file
- GET    /api/v1/folders             - List folders
- POST   /api/v1/folders             - Create a folder
- PATCH  /api/v1/folders/:id         - Rename a folder
- DELETE /api/v1/folders/:id         - Delete a folder
- GET    /api/v1/metrics             - Account usage metrics
"""

import logging
import time
from typing import Any, Callable, Iterable, Optional, Sequence, Union
from urllib.parse import quote, urlencode

import requests

from .config import DEFAULT_TIMEOUT, ClientConfig, load_config, validate_timeout
from .models import ApiResponse, CompressionLevel, FileRecord, Folder, Metrics
from .transport.executor import RequestExecutor, RetryCallback
from .transport.retry_policy import RetryPolicy, default_retry_policy
from .uploads import UploadInput, build_form_fields, to_file_part

logger = logging.getLogger(__name__)

Compression = Union[str, CompressionLevel]


class VaultSensClient:
    """Client for the VaultSens file storage and image transform API.

    Every request carries the x-api-key / x-api-secret headers and is
    retried according to the configured RetryPolicy.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_policy: Optional[RetryPolicy] = None,
        session: Optional[requests.Session] = None,
        on_retry: Optional[RetryCallback] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the client.

        Args:
            base_url: API base URL (e.g., https://api.vaultsens.com).
            api_key: API key. Can also be supplied later via set_auth().
            api_secret: API secret.
            timeout: Per-attempt timeout in seconds.
            retry_policy: Retry policy for failed requests.
            session: requests.Session to reuse. Not closed by close().
            on_retry: Optional callback(retry_number, error) before each retry.
            sleep: Function used to wait between attempts.
        """
        self.config = ClientConfig(
            base_url=base_url,
            api_key=api_key,
            api_secret=api_secret,
            timeout=timeout,
            retry=retry_policy or default_retry_policy(),
        )
        self._executor = RequestExecutor(
            self.config, session=session, sleep=sleep, on_retry=on_retry
        )

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs) -> "VaultSensClient":
        """Create a client from a ClientConfig."""
        return cls(
            base_url=config.base_url,
            api_key=config.api_key,
            api_secret=config.api_secret,
            timeout=config.timeout,
            retry_policy=config.retry,
            **kwargs,
        )

    @classmethod
    def from_env(cls, config_path=None, **kwargs) -> "VaultSensClient":
        """Create a client from environment variables and the YAML config file."""
        return cls.from_config(load_config(config_path), **kwargs)

    @property
    def base_url(self) -> str:
        return self.config.base_url

    @property
    def retry_policy(self) -> RetryPolicy:
        return self.config.retry

    def set_auth(self, api_key: str, api_secret: str) -> None:
        self.config.api_key = api_key
        self.config.api_secret = api_secret

    def set_timeout(self, timeout: float) -> None:
        """Set the per-attempt timeout in seconds."""
        validate_timeout(timeout)
        self.config.timeout = timeout

    def set_retry(
        self,
        retries: int,
        retry_delay: Optional[float] = None,
        retry_on: Optional[Iterable[int]] = None,
    ) -> None:
        """Replace the retry policy.

        Omitted ``retry_delay`` / ``retry_on`` keep their current values.
        """
        self.config.retry = self.config.retry.replace(
            retries, retry_delay=retry_delay, retry_on=retry_on
        )

    # -- files ---------------------------------------------------------------

    def upload_file(
        self,
        file: UploadInput,
        name: Optional[str] = None,
        compression: Optional[Compression] = None,
        filename: Optional[str] = None,
        folder_id: Optional[str] = None,
    ) -> ApiResponse[FileRecord]:
        """Upload a single file.

        POST /api/v1/files/upload

        Args:
            file: Bytes, a file path, a binary file object, or a PIL image.
            name: Display name stored with the file.
            compression: Compression level (none, low, medium, high).
            filename: Filename sent in the multipart part.
            folder_id: Folder to place the file in.

        Returns:
            ApiResponse with the stored FileRecord.
        """
        fields = build_form_fields(name, compression, folder_id)
        files = [("file", to_file_part(file, filename))]
        payload = self._request(
            "POST", "/api/v1/files/upload", data=fields, files=files
        )
        return ApiResponse.parse(payload, FileRecord.from_dict)

    def upload_files(
        self,
        files: Sequence[Union[UploadInput, tuple[UploadInput, Optional[str]]]],
        name: Optional[str] = None,
        compression: Optional[Compression] = None,
        folder_id: Optional[str] = None,
    ) -> ApiResponse[list[FileRecord]]:
        """Upload several files in one request.

        POST /api/v1/files/upload

        Args:
            files: Upload inputs, or (input, filename) pairs.
            name: Display name stored with the files.
            compression: Compression level (none, low, medium, high).
            folder_id: Folder to place the files in.

        Returns:
            ApiResponse with the stored FileRecords.
        """
        fields = build_form_fields(name, compression, folder_id)
        parts = []
        for item in files:
            if isinstance(item, tuple):
                upload, item_filename = item
            else:
                upload, item_filename = item, None
            parts.append(("files", to_file_part(upload, item_filename)))

        payload = self._request(
            "POST", "/api/v1/files/upload", data=fields, files=parts
        )
        return ApiResponse.parse(payload, FileRecord.from_dict, many=True)

    def list_files(self, folder_id: Optional[str] = None) -> ApiResponse[list[FileRecord]]:
        """List files, optionally restricted to one folder.

        GET /api/v1/files[?folderId=<id>]
        """
        path = "/api/v1/files"
        if folder_id:
            path += "?" + urlencode({"folderId": folder_id}, quote_via=quote)
        payload = self._request("GET", path)
        return ApiResponse.parse(payload, FileRecord.from_dict, many=True)

    def get_file_metadata(self, file_id: str) -> ApiResponse[FileRecord]:
        """GET /api/v1/files/metadata/:id"""
        payload = self._request("GET", f"/api/v1/files/metadata/{_segment(file_id)}")
        return ApiResponse.parse(payload, FileRecord.from_dict)

    def update_file(
        self,
        file_id: str,
        file: UploadInput,
        name: Optional[str] = None,
        compression: Optional[Compression] = None,
        filename: Optional[str] = None,
    ) -> ApiResponse[FileRecord]:
        """Replace the contents of an existing file.

        PUT /api/v1/files/:id
        """
        fields = build_form_fields(name, compression)
        files = [("file", to_file_part(file, filename))]
        payload = self._request(
            "PUT", f"/api/v1/files/{_segment(file_id)}", data=fields, files=files
        )
        return ApiResponse.parse(payload, FileRecord.from_dict)

    def delete_file(self, file_id: str) -> ApiResponse[None]:
        """DELETE /api/v1/files/:id"""
        payload = self._request("DELETE", f"/api/v1/files/{_segment(file_id)}")
        return ApiResponse.parse(payload)

    def build_file_url(
        self,
        file_id: str,
        width: Optional[int] = None,
        height: Optional[int] = None,
        format: Optional[str] = None,
        quality: Optional[Union[int, str]] = None,
    ) -> str:
        """Build the public URL of a file with optional image transforms.

        No request is made. Parameters are always emitted in the order
        width, height, format, quality.

        Args:
            file_id: File identifier.
            width: Target width in pixels.
            height: Target height in pixels.
            format: Output format (e.g., webp, png).
            quality: Output quality.

        Returns:
            Absolute URL string.
        """
        params: list[tuple[str, str]] = []
        if width:
            params.append(("width", str(width)))
        if height:
            params.append(("height", str(height)))
        if format:
            params.append(("format", format))
        if quality is not None:
            params.append(("quality", str(quality)))

        url = f"{self.config.base_url}/api/v1/files/{_segment(file_id)}"
        if params:
            url += "?" + urlencode(params)
        return url

    # -- folders -------------------------------------------------------------

    def list_folders(self) -> ApiResponse[list[Folder]]:
        """GET /api/v1/folders"""
        payload = self._request("GET", "/api/v1/folders")
        return ApiResponse.parse(payload, Folder.from_dict, many=True)

    def create_folder(self, name: str, parent_id: Optional[str] = None) -> ApiResponse[Folder]:
        """Create a folder, nested under ``parent_id`` when given.

        POST /api/v1/folders
        """
        body: dict[str, Any] = {"name": name}
        if parent_id is not None:
            body["parentId"] = parent_id
        payload = self._request("POST", "/api/v1/folders", json=body)
        return ApiResponse.parse(payload, Folder.from_dict)

    def rename_folder(self, folder_id: str, name: str) -> ApiResponse[Folder]:
        """PATCH /api/v1/folders/:id"""
        payload = self._request(
            "PATCH", f"/api/v1/folders/{_segment(folder_id)}", json={"name": name}
        )
        return ApiResponse.parse(payload, Folder.from_dict)

    def delete_folder(self, folder_id: str) -> ApiResponse[None]:
        """DELETE /api/v1/folders/:id"""
        payload = self._request("DELETE", f"/api/v1/folders/{_segment(folder_id)}")
        return ApiResponse.parse(payload)

    # -- account -------------------------------------------------------------

    def get_metrics(self) -> ApiResponse[Metrics]:
        """GET /api/v1/metrics"""
        payload = self._request("GET", "/api/v1/metrics")
        return ApiResponse.parse(payload, Metrics.from_dict)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        logger.debug("%s %s", method, path)
        return self._executor.request(method, path, **kwargs)

    def close(self) -> None:
        """Close the HTTP session."""
        self._executor.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def _segment(value: str) -> str:
    return quote(str(value), safe="")
