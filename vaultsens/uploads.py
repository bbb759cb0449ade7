"""Upload input normalization.

Turns the accepted upload inputs into multipart parts that requests can
send. File contents are read into memory up front so a retried attempt
sends the same bytes again.
"""

import io
import mimetypes
import os
from pathlib import Path
from typing import Any, BinaryIO, Optional, Union

from PIL import Image

from .models import VALID_COMPRESSION_LEVELS, CompressionLevel

DEFAULT_FILENAME = "file"
DEFAULT_MIME_TYPE = "application/octet-stream"

UploadInput = Union[bytes, bytearray, str, Path, BinaryIO, Image.Image]

# (filename, content, mime type), the tuple form requests expects in `files`
FilePart = tuple[str, bytes, str]


def to_file_part(file: UploadInput, filename: Optional[str] = None) -> FilePart:
    """Convert an upload input into a multipart file part.

    Args:
        file: Raw bytes, a filesystem path, a binary file object, or a
            Pillow image.
        filename: Filename sent to the server. Defaults to the path's
            basename, the file object's name, or "file".

    Returns:
        (filename, content, mime_type) tuple.

    Raises:
        FileNotFoundError: If a path does not point to a file.
        TypeError: If the input type is not supported.
    """
    if isinstance(file, (bytes, bytearray)):
        content = bytes(file)
        name = filename or DEFAULT_FILENAME
    elif isinstance(file, (str, Path)):
        path = Path(file)
        if not path.is_file():
            raise FileNotFoundError(f"Upload file not found: {path}")
        content = path.read_bytes()
        name = filename or path.name
    elif isinstance(file, Image.Image):
        content, image_format = _encode_image(file)
        name = filename or f"{DEFAULT_FILENAME}.{image_format.lower()}"
    elif hasattr(file, "read"):
        content = file.read()
        if isinstance(content, str):
            raise TypeError("File objects must be opened in binary mode")
        name = filename or _file_object_name(file) or DEFAULT_FILENAME
    else:
        raise TypeError(f"Unsupported upload input: {type(file).__name__}")

    return name, content, guess_mime_type(name)


def guess_mime_type(filename: str) -> str:
    return mimetypes.guess_type(filename)[0] or DEFAULT_MIME_TYPE


def build_form_fields(
    name: Optional[str] = None,
    compression: Optional[Union[str, CompressionLevel]] = None,
    folder_id: Optional[str] = None,
) -> dict[str, str]:
    """Collect the optional text fields sent alongside uploaded files."""
    fields: dict[str, str] = {}
    if name:
        fields["name"] = name
    if compression is not None:
        fields["compression"] = normalize_compression(compression)
    if folder_id:
        fields["folderId"] = folder_id
    return fields


def normalize_compression(compression: Union[str, CompressionLevel]) -> str:
    value = compression.value if isinstance(compression, CompressionLevel) else str(compression)
    value = value.lower()
    if value not in VALID_COMPRESSION_LEVELS:
        raise ValueError(
            f"Invalid compression '{compression}'. "
            f"Valid: {', '.join(sorted(VALID_COMPRESSION_LEVELS))}"
        )
    return value


def _encode_image(image: Image.Image) -> tuple[bytes, str]:
    """Serialize a Pillow image in its own format (PNG when unknown)."""
    image_format = image.format or "PNG"
    # multi-picture JPEGs from phone cameras; the first frame is a plain JPEG
    if image_format == "MPO":
        image_format = "JPEG"
    buffer = io.BytesIO()
    image.save(buffer, format=image_format)
    return buffer.getvalue(), image_format


def _file_object_name(file: Any) -> Optional[str]:
    name = getattr(file, "name", None)
    if isinstance(name, str) and name:
        return os.path.basename(name)
    return None
