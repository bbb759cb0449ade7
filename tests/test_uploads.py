"""Tests for upload input normalization."""

import io

import pytest
from PIL import Image

from vaultsens.models import CompressionLevel
from vaultsens.uploads import (
    build_form_fields,
    guess_mime_type,
    normalize_compression,
    to_file_part,
)


def test_bytes_input():
    assert to_file_part(b"data") == ("file", b"data", "application/octet-stream")
    assert to_file_part(bytearray(b"data"), "x.json") == ("x.json", b"data", "application/json")


def test_path_input(tmp_path):
    path = tmp_path / "photo.jpg"
    path.write_bytes(b"jpegbytes")

    assert to_file_part(path) == ("photo.jpg", b"jpegbytes", "image/jpeg")
    assert to_file_part(str(path), "other.png") == ("other.png", b"jpegbytes", "image/png")


def test_missing_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        to_file_part(tmp_path / "missing.png")


def test_file_object_uses_name(tmp_path):
    path = tmp_path / "doc.pdf"
    path.write_bytes(b"%PDF")

    with open(path, "rb") as f:
        assert to_file_part(f) == ("doc.pdf", b"%PDF", "application/pdf")


def test_text_file_object_rejected():
    with pytest.raises(TypeError):
        to_file_part(io.StringIO("text"))


def test_unsupported_input():
    with pytest.raises(TypeError):
        to_file_part(12345)


def test_pillow_image_defaults_to_png():
    image = Image.new("RGB", (4, 4), color="red")
    name, content, mime = to_file_part(image)

    assert name == "file.png"
    assert mime == "image/png"
    assert content.startswith(b"\x89PNG")


def test_pillow_image_keeps_source_format():
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4)).save(buffer, format="JPEG")
    image = Image.open(io.BytesIO(buffer.getvalue()))

    name, content, mime = to_file_part(image, "thumb.jpg")

    assert name == "thumb.jpg"
    assert mime == "image/jpeg"
    assert content.startswith(b"\xff\xd8")


def test_guess_mime_type_fallback():
    assert guess_mime_type("noext") == "application/octet-stream"


class TestFormFields:
    def test_empty(self):
        assert build_form_fields() == {}

    def test_all_fields(self):
        assert build_form_fields("n", CompressionLevel.MEDIUM, "d1") == {
            "name": "n",
            "compression": "medium",
            "folderId": "d1",
        }

    def test_empty_strings_skipped(self):
        assert build_form_fields(name="", folder_id="") == {}

    def test_compression_case_insensitive(self):
        assert normalize_compression("HIGH") == "high"

    def test_invalid_compression(self):
        with pytest.raises(ValueError, match="Invalid compression"):
            normalize_compression("max")


def test_mpo_image_sent_as_jpeg():
    image = Image.new("RGB", (4, 4), color="blue")
    image.format = "MPO"

    name, content, mime = to_file_part(image)

    assert name == "file.jpeg"
    assert mime == "image/jpeg"
    assert content.startswith(b"\xff\xd8")
