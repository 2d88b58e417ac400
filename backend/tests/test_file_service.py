"""
Tourenplan Backend — File Service Unit Tests
===============================================

What:  Tests for FileService validation, overwrite-in-place writes, URLs
       and deletion.
Why:   The photo directory must hold exactly one file per derived name.
How:   Every test works in a temporary directory (temp_storage fixture).

Test Strategy:
    ✅ Missing/empty payload rejected with field="photo"
    ✅ Size limit boundary
    ✅ Second write to the same name replaces the first
    ✅ Names with path components refused
    ✅ public_url / filename_from_url agree
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from tourenplan.exceptions import FileStorageError, ValidationError
from tourenplan.services.file_service import FileService


class TestContentValidation:
    """Presence and size checks in FileService.validate_content."""

    def setup_method(self):
        self.service = FileService(max_size=2048)

    @pytest.mark.parametrize("content", [None, b""])
    def test_missing_payload_rejected(self, content):
        with pytest.raises(ValidationError, match="No file received") as exc_info:
            self.service.validate_content(content)
        assert exc_info.value.field == "photo"

    def test_within_limit(self):
        self.service.validate_content(b"x" * 2048)

    def test_over_limit(self):
        with pytest.raises(ValidationError, match="exceeds") as exc_info:
            self.service.validate_content(b"x" * 2049)
        assert exc_info.value.context["actual_size"] == 2049


class TestFileStorage:
    """Writes, overwrites and deletes on disk."""

    @pytest.mark.asyncio
    async def test_store_writes_file(self, file_service, temp_storage, sample_image_bytes):
        path = await file_service.store_file("mueller_05_03_2024.jpg", sample_image_bytes)

        assert path == Path(temp_storage).resolve() / "mueller_05_03_2024.jpg"
        assert path.read_bytes() == sample_image_bytes

    @pytest.mark.asyncio
    async def test_same_name_overwrites(self, file_service, temp_storage):
        await file_service.store_file("mueller_05_03_2024.jpg", b"first photo")
        await file_service.store_file("mueller_05_03_2024.jpg", b"second")

        assert os.listdir(temp_storage) == ["mueller_05_03_2024.jpg"]
        assert (Path(temp_storage) / "mueller_05_03_2024.jpg").read_bytes() == b"second"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["../escape.jpg", "sub/dir.jpg", "", ".."])
    async def test_path_components_refused(self, file_service, name):
        with pytest.raises(FileStorageError):
            await file_service.store_file(name, b"data")

    @pytest.mark.asyncio
    async def test_write_failure_becomes_storage_error(self, file_service):
        with patch("tourenplan.services.file_service.aiofiles.open", side_effect=OSError("disk full")):
            with pytest.raises(FileStorageError) as exc_info:
                await file_service.store_file("kunde_01_01_2024.jpg", b"data")
        assert exc_info.value.context["os_error"] == "disk full"

    @pytest.mark.asyncio
    async def test_delete_existing_and_missing(self, file_service, temp_storage):
        await file_service.store_file("kunde_01_01_2024.jpg", b"data")

        assert await file_service.delete_file("kunde_01_01_2024.jpg") is True
        assert await file_service.delete_file("kunde_01_01_2024.jpg") is False
        assert os.listdir(temp_storage) == []


class TestPublicUrls:

    def test_relative_url(self, file_service):
        assert file_service.public_url("mueller_05_03_2024.png") == "/uploads/mueller_05_03_2024.png"

    def test_absolute_url_with_base(self, file_service):
        with patch("tourenplan.services.file_service.settings") as mock_settings:
            mock_settings.upload_url_prefix = "/uploads"
            mock_settings.public_base_url = "https://touren.example.de/"
            url = file_service.public_url("mueller_05_03_2024.png")
        assert url == "https://touren.example.de/uploads/mueller_05_03_2024.png"

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("/uploads/mueller_05_03_2024.png", "mueller_05_03_2024.png"),
            ("https://touren.example.de/uploads/kunde_01_01_2024.jpg", "kunde_01_01_2024.jpg"),
            (None, None),
            ("", None),
        ],
    )
    def test_filename_from_url(self, url, expected):
        assert FileService.filename_from_url(url) == expected
