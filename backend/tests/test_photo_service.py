"""
Tourenplan Backend — Photo Service Tests
==========================================

What:  Attach/replace/remove flows against a real schema and temp directory.
Why:   Re-uploading for the same stop must leave exactly one file behind
       and keep foto_url stable.
"""

import os
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from tourenplan.exceptions import FileStorageError, NotFoundError, ValidationError
from tourenplan.schemas.tour import StopCreate, TourCreate
from tourenplan.services.photo_service import PhotoService
from tourenplan.services.stop_service import stop_service
from tourenplan.services.tour_service import tour_service


@pytest.fixture
def photos(file_service):
    return PhotoService(files=file_service)


class TestAttachPhoto:

    @pytest.mark.asyncio
    async def test_name_from_customer_and_tour_date(self, db_session, sample_tour, photos, temp_storage):
        _, _, stops = sample_tour
        mueller = stops[0]

        stop, filename = await photos.attach_photo(db_session, mueller.id, b"png-bytes", "image/png")

        assert filename == "mueller_05_03_2024.png"
        assert stop.foto_url == "/uploads/mueller_05_03_2024.png"
        assert (Path(temp_storage) / filename).read_bytes() == b"png-bytes"

    @pytest.mark.asyncio
    async def test_second_upload_replaces_first(self, db_session, sample_tour, photos, temp_storage):
        _, _, stops = sample_tour
        mueller = stops[0]

        first, _ = await photos.attach_photo(db_session, mueller.id, b"first", "image/jpeg")
        url_after_first = first.foto_url
        second, _ = await photos.attach_photo(db_session, mueller.id, b"second", "image/jpeg")

        assert second.foto_url == url_after_first
        assert os.listdir(temp_storage) == ["mueller_05_03_2024.jpg"]
        assert (Path(temp_storage) / "mueller_05_03_2024.jpg").read_bytes() == b"second"

    @pytest.mark.asyncio
    async def test_missing_customer_uses_placeholder(self, db_session, sample_tour, photos):
        _, _, stops = sample_tour
        _, filename = await photos.attach_photo(db_session, stops[2].id, b"data", None)
        assert filename == "kunde_05_03_2024.jpg"

    @pytest.mark.asyncio
    async def test_no_payload_checked_before_lookup(self, db_session, photos, temp_storage):
        with pytest.raises(ValidationError, match="No file received"):
            await photos.attach_photo(db_session, 999, None, None)
        assert os.listdir(temp_storage) == []

    @pytest.mark.asyncio
    async def test_unknown_stop(self, db_session, photos, temp_storage):
        with pytest.raises(NotFoundError):
            await photos.attach_photo(db_session, 999, b"data", "image/jpeg")
        assert os.listdir(temp_storage) == []

    @pytest.mark.asyncio
    async def test_write_failure_leaves_row_untouched(self, db_session, sample_tour, photos):
        _, _, stops = sample_tour
        photos.files.store_file = AsyncMock(side_effect=FileStorageError("disk full"))

        with pytest.raises(FileStorageError):
            await photos.attach_photo(db_session, stops[0].id, b"data", "image/jpeg")
        assert stops[0].foto_url is None


class TestRemovePhoto:

    @pytest.mark.asyncio
    async def test_remove_deletes_file_and_clears_url(self, db_session, sample_tour, photos, temp_storage):
        _, _, stops = sample_tour
        await photos.attach_photo(db_session, stops[0].id, b"data", "image/jpeg")

        stop = await photos.remove_photo(db_session, stops[0].id)

        assert stop.foto_url is None
        assert os.listdir(temp_storage) == []

    @pytest.mark.asyncio
    async def test_remove_without_photo(self, db_session, sample_tour, photos):
        _, _, stops = sample_tour
        stop = await photos.remove_photo(db_session, stops[1].id)
        assert stop.foto_url is None

    @pytest.mark.asyncio
    async def test_remove_unknown_stop(self, db_session, photos):
        with pytest.raises(NotFoundError):
            await photos.remove_photo(db_session, 999)

    @pytest.mark.asyncio
    async def test_shared_file_kept_until_last_stop_removed(self, db_session, sample_tour, photos, temp_storage):
        _, tour, stops = sample_tour
        other_driver = await tour_service.create_driver(db_session, "Fahrer Zwei")
        other_tour, _ = await tour_service.create_tour(
            db_session, TourCreate(fahrer_id=other_driver.id, datum=tour.datum)
        )
        other_mueller = await stop_service.create_stop(
            db_session, other_tour.id, StopCreate(adresse="Hauptstraße 7", reihenfolge=1, kunde="Müller")
        )

        first, _ = await photos.attach_photo(db_session, stops[0].id, b"data", "image/jpeg")
        second, _ = await photos.attach_photo(db_session, other_mueller.id, b"data", "image/jpeg")
        assert first.foto_url == second.foto_url

        await photos.remove_photo(db_session, stops[0].id)

        assert second.foto_url == "/uploads/mueller_05_03_2024.jpg"
        assert os.listdir(temp_storage) == ["mueller_05_03_2024.jpg"]

        await photos.remove_photo(db_session, other_mueller.id)

        assert os.listdir(temp_storage) == []
