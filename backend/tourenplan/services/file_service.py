"""
Tourenplan Backend — Photo Storage Service
============================================

What:  Validates, writes, and removes stop photo files on disk.
Why:   Centralizes all file system operations for uploads.
How:   Files live flat in UPLOAD_DIR under the name chosen by the photo
       naming policy and are served by the static mount at UPLOAD_URL_PREFIX.
Who:   Called by PhotoService during attach and remove.

Overwrite Semantics:
    Unlike a unique-name store, the same name is written again for the
    same stop/customer/date. Writing replaces the previous content in
    place. Two overlapping uploads resolve last-write-wins; there is no
    lock around the write.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import aiofiles

from tourenplan.config import settings
from tourenplan.exceptions import ValidationError, FileStorageError

logger = logging.getLogger(__name__)


class FileService:
    """
    Manages the photo directory.

    Directory Structure:
        uploads/
        ├── mueller_05_03_2024.png
        ├── baeckerei_schmidt_05_03_2024.jpg
        └── kunde_06_03_2024.webp
    """

    def __init__(self, storage_root: Optional[str] = None, max_size: Optional[int] = None):
        """
        Args:
            storage_root: Override the upload directory (used in tests).
            max_size: Override the byte limit per photo (used in tests).
        """
        self.storage_root = Path(storage_root or settings.upload_dir).resolve()
        self.max_size = max_size or settings.max_photo_size
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    def validate_content(self, content: Optional[bytes]) -> None:
        """
        Reject a missing/empty payload and anything above the size limit.

        Raises:
            ValidationError with field="photo"
        """
        if not content:
            raise ValidationError(
                message="No file received. Send the image in the 'photo' form field.",
                field="photo",
            )

        if len(content) > self.max_size:
            max_mb = self.max_size / (1024 * 1024)
            raise ValidationError(
                message=(
                    f"File size ({len(content) / (1024 * 1024):.1f}MB) exceeds "
                    f"maximum of {max_mb:.0f}MB."
                ),
                field="photo",
                context={"max_size_mb": max_mb, "actual_size": len(content)},
            )

    def path_for(self, filename: str) -> Path:
        """
        Absolute path for `filename` inside the storage root.

        Only bare names are accepted; names from the naming policy never
        contain separators, anything else is refused.
        """
        if not filename or Path(filename).name != filename or filename in (".", ".."):
            raise FileStorageError(
                message="Invalid photo file name.",
                context={"filename": filename},
            )
        return self.storage_root / filename

    def public_url(self, filename: str) -> str:
        """Public URL (or host-relative path) under which `filename` is served."""
        path = f"{settings.upload_url_prefix}/{filename}"
        if settings.public_base_url:
            return settings.public_base_url.rstrip("/") + path
        return path

    @staticmethod
    def filename_from_url(url: Optional[str]) -> Optional[str]:
        """Inverse of public_url(): the bare file name at the end of a stored URL."""
        if not url:
            return None
        name = url.rstrip("/").rsplit("/", 1)[-1]
        return name or None

    async def store_file(self, filename: str, content: bytes) -> Path:
        """
        Write `content` to `filename`, replacing any existing file.

        Returns:
            Absolute path of the written file.

        Raises:
            FileStorageError if the directory or file cannot be written.
        """
        absolute_path = self.path_for(filename)
        replaced = absolute_path.exists()

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded photo. Please try again.",
                context={"filename": filename, "os_error": str(e)},
            )

        logger.info(
            "Photo %s: %s (%d bytes)",
            "replaced" if replaced else "stored",
            filename,
            len(content),
        )
        return absolute_path

    async def delete_file(self, filename: str) -> bool:
        """
        Remove `filename` from storage.

        Returns:
            True if a file was removed, False if it was already gone.

        Raises:
            FileStorageError for OS errors other than a missing file.
        """
        path = self.path_for(filename)
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.debug("Delete: file already gone: %s", filename)
            return False
        except OSError as e:
            logger.error("Failed to delete file %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to delete photo. Please try again.",
                context={"filename": filename, "os_error": str(e)},
            )
        logger.info("Deleted photo: %s", filename)
        return True


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
