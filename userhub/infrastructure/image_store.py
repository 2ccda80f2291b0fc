"""Profile image storage on the local filesystem.

Each upload is written under a fresh nanosecond-timestamp name plus the
original extension, and served publicly from ``UPLOAD_URL_PREFIX``.
"""

import os
import shutil
import time
from pathlib import Path
from typing import Iterable, Optional

import structlog
from fastapi import UploadFile

from userhub.core.exceptions import InternalError, ValidationException

logger = structlog.get_logger(__name__)

CHUNK_SIZE = 1024 * 1024


class ImageStore:
    """Associates uploaded image files with opaque references (their filenames)."""

    def __init__(
        self,
        directory: str,
        public_prefix: str = "/uploads",
        allowed_extensions: Iterable[str] = (".jpg", ".jpeg", ".png", ".gif", ".webp"),
    ):
        self.directory = Path(directory)
        self.public_prefix = "/" + public_prefix.strip("/")
        self.allowed_extensions = {ext.lower() for ext in allowed_extensions}
        self.directory.mkdir(parents=True, exist_ok=True)

    def extension_for(self, filename: Optional[str]) -> str:
        """Lower-cased extension of ``filename``, rejected when it is not an image type."""
        ext = os.path.splitext(filename or "")[1].lower()
        if ext not in self.allowed_extensions:
            allowed = ", ".join(sorted(self.allowed_extensions))
            raise ValidationException(f"Profile image must be one of: {allowed}")
        return ext

    def save(self, upload: UploadFile) -> str:
        """Persist ``upload`` and return its reference."""
        ext = self.extension_for(upload.filename)
        upload.file.seek(0)

        try:
            while True:
                ref = f"{time.time_ns()}{ext}"
                try:
                    # Exclusive create: two uploads in the same nanosecond cannot share a file
                    with open(self.path_for(ref), "xb") as f:
                        shutil.copyfileobj(upload.file, f, CHUNK_SIZE)
                    break
                except FileExistsError:
                    continue
        except OSError as e:
            logger.error("Image save failed", error=str(e))
            raise InternalError("Server error", details={"error": "Could not store profile image"}) from e

        logger.info("Image stored", image=ref)
        return ref

    def delete(self, ref: str) -> None:
        """Remove the file behind ``ref``. A file that is already gone is not an error."""
        try:
            self.path_for(ref).unlink()
        except FileNotFoundError:
            pass

    def discard(self, ref: Optional[str]) -> None:
        """Best-effort cleanup. Never raises; failures are only logged."""
        if not ref:
            return
        try:
            self.delete(ref)
            logger.info("Image deleted", image=ref)
        except OSError as e:
            logger.warning("Image cleanup failed", image=ref, error=str(e))

    def resolve(self, ref: Optional[str]) -> Optional[str]:
        """Public path of ``ref``, derived from the reference alone."""
        if not ref:
            return None
        return f"{self.public_prefix}/{Path(ref).name}"

    def path_for(self, ref: str) -> Path:
        # Only the base name is honoured, so a reference cannot leave the directory
        return self.directory / Path(ref).name
