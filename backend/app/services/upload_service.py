"""
Upload Service - stores multipart uploads on local disk

Files land under ``settings.UPLOAD_DIR/<category>/`` with a
``<prefix>-<epoch ms>-<random><ext>`` name and are referenced by their
relative path (``uploads/avatars/avatar-....png``), which is also the URL
path they are served from.
"""

import os
import secrets
import time
from pathlib import Path
from typing import List, Optional

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from app.core.config import settings
from app.core.exceptions import FileTooLargeError, InvalidFileTypeError
from app.core.logging_config import logger

CHUNK_SIZE = 1024 * 1024

# URL prefix the upload directory is mounted under
UPLOAD_URL_PREFIX = "uploads"


class UploadService:
    """Validates and writes uploaded files"""

    def __init__(self, base_dir: Optional[Path] = None):
        self._base_dir = base_dir

    @property
    def base_dir(self) -> Path:
        return self._base_dir or settings.upload_path

    def build_filename(self, prefix: str, original_name: Optional[str]) -> str:
        ext = os.path.splitext(original_name or "")[1].lower()
        return f"{prefix}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"

    def validate_image(self, file: UploadFile, field: str) -> None:
        allowed = settings.ALLOWED_IMAGE_TYPES
        if file.content_type not in allowed:
            raise InvalidFileTypeError(file.content_type or "unknown", allowed, field=field)

    def validate_document(self, file: UploadFile, field: str) -> None:
        allowed = settings.ALLOWED_EXTENSIONS
        ext = os.path.splitext(file.filename or "")[1].lower().lstrip(".")
        if ext not in allowed:
            raise InvalidFileTypeError(ext or "unknown", allowed, field=field)

    async def save(self, file: UploadFile, category: str, prefix: str, max_size: int, field: str) -> str:
        """
        Stream ``file`` to disk, enforcing ``max_size``.

        Returns the relative path stored on the record. A partially written
        file is removed when the limit is exceeded.
        """
        directory = self.base_dir / category
        directory.mkdir(parents=True, exist_ok=True)

        filename = self.build_filename(prefix, file.filename)
        full_path = directory / filename

        written = 0
        try:
            async with aiofiles.open(full_path, "wb") as out:
                while True:
                    chunk = await file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > max_size:
                        raise FileTooLargeError(max_size, field=field)
                    await out.write(chunk)
        except FileTooLargeError:
            await self.remove(full_path)
            raise

        logger.info(
            f"Stored upload {filename} ({written} bytes)",
            extra={"event_type": "upload", "upload_category": category, "size_bytes": written}
        )
        return f"{UPLOAD_URL_PREFIX}/{category}/{filename}"

    async def save_avatar(self, file: UploadFile) -> str:
        self.validate_image(file, field="avatar")
        return await self.save(file, "avatars", "avatar", settings.MAX_AVATAR_SIZE, field="avatar")

    async def save_student_photo(self, file: UploadFile) -> str:
        self.validate_image(file, field="photo")
        return await self.save(file, "students", "photo", settings.MAX_STUDENT_FILE_SIZE, field="photo")

    async def save_student_documents(self, files: List[UploadFile]) -> List[str]:
        """All documents are stored or none: earlier files are discarded if a later one fails"""
        for file in files:
            self.validate_document(file, field="documents")

        stored: List[str] = []
        try:
            for file in files:
                stored.append(await self.save(
                    file, "students", "document", settings.MAX_STUDENT_FILE_SIZE, field="documents"
                ))
        except Exception:
            await self.discard(stored)
            raise
        return stored

    def resolve(self, stored_path: str) -> Path:
        """Map a stored ``uploads/<category>/<file>`` path back to disk"""
        relative = stored_path.split("/", 1)[1] if stored_path.startswith(f"{UPLOAD_URL_PREFIX}/") else stored_path
        return self.base_dir / relative

    async def discard(self, stored_paths: List[str]) -> None:
        """Delete files written for a request that did not complete"""
        for stored_path in stored_paths:
            await self.remove(self.resolve(stored_path))
        if stored_paths:
            logger.info(
                f"Discarded {len(stored_paths)} orphaned upload(s)",
                extra={"event_type": "upload_discarded"}
            )

    async def remove(self, path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass


# Singleton instance
upload_service = UploadService()
