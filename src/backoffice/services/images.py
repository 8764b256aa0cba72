"""Image gallery over object storage, reloaded after every change."""

import asyncio
import logging
import mimetypes
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import PurePosixPath

from backoffice.adapters.supabase_object_storage import ObjectStorage
from backoffice.domain.models import DEFAULT_IMAGE_TYPE, ImageItem, UploadCandidate
from backoffice.errors import MutationError, SubscriptionError, ValidationError

_logger = logging.getLogger(__name__)


class UnsupportedImageType(ValidationError):
    """The file is not one of the accepted image formats."""


class ImageTooLarge(ValidationError):
    """The file exceeds the upload size limit."""


class NoFolderSelected(ValidationError):
    """The gallery has no folder to upload into."""


@dataclass(frozen=True)
class UploadPolicy:
    """Client-side limits checked before any upload reaches the backend."""

    allowed_types: frozenset[str]
    max_bytes: int

    def content_type(self, candidate: UploadCandidate) -> str:
        """Resolve the MIME type, guessing from the file name when missing."""
        declared = candidate.content_type.strip().lower()
        if declared:
            return declared
        guessed, _ = mimetypes.guess_type(candidate.file_name)
        return (guessed or "").lower()

    def check(self, candidate: UploadCandidate) -> str:
        """Return the accepted content type or raise a validation error."""
        content_type = self.content_type(candidate)
        if content_type not in self.allowed_types:
            raise UnsupportedImageType("Only JPG and PNG images are allowed")
        if candidate.size > self.max_bytes:
            limit_mb = self.max_bytes / (1024 * 1024)
            raise ImageTooLarge(f"Images must be at most {limit_mb:g}MB")
        return content_type


class ImageGallery:
    """Images of one storage folder, newest first.

    Storage offers no push notifications, so every upload or deletion is
    followed by a full reload. Switching folders bumps a generation counter;
    a reload that finishes after a newer one started is discarded.
    """

    def __init__(
        self,
        storage: ObjectStorage,
        policy: UploadPolicy,
        folder_path: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.storage = storage
        self.policy = policy
        self.folder_path = _clean_folder(folder_path)
        self.clock = clock
        self.items: list[ImageItem] = []
        self.loading = self.folder_path is not None
        self.error: SubscriptionError | None = None
        self._generation = 0

    def clear(self) -> None:
        """Forget the folder and any listing still in flight."""
        self._generation += 1
        self.folder_path = None
        self.items = []
        self.loading = False
        self.error = None

    async def set_folder(self, folder_path: str | None) -> None:
        """Point the gallery at another folder and load it."""
        self.folder_path = _clean_folder(folder_path)
        await self.reload()

    async def reload(self) -> None:
        """List the folder and resolve download URLs."""
        self._generation += 1
        generation = self._generation
        folder = self.folder_path
        if folder is None:
            self.items = []
            self.loading = False
            self.error = None
            return
        self.loading = True
        self.error = None
        try:
            images = await asyncio.to_thread(self._fetch, folder)
        except Exception as exc:
            if generation == self._generation:
                _logger.warning("Could not list images in %s: %s", folder, exc)
                self.error = SubscriptionError(f"Could not load images in {folder}")
                self.error.__cause__ = exc
                self.loading = False
            return
        if generation != self._generation:
            _logger.debug("Dropped stale listing of %s", folder)
            return
        self.items = images
        self.loading = False

    async def upload(self, candidate: UploadCandidate, prefix: str = "") -> str:
        """Validate, upload under a timestamped name, reload, return the path."""
        folder = self._require_folder()
        content_type = self.policy.check(candidate)
        file_name = PurePosixPath(candidate.file_name).name
        object_name = f"{prefix}{int(self.clock() * 1000)}_{file_name}"
        path = f"{folder}/{object_name}"
        try:
            await asyncio.to_thread(
                self.storage.upload, path, candidate.data, content_type
            )
        except Exception as exc:
            raise MutationError(f"Could not upload {object_name}") from exc
        _logger.info("Uploaded %s (%s bytes)", path, candidate.size)
        await self.reload()
        return path

    async def delete(self, path: str) -> None:
        """Delete an object of the current folder and reload the folder."""
        folder = self._require_folder()
        target = PurePosixPath(path.strip().strip("/"))
        if target.name in ("", "..") or target.parent != PurePosixPath(folder):
            raise ValidationError(f"{path} is not in {folder}")
        try:
            await asyncio.to_thread(self.storage.delete, str(target))
        except Exception as exc:
            raise MutationError(f"Could not delete {path}") from exc
        _logger.info("Deleted %s", target)
        await self.reload()

    def _require_folder(self) -> str:
        if self.folder_path is None:
            raise NoFolderSelected("Select a folder first")
        return self.folder_path

    def _fetch(self, folder: str) -> list[ImageItem]:
        images = [
            ImageItem(
                id=stored.name,
                name=stored.name,
                url=self.storage.download_url(stored.path),
                path=stored.path,
                size=stored.size,
                content_type=stored.content_type or DEFAULT_IMAGE_TYPE,
                created_at=stored.created_at,
                updated_at=stored.updated_at,
            )
            for stored in self.storage.list(folder)
        ]
        return sorted(images, key=lambda image: image.updated_at or "", reverse=True)


def _clean_folder(folder_path: str | None) -> str | None:
    if folder_path is None:
        return None
    cleaned = folder_path.strip().strip("/")
    return cleaned or None
