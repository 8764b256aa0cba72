"""Supabase-backed object storage for images."""

from dataclasses import dataclass
from typing import Protocol

from supabase import Client

from backoffice.domain.models import StoredObject


class ObjectStorage(Protocol):
    """Interface for folder-addressed object storage."""

    def list(self, folder: str) -> list[StoredObject]:
        """Return metadata for every object directly under folder."""

    def download_url(self, path: str) -> str:
        """Return a URL from which the object can be fetched."""

    def upload(self, path: str, data: bytes, content_type: str) -> None:
        """Store bytes under path."""

    def delete(self, path: str) -> None:
        """Delete the object at path."""


@dataclass
class SupabaseObjectStorage(ObjectStorage):
    """Supabase Storage implementation bound to a single bucket."""

    client: Client
    bucket: str

    def list(self, folder: str) -> list[StoredObject]:
        """List objects in a folder, skipping nested folder entries."""
        prefix = folder.strip("/")
        rows = self.client.storage.from_(self.bucket).list(prefix)
        objects = []
        for row in rows or []:
            if row.get("id") is None:
                continue
            metadata = row.get("metadata") or {}
            name = str(row["name"])
            objects.append(
                StoredObject(
                    name=name,
                    path=f"{prefix}/{name}" if prefix else name,
                    size=int(metadata.get("size") or 0),
                    content_type=metadata.get("mimetype"),
                    created_at=row.get("created_at"),
                    updated_at=row.get("updated_at"),
                )
            )
        return objects

    def download_url(self, path: str) -> str:
        """Return the public URL of an object."""
        return self.client.storage.from_(self.bucket).get_public_url(path)

    def upload(self, path: str, data: bytes, content_type: str) -> None:
        """Upload bytes with an explicit content type."""
        self.client.storage.from_(self.bucket).upload(
            path, data, {"content-type": content_type}
        )

    def delete(self, path: str) -> None:
        """Remove an object from the bucket."""
        self.client.storage.from_(self.bucket).remove([path])
