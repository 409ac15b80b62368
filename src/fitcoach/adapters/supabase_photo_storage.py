"""Supabase Storage bucket for meal photos."""

from dataclasses import dataclass

from supabase import Client

from fitcoach.services.completions import PhotoStorage


@dataclass
class SupabasePhotoStorage(PhotoStorage):
    """Stores meal photos in a public bucket."""

    client: Client
    bucket: str = "meal-photos"

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Upload without overwriting and return the public URL."""
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(
            path,
            content,
            {"content-type": content_type, "cache-control": "3600", "upsert": "false"},
        )
        return bucket.get_public_url(path)

    def remove(self, path: str) -> None:
        """Delete a stored photo."""
        self.client.storage.from_(self.bucket).remove([path])
