"""File storage for issue images.

Files are written under ``{base_dir}/{prefix}/{year}/{month}/{uuid}.{ext}``
with async I/O; the returned relative path is what the ``/uploads`` static
mount serves.
"""

import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

import aiofiles

from people_center_api.lib.uploads.validators import extract_extension


class FileStorage(Protocol):
    """Abstract file storage interface for uploaded images."""

    async def save(self, content: bytes, filename: str) -> str:
        """Save file content and return the stored relative path."""
        ...

    async def delete(self, stored_path: str) -> None:
        """Delete a stored file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        ...


class LocalFileStorage:
    """Local filesystem implementation of FileStorage.

    Args:
        base_dir: The root directory for file storage.
        prefix: Sub-directory all files of this store go into (e.g. ``issues``).
    """

    def __init__(self, base_dir: str | Path, prefix: str = "") -> None:
        self._base_dir = Path(base_dir)
        self._prefix = prefix.strip("/")

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    async def save(self, content: bytes, filename: str) -> str:
        """Save file content to the local filesystem.

        Creates year/month subdirectories as needed and names the file with
        a random UUID, keeping only the original extension.

        Args:
            content: Raw file bytes.
            filename: Original filename (extension is preserved).

        Returns:
            Relative storage path (e.g., "issues/2026/02/abc123.png").
        """
        now = datetime.now(tz=UTC)
        parts = [p for p in (self._prefix, str(now.year), f"{now.month:02d}") if p]
        stored_name = f"{uuid.uuid4().hex}{extract_extension(filename)}"
        relative_path = "/".join([*parts, stored_name])

        full_dir = self._base_dir.joinpath(*parts)
        full_dir.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(self._base_dir / relative_path, "wb") as f:
            await f.write(content)

        return relative_path

    async def delete(self, stored_path: str) -> None:
        full_path = self._base_dir / stored_path
        if not full_path.exists():
            msg = f"File not found: {stored_path}"
            raise FileNotFoundError(msg)
        full_path.unlink()
