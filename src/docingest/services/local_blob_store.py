"""Filesystem-backed BlobStore for offline runs and tests."""

import asyncio
import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalBlobStore:
    """BlobStore that maps ``<folder>/<name>`` paths under a root directory.

    Attributes:
        root: Directory that plays the role of the blob container.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    @property
    def base_uri(self) -> str:
        """``file://`` URI of the container root."""
        return self.root.resolve().as_uri()

    def _resolve(self, path: str) -> Path:
        resolved = (self.root / path.lstrip("/")).resolve()
        if self.root.resolve() not in resolved.parents:
            raise ValueError(f"Blob path escapes the container root: {path}")
        return resolved

    async def get(self, path: str) -> bytes | None:
        target = self._resolve(path)
        if not target.is_file():
            return None
        return await asyncio.to_thread(target.read_bytes)

    async def put(self, path: str, data: bytes | str) -> None:
        target = self._resolve(path)
        payload = data.encode("utf-8") if isinstance(data, str) else data

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload)

        await asyncio.to_thread(_write)
        logger.debug(f"Wrote blob {path} ({len(payload)} bytes)")

    async def move(self, source_path: str, destination_path: str) -> None:
        source = self._resolve(source_path)
        destination = self._resolve(destination_path)

        def _move() -> None:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source), str(destination))

        await asyncio.to_thread(_move)
        logger.info(f"Moved blob {source_path} to {destination_path}")

    async def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()
