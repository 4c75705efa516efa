"""Filesystem store for uploaded property images and deal documents.

Layout (gitignored):
  data/storage/<bucket>/<owner-id>/<timestamp>_<safe-name>

Keys are relative POSIX paths under the root; they are what the database
stores (``DealDocument.file_path``, ``PropertyImage.storage_key``).
"""

from __future__ import annotations

import os
import re
import tempfile
import time
from pathlib import Path, PurePosixPath

from ..config import settings
from ..errors import CRMError

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class StorageError(CRMError):
    pass


def safe_filename(name: str) -> str:
    """Strip directories and collapse unsafe characters."""
    base = PurePosixPath((name or "").replace("\\", "/")).name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned or "file"


def build_key(bucket: str, owner: object, filename: str) -> str:
    return f"{bucket}/{owner}/{int(time.time() * 1000)}_{safe_filename(filename)}"


class FileStore:
    """Key/value file store with atomic writes."""

    def __init__(self, root_dir: str | Path = "data/storage", public_base_url: str = "/files"):
        self.root_dir = Path(root_dir)
        self.public_base_url = public_base_url.rstrip("/")

    def path_for(self, key: str) -> Path:
        rel = PurePosixPath((key or "").strip())
        if not rel.parts or rel.is_absolute() or ".." in rel.parts:
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.root_dir.joinpath(*rel.parts)

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def put_bytes(self, key: str, data: bytes) -> Path:
        """Write bytes under *key* using an atomic rename."""
        dest = self.path_for(key)
        dest.parent.mkdir(parents=True, exist_ok=True)

        fd = None
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(prefix=f"{dest.name}.tmp.", dir=str(dest.parent))
            with os.fdopen(fd, "wb") as f:
                fd = None
                f.write(data or b"")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, dest)
            tmp_path = None
        finally:
            if fd is not None:
                try:
                    os.close(fd)
                except OSError:
                    pass
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass

        return dest

    def read_bytes(self, key: str) -> bytes:
        path = self.path_for(key)
        if not path.is_file():
            raise StorageError(f"File not found: {key}")
        return path.read_bytes()

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        if not path.is_file():
            return False
        path.unlink()
        return True

    def url_for(self, key: str) -> str:
        self.path_for(key)
        return f"{self.public_base_url}/{key}"


def get_filestore() -> FileStore:
    """Default store built from settings (FastAPI dependency friendly)."""
    return FileStore(settings.storage_path, settings.storage_public_base_url)
