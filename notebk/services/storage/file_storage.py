"""
File Storage Implementation

Each slot is one UTF-8 JSON file inside the data directory:

    <data_dir>/<key>.json

Writes are atomic: the content goes to a temporary file next to the
target, is flushed and fsynced, then renamed over the target with
os.replace(). A crash mid-write leaves the previous document intact.

TRADEOFFS:
- No locking (single writer per process is assumed)
- Whole-file rewrite on every save (documents are small)
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from notebk.services.storage.interface import (
    StorageBackend,
    StorageReadError,
    StorageWriteError,
)


SLOT_SUFFIX = ".json"

logger = structlog.get_logger(__name__)


class FileStorage(StorageBackend):
    """Directory-backed storage with atomic writes."""

    def __init__(self, directory: Path):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        return self._directory / f"{self.check_key(key)}{SLOT_SUFFIX}"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Could not read {path}: {e}") from e

    def write(self, key: str, text: str) -> None:
        path = self.path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            self._atomic_write(path, text)
        except OSError as e:
            raise StorageWriteError(f"Could not write {path}: {e}") from e

    def keys(self) -> list[str]:
        if not self._directory.is_dir():
            return []
        return sorted(p.stem for p in self._directory.glob(f"*{SLOT_SUFFIX}"))

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _atomic_write(self, path: Path, text: str) -> None:
        """Write to a sibling temp file, then rename it over the target."""
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                tmp_file.write(text)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            os.replace(tmp_name, path)
        except OSError:
            logger.warning("atomic_write_failed", path=str(path))
            raise
        finally:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
