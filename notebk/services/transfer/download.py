"""
Download to a local folder.

Stands in for the browser's save dialog on desktop hosts. The content
is first written to a transient temp file in the destination folder,
which is always released: either renamed into place or deleted.
A file with the same name is overwritten.
"""

import os
import tempfile
from pathlib import Path

from notebk.services.transfer.interface import (
    BACKUP_MIME_TYPE,
    DownloadCapability,
    TransferError,
)


class DirectoryDownload(DownloadCapability):
    """Delivers files into a fixed directory."""

    def __init__(self, directory: Path):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def deliver(self, filename: str, content: str, mime_type: str = BACKUP_MIME_TYPE) -> None:
        if Path(filename).name != filename or filename in ("", ".", ".."):
            raise TransferError(f"Invalid download filename: {filename!r}")

        target = self._directory / filename
        tmp_name = None
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{filename}.", suffix=".part")
            with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                tmp_file.write(content)
            os.replace(tmp_name, target)
        except OSError as e:
            raise TransferError(f"Could not write {target}: {e}") from e
        finally:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
