"""
Backup Exporters

One exporter per host environment:

- NativeShareExporter: share sheet; when sharing is unavailable the text
  goes to the clipboard and the export still succeeds, with a message
  telling the user where the backup went.
- DownloadExporter: delivers the backup as a downloadable file.

build_exporter() picks the variant for a platform. It is called once per
export; nothing about the choice is remembered between calls.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import structlog

from notebk.config import TransferSettings, get_settings
from notebk.models.backup import APP_NAME, ExportChannel, ExportResult
from notebk.services.transfer.download import DirectoryDownload
from notebk.services.transfer.interface import (
    ClipboardCapability,
    DownloadCapability,
    ShareCapability,
    TransferError,
)
from notebk.services.transfer.platform import HostPlatform
from notebk.services.transfer.termux import CommandClipboard, CommandShare


SHARE_TITLE = f"Backup de {APP_NAME}"
SHARE_DIALOG_TITLE = "Guardar backup"
CLIPBOARD_FALLBACK_MESSAGE = "Backup copiado al portapapeles"
EXPORT_ERROR_MESSAGE = "Error al exportar el backup"

logger = structlog.get_logger(__name__)


class Exporter(ABC):
    """Moves a serialized backup out of the process."""

    @abstractmethod
    def export(self, text: str, filename: str) -> ExportResult:
        """Export text; never raises, failures come back as results."""
        pass


class NativeShareExporter(Exporter):
    """Share sheet with clipboard fallback."""

    def __init__(self, share: ShareCapability, clipboard: ClipboardCapability):
        self._share = share
        self._clipboard = clipboard

    def export(self, text: str, filename: str) -> ExportResult:
        try:
            if self._share.can_share():
                self._share.share(
                    title=SHARE_TITLE,
                    text=text,
                    dialog_title=SHARE_DIALOG_TITLE,
                )
                return ExportResult(
                    success=True,
                    channel=ExportChannel.SHARE,
                    filename=filename,
                )

            self._clipboard.write_text(text)
            return ExportResult(
                success=True,
                message=CLIPBOARD_FALLBACK_MESSAGE,
                channel=ExportChannel.CLIPBOARD,
                filename=filename,
            )
        except TransferError as e:
            logger.error("native_export_failed", error=str(e))
            return ExportResult(success=False, error=EXPORT_ERROR_MESSAGE, filename=filename)


class DownloadExporter(Exporter):
    """Delivers the backup as a file."""

    def __init__(self, download: DownloadCapability):
        self._download = download

    def export(self, text: str, filename: str) -> ExportResult:
        try:
            self._download.deliver(filename, text)
        except TransferError as e:
            logger.error("download_export_failed", error=str(e))
            return ExportResult(success=False, error=EXPORT_ERROR_MESSAGE, filename=filename)
        return ExportResult(
            success=True,
            channel=ExportChannel.DOWNLOAD,
            filename=filename,
        )


def build_exporter(
    platform: HostPlatform,
    settings: Optional[TransferSettings] = None,
    download: Optional[DownloadCapability] = None,
    export_dir: Optional[Path] = None,
) -> Exporter:
    """
    Exporter for a host platform.

    Args:
        platform: Result of detect_platform()
        settings: Transfer settings (commands, timeouts)
        download: Download capability for web hosts
        export_dir: Folder for the default web download; defaults to
                    the configured export folder
    """
    settings = settings or get_settings().transfer

    if platform == HostPlatform.NATIVE:
        return NativeShareExporter(
            share=CommandShare(settings.share_command, settings.command_timeout),
            clipboard=CommandClipboard(settings.clipboard_command, settings.command_timeout),
        )

    if download is None:
        download = DirectoryDownload(export_dir or get_settings().backup.export_dir)
    return DownloadExporter(download)
