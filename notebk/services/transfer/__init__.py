"""
Transfer Services Package

Capability interfaces and per-host implementations used to move a
backup across the process boundary.
"""

from notebk.services.transfer.interface import (
    BACKUP_MIME_TYPE,
    ClipboardCapability,
    DownloadCapability,
    ShareCapability,
    TransferError,
)
from notebk.services.transfer.platform import HostPlatform, detect_platform
from notebk.services.transfer.download import DirectoryDownload
from notebk.services.transfer.termux import CommandClipboard, CommandShare
from notebk.services.transfer.exporters import (
    CLIPBOARD_FALLBACK_MESSAGE,
    EXPORT_ERROR_MESSAGE,
    DownloadExporter,
    Exporter,
    NativeShareExporter,
    build_exporter,
)

__all__ = [
    # Interfaces
    "BACKUP_MIME_TYPE",
    "ClipboardCapability",
    "DownloadCapability",
    "ShareCapability",
    "TransferError",
    # Platform
    "HostPlatform",
    "detect_platform",
    # Implementations
    "CommandClipboard",
    "CommandShare",
    "DirectoryDownload",
    # Exporters
    "CLIPBOARD_FALLBACK_MESSAGE",
    "EXPORT_ERROR_MESSAGE",
    "DownloadExporter",
    "Exporter",
    "NativeShareExporter",
    "build_exporter",
]
