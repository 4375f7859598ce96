"""
Transfer Capability Interfaces

A backup leaves the process through one of three capabilities:

- ShareCapability:     hand the text to the host's share sheet
- ClipboardCapability: put the text on the clipboard
- DownloadCapability:  deliver the text as a named file

Each host environment provides its own implementations; the exporters
in notebk.services.transfer.exporters only ever talk to these interfaces.
"""

from abc import ABC, abstractmethod


BACKUP_MIME_TYPE = "application/json"


class ShareCapability(ABC):
    """The host's native share sheet."""

    @abstractmethod
    def can_share(self) -> bool:
        """Whether sharing is available right now."""
        pass

    @abstractmethod
    def share(self, title: str, text: str, dialog_title: str) -> None:
        """
        Open the share sheet with the given text.

        Raises:
            TransferError: If the share sheet could not be shown
        """
        pass


class ClipboardCapability(ABC):
    """The host clipboard."""

    @abstractmethod
    def write_text(self, text: str) -> None:
        """
        Replace the clipboard content.

        Raises:
            TransferError: If the clipboard is not writable
        """
        pass


class DownloadCapability(ABC):
    """A file download (browser save dialog, export folder...)."""

    @abstractmethod
    def deliver(self, filename: str, content: str, mime_type: str = BACKUP_MIME_TYPE) -> None:
        """
        Deliver content as a file named filename.

        Raises:
            TransferError: If the file could not be delivered
        """
        pass


class TransferError(Exception):
    """A transfer channel failed."""
    pass
