"""
Native Android capabilities through the Termux:API commands.

    termux-share          reads the text to share from stdin
    termux-clipboard-set  reads the new clipboard content from stdin

Both are optional: when the command is not installed, sharing reports
itself as unavailable and the clipboard raises TransferError.
"""

import shutil
import subprocess

from notebk.services.transfer.interface import (
    BACKUP_MIME_TYPE,
    ClipboardCapability,
    ShareCapability,
    TransferError,
)


def _run(command: list[str], text: str, timeout: float) -> None:
    try:
        subprocess.run(
            command,
            input=text,
            text=True,
            encoding="utf-8",
            capture_output=True,
            check=True,
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise TransferError(f"{command[0]} failed: {e}") from e


class CommandShare(ShareCapability):
    """Share sheet opened by a command that reads stdin."""

    def __init__(self, command: str = "termux-share", timeout: float = 120.0):
        self._command = command
        self._timeout = timeout

    def can_share(self) -> bool:
        return shutil.which(self._command) is not None

    def share(self, title: str, text: str, dialog_title: str) -> None:
        # termux-share has no dialog title option; the chooser uses its own
        _run(
            [self._command, "-a", "send", "-c", BACKUP_MIME_TYPE, "-t", title],
            text,
            self._timeout,
        )


class CommandClipboard(ClipboardCapability):
    """Clipboard written by a command that reads stdin."""

    def __init__(self, command: str = "termux-clipboard-set", timeout: float = 30.0):
        self._command = command
        self._timeout = timeout

    def write_text(self, text: str) -> None:
        if shutil.which(self._command) is None:
            raise TransferError(f"{self._command} is not installed")
        _run([self._command], text, self._timeout)
