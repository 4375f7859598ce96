"""Tests for host detection, transfer capabilities and exporters."""

import pytest

from notebk.config import TransferSettings
from notebk.models import ExportChannel
from notebk.services.transfer import (
    CLIPBOARD_FALLBACK_MESSAGE,
    EXPORT_ERROR_MESSAGE,
    ClipboardCapability,
    CommandClipboard,
    CommandShare,
    DirectoryDownload,
    DownloadExporter,
    HostPlatform,
    NativeShareExporter,
    ShareCapability,
    TransferError,
    build_exporter,
    detect_platform,
)


MISSING_COMMAND = "notebk-command-that-does-not-exist"


class FakeShare(ShareCapability):
    def __init__(self, available=True, fail=False):
        self.available = available
        self.fail = fail
        self.shared = []

    def can_share(self):
        return self.available

    def share(self, title, text, dialog_title):
        if self.fail:
            raise TransferError("share cancelled")
        self.shared.append((title, text, dialog_title))


class FakeClipboard(ClipboardCapability):
    def __init__(self, fail=False):
        self.fail = fail
        self.content = None

    def write_text(self, text):
        if self.fail:
            raise TransferError("no clipboard")
        self.content = text


class TestDetectPlatform:
    """Tests for host platform detection."""

    def test_override_wins(self):
        """Test an explicit setting is used as is."""
        assert detect_platform("native", environ={}) == HostPlatform.NATIVE
        assert detect_platform("web", environ={"TERMUX_VERSION": "0.118"}) == HostPlatform.WEB

    @pytest.mark.parametrize("environ", [
        {"TERMUX_VERSION": "0.118"},
        {"PREFIX": "/data/data/com.termux/files/usr"},
    ])
    def test_termux_is_native(self, environ):
        """Test Termux environments are detected."""
        assert detect_platform(environ=environ) == HostPlatform.NATIVE

    def test_desktop_is_web(self):
        """Test everything else is web."""
        assert detect_platform(environ={"PREFIX": "/usr/local"}) == HostPlatform.WEB


class TestNativeShareExporter:
    """Tests for share sheet with clipboard fallback."""

    def test_share(self):
        """Test the backup is shared when sharing is available."""
        share, clipboard = FakeShare(), FakeClipboard()
        result = NativeShareExporter(share, clipboard).export("{}", "b.json")
        assert result.success
        assert result.channel == ExportChannel.SHARE
        assert share.shared == [("Backup de notebk", "{}", "Guardar backup")]
        assert clipboard.content is None

    def test_clipboard_fallback(self):
        """Test the backup goes to the clipboard when sharing is unavailable."""
        share, clipboard = FakeShare(available=False), FakeClipboard()
        result = NativeShareExporter(share, clipboard).export("{}", "b.json")
        assert result.success
        assert result.channel == ExportChannel.CLIPBOARD
        assert result.message == CLIPBOARD_FALLBACK_MESSAGE
        assert clipboard.content == "{}"

    def test_share_failure(self):
        """Test a failing share sheet is an export error."""
        result = NativeShareExporter(FakeShare(fail=True), FakeClipboard()).export("{}", "b.json")
        assert not result.success
        assert result.error == EXPORT_ERROR_MESSAGE

    def test_clipboard_failure(self):
        """Test a failing fallback is an export error."""
        result = NativeShareExporter(FakeShare(available=False), FakeClipboard(fail=True)).export("{}", "b.json")
        assert not result.success
        assert result.error == EXPORT_ERROR_MESSAGE


class TestDownload:
    """Tests for file downloads."""

    def test_deliver(self, tmp_path):
        """Test the file lands in the folder with no temp files left."""
        result = DownloadExporter(DirectoryDownload(tmp_path / "out")).export("{\"a\": 1}", "b.json")
        assert result.success
        assert result.channel == ExportChannel.DOWNLOAD
        assert (tmp_path / "out" / "b.json").read_text(encoding="utf-8") == "{\"a\": 1}"
        assert [p.name for p in (tmp_path / "out").iterdir()] == ["b.json"]

    def test_same_name_is_overwritten(self, tmp_path):
        """Test a second export on the same day replaces the file."""
        download = DirectoryDownload(tmp_path)
        download.deliver("b.json", "uno")
        download.deliver("b.json", "dos")
        assert (tmp_path / "b.json").read_text(encoding="utf-8") == "dos"

    @pytest.mark.parametrize("filename", ["../b.json", "sub/b.json", ""])
    def test_rejects_paths(self, tmp_path, filename):
        """Test filenames cannot leave the folder."""
        with pytest.raises(TransferError):
            DirectoryDownload(tmp_path).deliver(filename, "x")

    def test_unwritable_folder(self, tmp_path):
        """Test a folder that cannot be created is an export error."""
        blocker = tmp_path / "file"
        blocker.write_text("x")
        result = DownloadExporter(DirectoryDownload(blocker / "out")).export("{}", "b.json")
        assert not result.success
        assert result.error == EXPORT_ERROR_MESSAGE


class TestCommands:
    """Tests for the Termux command capabilities without Termux."""

    def test_missing_share_command(self):
        """Test sharing is unavailable when the command is missing."""
        assert CommandShare(MISSING_COMMAND).can_share() is False

    def test_missing_clipboard_command(self):
        """Test the clipboard raises when the command is missing."""
        with pytest.raises(TransferError):
            CommandClipboard(MISSING_COMMAND).write_text("{}")

    def test_native_without_commands(self):
        """Test a native exporter without Termux:API reports failure."""
        settings = TransferSettings(
            platform="native",
            share_command=MISSING_COMMAND,
            clipboard_command=MISSING_COMMAND,
        )
        exporter = build_exporter(HostPlatform.NATIVE, settings)
        result = exporter.export("{}", "b.json")
        assert not result.success


class TestBuildExporter:
    """Tests for picking the exporter."""

    def test_native(self):
        """Test native hosts get the share exporter."""
        assert isinstance(build_exporter(HostPlatform.NATIVE, TransferSettings()), NativeShareExporter)

    def test_web(self, tmp_path):
        """Test web hosts get a download exporter into the folder."""
        exporter = build_exporter(HostPlatform.WEB, TransferSettings(), export_dir=tmp_path)
        assert isinstance(exporter, DownloadExporter)
        assert exporter.export("{}", "b.json").success
        assert (tmp_path / "b.json").exists()
