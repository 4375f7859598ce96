"""Shared fixtures for notebk tests."""

from datetime import datetime, timezone

import pytest

from notebk.audit import AuditLogger
from notebk.config import BackupSettings, TransferSettings
from notebk.services.storage import MemoryStorage, StateStore


FIXED_NOW = datetime(2024, 5, 17, 10, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def memory_backend():
    return MemoryStorage()


@pytest.fixture
def store(memory_backend, audit_logger):
    return StateStore(memory_backend, audit_logger=audit_logger, clock=lambda: FIXED_NOW)


@pytest.fixture
def backup_settings(tmp_path):
    return BackupSettings(export_dir=tmp_path / "exports", indent=2)


@pytest.fixture
def transfer_settings():
    return TransferSettings(platform="web")
