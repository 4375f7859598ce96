"""
Main Orchestrator for notebk

Owns the live document and wires the components together.

DESIGN DECISION: The live document is held by an explicit Notebook
object with an injected StateStore instead of a module-level global.
Tests build one over MemoryStorage; the UI builds one over FileStorage.

Edit flow:
1. A pure mutator computes the new document from the current one
2. The new document is saved (whole document, synchronously)
3. Only after a successful save does it become the current document

A rejected edit (bad month name, wrong value type, unknown field) and
a failed save both leave the previous document in place and come back
as a failed OperationResult; nothing is ever half-applied.
"""

from typing import Any, Callable, Optional

from notebk.audit import AuditLogger
from notebk.backup import SAVE_ERROR_MESSAGE, BackupService
from notebk.config import get_settings
from notebk.models.backup import OperationResult
from notebk.models.state import AppState
from notebk.services.storage import (
    FileStorage,
    StateStore,
    StorageBackend,
    StorageError,
)


Mutator = Callable[..., AppState]

INVALID_EDIT_MESSAGE = "Dato no válido"


class Notebook:
    """The application state, owned by whoever created it."""

    def __init__(self, store: StateStore, audit_logger: Optional[AuditLogger] = None):
        self._store = store
        self._audit = audit_logger or AuditLogger()
        self._state = store.load()

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def store(self) -> StateStore:
        return self._store

    def apply(self, mutator: Mutator, *args: Any, **kwargs: Any) -> OperationResult:
        """
        Apply an edit and persist it.

        Usage:
            notebook.apply(mutators.set_saving, "2024", "Enero", 1200)
        """
        try:
            new_state = mutator(self._state, *args, **kwargs)
        except ValueError as e:
            # pydantic.ValidationError is a ValueError
            self._audit.log_error(
                "edit_rejected",
                str(e),
                {"mutator": getattr(mutator, "__name__", repr(mutator))},
            )
            return OperationResult(success=False, error=INVALID_EDIT_MESSAGE)
        if new_state is self._state:
            return OperationResult(success=True)

        try:
            self._store.save(new_state)
        except StorageError:
            return OperationResult(success=False, error=SAVE_ERROR_MESSAGE)

        self._state = new_state
        return OperationResult(success=True)

    def reload(self) -> AppState:
        """Re-read the stored document, e.g. after a backup was applied."""
        self._state = self._store.load()
        return self._state


def create_app_components(
    backend: Optional[StorageBackend] = None,
) -> tuple[Notebook, BackupService]:
    """
    Factory function to create all application components.

    Args:
        backend: Storage to use. Defaults to files in the configured
                 data directory.

    Returns:
        (notebook, backup_service)
    """
    settings = get_settings()
    storage_settings = settings.storage
    audit_logger = AuditLogger()

    store = StateStore(
        backend or FileStorage(storage_settings.data_dir),
        key=storage_settings.key,
        audit_logger=audit_logger,
        preserve_corrupt=storage_settings.preserve_corrupt,
    )
    notebook = Notebook(store, audit_logger=audit_logger)
    backup_service = BackupService(
        store,
        audit_logger=audit_logger,
        backup_settings=settings.backup,
        transfer_settings=settings.transfer,
    )
    return notebook, backup_service
