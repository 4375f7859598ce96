"""
Persistent Store

Reads and writes the single AppState document to one storage slot.

GUARANTEES:
- load() never raises. An empty slot, an unreadable slot and text that
  is not a JSON object come back as the default (empty) document; the
  last two are logged as errors.
- A JSON object with some invalid entries is repaired, not discarded:
  every entry that validates on its own is kept and the rest are
  dropped and logged. Amounts that are not numbers load as null.
- save() overwrites the whole slot. The same document always produces
  the same bytes, so saving twice is harmless.

CAVEAT: after a fallback or a repair the next save() overwrites the
stored blob. Set preserve_corrupt=True to copy it to a side slot first.
"""

import json
from datetime import datetime, timezone
from typing import Callable, Optional

from pydantic import ValidationError

from notebk.audit import AuditLogger
from notebk.models.audit import AuditEventBuilder
from notebk.models.state import AppState
from notebk.services.storage.interface import (
    StorageBackend,
    StorageError,
)


DEFAULT_STORAGE_KEY = "notebk_data"


def default_state() -> AppState:
    """A document with all six mappings present and empty."""
    return AppState()


class StateStore:
    """Owns the persisted document slot."""

    def __init__(
        self,
        backend: StorageBackend,
        key: str = DEFAULT_STORAGE_KEY,
        audit_logger: Optional[AuditLogger] = None,
        preserve_corrupt: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._backend = backend
        self._key = backend.check_key(key)
        self._audit = audit_logger or AuditLogger()
        self._preserve_corrupt = preserve_corrupt
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def key(self) -> str:
        return self._key

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    def load(self) -> AppState:
        """Return the stored document, or the default one."""
        try:
            raw = self._backend.read(self._key)
        except StorageError as e:
            self._audit.log(AuditEventBuilder.state_read_failed(self._key, str(e)))
            return default_state()

        if raw is None:
            self._audit.log(AuditEventBuilder.state_defaulted(self._key))
            return default_state()

        try:
            document = json.loads(raw)
        except (ValueError, RecursionError) as e:
            return self._fallback(raw, str(e))
        if not isinstance(document, dict):
            return self._fallback(raw, "stored document is not a JSON object")

        try:
            state = AppState.model_validate(document)
        except ValidationError as e:
            state, dropped = repair_document(document)
            self._audit.log(AuditEventBuilder.state_repaired(self._key, dropped, str(e)))
            if self._preserve_corrupt:
                self._preserve(raw)
            return state

        self._audit.log(AuditEventBuilder.state_loaded(self._key, len(raw)))
        return state

    def save(self, state: AppState) -> None:
        """
        Overwrite the stored document.

        Raises:
            StorageWriteError: If the host rejects the write
        """
        text = state.to_json()
        try:
            self._backend.write(self._key, text)
        except StorageError as e:
            self._audit.log(AuditEventBuilder.save_failed(self._key, str(e)))
            raise
        self._audit.log(AuditEventBuilder.state_saved(self._key, len(text)))

    def _preserve(self, raw: str) -> None:
        stamp = self._clock().strftime("%Y%m%dT%H%M%S")
        preserved_key = f"{self._key}.corrupt-{stamp}"
        try:
            self._backend.write(preserved_key, raw)
        except StorageError as e:
            self._audit.log_error("preserve_failed", str(e), {"key": preserved_key})
            return
        self._audit.log(AuditEventBuilder.state_preserved(self._key, preserved_key))

    def _fallback(self, raw: str, error_message: str) -> AppState:
        self._audit.log(AuditEventBuilder.state_corrupt(self._key, error_message))
        if self._preserve_corrupt:
            self._preserve(raw)
        return default_state()


def repair_document(document: dict) -> tuple[AppState, list[str]]:
    """
    Keep every entry of a stored document that validates on its own.

    Returns the repaired document and the dotted paths that were dropped
    (a whole mapping when it is not an object, otherwise single entries
    such as "expenses.2024-05").
    """
    kept: dict = {}
    dropped: list[str] = []

    for name, field in AppState.model_fields.items():
        alias = field.alias or name
        mapping = document.get(alias)
        if mapping is None:
            continue
        if not isinstance(mapping, dict):
            dropped.append(alias)
            continue

        entries = {}
        for key, entry in mapping.items():
            try:
                AppState.model_validate({alias: {key: entry}})
            except ValidationError:
                dropped.append(f"{alias}.{key}")
            else:
                entries[key] = entry
        kept[alias] = entries

    return AppState.model_validate(kept), dropped
