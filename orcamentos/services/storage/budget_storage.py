"""
Budget Collection Storage

The whole collection is stored as one JSON array under a single key of
a KeyValueStore. The same key and field names as earlier versions are
used, so previously stored data keeps loading.

Corrupt data (text that is not a JSON array of records) is never fatal:
it is logged and read as an empty collection.
"""

import json
from typing import Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from orcamentos.audit import AuditLogger
from orcamentos.models.budget import BudgetItem
from orcamentos.services.storage.interface import (
    BudgetStorageInterface,
    KeyValueStore,
)


DEFAULT_STORAGE_KEY = "orcamentos_v1"

_collection_adapter = TypeAdapter(list[BudgetItem])


class KeyValueBudgetStorage(BudgetStorageInterface):
    """
    Budget storage on top of a key-value store.

    Performs no validation beyond the record shape; every write replaces
    the stored collection (last writer wins, no merge).
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = DEFAULT_STORAGE_KEY,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._key = key
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[BudgetItem]:
        raw = self._store.get_item(self._key)
        if not raw:
            return []

        try:
            return _collection_adapter.validate_json(raw)
        except ValidationError as e:
            self._audit_logger.log_storage_corrupt(
                key=self._key,
                error_message=str(e),
            )
            return []

    def save(self, items: Sequence[BudgetItem]) -> None:
        payload = json.dumps(
            [item.to_storage_dict() for item in items],
            ensure_ascii=False,
            separators=(",", ":"),
        )
        self._store.set_item(self._key, payload)
