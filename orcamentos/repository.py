"""
Budget Repository

CRUD operations over the budget collection.

DESIGN DECISION: Every operation is a full load-modify-save cycle.
The collection is read as a whole, changed in memory, and written back
as a whole. This is only reasonable because a personal budget list is
small; a larger dataset would need an indexed store that can update a
single record. Changing that would also change what is written when
the stored data is corrupt (today: the corrupt value is replaced by
the new collection), so it is kept as-is on purpose.

Ids are "id-<epoch milliseconds>". They are unique within a process
(the factory never repeats a value) and checked against the current
collection, but two processes creating a record in the same
millisecond could still pick the same id. For a single local user
that window is accepted.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional
from uuid import UUID

from orcamentos.audit import AuditLogger
from orcamentos.models.budget import (
    BudgetFields,
    BudgetItem,
    to_iso_timestamp,
    utc_now,
)
from orcamentos.services.storage import BudgetStorageInterface, NotFoundError


class TimestampIdFactory:
    """
    Time-based id generator, monotonic within one instance.

    If the clock has not moved past the last issued millisecond, the
    next millisecond is used instead.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        self._last_ms = 0

    def __call__(self) -> str:
        ms = int(self._clock().timestamp() * 1000)
        if ms <= self._last_ms:
            ms = self._last_ms + 1
        self._last_ms = ms
        return f"id-{ms}"


class BudgetRepository:
    """
    Create, read, update and delete budget items.

    Storage is only ever written with a complete collection.
    """

    def __init__(
        self,
        storage: BudgetStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._clock = clock or utc_now
        self._id_factory = id_factory or TimestampIdFactory(self._clock)

    def _new_id(self, items: list[BudgetItem]) -> str:
        taken = {item.id for item in items}
        item_id = self._id_factory()
        while item_id in taken:
            item_id = self._id_factory()
        return item_id

    def _stamp_after(self, previous: Optional[str]) -> str:
        """Current timestamp, moved forward if it would not differ from previous."""
        moment = self._clock()
        stamp = to_iso_timestamp(moment)
        while previous is not None and stamp <= previous:
            moment += timedelta(milliseconds=1)
            stamp = to_iso_timestamp(moment)
        return stamp

    def list_all(self) -> list[BudgetItem]:
        """Snapshot of the collection; callers may mutate it freely."""
        return [item.model_copy(deep=True) for item in self._storage.load()]

    def find_by_id(self, item_id: str) -> Optional[BudgetItem]:
        for item in self._storage.load():
            if item.id == item_id:
                return item.model_copy(deep=True)
        return None

    def categories(self) -> list[str]:
        """Distinct non-empty categories present in the collection."""
        return sorted({item.categoria for item in self._storage.load() if item.categoria})

    def create(
        self,
        fields: BudgetFields,
        correlation_id: Optional[UUID] = None,
    ) -> BudgetItem:
        """
        Append a new item built from validated fields.

        Returns:
            The stored item, with its new id and creation timestamp
        """
        items = self._storage.load()

        item = BudgetItem(
            id=self._new_id(items),
            criado_em=to_iso_timestamp(self._clock()),
            **fields.model_dump(),
        )
        items.append(item)
        self._storage.save(items)

        self._audit_logger.log_budget_created(
            item_id=item.id,
            titulo=item.titulo,
            valor=item.valor,
            correlation_id=correlation_id,
        )
        return item.model_copy(deep=True)

    def update(
        self,
        item_id: str,
        fields: BudgetFields,
        correlation_id: Optional[UUID] = None,
    ) -> BudgetItem:
        """
        Overwrite the editable fields of an existing item, in place.

        id and criadoEm are kept; atualizadoEm is refreshed.

        Raises:
            NotFoundError: If no item has this id (nothing is written)
        """
        items = self._storage.load()

        index = next(
            (i for i, item in enumerate(items) if item.id == item_id),
            None,
        )
        if index is None:
            self._audit_logger.log_budget_not_found(
                item_id=item_id,
                operation="update",
                correlation_id=correlation_id,
            )
            raise NotFoundError(item_id)

        existing = items[index]
        new_values = fields.model_dump()
        updated = existing.model_copy(
            update={
                **new_values,
                "atualizado_em": self._stamp_after(existing.atualizado_em),
            }
        )
        items[index] = updated
        self._storage.save(items)

        changed = [
            name for name in new_values
            if getattr(existing, name) != getattr(updated, name)
        ]
        self._audit_logger.log_budget_updated(
            item_id=item_id,
            changed_fields=changed,
            correlation_id=correlation_id,
        )
        return updated.model_copy(deep=True)

    def delete(
        self,
        item_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Remove the item with this id.

        Returns:
            True if an item was removed; False if none matched, in which
            case storage is left untouched
        """
        items = self._storage.load()
        remaining = [item for item in items if item.id != item_id]

        if len(remaining) == len(items):
            self._audit_logger.log_budget_not_found(
                item_id=item_id,
                operation="delete",
                correlation_id=correlation_id,
            )
            return False

        self._storage.save(remaining)
        self._audit_logger.log_budget_deleted(
            item_id=item_id,
            correlation_id=correlation_id,
        )
        return True
