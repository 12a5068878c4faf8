"""
Main Orchestrator for Orçamentos

This module ties together all the components and defines the
handlers a presentation layer calls:
1. Render (snapshot → query → list)
2. Submit (raw form → validate → create or update)
3. Edit / cancel / delete-with-confirmation
4. Export (full collection → JSON or CSV file)

DESIGN DECISION: Handlers take the current SessionState and return the
next one. The presentation layer keeps that value between events and
never decides on its own whether a submit creates or updates.

The orchestrator enforces the boundaries:
- Nothing is written without passing validation
- Deletion happens only after explicit confirmation
- Every mutation is audited
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from orcamentos.audit import AuditLogger, create_correlation_id
from orcamentos.config import Settings, get_settings
from orcamentos.export import (
    EmptyCollectionError,
    ExportFile,
    export_csv_file,
    export_json_file,
)
from orcamentos.models.budget import (
    BudgetItem,
    QuerySummary,
    ValidationResult,
)
from orcamentos.models.session import SessionState
from orcamentos.queries import QueryEngine
from orcamentos.repository import BudgetRepository
from orcamentos.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueBudgetStorage,
    KeyValueStore,
    NotFoundError,
    StorageUnavailableError,
)
from orcamentos.validation import BudgetValidator


class SubmitOutcome(BaseModel):
    """What happened when the form was submitted."""

    state: SessionState
    result: ValidationResult
    item: Optional[BudgetItem] = None
    # The record being edited no longer exists
    not_found: bool = False

    @property
    def saved(self) -> bool:
        return self.item is not None


class BudgetFlow:
    """
    Orchestrates the budget list screen.

    Flow:
    1. snapshot() → items to render for the current search/filter/sort
    2. submit() → validated create (create mode) or update (editing mode)
    3. load_for_edit() → switch to editing mode with the item's values
    4. delete() → remove only when the user confirmed
    5. export_json() / export_csv() → download of the full collection
    """

    def __init__(
        self,
        repository: BudgetRepository,
        validator: Optional[BudgetValidator] = None,
        query_engine: Optional[QueryEngine] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._validator = validator or BudgetValidator()
        self._query_engine = query_engine or QueryEngine()
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def repository(self) -> BudgetRepository:
        return self._repository

    @property
    def validator(self) -> BudgetValidator:
        return self._validator

    def _load_all(self) -> list[BudgetItem]:
        try:
            return self._repository.list_all()
        except StorageUnavailableError as e:
            self._audit_logger.log_error(
                error_type="storage_unavailable",
                error_message=str(e),
            )
            raise

    def snapshot(self, state: SessionState) -> list[BudgetItem]:
        """Fresh load of the collection, filtered and sorted for display."""
        return self._query_engine.apply(self._load_all(), state.query)

    def summarize(self, items: list[BudgetItem]) -> QuerySummary:
        return self._query_engine.summarize(items)

    def categories(self) -> list[str]:
        return self._repository.categories()

    def submit(
        self,
        state: SessionState,
        raw_fields: dict,
        correlation_id: Optional[UUID] = None,
    ) -> SubmitOutcome:
        """
        Validate the form and save it.

        Invalid input writes nothing and keeps the state. A successful
        save resets the form to create mode. If the record being edited
        has disappeared, nothing is written and editing mode is kept.
        """
        correlation_id = correlation_id or create_correlation_id()

        result = self._validator.validate(raw_fields)
        if not result.ok:
            self._audit_logger.log_validation_failed(
                errors=result.errors,
                correlation_id=correlation_id,
            )
            return SubmitOutcome(state=state, result=result)

        if state.is_editing:
            try:
                item = self._repository.update(
                    state.editing_id,
                    result.normalized,
                    correlation_id=correlation_id,
                )
            except NotFoundError:
                return SubmitOutcome(state=state, result=result, not_found=True)
        else:
            item = self._repository.create(
                result.normalized,
                correlation_id=correlation_id,
            )

        return SubmitOutcome(state=state.reset_form(), result=result, item=item)

    def load_for_edit(
        self,
        state: SessionState,
        item_id: str,
    ) -> tuple[SessionState, Optional[BudgetItem]]:
        """
        Switch the form to editing an existing item.

        Returns:
            (new_state, item) - item is None and the state unchanged
            when the id no longer exists
        """
        item = self._repository.find_by_id(item_id)
        if item is None:
            return state, None
        return state.start_editing(item_id), item

    def cancel(self, state: SessionState) -> SessionState:
        """Clear the form and leave editing mode."""
        return state.reset_form()

    def delete(
        self,
        state: SessionState,
        item_id: str,
        confirmed: bool,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[SessionState, bool]:
        """
        Delete an item if the user confirmed.

        Declining the confirmation is a silent no-op. Deleting the item
        currently being edited also resets the form.

        Returns:
            (new_state, removed)
        """
        if not confirmed:
            return state, False

        removed = self._repository.delete(item_id, correlation_id=correlation_id)
        if removed and state.editing_id == item_id:
            state = state.reset_form()
        return state, removed

    def export_json(self) -> ExportFile:
        """Full collection as orcamentos.json (also when empty)."""
        items = self._load_all()
        export = export_json_file(items)
        self._audit_logger.log_export_generated("json", len(items))
        return export

    def export_csv(self) -> ExportFile:
        """
        Full collection as orcamentos.csv.

        Raises:
            EmptyCollectionError: If there is nothing to export
        """
        items = self._load_all()
        try:
            export = export_csv_file(items)
        except EmptyCollectionError:
            self._audit_logger.log_export_empty("csv")
            raise
        self._audit_logger.log_export_generated("csv", len(items))
        return export


def create_store(settings: Optional[Settings] = None) -> KeyValueStore:
    """Build the key-value backend selected in the storage settings."""
    storage_settings = (settings or get_settings()).storage
    if storage_settings.backend == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(storage_settings.data_path)


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
) -> BudgetFlow:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to get_settings()
        store: Key-value backend to use instead of the configured one
               (e.g. an in-memory store for testing)

    Returns:
        A BudgetFlow wired to storage, validator, query engine and audit log
    """
    settings = settings or get_settings()

    audit_logger = AuditLogger()
    storage = KeyValueBudgetStorage(
        store or create_store(settings),
        key=settings.storage.key,
        audit_logger=audit_logger,
    )
    repository = BudgetRepository(storage, audit_logger=audit_logger)

    return BudgetFlow(
        repository=repository,
        audit_logger=audit_logger,
    )
