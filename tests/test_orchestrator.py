"""Flow tests for BudgetFlow over an in-memory store."""

import json

import pytest

from orcamentos.config import Settings
from orcamentos.export import EmptyCollectionError
from orcamentos.models.audit import AuditEventType
from orcamentos.models.budget import SortKey
from orcamentos.models.session import FormMode, SessionState
from orcamentos.orchestrator import BudgetFlow, create_app_components
from orcamentos.repository import BudgetRepository
from orcamentos.services.storage import (
    DEFAULT_STORAGE_KEY,
    InMemoryKeyValueStore,
    KeyValueBudgetStorage,
    StorageUnavailableError,
)


def _form(**overrides):
    raw = {
        "titulo": "Cadeiras de escritório",
        "descricao": "6 unidades",
        "fornecedor": "Acme",
        "valor": "1500",
        "data": "2024-06-10",
        "categoria": "Móveis",
    }
    raw.update(overrides)
    return raw


class TestSubmit:
    """Tests for create and update through submit()."""

    def test_submit_in_create_mode_creates(self, flow):
        outcome = flow.submit(SessionState(), _form())

        assert outcome.saved
        assert outcome.result.ok
        assert outcome.state.mode == FormMode.CREATE
        assert [item.id for item in flow.repository.list_all()] == [outcome.item.id]
        assert outcome.item.valor == 1500

    def test_invalid_submit_writes_nothing(self, flow, store, audit_events):
        state = SessionState(search_text="cad")
        outcome = flow.submit(state, _form(titulo="ab", valor="-3"))

        assert not outcome.saved
        assert set(outcome.result.errors) == {"titulo", "valor"}
        assert outcome.state == state
        assert store.get_item(DEFAULT_STORAGE_KEY) is None
        assert audit_events[-1].event_type == AuditEventType.VALIDATION_FAILED

    def test_edit_then_submit_updates_and_resets(self, flow):
        created = flow.submit(SessionState(), _form()).item

        state, loaded = flow.load_for_edit(SessionState(), created.id)
        assert state.editing_id == created.id
        assert loaded == created

        outcome = flow.submit(state, _form(titulo="Mesas", valor="99.9"))
        assert outcome.saved
        assert outcome.state.mode == FormMode.CREATE
        assert outcome.state.editing_id is None

        [stored] = flow.repository.list_all()
        assert stored.id == created.id
        assert stored.criado_em == created.criado_em
        assert stored.titulo == "Mesas"
        assert stored.valor == 99.9
        assert stored.atualizado_em is not None

    def test_submit_after_record_vanished(self, flow, store):
        """Test that editing a deleted record neither writes nor leaves editing mode."""
        created = flow.submit(SessionState(), _form()).item
        state, _ = flow.load_for_edit(SessionState(), created.id)
        flow.repository.delete(created.id)
        before = store.get_item(DEFAULT_STORAGE_KEY)

        outcome = flow.submit(state, _form(titulo="Outro título"))

        assert outcome.not_found is True
        assert not outcome.saved
        assert outcome.state == state
        assert store.get_item(DEFAULT_STORAGE_KEY) == before

    def test_submit_long_title(self, flow):
        """Test that a very long valid title saves and resets the form."""
        outcome = flow.submit(SessionState(), {"titulo": "x" * 600, "fornecedor": "Acme", "valor": "10"})

        assert outcome.saved
        assert outcome.state == SessionState()
        [stored] = flow.repository.list_all()
        assert stored.titulo == "x" * 600

        edited = flow.submit(
            SessionState().start_editing(stored.id),
            {"titulo": "y" * 5000, "fornecedor": "z" * 5000, "valor": "1"},
        )
        assert edited.saved
        assert flow.repository.find_by_id(stored.id).titulo == "y" * 5000

    def test_submit_keeps_query_state(self, flow):
        state = SessionState().with_query(search_text="cad", sort_key=SortKey.AMOUNT_ASC)
        outcome = flow.submit(state, _form())
        assert outcome.state.search_text == "cad"
        assert outcome.state.sort_key == SortKey.AMOUNT_ASC


class TestEditAndCancel:
    """Tests for load_for_edit and cancel."""

    def test_load_missing_item_keeps_state(self, flow):
        state = SessionState()
        new_state, item = flow.load_for_edit(state, "id-404")
        assert item is None
        assert new_state == state

    def test_cancel_leaves_editing_mode(self, flow):
        created = flow.submit(SessionState(), _form()).item
        state, _ = flow.load_for_edit(SessionState(), created.id)

        cancelled = flow.cancel(state)
        assert cancelled.mode == FormMode.CREATE
        assert cancelled.editing_id is None
        # nothing changed in storage
        assert flow.repository.find_by_id(created.id) == created


class TestDelete:
    """Tests for delete with confirmation."""

    def test_unconfirmed_delete_is_noop(self, flow, store):
        created = flow.submit(SessionState(), _form()).item
        before = store.get_item(DEFAULT_STORAGE_KEY)

        state, removed = flow.delete(SessionState(), created.id, confirmed=False)

        assert removed is False
        assert state == SessionState()
        assert store.get_item(DEFAULT_STORAGE_KEY) == before

    def test_confirmed_delete_removes(self, flow, audit_events):
        created = flow.submit(SessionState(), _form()).item
        _, removed = flow.delete(SessionState(), created.id, confirmed=True)

        assert removed is True
        assert flow.repository.list_all() == []
        assert audit_events[-1].event_type == AuditEventType.BUDGET_DELETED

    def test_deleting_edited_item_resets_form(self, flow):
        created = flow.submit(SessionState(), _form()).item
        editing, _ = flow.load_for_edit(SessionState(), created.id)

        state, removed = flow.delete(editing, created.id, confirmed=True)

        assert removed is True
        assert state.mode == FormMode.CREATE
        assert state.editing_id is None

    def test_deleting_other_item_keeps_editing(self, flow):
        first = flow.submit(SessionState(), _form(titulo="Primeiro")).item
        second = flow.submit(SessionState(), _form(titulo="Segundo")).item
        editing, _ = flow.load_for_edit(SessionState(), first.id)

        state, removed = flow.delete(editing, second.id, confirmed=True)

        assert removed is True
        assert state.editing_id == first.id


class TestSnapshot:
    """Tests for the rendered list."""

    def test_snapshot_applies_state_query(self, flow):
        flow.submit(SessionState(), _form(titulo="Cadeiras", valor="10", categoria="Móveis"))
        flow.submit(SessionState(), _form(titulo="Mesas", valor="30", categoria="Móveis"))
        flow.submit(SessionState(), _form(titulo="Pintura", valor="20", categoria="Serviços"))

        state = SessionState().with_query(category="Móveis", sort_key=SortKey.AMOUNT_DESC)
        items = flow.snapshot(state)

        assert [item.titulo for item in items] == ["Mesas", "Cadeiras"]
        summary = flow.summarize(items)
        assert (summary.count, summary.total) == (2, 40)

    def test_snapshot_reads_fresh_data(self, flow, store):
        """Test that a write made outside the flow shows up on the next render."""
        flow.submit(SessionState(), _form())
        store.set_item(DEFAULT_STORAGE_KEY, "[]")
        assert flow.snapshot(SessionState()) == []

    def test_categories(self, flow):
        flow.submit(SessionState(), _form(categoria="Serviços"))
        flow.submit(SessionState(), _form(categoria="Móveis"))
        assert flow.categories() == ["Móveis", "Serviços"]


class TestExport:
    """Tests for exports through the flow."""

    def test_export_json_of_empty_collection(self, flow):
        export = flow.export_json()
        assert export.content == "[]"
        assert export.filename == "orcamentos.json"

    def test_export_csv_of_empty_collection_raises(self, flow, audit_events):
        with pytest.raises(EmptyCollectionError):
            flow.export_csv()
        assert audit_events[-1].event_type == AuditEventType.EXPORT_EMPTY

    def test_export_ignores_current_filter(self, flow):
        """Test that exports always contain the whole collection."""
        flow.submit(SessionState(), _form(titulo="Cadeiras"))
        flow.submit(SessionState(), _form(titulo="Mesas"))

        assert len(json.loads(flow.export_json().content)) == 2
        assert flow.export_csv().content.count("\n") == 2

    def test_export_is_audited(self, flow, audit_events):
        flow.submit(SessionState(), _form())
        flow.export_csv()
        event = audit_events[-1]
        assert event.event_type == AuditEventType.EXPORT_GENERATED
        assert event.details["record_count"] == 1


class _UnavailableStore(InMemoryKeyValueStore):
    def get_item(self, key):
        raise StorageUnavailableError("disk gone")


class TestStorageUnavailable:
    """Tests for a backend that cannot be read."""

    def test_snapshot_logs_and_raises(self, audit_logger, audit_events):
        storage = KeyValueBudgetStorage(_UnavailableStore(), audit_logger=audit_logger)
        flow = BudgetFlow(BudgetRepository(storage), audit_logger=audit_logger)

        with pytest.raises(StorageUnavailableError):
            flow.snapshot(SessionState())
        assert audit_events[-1].event_type == AuditEventType.SYSTEM_ERROR
        assert audit_events[-1].error_message == "disk gone"


class TestCreateAppComponents:
    """Tests for the factory."""

    def test_factory_with_injected_store(self):
        store = InMemoryKeyValueStore()
        flow = create_app_components(settings=Settings(), store=store)

        assert isinstance(flow, BudgetFlow)
        outcome = flow.submit(SessionState(), _form())
        assert outcome.saved
        assert store.get_item(DEFAULT_STORAGE_KEY) is not None

    def test_factory_uses_configured_key(self, monkeypatch):
        monkeypatch.setenv("ORCAMENTOS_STORAGE_KEY", "outra_chave")
        store = InMemoryKeyValueStore()
        flow = create_app_components(settings=Settings(), store=store)

        flow.submit(SessionState(), _form())
        assert store.get_item("outra_chave") is not None
        assert store.get_item(DEFAULT_STORAGE_KEY) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
