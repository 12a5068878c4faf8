"""Smoke tests for the Streamlit page, run headless with AppTest."""

from pathlib import Path

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

from orcamentos.validation.validator import TITLE_ERROR


APP_PATH = str(Path(__file__).resolve().parent.parent / "app" / "main.py")


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setenv("ORCAMENTOS_STORAGE_BACKEND", "memory")
    # the flow is cached per process; every test starts from an empty store
    st.cache_resource.clear()
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    yield at
    st.cache_resource.clear()


def _button(at, label):
    return next(b for b in at.button if b.label == label)


def _fill(at, titulo="Cadeiras", fornecedor="Acme", valor="10,5"):
    at.text_input(key="form_titulo").input(titulo)
    at.text_input(key="form_fornecedor").input(fornecedor)
    at.text_input(key="form_valor").input(valor)


def _cards(at):
    return [m.value for m in at.markdown if m.value.startswith("**")]


class TestPage:
    """Tests for the form and list flows."""

    def test_page_renders(self, app):
        assert not app.exception
        assert "Novo orçamento" in [s.value for s in app.subheader]
        assert app.text_input(key="form_titulo").value == ""

    def test_submit_saves_and_clears_form(self, app):
        _fill(app)
        _button(app, "Salvar orçamento").click().run()

        assert not app.exception
        assert _cards(app) == ["**Cadeiras**"]
        assert app.text_input(key="form_titulo").value == ""
        assert app.text_input(key="form_valor").value == ""
        assert not app.session_state["ui_state"].is_editing

    def test_invalid_submit_shows_field_error(self, app):
        _fill(app, titulo="ab")
        _button(app, "Salvar orçamento").click().run()

        assert not app.exception
        assert TITLE_ERROR in [e.value for e in app.error]
        assert app.text_input(key="form_titulo").value == "ab"
        assert _cards(app) == []

    def test_long_title_submit(self, app):
        _fill(app, titulo="x" * 600)
        _button(app, "Salvar orçamento").click().run()

        assert not app.exception
        assert _cards(app) == [f"**{'x' * 600}**"]

    def test_edit_prefills_form_and_updates(self, app):
        _fill(app)
        _button(app, "Salvar orçamento").click().run()

        _button(app, "Editar").click().run()
        assert not app.exception
        assert "Editar orçamento" in [s.value for s in app.subheader]
        assert app.text_input(key="form_titulo").value == "Cadeiras"
        assert app.text_input(key="form_fornecedor").value == "Acme"
        assert app.text_input(key="form_valor").value == "10.50"

        app.text_input(key="form_titulo").input("Mesas")
        _button(app, "Atualizar orçamento").click().run()

        assert not app.exception
        assert _cards(app) == ["**Mesas**"]
        assert app.text_input(key="form_titulo").value == ""
        assert "Novo orçamento" in [s.value for s in app.subheader]

    def test_clear_leaves_editing_mode(self, app):
        _fill(app)
        _button(app, "Salvar orçamento").click().run()
        _button(app, "Editar").click().run()

        _button(app, "Limpar").click().run()

        assert not app.exception
        assert not app.session_state["ui_state"].is_editing
        assert app.text_input(key="form_titulo").value == ""
        assert _cards(app) == ["**Cadeiras**"]

    def test_deleting_edited_item_clears_form(self, app):
        _fill(app)
        _button(app, "Salvar orçamento").click().run()
        _button(app, "Editar").click().run()

        _button(app, "Excluir").click().run()
        _button(app, "Sim, excluir").click().run()

        assert not app.exception
        assert _cards(app) == []
        assert not app.session_state["ui_state"].is_editing
        assert app.text_input(key="form_titulo").value == ""

    def test_declined_delete_keeps_item(self, app):
        _fill(app)
        _button(app, "Salvar orçamento").click().run()

        _button(app, "Excluir").click().run()
        _button(app, "Cancelar").click().run()

        assert not app.exception
        assert _cards(app) == ["**Cadeiras**"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
