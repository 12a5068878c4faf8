"""
Streamlit Frontend for Orçamentos

A thin presentation layer over the headless core. It renders the list
returned by BudgetFlow.snapshot() and forwards every user action to a
BudgetFlow handler.

DESIGN PRINCIPLES:
1. No business rules here - validation, ids and storage live in the core
2. The only state kept between reruns is the SessionState value
   (plus widget values Streamlit manages itself)
3. Deletion always asks for confirmation first
"""

from datetime import date
from typing import Optional

import streamlit as st

from orcamentos.audit import configure_logging
from orcamentos.config import get_settings, validate_all_settings
from orcamentos.export import EmptyCollectionError
from orcamentos.formatting import describe_item, format_brl
from orcamentos.models import BudgetItem, SessionState, SortKey
from orcamentos.orchestrator import BudgetFlow, create_app_components
from orcamentos.repository import BudgetRepository
from orcamentos.services.storage import (
    InMemoryKeyValueStore,
    KeyValueBudgetStorage,
    StorageUnavailableError,
)


st.set_page_config(
    page_title="Orçamentos",
    page_icon="🧾",
    layout="wide",
)

SORT_LABELS = {
    SortKey.NONE: "Sem ordenação",
    SortKey.DATE_DESC: "Data (mais recente)",
    SortKey.DATE_ASC: "Data (mais antiga)",
    SortKey.AMOUNT_DESC: "Valor (maior)",
    SortKey.AMOUNT_ASC: "Valor (menor)",
}


@st.cache_resource
def get_flow() -> BudgetFlow:
    """Get or create application components (cached)."""
    try:
        configure_logging(get_settings().app.log_level)
        return create_app_components()
    except ValueError as e:
        st.error(f"Configuração inválida, usando armazenamento temporário: {e}")
        storage = KeyValueBudgetStorage(InMemoryKeyValueStore())
        return BudgetFlow(repository=BudgetRepository(storage))


def get_state() -> SessionState:
    if "ui_state" not in st.session_state:
        st.session_state.ui_state = SessionState()
    return st.session_state.ui_state


def set_state(state: SessionState) -> None:
    st.session_state.ui_state = state


def _parse_date(value: str) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def fill_form(item: Optional[BudgetItem]) -> None:
    """
    Schedule the form to show an item's values (or blanks).

    Widget values cannot change once the widget exists in the current
    run, so the values are applied by render_form on the next run.
    """
    st.session_state.form_pending = {"item": item}


def _apply_form(item: Optional[BudgetItem]) -> None:
    st.session_state.form_titulo = item.titulo if item else ""
    st.session_state.form_descricao = item.descricao if item else ""
    st.session_state.form_fornecedor = item.fornecedor if item else ""
    st.session_state.form_valor = f"{item.valor:.2f}" if item else ""
    st.session_state.form_data = _parse_date(item.data) if item else None
    st.session_state.form_categoria = item.categoria if item else ""
    st.session_state.form_errors = {}


def main():
    """Main application entry point."""
    flow = get_flow()
    state = get_state()

    st.title("🧾 Orçamentos")

    col_form, col_list = st.columns([1, 2])

    with col_form:
        render_form(flow, state)

    with col_list:
        try:
            render_list(flow, get_state())
            st.markdown("---")
            render_export(flow)
        except StorageUnavailableError as e:
            st.error(f"Armazenamento indisponível: {e}")

    render_settings_status()


def render_settings_status():
    """Sidebar panel with the configuration check."""
    status = validate_all_settings()

    st.sidebar.markdown("### Configuração")
    for name, key in [("Armazenamento", "storage"), ("Aplicação", "app")]:
        if status.get(key, False):
            st.sidebar.success(f"✅ {name}")
        else:
            error = status.get(f"{key}_error", "Não configurado")
            st.sidebar.error(f"❌ {name} - {error}")


def render_form(flow: BudgetFlow, state: SessionState):
    """Create / edit form."""
    pending = st.session_state.pop("form_pending", None)
    if pending is not None:
        _apply_form(pending["item"])
    elif "form_errors" not in st.session_state:
        _apply_form(None)

    errors = st.session_state.form_errors

    st.subheader("Editar orçamento" if state.is_editing else "Novo orçamento")

    with st.form("orcamento_form"):
        st.text_input("Título *", key="form_titulo")
        if "titulo" in errors:
            st.error(errors["titulo"])

        st.text_area("Descrição", key="form_descricao")

        st.text_input("Fornecedor *", key="form_fornecedor")
        if "fornecedor" in errors:
            st.error(errors["fornecedor"])

        st.text_input("Valor (R$) *", key="form_valor", placeholder="0,00")
        if "valor" in errors:
            st.error(errors["valor"])

        st.date_input("Data estimada", key="form_data", format="DD/MM/YYYY")
        st.text_input("Categoria", key="form_categoria")

        label = "Atualizar orçamento" if state.is_editing else "Salvar orçamento"
        submitted = st.form_submit_button(label, type="primary")

    if st.button("Limpar"):
        set_state(flow.cancel(state))
        fill_form(None)
        st.rerun()

    if submitted:
        chosen_date = st.session_state.form_data
        raw = {
            "titulo": st.session_state.form_titulo,
            "descricao": st.session_state.form_descricao,
            "fornecedor": st.session_state.form_fornecedor,
            # Accept the Brazilian decimal comma
            "valor": st.session_state.form_valor.replace(",", "."),
            "data": chosen_date.isoformat() if chosen_date else "",
            "categoria": st.session_state.form_categoria,
        }
        outcome = flow.submit(state, raw)

        if outcome.not_found:
            st.error("Orçamento não encontrado")
            return

        if not outcome.result.ok:
            st.session_state.form_errors = outcome.result.errors
            st.rerun()

        set_state(outcome.state)
        fill_form(None)
        st.toast("Orçamento salvo ✅")
        st.rerun()


def render_list(flow: BudgetFlow, state: SessionState):
    """Search, filter, sort and the list of cards."""
    col1, col2, col3 = st.columns(3)

    with col1:
        search_text = st.text_input(
            "Buscar",
            value=state.search_text,
            placeholder="Título ou fornecedor",
        )

    with col2:
        categories = [""] + flow.categories()
        current = state.category if state.category in categories else ""
        category = st.selectbox(
            "Categoria",
            options=categories,
            index=categories.index(current),
            format_func=lambda c: c or "Todas",
        )

    with col3:
        sort_options = list(SORT_LABELS)
        sort_key = st.selectbox(
            "Ordenar",
            options=sort_options,
            index=sort_options.index(state.sort_key),
            format_func=lambda k: SORT_LABELS[k],
        )

    state = state.with_query(
        search_text=search_text,
        category=category,
        sort_key=sort_key,
    )
    set_state(state)

    items = flow.snapshot(state)
    summary = flow.summarize(items)
    st.caption(f"{summary.count} orçamento(s) · total {format_brl(summary.total)}")

    if not items:
        st.info("Nenhum orçamento encontrado.")
        return

    for item in items:
        render_card(flow, state, item)


def render_card(flow: BudgetFlow, state: SessionState, item: BudgetItem):
    with st.container(border=True):
        st.markdown(f"**{item.titulo}**")
        st.caption(describe_item(item))
        if item.descricao:
            st.write(item.descricao)
        if item.data:
            st.caption(f"Data: {item.data}")

        pending = st.session_state.get("pending_delete")

        if pending == item.id:
            st.warning("Deseja realmente excluir este orçamento?")
            yes, no = st.columns(2)
            confirmed = yes.button("Sim, excluir", key=f"yes_{item.id}")
            declined = no.button("Cancelar", key=f"no_{item.id}")
            if confirmed or declined:
                was_editing = state.editing_id == item.id
                new_state, removed = flow.delete(state, item.id, confirmed=confirmed)
                set_state(new_state)
                if removed and was_editing:
                    fill_form(None)
                st.session_state.pending_delete = None
                st.rerun()
            return

        edit, delete = st.columns(2)
        if edit.button("Editar", key=f"edit_{item.id}"):
            new_state, found = flow.load_for_edit(state, item.id)
            if found is None:
                st.error("Orçamento não encontrado")
            else:
                set_state(new_state)
                fill_form(found)
                st.rerun()
        if delete.button("Excluir", key=f"delete_{item.id}"):
            st.session_state.pending_delete = item.id
            st.rerun()


def render_export(flow: BudgetFlow):
    """JSON / CSV download of the full collection."""
    st.subheader("Exportar")
    col1, col2 = st.columns(2)

    if col1.button("Exportar JSON"):
        st.session_state.export_file = flow.export_json()

    if col2.button("Exportar CSV"):
        try:
            st.session_state.export_file = flow.export_csv()
        except EmptyCollectionError as e:
            st.session_state.export_file = None
            st.info(str(e))

    export_file = st.session_state.get("export_file")
    if export_file is not None:
        st.download_button(
            f"⬇️ Baixar {export_file.filename}",
            data=export_file.data,
            file_name=export_file.filename,
            mime=export_file.mime_type,
        )


if __name__ == "__main__":
    main()
