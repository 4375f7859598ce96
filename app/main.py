"""
Streamlit Frontend for notebk

Presentation only: every page reads the Notebook's current document
and changes it through notebook.apply(mutator, ...). No state logic
lives here.

Pages:
1. Diario          - calendar day notes
2. Gastos          - monthly income/expense ledger
3. Notas del mes   - one free text per month
4. Resumen         - annual income/expense summary
5. Ahorros         - monthly savings per year
6. Salud           - yearly health checklist
7. Tablas          - user-defined two-column lists
8. Backup          - export / import the whole document
"""

import logging
from datetime import date

import streamlit as st

from notebk.config import get_settings
from notebk.models.backup import ImportResult, OperationResult
from notebk.orchestrator import Notebook, create_app_components
from notebk.queries import (
    annual_summary,
    days_with_notes,
    expense_totals,
    savings_total,
)
from notebk.services.transfer import (
    BACKUP_MIME_TYPE,
    DownloadCapability,
    DownloadExporter,
    HostPlatform,
    detect_platform,
)
from notebk.state import MONTH_NAMES, day_key, month_key, mutators, year_key
from notebk.state.mutators import parse_amount


logging.basicConfig(level=get_settings().app.log_level)

st.set_page_config(
    page_title="notebk",
    page_icon="📓",
    layout="centered",
    initial_sidebar_state="expanded",
)


class StreamlitDownload(DownloadCapability):
    """Browser download through a Streamlit download button."""

    def deliver(self, filename: str, content: str, mime_type: str = BACKUP_MIME_TYPE) -> None:
        st.download_button(
            "💾 Descargar backup",
            data=content.encode("utf-8"),
            file_name=filename,
            mime=mime_type,
        )


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def apply(notebook: Notebook, mutator, *args, **kwargs) -> None:
    """Apply an edit and report a failed save."""
    result: OperationResult = notebook.apply(mutator, *args, **kwargs)
    if not result.success:
        st.error(result.error)


def format_currency(value: float) -> str:
    return f"${value:,.0f}"


def format_diff(value: float) -> str:
    sign = "+" if value > 0 else "-" if value < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def main():
    """Main application entry point."""
    notebook, backup_service = get_components()

    st.sidebar.title("📓 notebk")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Ir a:",
        ["Diario", "Gastos", "Notas del mes", "Resumen", "Ahorros", "Salud", "Tablas", "Backup"],
        index=0,
    )
    view_date = st.sidebar.date_input("Fecha", value=date.today())

    if page == "Diario":
        render_diary_page(notebook, view_date)
    elif page == "Gastos":
        render_expenses_page(notebook, view_date)
    elif page == "Notas del mes":
        render_monthly_notes_page(notebook, view_date)
    elif page == "Resumen":
        render_summary_page(notebook, view_date)
    elif page == "Ahorros":
        render_savings_page(notebook, view_date)
    elif page == "Salud":
        render_health_page(notebook, view_date)
    elif page == "Tablas":
        render_tables_page(notebook, view_date)
    elif page == "Backup":
        render_backup_page(notebook, backup_service)


def render_diary_page(notebook: Notebook, view_date: date):
    key = day_key(view_date)
    st.title(view_date.strftime("%d/%m/%Y"))

    marked = days_with_notes(notebook.state, month_key(view_date))
    if marked:
        st.caption("Días con notas este mes: " + ", ".join(k[-2:] for k in marked))

    def on_change():
        apply(notebook, mutators.set_note, key, st.session_state[f"note_{key}"])

    st.text_area(
        "Diario",
        value=notebook.state.notes.get(key, ""),
        key=f"note_{key}",
        height=400,
        placeholder="Escribe aquí tu diario...",
        on_change=on_change,
    )


def render_expenses_page(notebook: Notebook, view_date: date):
    month = month_key(view_date)
    st.title(f"Gastos {view_date.strftime('%m/%Y')}")

    for row in notebook.state.expenses.get(month, []):
        cols = st.columns([2, 4, 2, 2, 1])
        for col, field in zip(cols[:4], ("date", "concept", "income", "expense")):
            widget_key = f"exp_{row.id}_{field}"
            value = getattr(row, field)

            def on_change(row_id=row.id, field=field, widget_key=widget_key):
                raw = st.session_state[widget_key]
                new_value = parse_amount(raw) if field in ("income", "expense") else raw
                apply(notebook, mutators.update_expense, month, row_id, **{field: new_value})

            col.text_input(
                field,
                value="" if value is None else str(value),
                key=widget_key,
                label_visibility="collapsed",
                on_change=on_change,
            )
        if cols[4].button("🗑", key=f"exp_del_{row.id}"):
            apply(notebook, mutators.delete_expense, month, row.id)
            st.rerun()

    totals = expense_totals(notebook.state, month)
    st.markdown(
        f"**Total:** ingresos {totals.income:.2f} · egresos -{totals.expense:.2f}"
        f" · saldo {totals.balance:.2f}"
    )

    if st.button("Añadir fila"):
        apply(notebook, mutators.add_expense, month)
        st.rerun()


def render_monthly_notes_page(notebook: Notebook, view_date: date):
    month = month_key(view_date)
    st.title(f"Notas {view_date.strftime('%m/%Y')}")

    def on_change():
        apply(notebook, mutators.set_monthly_note, month, st.session_state[f"mnote_{month}"])

    st.text_area(
        "Notas del mes",
        value=notebook.state.monthly_notes.get(month, ""),
        key=f"mnote_{month}",
        height=300,
        on_change=on_change,
    )


def render_summary_page(notebook: Notebook, view_date: date):
    year = year_key(view_date)
    st.title(f"Resumen {year}")

    summary = annual_summary(notebook.state, year)
    rows = [
        {
            "Mes": m.name,
            "Ingresos": format_currency(m.income),
            "Egresos": format_currency(m.expense),
            "Diferencia": format_diff(m.balance),
        }
        for m in summary.months
    ]
    rows.append({
        "Mes": "TOTAL",
        "Ingresos": format_currency(summary.totals.income),
        "Egresos": format_currency(summary.totals.expense),
        "Diferencia": format_diff(summary.totals.balance),
    })
    st.table(rows)


def render_savings_page(notebook: Notebook, view_date: date):
    year = year_key(view_date)
    st.title(f"Ahorros {year}")

    year_savings = notebook.state.savings.get(year, {})
    for name in MONTH_NAMES:
        widget_key = f"sav_{year}_{name}"
        value = year_savings.get(name)

        def on_change(name=name, widget_key=widget_key):
            apply(notebook, mutators.set_saving, year, name, parse_amount(st.session_state[widget_key]))

        st.text_input(
            name,
            value="" if value is None else str(value),
            key=widget_key,
            placeholder="0.00",
            on_change=on_change,
        )

    st.markdown(f"**Total anual:** {savings_total(notebook.state, year):.2f}")


def render_health_page(notebook: Notebook, view_date: date):
    year = year_key(view_date)
    st.title(f"Salud {year}")

    with st.form("health_add", clear_on_submit=True):
        title = st.text_input("Añadir pendiente...")
        if st.form_submit_button("Añadir"):
            apply(notebook, mutators.add_health_item, year, title)

    for item in notebook.state.health.get(year, []):
        cols = st.columns([6, 1])
        label = f"~~{item.title}~~" if item.completed else item.title
        if cols[0].checkbox(label, value=item.completed, key=f"health_{item.id}") != item.completed:
            apply(notebook, mutators.toggle_health_item, year, item.id)
            st.rerun()
        if cols[1].button("🗑", key=f"health_del_{item.id}"):
            apply(notebook, mutators.delete_health_item, year, item.id)
            st.rerun()


def render_tables_page(notebook: Notebook, view_date: date):
    year = year_key(view_date)
    st.title(f"Tablas {year}")

    with st.expander("➕ Nueva tabla"):
        with st.form("table_add", clear_on_submit=True):
            title = st.text_input("Título de la tabla", placeholder="Ej: Registro Menstrual")
            col1 = st.text_input("Título columna 1", placeholder="Ej: Fecha")
            col2 = st.text_input("Título columna 2", placeholder="Ej: Observaciones")
            color = st.color_picker("Color", value="#000000")
            if st.form_submit_button("Crear tabla"):
                apply(notebook, mutators.add_custom_table, year, title, col1, col2, color=color)

    for table in notebook.state.custom_tables.get(year, []):
        header = st.columns([6, 1])
        header[0].markdown(
            f"<h3 style='border-bottom: 2px solid {table.color}'>{table.title}</h3>",
            unsafe_allow_html=True,
        )
        if header[1].button("🗑", key=f"table_del_{table.id}"):
            apply(notebook, mutators.delete_custom_table, year, table.id)
            st.rerun()

        cols = st.columns(2)
        cols[0].caption(table.col1_title)
        cols[1].caption(table.col2_title)
        for row in table.rows:
            cols = st.columns(2)
            for col, field in zip(cols, ("val1", "val2")):
                widget_key = f"row_{table.id}_{row.id}_{field}"

                def on_change(table_id=table.id, row_id=row.id, field=field, widget_key=widget_key):
                    apply(
                        notebook, mutators.update_table_row, year, table_id, row_id,
                        **{field: st.session_state[widget_key]},
                    )

                col.text_input(
                    field,
                    value=getattr(row, field),
                    key=widget_key,
                    label_visibility="collapsed",
                    on_change=on_change,
                )
        if st.button("+ Añadir fila", key=f"row_add_{table.id}"):
            apply(notebook, mutators.add_table_row, year, table.id)
            st.rerun()


def render_backup_page(notebook: Notebook, backup_service):
    st.title("Backup")

    st.markdown("### Exportar")
    if st.button("📤 Exportar backup", type="primary"):
        platform = detect_platform(get_settings().transfer.platform)
        exporter = None
        if platform == HostPlatform.WEB:
            exporter = DownloadExporter(StreamlitDownload())
        result = backup_service.export_backup(exporter)
        if not result.success:
            st.error(result.error)
        elif result.message:
            st.warning(result.message)
        else:
            st.success(f"Backup listo: {result.filename}")

    st.markdown("---")
    st.markdown("### Importar")
    st.warning("Importar reemplaza todos los datos actuales.")

    uploaded_file = st.file_uploader("Archivo de backup", type=["json"])
    if uploaded_file is not None:
        result: ImportResult = backup_service.import_backup(uploaded_file)
        if not result.success:
            st.error(result.error)
            if result.issues:
                st.code(backup_service.validator.get_user_friendly_summary(result.issues))
            return

        if result.warnings:
            st.warning(backup_service.validator.get_user_friendly_summary(result.issues))

        data = result.data
        st.info(
            f"{len(data.notes)} notas · {sum(len(v) for v in data.expenses.values())} movimientos · "
            f"{sum(len(v) for v in data.custom_tables.values())} tablas"
        )
        if st.button("✅ Restaurar este backup"):
            applied = backup_service.apply_backup(data)
            if applied.success:
                notebook.reload()
                st.success("Backup restaurado")
            else:
                st.error(applied.error)


if __name__ == "__main__":
    main()
