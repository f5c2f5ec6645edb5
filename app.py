import sys
from pathlib import Path

# Garantiza que el directorio raíz del proyecto esté en el path (para correr desde cualquier cwd)
_ROOT = Path(__file__).resolve().parents[0]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import pandas as pd
import streamlit as st

from utils.app_context import get_api
from utils.dates import now_local
from utils.formatters import format_date
from utils.navigation import show_sidebar
from utils.ui_helpers import page_header, warning_box


st.set_page_config(
    page_title="Inventario - Tienda",
    page_icon="🏪",
    layout="wide",
    initial_sidebar_state="expanded",
    menu_items={
        "Get Help": None,
        "Report a bug": None,
        "About": None,
    },
)


def home_page():
    api = get_api()

    page_header("Inicio", "🏠", "Resumen del inventario por lotes.")

    inventario = api.grouped_inventory()
    if not inventario.ok:
        st.error("No se pudo leer el inventario. Revise el registro de la aplicación.")
        return

    grupos = inventario.data
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Productos", len(grupos))
    with col2:
        st.metric("Lotes activos", sum(g.cantidad_lotes for g in grupos))
    with col3:
        st.metric("Piezas en inventario", sum(g.total_piezas for g in grupos))
    with col4:
        st.metric("Hoy", format_date(now_local()))

    negativos = api.negative_lots()
    if negativos.data:
        nombres_neg = {g.product.id: g.product.nombre for g in grupos}
        warning_box(
            f"{len(negativos.data)} lote(s) con cantidad negativa: el consumo registrado superó el stock. "
            "Revise el conteo físico."
        )
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "Lote #": l.id,
                        "Producto": nombres_neg.get(l.producto_id, f"#{l.producto_id}"),
                        "Etiqueta": l.lote or "-",
                        "Cantidad": l.cantidad_actual,
                    }
                    for l in negativos.data
                ]
            ),
            use_container_width=True,
            hide_index=True,
        )

    st.markdown("### ⚠️ Productos con stock bajo")
    bajo = api.low_stock_products()
    if not bajo.ok:
        st.error("No se pudo calcular el stock bajo.")
    elif not bajo.data:
        st.caption(f"Ningún producto por debajo de {api.low_stock_threshold} piezas.")
    else:
        st.dataframe(
            pd.DataFrame(
                [{"Producto": r.nombre, "ID": r.producto_id, "Stock": r.stock} for r in bajo.data]
            ),
            use_container_width=True,
            hide_index=True,
        )

    st.markdown(f"### ⏳ Lotes que vencen en los próximos {api.expiry_window_days} días")
    por_vencer = api.expiring_lots()
    if not por_vencer.ok:
        st.error("No se pudieron leer los lotes por vencer.")
    elif not por_vencer.data:
        st.caption("No hay lotes por vencer.")
    else:
        nombres = {g.product.id: g.product.nombre for g in grupos}
        warning_box(f"{len(por_vencer.data)} lote(s) por vencer. Véndalos primero.")
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "Producto": nombres.get(l.producto_id, f"#{l.producto_id}"),
                        "Lote": l.lote or "-",
                        "Caducidad": format_date(l.fecha_caducidad),
                        "Piezas": l.cantidad_actual,
                    }
                    for l in por_vencer.data
                ]
            ),
            use_container_width=True,
            hide_index=True,
        )


def main():
    show_sidebar()
    home_page()


if __name__ == "__main__":
    main()
