import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import pandas as pd
import streamlit as st

from utils.app_context import get_api
from utils.formatters import format_date
from utils.navigation import show_sidebar
from utils.ui_helpers import page_header, show_result


st.set_page_config(page_title="Inventario", page_icon="📦", layout="wide")

show_sidebar()
page_header("Inventario", "📦", "Lotes activos por producto. Registre aquí mermas y consumo interno.")

api = get_api()

inventario = api.grouped_inventory()
if not inventario.ok:
    st.error("No se pudo leer el inventario.")
    st.stop()

grupos = inventario.data
if not grupos:
    st.info("No hay productos registrados.")
    st.stop()

busca = st.text_input("Buscar producto", placeholder="Ej: leche, 7501...").strip().lower()
solo_con_stock = st.checkbox("Solo productos con stock", value=False)

filtrados = [
    g
    for g in grupos
    if (not busca or busca in (g.product.nombre or "").lower() or busca in (g.product.codigo_barras or ""))
    and (not solo_con_stock or g.total_piezas > 0)
]

st.dataframe(
    pd.DataFrame(
        [
            {
                "ID": g.product.id,
                "Producto": g.product.nombre,
                "Lotes activos": g.cantidad_lotes,
                "Piezas": g.total_piezas,
            }
            for g in filtrados
        ]
    ),
    use_container_width=True,
    hide_index=True,
)

st.markdown("---")
col_lotes, col_consumo = st.columns([2, 1])

with col_lotes:
    st.subheader("Lotes del producto")
    opciones = {f"{g.product.nombre} (#{g.product.id})": g for g in filtrados}
    if not opciones:
        st.info("Ningún producto coincide con el filtro.")
        st.stop()
    elegido = opciones[st.selectbox("Producto", options=list(opciones))]
    if not elegido.lotes_activos:
        st.caption("Este producto no tiene lotes activos.")
    else:
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "Lote #": l.id,
                        "Etiqueta": l.lote or "-",
                        "Caducidad": format_date(l.fecha_caducidad),
                        "Piezas": l.cantidad_disponible,
                        "Alta": format_date(l.created_at),
                    }
                    for l in elegido.lotes_activos
                ]
            ),
            use_container_width=True,
            hide_index=True,
        )

with col_consumo:
    st.subheader("Consumo interno / merma")
    if not elegido.lotes_activos:
        st.caption("Sin lotes activos para descontar.")
    else:
        with st.form("consumo_form", clear_on_submit=True):
            lote_id = st.selectbox(
                "Lote",
                options=[l.id for l in elegido.lotes_activos],
                format_func=lambda i: next(
                    f"#{l.id} · {l.lote or 'sin etiqueta'} · {l.cantidad_disponible} pz"
                    for l in elegido.lotes_activos
                    if l.id == i
                ),
            )
            cantidad = st.number_input("Cantidad (piezas)", min_value=1, step=1, value=1)
            motivo = st.selectbox("Motivo", options=["merma", "daño", "muestras", "consumo interno", "caducado"])
            observaciones = st.text_input("Observaciones (opcional)")
            enviar = st.form_submit_button("Registrar consumo", type="primary")

        if enviar:
            resultado = api.record_consumption(
                {
                    "lote_id": lote_id,
                    "cantidad": int(cantidad),
                    "motivo": motivo,
                    "observaciones": observaciones,
                }
            )
            if show_result(resultado, "Consumo registrado."):
                st.rerun()
