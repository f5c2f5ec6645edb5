import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import pandas as pd
import streamlit as st

from models.product import Product
from models.provider import Provider
from utils.app_context import get_api
from utils.dates import now_local
from utils.formatters import format_container, format_currency, format_date
from utils.navigation import show_sidebar
from utils.ui_helpers import page_header, show_result, step_label


st.set_page_config(page_title="Compras", page_icon="🚚", layout="wide")

show_sidebar()
page_header("Compras", "🚚", "Cada renglón de la compra genera un lote nuevo en el inventario.")

api = get_api()

with api.database.session() as db:
    proveedores = db.query(Provider).filter(Provider.activo.is_(True)).order_by(Provider.nombre).all()
    productos = db.query(Product).filter(Product.activo.is_(True)).order_by(Product.nombre).all()

if not proveedores or not productos:
    st.info("Registre proveedores y productos antes de capturar compras.")
    st.stop()

if "compra_items" not in st.session_state:
    st.session_state.compra_items = []

col_form, col_items = st.columns([1, 2])

with col_form:
    step_label(1, "Agregar renglones")
    nombres = {p.id: p.nombre for p in productos}
    with st.form("renglon_compra", clear_on_submit=True):
        producto_id = st.selectbox("Producto", options=list(nombres), format_func=nombres.get)
        tipo = st.selectbox("Contenedor", options=["unidad", "caja", "paquete"])
        unidades = st.number_input("Unidades por contenedor", min_value=1, step=1, value=1)
        cantidad = st.number_input("Cantidad", min_value=1, step=1, value=1)
        precio = st.number_input("Costo unitario", min_value=0.0, step=0.5, value=0.0)
        etiqueta = st.text_input("Lote (opcional)")
        con_caducidad = st.checkbox("Tiene caducidad")
        caducidad = st.date_input("Caducidad", value=now_local().date())
        agregar = st.form_submit_button("Agregar")

    if agregar:
        st.session_state.compra_items.append(
            {
                "producto_id": producto_id,
                "cantidad": int(cantidad),
                "precio_unitario": float(precio),
                "tipo_contenedor": tipo,
                "unidades_por_contenedor": int(unidades),
                "lote": etiqueta,
                "fecha_caducidad": caducidad if con_caducidad else None,
            }
        )
        st.rerun()

with col_items:
    step_label(2, "Revisar y guardar")
    items = st.session_state.compra_items
    if not items:
        st.caption("Aún no hay renglones.")
    else:
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "Producto": nombres.get(i["producto_id"]),
                        "Cantidad": i["cantidad"],
                        "Contenedor": format_container(i["tipo_contenedor"], i["unidades_por_contenedor"]),
                        "Costo": format_currency(i["precio_unitario"]),
                        "Lote": i["lote"] or "-",
                        "Caducidad": format_date(i["fecha_caducidad"]),
                    }
                    for i in items
                ]
            ),
            use_container_width=True,
            hide_index=True,
        )

        prov_nombres = {p.id: p.nombre for p in proveedores}
        proveedor_id = st.selectbox("Proveedor", options=list(prov_nombres), format_func=prov_nombres.get)
        total = st.number_input("Total de la factura", min_value=0.0, step=1.0, value=0.0)
        observaciones = st.text_area("Observaciones (opcional)")

        c_guardar, c_limpiar = st.columns(2)
        with c_guardar:
            if st.button("Guardar compra", type="primary", use_container_width=True):
                resultado = api.create_purchase(
                    {
                        "proveedor_id": proveedor_id,
                        "total": total,
                        "observaciones": observaciones,
                        "detalles": items,
                    }
                )
                if show_result(resultado, "Compra registrada. Lotes creados."):
                    st.session_state.compra_items = []
        with c_limpiar:
            if st.button("Limpiar", use_container_width=True):
                st.session_state.compra_items = []
                st.rerun()

st.markdown("---")
st.subheader("Últimas compras")
proveedores_por_id = {p.id: p.nombre for p in proveedores}
compras = api.list_purchases()
if not compras.ok:
    st.error("No se pudieron leer las compras.")
elif not compras.data:
    st.caption("Sin compras registradas.")
else:
    st.dataframe(
        pd.DataFrame(
            [
                {
                    "Compra #": c.id,
                    "Fecha": format_date(c.fecha),
                    "Proveedor": proveedores_por_id.get(c.proveedor_id, f"#{c.proveedor_id}"),
                    "Total": format_currency(c.total),
                    "Observaciones": c.observaciones or "",
                }
                for c in compras.data[:20]
            ]
        ),
        use_container_width=True,
        hide_index=True,
    )
