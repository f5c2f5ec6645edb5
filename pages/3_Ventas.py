import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import pandas as pd
import streamlit as st

from models.product import Product
from services.schemas import piezas_fisicas, subtotal_linea
from utils.app_context import get_api
from utils.formatters import format_container, format_currency, format_date
from utils.navigation import show_sidebar
from utils.ui_helpers import page_header, show_result, step_label


st.set_page_config(page_title="Ventas", page_icon="🧾", layout="wide")

show_sidebar()
page_header("Ventas", "🧾", "Las piezas se descuentan de los lotes que vencen primero.")

api = get_api()

with api.database.session() as db:
    productos = db.query(Product).filter(Product.activo.is_(True)).order_by(Product.nombre).all()
if not productos:
    st.info("No hay productos registrados.")
    st.stop()

por_id = {p.id: p for p in productos}

if "cart_items" not in st.session_state:
    st.session_state.cart_items = []

col_prod, col_cart = st.columns([1, 2])

with col_prod:
    step_label(1, "Seleccionar producto")
    producto_id = st.selectbox(
        "Producto", options=list(por_id), format_func=lambda i: f"{por_id[i].nombre} · {format_currency(por_id[i].precio_venta)}"
    )
    caducidad = api.earliest_expiration(producto_id)
    if caducidad:
        st.caption(f"Lote más próximo a vencer: {format_date(caducidad)}")

    with st.form("renglon_venta", clear_on_submit=True):
        tipo = st.selectbox("Contenedor", options=["unidad", "caja", "paquete"])
        unidades = st.number_input("Unidades por contenedor", min_value=1, step=1, value=1)
        cantidad = st.number_input("Cantidad", min_value=1, step=1, value=1)
        descuento = st.number_input("Descuento por unidad ($)", min_value=0.0, step=0.5, value=0.0)
        agregar = st.form_submit_button("Agregar al carrito")

    if agregar:
        st.session_state.cart_items.append(
            {
                "producto_id": producto_id,
                "cantidad": int(cantidad),
                "tipo_contenedor": tipo,
                "unidades_por_contenedor": int(unidades),
                "descuento_manual_fijo": float(descuento),
                "fecha_caducidad": caducidad,
            }
        )
        st.rerun()

with col_cart:
    step_label(2, "Carrito")
    cart = st.session_state.cart_items
    if not cart:
        st.caption("El carrito está vacío.")
    else:
        filas = []
        total = 0.0
        for item in cart:
            prod = por_id.get(item["producto_id"])
            precio = (prod.precio_venta if prod else 0.0) - item["descuento_manual_fijo"]
            upc = 1 if item["tipo_contenedor"] == "unidad" else item["unidades_por_contenedor"]
            sub = subtotal_linea(item["tipo_contenedor"], item["cantidad"], upc, precio)
            total += sub
            filas.append(
                {
                    "Producto": prod.nombre if prod else item["producto_id"],
                    "Cantidad": item["cantidad"],
                    "Contenedor": format_container(item["tipo_contenedor"], upc),
                    "Piezas": piezas_fisicas(item["tipo_contenedor"], item["cantidad"], upc),
                    "Precio": format_currency(precio),
                    "Subtotal": format_currency(sub),
                }
            )
        st.dataframe(pd.DataFrame(filas), use_container_width=True, hide_index=True)
        st.markdown(f"**Total:** {format_currency(total)}")
        observaciones = st.text_input("Observaciones (opcional)")

        c_fin, c_limpiar = st.columns(2)
        with c_fin:
            if st.button("Finalizar venta", type="primary", use_container_width=True):
                resultado = api.create_sale(
                    {"total": total, "observaciones": observaciones, "detalles": cart}
                )
                if show_result(resultado, "Venta registrada."):
                    st.session_state.cart_items = []
        with c_limpiar:
            if st.button("Vaciar carrito", use_container_width=True):
                st.session_state.cart_items = []
                st.rerun()

st.markdown("---")
st.subheader("Ventas de hoy")
hoy = api.sales_today()
if not hoy.ok:
    st.error("No se pudieron leer las ventas.")
elif not hoy.data:
    st.caption("Aún no hay ventas hoy.")
else:
    st.metric("Total del día", format_currency(sum(v.total or 0 for v in hoy.data)))
    st.dataframe(
        pd.DataFrame(
            [
                {
                    "Venta #": v.id,
                    "Hora": v.fecha.strftime("%H:%M") if v.fecha else "-",
                    "Total": format_currency(v.total),
                    "Observaciones": v.observaciones or "",
                }
                for v in hoy.data
            ]
        ),
        use_container_width=True,
        hide_index=True,
    )
