import streamlit as st


def show_sidebar() -> None:
    """
    Sidebar con los enlaces a las páginas del inventario.
    """
    with st.sidebar:
        st.markdown("## 🏪 Inventario")
        st.markdown("---")
        st.markdown("### Menú")
        st.page_link("app.py", label="Inicio", icon="🏠")
        st.page_link("pages/1_Inventario.py", label="Inventario", icon="📦")
        st.page_link("pages/2_Compras.py", label="Compras", icon="🚚")
        st.page_link("pages/3_Ventas.py", label="Ventas", icon="🧾")
