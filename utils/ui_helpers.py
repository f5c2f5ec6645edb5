"""
Helpers para que las pantallas sean consistentes.
"""
import streamlit as st

from services.results import OperationResult


def page_header(title: str, icon: str, subtitle: str = ""):
    """Título de la página con subtítulo opcional."""
    st.markdown(
        f"<p style='margin:0 0 0.25rem 0; font-size:1.25rem;'><strong>{icon} {title}</strong></p>"
        + (f"<p style='margin:0; font-size:0.8rem; color:#666;'>{subtitle}</p>" if subtitle else ""),
        unsafe_allow_html=True,
    )
    st.markdown("---")


def warning_box(message: str):
    """Caja de atención (ej.: lotes por vencer)."""
    st.markdown(
        f"""
    <div style="
        background-color: #fff3e0;
        border-left: 4px solid #fb8c00;
        padding: 14px 18px;
        margin: 12px 0;
        border-radius: 0 8px 8px 0;
        font-weight: 500;
    ">
        ⚠️ {message}
    </div>
    """,
        unsafe_allow_html=True,
    )


def show_result(result: OperationResult, success_message: str) -> bool:
    """
    Muestra el resultado de una escritura. message si viene, si no un aviso genérico.
    """
    if result.success:
        st.success(success_message)
        for aviso in result.warnings:
            st.warning(aviso)
        return True
    st.error(result.message or "No se pudo completar la operación.")
    return False


def step_label(step: int, label: str):
    """Rótulo de paso (ej.: 'Paso 1: Agregar productos')."""
    st.markdown(f"**Paso {step}:** {label}")
