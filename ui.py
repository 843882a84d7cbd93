import logging
from pathlib import Path

import streamlit as st

from plan import LABELS

logger = logging.getLogger(__name__)

CSS_PATH = Path(__file__).parent / "assets" / "styles.css"


def inject_css():
    try:
        css = CSS_PATH.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning("Stylesheet not found at %s; using Streamlit defaults", CSS_PATH)
        return
    st.markdown(f"<style>{css}</style>", unsafe_allow_html=True)


def header(title: str, subtitle: str = ""):
    st.markdown(f"## {title}")
    if subtitle:
        st.caption(subtitle)
    st.markdown(
        "<div class='badge'>Monte Carlo</div> "
        "<div class='badge'>Drawdown</div> "
        "<div class='badge'>UK state pension</div>",
        unsafe_allow_html=True,
    )


def helptext(text: str):
    st.caption(text)


def show_errors(errors: dict):
    st.error("Please fix the highlighted inputs and run again.")
    for name, message in errors.items():
        st.markdown(f"<div class='field-error'><b>{LABELS.get(name, name)}</b>: {message}</div>",
                    unsafe_allow_html=True)
