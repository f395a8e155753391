import logging

import streamlit as st

from config import Config
from state_manager import SessionState
from ui_components import UIComponents


def configure_logging():
    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    """
    Main application entry point.
    Upload trial JSON files, pick fields, compare trials side by side and export.
    """
    st.set_page_config(
        page_title=Config.APP_TITLE,
        layout="wide",
        page_icon=Config.PAGE_ICON
    )
    configure_logging()

    # Initialize session state FIRST so every component sees the same batch
    SessionState.initialize()
    session = SessionState.get()

    st.markdown("""
        <style>
        .stButton > button { border-radius: 10px; }
        .comparison-table { overflow-x: auto; }
        .comparison-table table { width: 100%; border-collapse: collapse; font-size: 0.9rem; }
        .comparison-table th { background-color: #e2e8f0; text-align: left; padding: 12px 24px; }
        .comparison-table td { padding: 16px 24px; border-left: 1px solid #e2e8f0; vertical-align: top; }
        .comparison-table tbody td:first-child { font-weight: bold; white-space: nowrap; background-color: #ffffff; }
        </style>
    """, unsafe_allow_html=True)

    st.title(Config.APP_TITLE)

    UIComponents.render_sidebar()
    UIComponents.render_uploader(session)
    UIComponents.render_field_selector(session)
    UIComponents.render_error(session)
    UIComponents.render_results(session)


if __name__ == "__main__":
    main()
