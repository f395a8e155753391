import json

import streamlit as st

from config import Config, FIELD_CATALOG
from data_services import ExportService
from exceptions import ExportPreconditionError
from state_manager import ExtractionSession, SessionState

UPLOAD_KEY = "json_upload"
FIELD_SELECT_KEY = "field_selection"


class UIComponents:
    """Reusable UI components."""

    @staticmethod
    def _on_upload_change():
        """A new file selection replaces the batch wholesale."""
        session = SessionState.get()
        files = st.session_state.get(UPLOAD_KEY) or []
        with st.spinner("Processing files..."):
            session.process_files(files)

    @staticmethod
    def render_sidebar():
        with st.sidebar:
            st.markdown(f"### {Config.PAGE_ICON} Trial Comparison")
            if st.button("Start New Comparison", use_container_width=True, type="primary"):
                # Widget state still holds the previous upload and selection
                for key in (UPLOAD_KEY, FIELD_SELECT_KEY):
                    st.session_state.pop(key, None)
                SessionState.reset()
                st.rerun()

    @staticmethod
    def render_uploader(session: ExtractionSession):
        with st.container(border=True):
            st.file_uploader(
                "Upload JSON Files:",
                type=["json"],
                accept_multiple_files=True,
                key=UPLOAD_KEY,
                on_change=UIComponents._on_upload_change,
            )
            if session.file_names:
                st.markdown("**Selected Files:**")
                st.markdown("\n".join(f"- {name}" for name in session.file_names))
            st.caption("Select multiple files at once to compare trials side by side. Data will not be saved.")

    @staticmethod
    def render_field_selector(session: ExtractionSession):
        if not session.has_data:
            return
        with st.container(border=True):
            chosen = st.multiselect(
                "Select Fields to Display:",
                FIELD_CATALOG,
                default=session.selected_fields,
                key=FIELD_SELECT_KEY,
            )
            session.select_fields(chosen)

    @staticmethod
    def render_error(session: ExtractionSession):
        if session.error:
            st.error(f"**Error!** {session.error}")

    @staticmethod
    def render_export(session: ExtractionSession):
        col_excel, col_json = st.columns(2)
        try:
            payload = session.export()
        except ExportPreconditionError as e:
            st.error(str(e))
            return

        with col_excel:
            st.download_button(
                label="Export to Excel",
                data=payload,
                file_name=Config.EXPORT_FILE_NAME,
                mime=Config.EXPORT_MIME,
                use_container_width=True,
                type="primary",
            )
        with col_json:
            st.download_button(
                label="Export to JSON",
                data=json.dumps(ExportService.records_to_json(session.records), indent=2),
                file_name="clinical_trial_data.json",
                mime="application/json",
                use_container_width=True,
            )

    @staticmethod
    def render_results(session: ExtractionSession):
        if not session.has_data:
            if not session.error:
                st.info("Upload JSON files to see the extracted data here. Data will not be saved.")
            return

        UIComponents.render_export(session)
        st.markdown(
            f'<div class="comparison-table">{session.table_html()}</div>',
            unsafe_allow_html=True
        )
