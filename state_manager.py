# ============================================================================
# FILE: state_manager.py
# Batch orchestration and session state management
# ============================================================================

import logging
from typing import Iterable, List, Optional

import streamlit as st

from config import FIELD_CATALOG, catalog_order
from data_services import ExportService, TrialFileService
from exceptions import TrialExtractorError, TrialParseError
from field_extractor import FieldExtractor
from models import FileRecord

logger = logging.getLogger(__name__)


class ExtractionSession:
    """Holds one batch of extracted files, its errors and the field selection."""

    def __init__(self, selected_fields: Optional[Iterable[str]] = None):
        self.records: List[FileRecord] = []
        self.file_names: List[str] = []
        self.error: str = ""
        self.selected_fields: List[str] = list(FIELD_CATALOG)
        if selected_fields is not None:
            self.select_fields(selected_fields)

    @property
    def has_data(self) -> bool:
        return bool(self.records)

    def clear(self):
        self.records = []
        self.file_names = []
        self.error = ""

    def process_files(self, files) -> List[FileRecord]:
        """
        Parses and extracts each file in order. A failing file adds to the
        error text and is skipped; the batch replaces any previous one.
        """
        files = list(files or [])
        if not files:
            self.clear()
            return self.records

        records: List[FileRecord] = []
        file_names: List[str] = []
        errors: List[str] = []

        for file in files:
            name = getattr(file, "name", "<unnamed>")
            try:
                record = TrialFileService.load(file)
                fields = FieldExtractor.extract(record)
            except TrialExtractorError as e:
                reason = e.reason if isinstance(e, TrialParseError) else str(e)
                logger.error("Error processing file %s: %s", name, reason)
                errors.append(f"Error processing {name}: {reason}. ")
                continue

            records.append(FileRecord(file_name=name, fields=fields))
            file_names.append(name)

        self.records = records
        self.file_names = file_names
        self.error = "".join(errors)
        logger.info("Processed %d file(s): %d extracted, %d failed",
                    len(files), len(records), len(errors))
        return self.records

    def select_fields(self, names: Iterable[str]) -> List[str]:
        names = list(names)
        unknown = [n for n in names if n not in FIELD_CATALOG]
        if unknown:
            logger.warning("Ignoring unknown field(s): %s", ", ".join(unknown))
        self.selected_fields = catalog_order(names)
        return self.selected_fields

    def comparison_table(self):
        return ExportService.build_table(self.records, self.selected_fields)

    def table_html(self) -> str:
        return ExportService.render_table_html(self.records, self.selected_fields)

    def export(self) -> bytes:
        return ExportService.export(self.records, self.selected_fields)


class SessionState:
    """Keeps the ExtractionSession in Streamlit session state across reruns."""

    KEY = "extraction_session"

    @staticmethod
    def initialize():
        """Initialize session state with a fresh session (all fields selected)."""
        if SessionState.KEY not in st.session_state:
            st.session_state[SessionState.KEY] = ExtractionSession()

    @staticmethod
    def get() -> ExtractionSession:
        SessionState.initialize()
        return st.session_state[SessionState.KEY]

    @staticmethod
    def reset():
        """Complete reset of the current batch and field selection."""
        st.session_state[SessionState.KEY] = ExtractionSession()
