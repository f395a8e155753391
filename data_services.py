# ============================================================================
# FILE: data_services.py
# File reading, JSON parsing and spreadsheet export services
# ============================================================================

import html
import json
import logging
import textwrap
from pathlib import Path
from typing import Any, Dict, List, Sequence

import pandas as pd

from config import Config, catalog_order
from exceptions import ExportPreconditionError, TrialParseError
from models import FileRecord

logger = logging.getLogger(__name__)

FIELD_COLUMN = "Field"
NO_DATA_MESSAGE = "No data to export. Please upload JSON files first."


class TrialFileService:
    """Reads uploaded trial files and parses them as JSON."""

    @staticmethod
    def read_text(file) -> str:
        """Returns the decoded text of an upload, a CLI file or a plain string."""
        if hasattr(file, "getvalue"):
            raw = file.getvalue()
        elif hasattr(file, "read"):
            raw = file.read()
        else:
            raw = file

        if isinstance(raw, str):
            return raw
        try:
            return bytes(raw).decode(Config.FILE_ENCODING)
        except UnicodeDecodeError as e:
            raise TrialParseError(getattr(file, "name", "<unnamed>"), str(e)) from e

    @staticmethod
    def parse(name: str, text: str) -> Any:
        try:
            return json.loads(text)
        except (ValueError, RecursionError) as e:
            raise TrialParseError(name, str(e)) from e

    @staticmethod
    def load(file) -> Any:
        name = getattr(file, "name", "<unnamed>")
        return TrialFileService.parse(name, TrialFileService.read_text(file))


class ExportService:
    """Builds the field-by-file comparison table and its spreadsheet export."""

    @staticmethod
    def build_table(records: Sequence[FileRecord], fields: Sequence[str]) -> pd.DataFrame:
        """Rows are fields in catalog order, columns are files in batch order."""
        rows = [
            [field_name] + [record.get(field_name) for record in records]
            for field_name in catalog_order(fields)
        ]
        columns = [FIELD_COLUMN] + [record.file_name for record in records]
        return pd.DataFrame(rows, columns=columns)

    @staticmethod
    def to_cell_html(value: Any) -> str:
        """Escapes cell text while keeping the <br> line breaks."""
        text = "" if value is None else str(value)
        return html.escape(text).replace("&lt;br&gt;", "<br>")

    @staticmethod
    def render_table_html(records: Sequence[FileRecord], fields: Sequence[str]) -> str:
        df = ExportService.build_table(records, fields)
        # Rebuilt positionally: two uploads may share a file name.
        escaped = pd.DataFrame(
            [[ExportService.to_cell_html(v) for v in row] for row in df.itertuples(index=False, name=None)],
            columns=[html.escape(str(c)) for c in df.columns],
        )
        return escaped.to_html(index=False, escape=False, border=1, na_rep="")

    @staticmethod
    def to_html(records: Sequence[FileRecord], fields: Sequence[str]) -> str:
        table = ExportService.render_table_html(records, fields)
        return textwrap.dedent(f"""\
            <!DOCTYPE html>
            <html lang="en">
            <head>
                <meta charset="UTF-8">
                <title>{Config.EXPORT_TITLE}</title>
            </head>
            <body>
            """) + table + "\n</body>\n</html>\n"

    @staticmethod
    def export(records: Sequence[FileRecord], fields: Sequence[str]) -> bytes:
        """Serializes the comparison table; refuses to run without data."""
        if not records:
            raise ExportPreconditionError(NO_DATA_MESSAGE)
        logger.info("Exporting %d file(s) x %d field(s)", len(records), len(catalog_order(fields)))
        return ExportService.to_html(records, fields).encode("utf-8")

    @staticmethod
    def write(path: Path, records: Sequence[FileRecord], fields: Sequence[str]) -> Path:
        payload = ExportService.export(records, fields)
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
        return path

    @staticmethod
    def records_to_json(records: Sequence[FileRecord]) -> List[Dict[str, Any]]:
        return [record.to_dict() for record in records]
