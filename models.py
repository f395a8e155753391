# ============================================================================
# FILE: models.py
# Data models and structures
# ============================================================================

from dataclasses import dataclass, field
from typing import Dict, Any

# Field name -> formatted value, one entry per catalog field.
ExtractionResult = Dict[str, str]


@dataclass
class UploadedTrialFile:
    """A named trial document as handed over by the upload control or CLI."""
    name: str
    content: bytes = b""

    def getvalue(self) -> bytes:
        return self.content


@dataclass
class FileRecord:
    """Extraction result for one successfully parsed file."""
    file_name: str
    fields: ExtractionResult = field(default_factory=dict)

    def get(self, field_name: str) -> str:
        return self.fields.get(field_name, "")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileName": self.file_name,
            "fields": dict(self.fields)
        }
