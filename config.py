# ============================================================================
# FILE: config.py
# Configuration, field catalog and sentinel strings
# ============================================================================

from enum import Enum
import os


class Config:
    """Application configuration constants."""
    APP_TITLE = "Clinical Trial Data Extractor"
    PAGE_ICON = "🧪"
    EXPORT_FILE_NAME = "clinical_trial_data.xls"
    EXPORT_MIME = "application/vnd.ms-excel"
    EXPORT_TITLE = "Clinical Trial Data"
    FILE_ENCODING = "utf-8-sig"
    LOG_LEVEL = os.getenv("TRIAL_EXTRACTOR_LOG_LEVEL", "WARNING")


class TrialField(Enum):
    """Ordered catalog of extractable fields. Order is display/export order."""
    REFERENCE = "Reference"
    MOA = "MOA"
    MOLECULE_ROUTE = "Molecule/Intervention Route"
    PHASE = "Phase"
    SAMPLE_SIZE = "Sample Size"
    TREATMENT_ARMS = "Treatment Arms"
    BACKGROUND_THERAPY = "Background Therapy"
    DURATION = "Duration"
    INCLUSION_CRITERIA = "Inclusion Criteria"
    AGE = "Age"
    BMI = "BMI"
    T2DM_INCLUDED = "T2DM Included?"
    T2DM_DEFINITION = "T2DM Definition"
    CVD_DEFINITION = "Established CVD Definition"
    CKD_INCLUDED = "CKD Included?"
    CKD_DEFINITION = "CKD Definition"
    HFPEF_INCLUDED = "HFpEF Included?"
    HFPEF_DEFINITION = "HFpEF Definition"
    EXCLUSION_CRITERIA = "Exclusion Criteria"
    DIABETES_EXCLUDED = "T2DM and/or T1DM excluded?"
    CV_EVENTS_EXCLUSION = "History of CV events definition and timing for exclusion"
    CON_MED_EXCLUSION = "Con med exclusion: definition and timing?"
    HTN_CUTOFFS = "Uncontrolled HTN, BP cutoffs"
    NYHA_CLASS = "NYHA class"
    LIVER_DISEASE = "Liver disease"
    RENAL_EXCLUSION = "CKD eGFR cutoff, dialysis or kidney transplant"
    PRIMARY_ENDPOINT = "Primary Endpoint"
    KEY_SECONDARY_ENDPOINTS = "Key Secondary Endpoints"
    OTHER_SECONDARY_ENDPOINTS = "Other Secondary Endpoints"
    EXPLORATORY_ENDPOINTS = "Exploratory Endpoints"
    SUBSTUDIES = "Substudies (if available)"
    NOTES = "Notes/Comments"
    STUDY_ID = "Study ID"


FIELD_CATALOG = [field.value for field in TrialField]


def catalog_order(names) -> list:
    """Returns the known field names among `names`, in catalog order."""
    wanted = set(names)
    return [name for name in FIELD_CATALOG if name in wanted]


class Sentinel:
    """Placeholder strings used when a field cannot be derived."""
    NOT_STATED = "Not explicitly stated."
    NOT_STATED_BARE = "Not explicitly stated"
    NOT_MENTIONED = "Not explicitly mentioned."
    NOT_LISTED = "Not explicitly listed in the provided data."
    NOT_APPLICABLE = "Not applicable"
    NO = "No"
    YES = "Yes"
    NA = "N/A"


class Marker:
    """Literal markers used to split and clean the eligibility criteria block."""
    EXCLUSION_HEADER = "Exclusion Criteria:"
    INCLUSION_HEADER = "Inclusion Criteria:"
    BULLET = "\n* "
    BULLET_HTML = "<br>- "
    LINE_BREAK = "<br>"
