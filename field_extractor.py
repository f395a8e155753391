# ============================================================================
# FILE: field_extractor.py
# Rule table mapping a ClinicalTrials.gov JSON record to the field catalog
# ============================================================================

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from config import Marker, Sentinel, TrialField
from exceptions import InvalidRecordError
from models import ExtractionResult
from utils import EligibilityParser, ListFormatter, PatternMatcher, RecordReader, compile_all

logger = logging.getLogger(__name__)

get_path = RecordReader.get_path
get_text = RecordReader.get_text
get_list = RecordReader.get_list


# Trial text is heavily templated; every literal below must match verbatim.
BMI_PATTERNS = compile_all([(r"Body mass index \(BMI\) ([^\n]+)", 1)])

CVD_PATTERNS = compile_all([
    (r"Have established cardiovascular \(CV\) disease as evidenced by ([^\n]+)", 1),
    (r"clinical evidence of cardiovascular disease or age above or equal to 60 years at screening "
     r"and subclinical evidence of cardiovascular disease", 0),
])

CKD_PATTERNS = compile_all([(r"Chronic kidney disease defined as: ([^\n]+)", 1)])

HFPEF_PATTERNS = compile_all([
    (r"Heart failure with preserved ejection fraction \(HFpEF\) defined as: ([^\n]+)", 1),
])

CV_EVENT_PATTERNS = compile_all([
    (r"Any of the following: myocardial infarction, stroke, hospitalisation for unstable angina "
     r"pectoris or transient ischaemic attack within the past (\d+ days) prior to the day of screening", 0),
    (r"Acute coronary or cerebro-vascular event within (\d+ days) prior to randomisation", 0),
])

CON_MED_PATTERN = compile_all([
    (r"Treatment with (any glucagon-like peptide-1 receptor agonist|glucose-lowering agents|"
     r"any dipeptidyl peptidase 4 \(DPP-IV\) inhibitor) within (\d+ days) before screening", 0),
])[0][0]

HTN_PATTERNS = compile_all([
    (r"Uncontrolled hypertension defined as systolic blood pressure >(\d+) mmHg "
     r"or diastolic blood pressure >(\d+) mmHg", 0),
])

NYHA_PATTERNS = compile_all([
    (r"Chronic heart failure New York Heart Association \(NYHA\) class IV", 0),
    (r"Presently classified as being in New York Heart Association \(NYHA\) Class IV heart failure", 0),
])

DURATION_SUMMARY_PATTERNS = compile_all([
    (r"The study will last for about ([\d\.-]+ to [\d\.-]+ years)", 1),
    (r"The trial duration is approximately ([\d\.-]+ to [\d\.-]+ years)", 1),
    (r"The study will last for about ([\d\.-]+ to [\d\.-]+ months)", 1),
    (r"up to max\. (\d+ weeks)", 1),
])

T2DM_CONDITION = "Diabetes Mellitus, Type 2"
T2DM_PHRASE = "type 2 diabetes mellitus"
CKD_PHRASE = "Chronic kidney disease defined as:"
HFPEF_PHRASE = "Heart failure with preserved ejection fraction (HFpEF)"
ADD_ON_PHRASE = "add-on to the standard-of-care treatment"

DIABETES_EXCLUSIONS = [
    ("Type 1 diabetes mellitus", "Type 1 diabetes mellitus excluded."),
    ("History of type 1 or type 2 diabetes", "History of type 1 or type 2 diabetes excluded."),
]

PANCREATITIS_PHRASES = (
    "History or presence of chronic pancreatitis",
    "Presence of acute pancreatitis within the past 180 days",
)
PANCREATITIS_SUMMARY = (
    "History or presence of chronic pancreatitis and/or acute pancreatitis "
    "within the past 180 days prior to screening."
)

RENAL_PHRASE = "End stage renal disease or chronic or intermittent haemodialysis or peritoneal dialysis"
RENAL_SUMMARY = RENAL_PHRASE + " is an exclusion criterion."


@dataclass
class TrialContext:
    """Sections of one record, resolved once and shared by every rule."""
    record: Dict[str, Any]
    protocol: Dict[str, Any] = field(default_factory=dict)
    derived: Dict[str, Any] = field(default_factory=dict)
    eligibility_text: str = ""
    inclusion_raw: str = ""
    exclusion_raw: str = ""
    summary: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "TrialContext":
        protocol = record.get("protocolSection")
        if not isinstance(protocol, dict):
            logger.warning("JSON record is missing 'protocolSection'; using defaults.")
            protocol = {}
        derived = record.get("derivedSection")
        if not isinstance(derived, dict):
            logger.debug("JSON record has no 'derivedSection'.")
            derived = {}

        eligibility_text = get_text(protocol, "eligibilityModule", "eligibilityCriteria")
        inclusion_raw, exclusion_raw = EligibilityParser.split(eligibility_text)
        return cls(
            record=record,
            protocol=protocol,
            derived=derived,
            eligibility_text=eligibility_text,
            inclusion_raw=inclusion_raw,
            exclusion_raw=exclusion_raw,
            summary=get_text(protocol, "descriptionModule", "briefSummary"),
        )


# --- rule helpers -----------------------------------------------------------

def segment_text(ctx: TrialContext, segment: str) -> str:
    if segment == "inclusion":
        return ctx.inclusion_raw
    if segment == "exclusion":
        return ctx.exclusion_raw
    return ctx.eligibility_text


def match_or(patterns, segment: str, default: str) -> Callable[[TrialContext], str]:
    """Rule: first pattern match against the 'inclusion', 'exclusion' or 'all' text."""
    def rule(ctx: TrialContext) -> str:
        return PatternMatcher.first_match(segment_text(ctx, segment), patterns) or default
    return rule


def contains_or(phrases, segment: str, value: str, default: str) -> Callable[[TrialContext], str]:
    def rule(ctx: TrialContext) -> str:
        return value if PatternMatcher.contains_any(segment_text(ctx, segment), phrases) else default
    return rule


def nct_id(ctx: TrialContext) -> str:
    return get_text(ctx.protocol, "identificationModule", "nctId")


def resolve_sample_size(ctx: TrialContext) -> str:
    """Enrollment count as text; a zero count reads as blank."""
    count = get_path(ctx.protocol, "designModule", "enrollmentInfo", "count")
    return RecordReader.as_text(count) if count else ""


def has_t2dm(ctx: TrialContext) -> bool:
    conditions = get_list(ctx.protocol, "conditionsModule", "conditions")
    return T2DM_CONDITION in conditions or T2DM_PHRASE in ctx.inclusion_raw


# --- per-field resolvers ----------------------------------------------------

def resolve_moa(ctx: TrialContext) -> str:
    browse = get_path(ctx.derived, "interventionBrowseModule")
    for key in ("meshTerms", "ancestors"):
        terms = get_list(browse, key)
        if terms:
            return ", ".join(get_text(term, "term") for term in terms)
    return Sentinel.NOT_STATED_BARE


def resolve_molecule_route(ctx: TrialContext) -> str:
    name = get_text(ctx.protocol, "armsInterventionsModule", "interventions", 0, "name")
    description = get_text(ctx.protocol, "armsInterventionsModule", "interventions", 0, "description")
    if name and description:
        return f"{name}, {description.split('.')[0]}"
    return ""


def resolve_background_therapy(ctx: TrialContext) -> str:
    if ADD_ON_PHRASE in ctx.summary:
        return "Add-on to standard-of-care treatment."
    return Sentinel.NOT_STATED


def resolve_duration(ctx: TrialContext) -> str:
    start = get_text(ctx.protocol, "statusModule", "startDateStruct", "date")
    completion = get_text(ctx.protocol, "statusModule", "completionDateStruct", "date")
    if start and completion:
        return f"From {start} to {completion}"

    from_summary = PatternMatcher.first_match(ctx.summary, DURATION_SUMMARY_PATTERNS)
    if from_summary:
        return from_summary

    time_frame = get_text(ctx.protocol, "outcomesModule", "primaryOutcomes", 0, "timeFrame")
    if time_frame:
        return time_frame.replace("Approximate Maximum ", "", 1).replace("Months", " months", 1)
    return ""


def resolve_diabetes_excluded(ctx: TrialContext) -> str:
    for phrase, verdict in DIABETES_EXCLUSIONS:
        if phrase in ctx.exclusion_raw:
            return verdict
    return Sentinel.NOT_STATED


def resolve_con_meds(ctx: TrialContext) -> str:
    matches = PatternMatcher.all_matches(ctx.exclusion_raw, CON_MED_PATTERN)
    return Marker.LINE_BREAK.join(matches) if matches else Sentinel.NOT_STATED


def secondary_outcomes(ctx: TrialContext) -> List[Any]:
    return get_list(ctx.protocol, "outcomesModule", "secondaryOutcomes")


def resolve_key_secondary(ctx: TrialContext) -> str:
    key, _ = ListFormatter.partition_secondary(secondary_outcomes(ctx))
    return ListFormatter.format_outcomes(key)


def resolve_other_secondary(ctx: TrialContext) -> str:
    _, other = ListFormatter.partition_secondary(secondary_outcomes(ctx))
    return ListFormatter.format_outcomes(other)


def resolve_exploratory(ctx: TrialContext) -> str:
    outcomes = get_list(ctx.protocol, "outcomesModule", "exploratoryOutcomes")
    return ListFormatter.format_outcomes(outcomes) or Sentinel.NOT_LISTED


def resolve_substudies(ctx: TrialContext) -> str:
    substudies = get_list(ctx.protocol, "designModule", "substudies")
    return ListFormatter.format_substudies(substudies) or Sentinel.NOT_LISTED


FIELD_RULES: Dict[TrialField, Callable[[TrialContext], str]] = {
    TrialField.REFERENCE: nct_id,
    TrialField.MOA: resolve_moa,
    TrialField.MOLECULE_ROUTE: resolve_molecule_route,
    TrialField.PHASE: lambda ctx: get_text(ctx.protocol, "designModule", "phases", 0),
    TrialField.SAMPLE_SIZE: resolve_sample_size,
    TrialField.TREATMENT_ARMS: lambda ctx: ListFormatter.format_arms(
        get_list(ctx.protocol, "armsInterventionsModule", "armGroups")),
    TrialField.BACKGROUND_THERAPY: resolve_background_therapy,
    TrialField.DURATION: resolve_duration,
    TrialField.INCLUSION_CRITERIA: lambda ctx: EligibilityParser.clean_inclusion(ctx.inclusion_raw),
    TrialField.AGE: lambda ctx: get_text(ctx.protocol, "eligibilityModule", "minimumAge"),
    TrialField.BMI: match_or(BMI_PATTERNS, "all", Sentinel.NOT_MENTIONED),
    TrialField.T2DM_INCLUDED: lambda ctx: Sentinel.YES if has_t2dm(ctx) else Sentinel.NO,
    TrialField.T2DM_DEFINITION: lambda ctx: "Type 2 diabetes mellitus" if has_t2dm(ctx) else Sentinel.NOT_APPLICABLE,
    TrialField.CVD_DEFINITION: match_or(CVD_PATTERNS, "inclusion", Sentinel.NOT_STATED),
    TrialField.CKD_INCLUDED: contains_or([CKD_PHRASE], "inclusion", Sentinel.YES, Sentinel.NOT_STATED),
    TrialField.CKD_DEFINITION: match_or(CKD_PATTERNS, "inclusion", Sentinel.NOT_STATED),
    TrialField.HFPEF_INCLUDED: contains_or([HFPEF_PHRASE], "inclusion", Sentinel.YES, Sentinel.NOT_STATED),
    TrialField.HFPEF_DEFINITION: match_or(HFPEF_PATTERNS, "inclusion", Sentinel.NOT_STATED),
    TrialField.EXCLUSION_CRITERIA: lambda ctx: EligibilityParser.clean_exclusion(ctx.exclusion_raw),
    TrialField.DIABETES_EXCLUDED: resolve_diabetes_excluded,
    TrialField.CV_EVENTS_EXCLUSION: match_or(CV_EVENT_PATTERNS, "exclusion", Sentinel.NOT_STATED),
    TrialField.CON_MED_EXCLUSION: resolve_con_meds,
    TrialField.HTN_CUTOFFS: match_or(HTN_PATTERNS, "exclusion", Sentinel.NOT_MENTIONED),
    TrialField.NYHA_CLASS: match_or(NYHA_PATTERNS, "exclusion", Sentinel.NOT_STATED),
    TrialField.LIVER_DISEASE: contains_or(PANCREATITIS_PHRASES, "exclusion", PANCREATITIS_SUMMARY, Sentinel.NOT_STATED),
    TrialField.RENAL_EXCLUSION: contains_or([RENAL_PHRASE], "exclusion", RENAL_SUMMARY, Sentinel.NOT_STATED),
    TrialField.PRIMARY_ENDPOINT: lambda ctx: get_text(ctx.protocol, "outcomesModule", "primaryOutcomes", 0, "title"),
    TrialField.KEY_SECONDARY_ENDPOINTS: resolve_key_secondary,
    TrialField.OTHER_SECONDARY_ENDPOINTS: resolve_other_secondary,
    TrialField.EXPLORATORY_ENDPOINTS: resolve_exploratory,
    TrialField.SUBSTUDIES: resolve_substudies,
    TrialField.NOTES: lambda ctx: ctx.summary,
    TrialField.STUDY_ID: nct_id,
}


class FieldExtractor:
    """Maps one parsed trial record to the full field catalog."""

    RULES = FIELD_RULES

    @staticmethod
    def extract(record: Any) -> ExtractionResult:
        """
        Resolves every catalog field independently.
        Missing sections degrade to each field's default; only a non-object
        input is rejected.
        """
        if not isinstance(record, dict):
            raise InvalidRecordError(
                f"Expected a JSON object, got {type(record).__name__}"
            )

        ctx = TrialContext.from_record(record)
        return {
            trial_field.value: FieldExtractor.RULES[trial_field](ctx)
            for trial_field in TrialField
        }
