"""
Pytest configuration and fixtures.
"""

import copy
import json
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from models import UploadedTrialFile


ELIGIBILITY_TEXT = (
    "Inclusion Criteria:\n\n"
    "* Male or female, age above or equal to 18 years\n"
    "* Body mass index (BMI) at least 25.0 kg/m^2\n"
    "* Diagnosed with type 2 diabetes mellitus\n"
    "* Chronic kidney disease defined as: eGFR 25-60 mL/min/1.73 m^2\n\n"
    "Exclusion Criteria:\n\n"
    "* Type 1 diabetes mellitus\n"
    "* Treatment with any glucagon-like peptide-1 receptor agonist within 90 days before screening\n"
    "* Treatment with glucose-lowering agents within 30 days before screening\n"
    "* Uncontrolled hypertension defined as systolic blood pressure >180 mmHg or diastolic blood pressure >110 mmHg\n"
    "* Chronic heart failure New York Heart Association (NYHA) class IV\n"
    "* History or presence of chronic pancreatitis\n"
    "* End stage renal disease or chronic or intermittent haemodialysis or peritoneal dialysis"
)

SAMPLE_TRIAL: Dict[str, Any] = {
    "protocolSection": {
        "identificationModule": {"nctId": "NCT04184622"},
        "statusModule": {
            "startDateStruct": {"date": "2019-12-02"},
            "completionDateStruct": {"date": "2022-03-09"},
        },
        "descriptionModule": {
            "briefSummary": (
                "This study compares semaglutide with placebo as add-on to the standard-of-care "
                "treatment. The study will last for about 1.5 to 2 years."
            ),
        },
        "conditionsModule": {"conditions": ["Obesity"]},
        "designModule": {
            "phases": ["PHASE3"],
            "enrollmentInfo": {"count": 1800},
        },
        "armsInterventionsModule": {
            "armGroups": [
                {
                    "label": "Semaglutide",
                    "description": "Participants receive semaglutide",
                    "interventionNames": ["Drug: Semaglutide"],
                },
                {
                    "label": "Placebo",
                    "description": "Participants receive placebo",
                    "interventionNames": ["Drug: Placebo"],
                },
            ],
            "interventions": [
                {
                    "name": "Semaglutide",
                    "description": "Semaglutide administered subcutaneously once weekly. Dose escalation applies.",
                }
            ],
        },
        "eligibilityModule": {
            "eligibilityCriteria": ELIGIBILITY_TEXT,
            "minimumAge": "18 Years",
        },
        "outcomesModule": {
            "primaryOutcomes": [
                {"title": "Change in body weight", "timeFrame": "From baseline to week 68"}
            ],
            "secondaryOutcomes": [
                {
                    "title": "Time to first occurrence of MACE",
                    "description": "Major adverse cardiovascular events",
                    "timeFrame": "Up to 5 years",
                },
                {"title": "Change in HbA1c", "timeFrame": "Week 68"},
                {"title": None, "description": "Untitled outcome"},
            ],
        },
    },
    "derivedSection": {
        "interventionBrowseModule": {
            "meshTerms": [{"term": "Semaglutide"}],
            "ancestors": [{"term": "Incretins"}],
        }
    },
}


@pytest.fixture
def sample_trial() -> Dict[str, Any]:
    """A realistic CT.gov record; each test gets its own copy."""
    return copy.deepcopy(SAMPLE_TRIAL)


@pytest.fixture
def make_upload():
    """Builds an in-memory upload from a JSON-able object or raw text."""
    def _make(name: str, payload: Any) -> UploadedTrialFile:
        text = payload if isinstance(payload, str) else json.dumps(payload)
        return UploadedTrialFile(name=name, content=text.encode("utf-8"))
    return _make
