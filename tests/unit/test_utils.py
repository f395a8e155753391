"""
Unit tests for record lookup, eligibility splitting and list formatting helpers.
"""

import re

import pytest

from utils import EligibilityParser, ListFormatter, PatternMatcher, RecordReader


class TestRecordReader:
    """Test nested path lookups."""

    def test_get_path_through_dicts_and_lists(self):
        data = {"a": {"b": [{"c": "value"}]}}
        assert RecordReader.get_path(data, "a", "b", 0, "c") == "value"

    @pytest.mark.parametrize("keys", [
        ("missing",),
        ("a", "missing"),
        ("a", "b", 3, "c"),
        ("a", "b", "c"),
        ("a", "b", 0, "c", "deeper"),
    ])
    def test_get_path_missing_segment(self, keys):
        data = {"a": {"b": [{"c": "value"}]}}
        assert RecordReader.get_path(data, *keys) is None

    @pytest.mark.parametrize("value,expected", [
        (None, "default"),
        ("", "default"),
        (0, "0"),
        (12.0, "12"),
        (12.5, "12.5"),
        ("text", "text"),
    ])
    def test_as_text(self, value, expected):
        assert RecordReader.as_text(value, "default") == expected

    def test_get_list_rejects_non_lists(self):
        assert RecordReader.get_list({"x": {"y": 1}}, "x") == []
        assert RecordReader.get_list({"x": [1]}, "x") == [1]


class TestEligibilityParser:
    """Test splitting on the exclusion header."""

    @pytest.mark.parametrize("text", [
        "Inclusion Criteria:\n\n* Adults\n\nExclusion Criteria:\n\n* Pregnancy",
        "Exclusion Criteria:\n* Only exclusions",
        "Inclusion Criteria:\n* A\nExclusion Criteria:\n* B\nExclusion Criteria:\n* C",
    ])
    def test_split_reassembles_original(self, text):
        inclusion, exclusion = EligibilityParser.split(text)
        assert inclusion + "Exclusion Criteria:" + exclusion == text
        assert len(inclusion) == text.index("Exclusion Criteria:")

    def test_split_only_once(self):
        _, exclusion = EligibilityParser.split("a Exclusion Criteria: b Exclusion Criteria: c")
        assert exclusion == " b Exclusion Criteria: c"

    def test_split_without_marker(self):
        assert EligibilityParser.split("Only inclusion") == ("Only inclusion", "")
        assert EligibilityParser.split("") == ("", "")

    def test_clean_inclusion_removes_header_once(self):
        cleaned = EligibilityParser.clean_inclusion("Inclusion Criteria:\n\n* A\n* B\n")
        assert cleaned == "<br>- A<br>- B"

    def test_clean_exclusion(self):
        assert EligibilityParser.clean_exclusion("\n\n* A\n* B") == "<br>- A<br>- B"
        assert EligibilityParser.clean_exclusion("") == ""


class TestPatternMatcher:
    """Test ordered pattern matching."""

    def test_first_match_respects_order(self):
        patterns = [(re.compile(r"beta (\d+)"), 1), (re.compile(r"alpha (\d+)"), 0)]
        assert PatternMatcher.first_match("alpha 1 beta 2", patterns) == "2"

    def test_first_match_none(self):
        assert PatternMatcher.first_match("", [(re.compile("x"), 0)]) is None
        assert PatternMatcher.first_match("abc", [(re.compile("x"), 0)]) is None

    def test_all_matches_in_document_order(self):
        assert PatternMatcher.all_matches("a1 b a2", re.compile(r"a\d")) == ["a1", "a2"]

    def test_contains_any_is_case_sensitive(self):
        assert PatternMatcher.contains_any("Type 1", ["Type 1"])
        assert not PatternMatcher.contains_any("type 1", ["Type 1"])


class TestListFormatter:
    """Test outcome partitioning and formatting."""

    OUTCOMES = [
        {"title": "Time to first MACE"},
        {"title": "First occurrence of stroke"},
        {"title": "Body weight"},
        {"title": None},
        {"description": "no title"},
        {"title": ""},
    ]

    def test_partition_is_exclusive_for_titled_outcomes(self):
        key, other = ListFormatter.partition_secondary(self.OUTCOMES)
        titled = [o for o in self.OUTCOMES if o.get("title")]
        for outcome in titled:
            assert (outcome in key) != (outcome in other)

    def test_untitled_outcomes_are_dropped(self):
        key, other = ListFormatter.partition_secondary(self.OUTCOMES)
        assert len(key) == 2
        assert other == [{"title": "Body weight"}]

    def test_format_outcomes(self):
        text = ListFormatter.format_outcomes([
            {"title": "A", "description": "d", "timeFrame": "1 year"},
            {"title": "B"},
        ])
        assert text == "- **A**: d (Time Frame: 1 year)<br>- **B**: N/A (Time Frame: N/A)"

    def test_format_arms_strips_drug_prefix(self):
        text = ListFormatter.format_arms([
            {"label": "Arm 1", "description": "d", "interventionNames": ["Drug: X", "Device: Y"]},
        ])
        assert text == "- **Arm 1**: d (Interventions: X, Device: Y)"

    def test_empty_lists(self):
        assert ListFormatter.format_outcomes([]) == ""
        assert ListFormatter.format_arms([]) == ""
        assert ListFormatter.format_substudies([]) == ""
