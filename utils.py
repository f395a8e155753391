import re
from typing import Any, Iterable, List, Optional, Pattern, Sequence, Tuple, Union

from config import Marker, Sentinel


class RecordReader:
    @staticmethod
    def get_path(data: Any, *keys: Union[str, int]) -> Any:
        """Follows nested keys/list indices; returns None as soon as a segment is missing."""
        current = data
        for key in keys:
            if current is None:
                return None
            if isinstance(current, dict):
                current = current.get(key)
            elif isinstance(current, list) and isinstance(key, int):
                current = current[key] if -len(current) <= key < len(current) else None
            else:
                return None
        return current

    @staticmethod
    def as_text(value: Any, default: str = "") -> str:
        """Renders a scalar JSON value as text; null, empty or false yield the default."""
        if value is None or value == "" or value is False:
            return default
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value)

    @staticmethod
    def get_text(data: Any, *keys: Union[str, int], default: str = "") -> str:
        return RecordReader.as_text(RecordReader.get_path(data, *keys), default)

    @staticmethod
    def get_list(data: Any, *keys: Union[str, int]) -> List[Any]:
        """Returns the list at the path, or an empty list for anything else."""
        value = RecordReader.get_path(data, *keys)
        return value if isinstance(value, list) else []


class EligibilityParser:
    """Splits and cleans the free-text eligibility criteria block."""

    @staticmethod
    def split(text: str) -> Tuple[str, str]:
        """
        Splits once on the exclusion header.
        Returns the raw text before and after the marker; the exclusion part is
        empty when the marker does not occur.
        """
        if not text:
            return "", ""
        inclusion, _, exclusion = text.partition(Marker.EXCLUSION_HEADER)
        return inclusion, exclusion

    @staticmethod
    def to_bullets(text: str) -> str:
        return text.replace(Marker.BULLET, Marker.BULLET_HTML).strip()

    @staticmethod
    def clean_inclusion(segment: str) -> str:
        if not segment:
            return ""
        return EligibilityParser.to_bullets(segment.replace(Marker.INCLUSION_HEADER, "", 1))

    @staticmethod
    def clean_exclusion(segment: str) -> str:
        if not segment:
            return ""
        return EligibilityParser.to_bullets(segment)


class PatternMatcher:
    """First-match helpers over templated criteria text. All matching is case-sensitive."""

    @staticmethod
    def first_match(text: str, patterns: Sequence[Tuple[Pattern, int]]) -> Optional[str]:
        """Tries (pattern, group) pairs in order and returns the first captured text."""
        if not text:
            return None
        for pattern, group in patterns:
            match = pattern.search(text)
            if match and match.group(group):
                return match.group(group)
        return None

    @staticmethod
    def all_matches(text: str, pattern: Pattern) -> List[str]:
        if not text:
            return []
        return [m.group(0) for m in pattern.finditer(text)]

    @staticmethod
    def contains_any(text: str, phrases: Iterable[str]) -> bool:
        if not text:
            return False
        return any(phrase in text for phrase in phrases)


class ListFormatter:
    """Formats structured sub-lists as bold-labelled, <br>-joined lines."""

    KEY_SECONDARY_TERMS = ("time to", "first occurrence")

    @staticmethod
    def _label(value: Any, default: str = Sentinel.NA) -> str:
        return RecordReader.as_text(value, default)

    @staticmethod
    def format_arms(arms: List[dict]) -> str:
        if not arms:
            return ""
        lines = []
        for arm in arms:
            if not isinstance(arm, dict):
                continue
            name = ListFormatter._label(arm.get("label"))
            description = ListFormatter._label(arm.get("description"), "")
            names = arm.get("interventionNames")
            if isinstance(names, list):
                interventions = ", ".join(str(n).replace("Drug: ", "", 1) for n in names)
            else:
                interventions = Sentinel.NA
            lines.append(f"- **{name}**: {description} (Interventions: {interventions})")
        return Marker.LINE_BREAK.join(lines)

    @staticmethod
    def format_outcomes(outcomes: List[dict]) -> str:
        if not outcomes:
            return ""
        lines = []
        for outcome in outcomes:
            if not isinstance(outcome, dict):
                continue
            lines.append(
                f"- **{ListFormatter._label(outcome.get('title'))}**: "
                f"{ListFormatter._label(outcome.get('description'))} "
                f"(Time Frame: {ListFormatter._label(outcome.get('timeFrame'))})"
            )
        return Marker.LINE_BREAK.join(lines)

    @staticmethod
    def format_substudies(substudies: List[dict]) -> str:
        if not substudies:
            return ""
        lines = [
            f"- **{ListFormatter._label(sub.get('title'))}**: {ListFormatter._label(sub.get('description'))}"
            for sub in substudies if isinstance(sub, dict)
        ]
        return Marker.LINE_BREAK.join(lines)

    @staticmethod
    def is_key_secondary(outcome: Any) -> bool:
        title = outcome.get("title") if isinstance(outcome, dict) else None
        if not title or not isinstance(title, str):
            return False
        lowered = title.lower()
        return any(term in lowered for term in ListFormatter.KEY_SECONDARY_TERMS)

    @staticmethod
    def is_other_secondary(outcome: Any) -> bool:
        title = outcome.get("title") if isinstance(outcome, dict) else None
        if not title or not isinstance(title, str):
            return False
        return not ListFormatter.is_key_secondary(outcome)

    @staticmethod
    def partition_secondary(outcomes: List[Any]) -> Tuple[List[dict], List[dict]]:
        """Splits secondary outcomes into (key, other); untitled outcomes land in neither."""
        key = [o for o in outcomes if ListFormatter.is_key_secondary(o)]
        other = [o for o in outcomes if ListFormatter.is_other_secondary(o)]
        return key, other


def compile_all(patterns: Iterable[Tuple[str, int]]) -> List[Tuple[Pattern, int]]:
    return [(re.compile(p), group) for p, group in patterns]
