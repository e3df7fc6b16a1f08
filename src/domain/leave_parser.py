"""
Leave Parser Module

Classifies free-text leave annotations into LeaveType values using a label
table, so new labels or locales are a configuration change.
"""

from typing import Dict, Mapping, Optional

from .entities import LeaveType


class LeaveLabelParser:
    """
    Maps leave annotation text to a LeaveType.

    Matching rules, in order:
    - empty text → NONE
    - exact enum name or description (case-insensitive)
    - first label in the table contained in the text (case-insensitive)
    - otherwise NONE

    CUSTOM is never chosen here from text alone; the builder decides CUSTOM
    when explicit start/end times are present.
    """

    DEFAULT_LABELS: Dict[str, LeaveType] = {
        "正常": LeaveType.NONE,
        "上午": LeaveType.MORNING,
        "下午": LeaveType.AFTERNOON,
        "全天": LeaveType.FULL_DAY,
        "morning": LeaveType.MORNING,
        "afternoon": LeaveType.AFTERNOON,
        "full day": LeaveType.FULL_DAY,
    }

    def __init__(self, labels: Optional[Mapping[str, LeaveType]] = None):
        table = labels if labels is not None else self.DEFAULT_LABELS
        self._labels: Dict[str, LeaveType] = {
            label.strip().lower(): leave_type
            for label, leave_type in table.items()
            if label and label.strip()
        }

    @classmethod
    def from_config(cls, labels: Mapping[str, str]) -> "LeaveLabelParser":
        """
        Build a parser from a {label: LeaveType name} table.

        Unknown type names are ignored.
        """
        table: Dict[str, LeaveType] = {}
        for label, type_name in labels.items():
            try:
                table[label] = LeaveType[str(type_name).strip().upper()]
            except KeyError:
                continue
        return cls(table)

    def parse(self, text: str) -> LeaveType:
        """Classify a leave annotation."""
        if not text or not text.strip():
            return LeaveType.NONE

        cleaned = text.strip().lower()

        for leave_type in LeaveType:
            if cleaned in (leave_type.name.lower(), leave_type.description.lower()):
                return self._labelled(leave_type)

        for label, leave_type in self._labels.items():
            if label in cleaned:
                return self._labelled(leave_type)

        return LeaveType.NONE

    @staticmethod
    def _labelled(leave_type: LeaveType) -> LeaveType:
        # CUSTOM needs explicit times, the text only says "some time range"
        return LeaveType.NONE if leave_type == LeaveType.CUSTOM else leave_type

    def mentions_custom(self, text: str) -> bool:
        """True if the text names the custom time-range type."""
        if not text or not text.strip():
            return False
        cleaned = text.strip().lower()
        if cleaned in (LeaveType.CUSTOM.name.lower(), LeaveType.CUSTOM.description.lower()):
            return True
        return any(
            label in cleaned
            for label, leave_type in self._labels.items()
            if leave_type == LeaveType.CUSTOM
        )
