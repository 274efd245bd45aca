from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any


class AlignmentCategory(Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    WARNING = "warning"
    POOR = "poor"


LABELS = {
    AlignmentCategory.EXCELLENT: "> 90%",
    AlignmentCategory.GOOD: "90% a 70%",
    AlignmentCategory.WARNING: "70% a 50%",
    AlignmentCategory.POOR: "< 50%",
}

STATUS_TEXTS = {
    AlignmentCategory.EXCELLENT: "Excellent alignment",
    AlignmentCategory.GOOD: "Good alignment",
    AlignmentCategory.WARNING: "Attention needed",
    AlignmentCategory.POOR: "Urgent review",
}


@dataclass(frozen=True)
class AlignmentPolicy:
    raw: Dict[str, Any]

    @property
    def excellent_above(self) -> float:
        return float(self.raw.get("alignment", {}).get("excellent_above", 90.0))

    @property
    def good_min(self) -> float:
        return float(self.raw.get("alignment", {}).get("good_min", 70.0))

    @property
    def warning_min(self) -> float:
        return float(self.raw.get("alignment", {}).get("warning_min", 50.0))


def categorize(score: float, pol: AlignmentPolicy | None = None) -> AlignmentCategory:
    pol = pol or AlignmentPolicy({})
    # strictly above for excellent, inclusive lower bounds below
    if score > pol.excellent_above:
        return AlignmentCategory.EXCELLENT
    if score >= pol.good_min:
        return AlignmentCategory.GOOD
    if score >= pol.warning_min:
        return AlignmentCategory.WARNING
    return AlignmentCategory.POOR


def status_text(score: float, pol: AlignmentPolicy | None = None) -> str:
    return STATUS_TEXTS[categorize(score, pol)]


def format_alignment_percentage(score: float) -> str:
    return f"{score:.1f}%"
