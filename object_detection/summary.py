"""
Per-class summary of a detection batch, for statistics panels.
"""

from dataclasses import dataclass
from typing import Dict, List

from object_detection.detection import DetectionBatch


@dataclass(frozen=True)
class ClassSummary:
    label: str
    count: int
    max_score: float


def summarize(detections: DetectionBatch) -> List[ClassSummary]:
    """Group detections by label, most confident class first."""
    counts: Dict[str, int] = {}
    best: Dict[str, float] = {}
    for det in detections:
        counts[det.label] = counts.get(det.label, 0) + 1
        best[det.label] = max(best.get(det.label, 0.0), det.score)

    summaries = [ClassSummary(label, counts[label], best[label]) for label in counts]
    summaries.sort(key=lambda s: s.max_score, reverse=True)
    return summaries
