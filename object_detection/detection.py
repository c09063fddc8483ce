"""
Detection data transfer object.

This module defines the Detection dataclass, the single value type that
flows through the pipeline: produced by the detector adapter, filtered by
the suppression engine, and drawn by the renderer. A new batch is produced
every frame; detections carry no identity across frames.

Non-goals:
    - No rendering logic.
    - No tracking IDs.
"""

from dataclasses import dataclass
from typing import List, Tuple

BBox = Tuple[float, float, float, float]


@dataclass(frozen=True, slots=True)
class Detection:
    """A single detected object.

    Attributes:
        label: Class name (e.g. "person").
        score: Confidence score in [0.0, 1.0].
        bbox: Box as (x, y, width, height) in source-frame pixels,
              with (x, y) the top-left corner.
    """

    label: str
    score: float
    bbox: BBox

    def to_dict(self) -> dict:
        """Return a plain dict suitable for JSON serialization."""
        return {
            "label": self.label,
            "score": round(self.score, 4),
            "bbox": [round(v, 2) for v in self.bbox],
        }

    @property
    def x(self) -> float:
        return self.bbox[0]

    @property
    def y(self) -> float:
        return self.bbox[1]

    @property
    def width(self) -> float:
        """Bounding box width in pixels."""
        return self.bbox[2]

    @property
    def height(self) -> float:
        """Bounding box height in pixels."""
        return self.bbox[3]

    @property
    def area(self) -> float:
        """Bounding box area in pixels."""
        return self.width * self.height


# One detector invocation's output, before or after suppression.
DetectionBatch = List[Detection]
