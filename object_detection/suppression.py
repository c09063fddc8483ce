"""
Per-class Non-Maximum Suppression.

Responsibility:
    Remove lower-scoring, highly-overlapping duplicate detections of the
    same class from one detector batch. Boxes of different classes never
    suppress each other.

Non-goals:
    - No score thresholding (the detector adapter does that).
    - No cross-frame state.
"""

from typing import Dict, List

from object_detection.detection import Detection, DetectionBatch
from object_detection.geometry import iou


def suppress(detections: DetectionBatch, iou_threshold: float) -> DetectionBatch:
    """Apply greedy NMS independently within each class label.

    Args:
        detections: Raw detections from a single frame.
        iou_threshold: Overlap above which the lower-scoring box of a pair
                       is dropped. Higher values allow more overlap.

    Returns:
        The kept detections, grouped by class in first-seen order and
        sorted by descending score within each group. Callers must not
        rely on the order across classes.

    Raises:
        ValueError: If iou_threshold is outside [0.0, 1.0].
    """
    if not (0.0 <= iou_threshold <= 1.0):
        raise ValueError(
            f"iou_threshold must be in [0.0, 1.0], got {iou_threshold}."
        )

    by_label: Dict[str, List[Detection]] = {}
    for det in detections:
        by_label.setdefault(det.label, []).append(det)

    kept: DetectionBatch = []
    for group in by_label.values():
        # sorted() is stable: equal scores keep input order
        ranked = sorted(group, key=lambda d: d.score, reverse=True)
        suppressed = [False] * len(ranked)

        for i, anchor in enumerate(ranked):
            if suppressed[i]:
                continue
            kept.append(anchor)
            for j in range(i + 1, len(ranked)):
                if not suppressed[j] and iou(anchor.bbox, ranked[j].bbox) > iou_threshold:
                    suppressed[j] = True

    return kept
