"""
Postprocessing for the detection pipeline.

Responsibility:
    Parse the raw SSD network output tensor into a DetectionBatch.
    Apply score thresholding, label lookup, coordinate un-normalization,
    boundary clamping, and truncation to the candidate budget.

Non-goals:
    - No suppression of overlapping boxes (see suppression.py).
    - No drawing or model loading.

Hard-coded:
    - SSD output tensor layout: [1, 1, N, 7] where each row is
      [batch_id, class_id, score, x1, y1, x2, y2] with coordinates
      normalized to [0, 1].
"""

from typing import Dict

import numpy as np

from object_detection.detection import Detection, DetectionBatch
from object_detection.labels import label_for


def postprocess(
    network_output: np.ndarray,
    frame_width: int,
    frame_height: int,
    labels: Dict[int, str],
    min_score: float,
    max_detections: int,
) -> DetectionBatch:
    """Parse raw SSD output into at most max_detections Detection objects.

    Args:
        network_output: Raw output from net.forward(), shape (1, 1, N, 7).
        frame_width: Source frame width in pixels.
        frame_height: Source frame height in pixels.
        labels: Class id to name map.
        min_score: Minimum score to accept a candidate (inclusive).
        max_detections: Maximum number of candidates to return.

    Returns:
        Detections with (x, y, w, h) pixel boxes, sorted by score
        (descending). Empty if nothing meets the threshold.
    """
    detections: DetectionBatch = []

    raw = network_output[0, 0]  # Shape: (N, 7)

    for i in range(raw.shape[0]):
        score = float(raw[i, 2])
        if score < min_score:
            continue

        x1 = float(np.clip(raw[i, 3] * frame_width, 0, frame_width))
        y1 = float(np.clip(raw[i, 4] * frame_height, 0, frame_height))
        x2 = float(np.clip(raw[i, 5] * frame_width, 0, frame_width))
        y2 = float(np.clip(raw[i, 6] * frame_height, 0, frame_height))

        # Skip degenerate boxes
        if x2 <= x1 or y2 <= y1:
            continue

        detections.append(Detection(
            label=label_for(int(raw[i, 1]), labels),
            score=score,
            bbox=(x1, y1, x2 - x1, y2 - y1),
        ))

    detections.sort(key=lambda d: d.score, reverse=True)

    return detections[:max_detections]
