"""
Box geometry helpers.

All boxes are (x, y, width, height) tuples in pixel coordinates.
"""

from typing import Sequence


def iou(a: Sequence[float], b: Sequence[float]) -> float:
    """Intersection-over-Union of two (x, y, w, h) boxes.

    Returns a value in [0.0, 1.0]. Disjoint boxes give 0.0. When both boxes
    are degenerate (union area is zero) the result is 0.0 instead of a
    division error.
    """
    x1 = max(a[0], b[0])
    y1 = max(a[1], b[1])
    x2 = min(a[0] + a[2], b[0] + b[2])
    y2 = min(a[1] + a[3], b[1] + b[3])

    inter = max(0.0, x2 - x1) * max(0.0, y2 - y1)
    union = a[2] * a[3] + b[2] * b[3] - inter
    if union <= 0:
        return 0.0

    return inter / union
