"""
Live Object Detection: real-time COCO object detection using OpenCV DNN.

Public API:
    - DetectionSession: Loads the model and runs the per-frame loop.
    - DetectorAdapter: Async model lifecycle and single-frame detection.
    - Detection: Data transfer object representing a detected object.
    - suppress / iou: Per-class non-maximum suppression and box overlap.

Usage:
    from object_detection import DetectionSession

    session = DetectionSession()
    await session.open()
    session.start(source, surface)
"""

from object_detection.detection import Detection
from object_detection.detector import DetectorAdapter
from object_detection.geometry import iou
from object_detection.session import DetectionSession, SessionStatus
from object_detection.suppression import suppress

__all__ = [
    "Detection",
    "DetectionSession",
    "DetectorAdapter",
    "SessionStatus",
    "iou",
    "suppress",
]
