"""
Class label maps for the COCO-trained detector.

The TensorFlow SSD models number classes with the original 90-id COCO
scheme; only 80 ids are populated, the rest are gaps.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from object_detection.config import get_project_root

logger = logging.getLogger(__name__)

COCO_LABELS: Dict[int, str] = {
    1: "person", 2: "bicycle", 3: "car", 4: "motorcycle", 5: "airplane",
    6: "bus", 7: "train", 8: "truck", 9: "boat", 10: "traffic light",
    11: "fire hydrant", 13: "stop sign", 14: "parking meter", 15: "bench",
    16: "bird", 17: "cat", 18: "dog", 19: "horse", 20: "sheep", 21: "cow",
    22: "elephant", 23: "bear", 24: "zebra", 25: "giraffe", 27: "backpack",
    28: "umbrella", 31: "handbag", 32: "tie", 33: "suitcase", 34: "frisbee",
    35: "skis", 36: "snowboard", 37: "sports ball", 38: "kite",
    39: "baseball bat", 40: "baseball glove", 41: "skateboard",
    42: "surfboard", 43: "tennis racket", 44: "bottle", 46: "wine glass",
    47: "cup", 48: "fork", 49: "knife", 50: "spoon", 51: "bowl",
    52: "banana", 53: "apple", 54: "sandwich", 55: "orange", 56: "broccoli",
    57: "carrot", 58: "hot dog", 59: "pizza", 60: "donut", 61: "cake",
    62: "chair", 63: "couch", 64: "potted plant", 65: "bed",
    67: "dining table", 70: "toilet", 72: "tv", 73: "laptop", 74: "mouse",
    75: "remote", 76: "keyboard", 77: "cell phone", 78: "microwave",
    79: "oven", 80: "toaster", 81: "sink", 82: "refrigerator", 84: "book",
    85: "clock", 86: "vase", 87: "scissors", 88: "teddy bear",
    89: "hair drier", 90: "toothbrush",
}


def label_for(class_id: int, labels: Dict[int, str]) -> str:
    """Return the class name for an id, or 'class_<id>' when unknown."""
    return labels.get(class_id, f"class_{class_id}")


def load_labels(labels_path: Optional[str] = None) -> Dict[int, str]:
    """Load a label map.

    Args:
        labels_path: Path to a text file with one "<id> <name>" pair per
                     line (names may contain spaces; blank lines and lines
                     starting with '#' are ignored). None returns the
                     built-in COCO map.

    Raises:
        FileNotFoundError: If labels_path does not exist.
        ValueError: If a line does not start with an integer id.
    """
    if labels_path is None:
        return dict(COCO_LABELS)

    path = Path(labels_path)
    if not path.is_absolute():
        path = get_project_root() / path

    if not path.is_file():
        raise FileNotFoundError(
            f"Labels file not found.\n"
            f"  Expected: {path}\n"
            f"  Provide the file or unset 'model.labels_path' to use COCO labels."
        )

    labels: Dict[int, str] = {}
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            id_part, _, name = line.partition(" ")
            try:
                class_id = int(id_part)
            except ValueError as e:
                raise ValueError(
                    f"Invalid labels file line {line_no}: '{line}'. "
                    f"Expected '<id> <name>'."
                ) from e
            labels[class_id] = name.strip() or f"class_{class_id}"

    logger.info("Loaded %d labels from %s", len(labels), path)
    return labels
