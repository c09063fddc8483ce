"""
Preprocessing for the detection pipeline.

Converts a raw BGR frame into the 4D input blob expected by the
TensorFlow SSD network. The model is trained on RGB images, so channels
are swapped by default.
"""

import cv2
import numpy as np

from object_detection.config import ModelConfig


def preprocess(frame: np.ndarray, config: ModelConfig) -> np.ndarray:
    """Convert a raw BGR frame into a DNN input blob.

    Args:
        frame: Input image as a BGR numpy array (H, W, 3).
        config: ModelConfig providing input_size, scale_factor, mean_values
                and swap_rb.

    Returns:
        A float32 array of shape (1, 3, H, W) ready for net.setInput().

    Raises:
        ValueError: If the frame is empty.
    """
    if frame is None or frame.size == 0:
        raise ValueError(
            "Cannot preprocess an empty frame. "
            "Ensure the video source is providing valid frames."
        )

    return cv2.dnn.blobFromImage(
        image=frame,
        scalefactor=config.scale_factor,
        size=config.input_size,
        mean=config.mean_values,
        swapRB=config.swap_rb,
        crop=False,
    )
