"""
Model loading for the object detection system.

Responsibility:
    Load the COCO SSD network from disk, configure the compute backend,
    and return a ready-to-infer cv2.dnn.Net object.

Non-goals:
    - No preprocessing, inference, or frame-level logic.
    - No automatic model downloading.
    - No retries or fallback to alternative models.

Failure behavior:
    - Missing model files raise FileNotFoundError with the exact
      missing path and expected location.
    - Incompatible backend raises RuntimeError.
"""

import logging
from pathlib import Path

import cv2

from object_detection.config import ModelConfig, get_project_root

logger = logging.getLogger(__name__)


def _resolve(path_str: str) -> Path:
    path = Path(path_str)
    if not path.is_absolute():
        path = get_project_root() / path
    return path


def load_model(config: ModelConfig) -> cv2.dnn.Net:
    """Load and configure the SSD object detection model.

    Args:
        config: ModelConfig containing file paths and backend preference.

    Returns:
        A configured cv2.dnn.Net ready for inference.

    Raises:
        FileNotFoundError: If the frozen graph or text graph does not exist.
        RuntimeError: If the requested backend is unavailable.
    """
    weights = _resolve(config.weights_path)
    graph = _resolve(config.config_path)

    if not weights.is_file():
        raise FileNotFoundError(
            f"Model weights not found.\n"
            f"  Expected: {weights}\n"
            f"  Download the frozen inference graph and place it at the path above,\n"
            f"  or update 'model.weights_path' in your config."
        )

    if not graph.is_file():
        raise FileNotFoundError(
            f"Model graph config not found.\n"
            f"  Expected: {graph}\n"
            f"  Provide the .pbtxt file or update 'model.config_path' in your config."
        )

    logger.info("Loading model: weights=%s, config=%s", weights, graph)
    net = cv2.dnn.readNetFromTensorflow(str(weights), str(graph))

    if config.backend == "cuda":
        logger.info("Setting CUDA backend and target.")
        try:
            net.setPreferableBackend(cv2.dnn.DNN_BACKEND_CUDA)
            net.setPreferableTarget(cv2.dnn.DNN_TARGET_CUDA)
        except cv2.error as e:
            raise RuntimeError(
                f"Failed to set CUDA backend. Ensure OpenCV was built with "
                f"CUDA support.\n"
                f"  OpenCV error: {e}"
            ) from e
    else:
        logger.info("Using CPU backend.")
        net.setPreferableBackend(cv2.dnn.DNN_BACKEND_OPENCV)
        net.setPreferableTarget(cv2.dnn.DNN_TARGET_CPU)

    logger.info("Model loaded successfully.")
    return net
