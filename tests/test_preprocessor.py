"""
Tests for the preprocessing module.
"""

import numpy as np
import pytest

from object_detection.config import ModelConfig
from object_detection.preprocessor import preprocess


def test_preprocess_valid_input():
    """Test standard preprocessing on a valid frame."""
    config = ModelConfig(input_size=(300, 300))

    frame = np.zeros((480, 640, 3), dtype=np.uint8)
    frame[:, :, 0] = 255  # Blue in BGR

    blob = preprocess(frame, config)

    assert isinstance(blob, np.ndarray)
    assert blob.shape == (1, 3, 300, 300)
    assert blob.dtype == np.float32


def test_preprocess_swaps_channels():
    """BGR input is converted to RGB for the TensorFlow model."""
    config = ModelConfig(input_size=(10, 10), swap_rb=True)
    frame = np.zeros((20, 20, 3), dtype=np.uint8)
    frame[:, :, 0] = 255  # Blue in BGR

    blob = preprocess(frame, config)

    # Blue ends up in the last channel after the swap
    assert blob[0, 2].min() == pytest.approx(255.0)
    assert blob[0, 0].max() == pytest.approx(0.0)


def test_preprocess_empty_frame():
    """Test that preprocessing rejects empty frames."""
    with pytest.raises(ValueError):
        preprocess(np.array([]), ModelConfig())


def test_preprocess_none_frame():
    """Test that preprocessing rejects None."""
    with pytest.raises(ValueError):
        preprocess(None, ModelConfig())
