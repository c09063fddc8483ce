"""
Tests for the configuration module.
"""

import pytest

from object_detection.config import (
    AppConfig,
    DetectionConfig,
    ModelConfig,
    RenderConfig,
    SchedulerConfig,
    _validate,
    load_config,
)


def test_load_defaults():
    """Test loading configuration without any file."""
    config = load_config(None)
    assert isinstance(config, AppConfig)
    assert config.model.backend == "cpu"
    assert config.detection.min_score == 0.45
    assert config.detection.max_detections == 20
    assert config.detection.nms_iou_threshold == 0.5
    assert config.scheduler.fps_sample_period == 1.0
    assert config.render.reference_width == 500
    assert config.render.mirror is True


def test_validation_failure():
    """Test fail-fast validation."""
    bad_config = AppConfig(detection=DetectionConfig(min_score=1.5))
    with pytest.raises(ValueError, match="min_score"):
        _validate(bad_config)

    bad_config = AppConfig(detection=DetectionConfig(nms_iou_threshold=-0.1))
    with pytest.raises(ValueError, match="nms_iou_threshold"):
        _validate(bad_config)

    bad_config = AppConfig(detection=DetectionConfig(max_detections=0))
    with pytest.raises(ValueError, match="max_detections"):
        _validate(bad_config)

    bad_config = AppConfig(model=ModelConfig(backend="invalid"))
    with pytest.raises(ValueError, match="backend"):
        _validate(bad_config)

    bad_config = AppConfig(scheduler=SchedulerConfig(fps_sample_period=0))
    with pytest.raises(ValueError, match="fps_sample_period"):
        _validate(bad_config)

    bad_config = AppConfig(render=RenderConfig(reference_width=0))
    with pytest.raises(ValueError, match="reference_width"):
        _validate(bad_config)


def test_env_override(monkeypatch):
    """Test environment variable overrides."""
    monkeypatch.setenv("OBJECT_DETECT_DETECTION_MIN_SCORE", "0.6")
    monkeypatch.setenv("OBJECT_DETECT_MODEL_BACKEND", "cuda")
    monkeypatch.setenv("OBJECT_DETECT_RENDER_MIRROR", "false")

    config = load_config(None)

    assert config.detection.min_score == 0.6
    assert config.model.backend == "cuda"
    assert config.render.mirror is False


def test_yaml_file(tmp_path):
    """Test loading values from a YAML file."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "detection:\n"
        "  nms_iou_threshold: 0.3\n"
        "input:\n"
        "  source: clip.mp4\n"
        "  capture_size: [1280, 720]\n"
        "scheduler:\n"
        "  tick_interval: 0.016\n",
        encoding="utf-8",
    )

    config = load_config(str(path))

    assert config.detection.nms_iou_threshold == 0.3
    assert config.detection.min_score == 0.45
    assert config.input.source == "clip.mp4"
    assert config.input.capture_size == (1280, 720)
    assert config.scheduler.tick_interval == pytest.approx(0.016)


def test_missing_file():
    """A config path that does not exist fails loudly."""
    with pytest.raises(FileNotFoundError):
        load_config("does/not/exist.yaml")


def test_empty_yaml_section_uses_defaults(tmp_path, monkeypatch):
    """A section key with nothing under it falls back to defaults."""
    monkeypatch.setenv("OBJECT_DETECT_MODEL_BACKEND", "cuda")
    path = tmp_path / "config.yaml"
    path.write_text("model:\ndetection:\n  min_score: 0.6\n", encoding="utf-8")

    config = load_config(str(path))

    assert config.model.backend == "cuda"
    assert config.model.input_size == (300, 300)
    assert config.detection.min_score == 0.6


def test_non_mapping_yaml_section(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("render: 5\n", encoding="utf-8")

    with pytest.raises(ValueError, match="render"):
        load_config(str(path))
