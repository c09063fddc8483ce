"""
Configuration management for the live object detection system.

Provides a layered configuration system with the following precedence
(highest to lowest):

    CLI arguments > Environment variables > YAML config file > Defaults

Design constraints:
    - The system MUST run with zero configuration (safe defaults only).
    - Missing or invalid values fail early and loudly.
    - Values are fixed once a session starts; there is no live tuning.

Non-goals:
    - No dynamic reloading.
    - No database-backed or remote configuration.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Project root resolution
# ---------------------------------------------------------------------------
# Resolved relative to this file's location: object_detection/config.py → repo root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent


def get_project_root() -> Path:
    """Return the resolved project root directory."""
    return _PROJECT_ROOT


# ---------------------------------------------------------------------------
# Pipeline constants
# ---------------------------------------------------------------------------

MIN_SCORE = 0.45
MAX_DETECTIONS = 20
NMS_IOU_THRESHOLD = 0.5
FPS_SAMPLE_PERIOD = 1.0
REFERENCE_WIDTH = 500


# ---------------------------------------------------------------------------
# Configuration dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ModelConfig:
    """Model-related configuration.

    Attributes:
        weights_path: Path to the TensorFlow frozen graph (.pb), relative to project root.
        config_path: Path to the matching OpenCV text graph (.pbtxt).
        labels_path: Optional labels file ("<id> <name>" per line). None uses
                     the built-in COCO label map.
        backend: Compute backend, 'cpu' or 'cuda'.
        input_size: Spatial dimensions (width, height) for the DNN input blob.
        mean_values: Per-channel mean subtraction values.
        scale_factor: Pixel value scale factor applied during blob creation.
        swap_rb: Convert BGR frames to RGB during blob creation.
    """

    weights_path: str = "models/frozen_inference_graph.pb"
    config_path: str = "models/ssd_mobilenet_v2_coco_2018_03_29.pbtxt"
    labels_path: Optional[str] = None
    backend: str = "cpu"
    input_size: Tuple[int, int] = (300, 300)
    mean_values: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    scale_factor: float = 1.0
    swap_rb: bool = True


@dataclass(frozen=True)
class DetectionConfig:
    """Detection thresholds.

    The detector is deliberately asked for more, lower-confidence candidates
    than are finally shown; suppression makes the final precision trade.

    Attributes:
        min_score: Minimum score for a raw candidate.
        max_detections: Maximum raw candidates per frame.
        nms_iou_threshold: IoU above which a same-class box is suppressed.
    """

    min_score: float = MIN_SCORE
    max_detections: int = MAX_DETECTIONS
    nms_iou_threshold: float = NMS_IOU_THRESHOLD


@dataclass(frozen=True)
class InputConfig:
    """Video source configuration.

    Attributes:
        source: Webcam device index (as digit string) or video file path.
        resize_width: Optional width to downscale frames before detection.
                      None means no resizing.
        capture_size: Requested (width, height) for webcam capture. The
                      camera may deliver a different native size.
    """

    source: str = "0"
    resize_width: Optional[int] = None
    capture_size: Optional[Tuple[int, int]] = (640, 480)


@dataclass(frozen=True)
class SchedulerConfig:
    """Frame loop timing.

    Attributes:
        fps_sample_period: Seconds between fps samples.
        tick_interval: Delay in seconds before each tick. 0.0 lets the
                       video source's read pace the loop.
    """

    fps_sample_period: float = FPS_SAMPLE_PERIOD
    tick_interval: float = 0.0


@dataclass(frozen=True)
class RenderConfig:
    """Overlay rendering parameters.

    Stroke width and font size scale with surface_width / reference_width
    and never drop below their floors.

    Attributes:
        mirror: Draw frames and boxes horizontally mirrored.
        reference_width: Surface width at which base sizes apply.
        line_width: Base box stroke width.
        min_line_width: Stroke width floor.
        font_size: Base label font size in pixels.
        min_font_size: Font size floor.
        label_alpha: Opacity of the label background.
    """

    mirror: bool = True
    reference_width: int = REFERENCE_WIDTH
    line_width: float = 2.5
    min_line_width: float = 2.0
    font_size: float = 14.0
    min_font_size: float = 12.0
    label_alpha: float = 0.85


@dataclass(frozen=True)
class DisplayConfig:
    """Presentation window parameters.

    Attributes:
        window_name: Title of the OpenCV window.
        show_stats: Draw the objects/types/fps bar over the video.
    """

    window_name: str = "Object Detection"
    show_stats: bool = True


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration.

    Aggregates all sub-configurations into a single, frozen object.
    """

    model: ModelConfig = field(default_factory=ModelConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    input: InputConfig = field(default_factory=InputConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

_VALID_BACKENDS = {"cpu", "cuda"}


def _validate(config: AppConfig) -> None:
    """Validate configuration values. Raises ValueError on invalid state."""

    if config.model.backend not in _VALID_BACKENDS:
        raise ValueError(
            f"Invalid model.backend: '{config.model.backend}'. "
            f"Must be one of {_VALID_BACKENDS}."
        )

    if not (0.0 <= config.detection.min_score <= 1.0):
        raise ValueError(
            f"detection.min_score must be in [0.0, 1.0], "
            f"got {config.detection.min_score}."
        )

    if not (0.0 <= config.detection.nms_iou_threshold <= 1.0):
        raise ValueError(
            f"detection.nms_iou_threshold must be in [0.0, 1.0], "
            f"got {config.detection.nms_iou_threshold}."
        )

    if config.detection.max_detections <= 0:
        raise ValueError(
            f"detection.max_detections must be positive, "
            f"got {config.detection.max_detections}."
        )

    if len(config.model.input_size) != 2:
        raise ValueError(
            f"model.input_size must be a (width, height) tuple, "
            f"got {config.model.input_size}."
        )

    if any(d <= 0 for d in config.model.input_size):
        raise ValueError(
            f"model.input_size dimensions must be positive, "
            f"got {config.model.input_size}."
        )

    if config.model.scale_factor <= 0:
        raise ValueError(
            f"model.scale_factor must be positive, "
            f"got {config.model.scale_factor}."
        )

    if config.input.resize_width is not None and config.input.resize_width <= 0:
        raise ValueError(
            f"input.resize_width must be positive or None, "
            f"got {config.input.resize_width}."
        )

    if config.scheduler.fps_sample_period <= 0:
        raise ValueError(
            f"scheduler.fps_sample_period must be positive, "
            f"got {config.scheduler.fps_sample_period}."
        )

    if config.scheduler.tick_interval < 0:
        raise ValueError(
            f"scheduler.tick_interval must not be negative, "
            f"got {config.scheduler.tick_interval}."
        )

    if config.render.reference_width <= 0:
        raise ValueError(
            f"render.reference_width must be positive, "
            f"got {config.render.reference_width}."
        )

    if not (0.0 <= config.render.label_alpha <= 1.0):
        raise ValueError(
            f"render.label_alpha must be in [0.0, 1.0], "
            f"got {config.render.label_alpha}."
        )


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------

def _parse_tuple(value, expected_len: int, cast_type=float):
    """Convert a list from YAML into a tuple of the expected type and length."""
    if isinstance(value, (list, tuple)):
        if len(value) != expected_len:
            raise ValueError(
                f"Expected {expected_len} values, got {len(value)}: {value}"
            )
        return tuple(cast_type(v) for v in value)
    return value


def _parse_bool(value) -> bool:
    """Accept YAML booleans and environment strings like 'false' or '0'."""
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _build_model_config(raw: dict) -> ModelConfig:
    """Build ModelConfig from a raw YAML dict."""
    kwargs = {}
    if "weights_path" in raw:
        kwargs["weights_path"] = str(raw["weights_path"])
    if "config_path" in raw:
        kwargs["config_path"] = str(raw["config_path"])
    if "labels_path" in raw:
        val = raw["labels_path"]
        kwargs["labels_path"] = str(val) if val is not None else None
    if "backend" in raw:
        kwargs["backend"] = str(raw["backend"]).lower()
    if "input_size" in raw:
        kwargs["input_size"] = _parse_tuple(raw["input_size"], 2, int)
    if "mean_values" in raw:
        kwargs["mean_values"] = _parse_tuple(raw["mean_values"], 3, float)
    if "scale_factor" in raw:
        kwargs["scale_factor"] = float(raw["scale_factor"])
    if "swap_rb" in raw:
        kwargs["swap_rb"] = _parse_bool(raw["swap_rb"])
    return ModelConfig(**kwargs)


def _build_detection_config(raw: dict) -> DetectionConfig:
    """Build DetectionConfig from a raw YAML dict."""
    kwargs = {}
    if "min_score" in raw:
        kwargs["min_score"] = float(raw["min_score"])
    if "max_detections" in raw:
        kwargs["max_detections"] = int(raw["max_detections"])
    if "nms_iou_threshold" in raw:
        kwargs["nms_iou_threshold"] = float(raw["nms_iou_threshold"])
    return DetectionConfig(**kwargs)


def _build_input_config(raw: dict) -> InputConfig:
    """Build InputConfig from a raw YAML dict."""
    kwargs = {}
    if "source" in raw:
        kwargs["source"] = str(raw["source"])
    if "resize_width" in raw:
        val = raw["resize_width"]
        kwargs["resize_width"] = int(val) if val is not None else None
    if "capture_size" in raw:
        val = raw["capture_size"]
        kwargs["capture_size"] = _parse_tuple(val, 2, int) if val is not None else None
    return InputConfig(**kwargs)


def _build_scheduler_config(raw: dict) -> SchedulerConfig:
    """Build SchedulerConfig from a raw YAML dict."""
    kwargs = {}
    if "fps_sample_period" in raw:
        kwargs["fps_sample_period"] = float(raw["fps_sample_period"])
    if "tick_interval" in raw:
        kwargs["tick_interval"] = float(raw["tick_interval"])
    return SchedulerConfig(**kwargs)


def _build_render_config(raw: dict) -> RenderConfig:
    """Build RenderConfig from a raw YAML dict."""
    kwargs = {}
    if "mirror" in raw:
        kwargs["mirror"] = _parse_bool(raw["mirror"])
    if "reference_width" in raw:
        kwargs["reference_width"] = int(raw["reference_width"])
    for key in ("line_width", "min_line_width", "font_size", "min_font_size", "label_alpha"):
        if key in raw:
            kwargs[key] = float(raw[key])
    return RenderConfig(**kwargs)


def _build_display_config(raw: dict) -> DisplayConfig:
    """Build DisplayConfig from a raw YAML dict."""
    kwargs = {}
    if "window_name" in raw:
        kwargs["window_name"] = str(raw["window_name"])
    if "show_stats" in raw:
        kwargs["show_stats"] = _parse_bool(raw["show_stats"])
    return DisplayConfig(**kwargs)


# ---------------------------------------------------------------------------
# Environment variable overrides
# ---------------------------------------------------------------------------

_ENV_PREFIX = "OBJECT_DETECT_"


def _section(raw: dict, name: str) -> dict:
    """Return one config section, treating an empty YAML section as {}."""
    value = raw.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(
            f"Config section '{name}' must be a mapping, got {type(value).__name__}."
        )
    return value


def _apply_env_overrides(raw: dict) -> dict:
    """Apply environment variable overrides to the raw config dict.

    Environment variables follow the pattern:
        OBJECT_DETECT_MODEL_BACKEND=cuda
        OBJECT_DETECT_DETECTION_MIN_SCORE=0.6
    """
    env_map = {
        f"{_ENV_PREFIX}MODEL_BACKEND": ("model", "backend"),
        f"{_ENV_PREFIX}MODEL_WEIGHTS_PATH": ("model", "weights_path"),
        f"{_ENV_PREFIX}MODEL_CONFIG_PATH": ("model", "config_path"),
        f"{_ENV_PREFIX}MODEL_LABELS_PATH": ("model", "labels_path"),
        f"{_ENV_PREFIX}DETECTION_MIN_SCORE": ("detection", "min_score"),
        f"{_ENV_PREFIX}DETECTION_MAX_DETECTIONS": ("detection", "max_detections"),
        f"{_ENV_PREFIX}DETECTION_NMS_IOU_THRESHOLD": ("detection", "nms_iou_threshold"),
        f"{_ENV_PREFIX}INPUT_SOURCE": ("input", "source"),
        f"{_ENV_PREFIX}INPUT_RESIZE_WIDTH": ("input", "resize_width"),
        f"{_ENV_PREFIX}SCHEDULER_TICK_INTERVAL": ("scheduler", "tick_interval"),
        f"{_ENV_PREFIX}RENDER_MIRROR": ("render", "mirror"),
    }

    for env_var, (section, key) in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            section_raw = _section(raw, section)
            section_raw[key] = value
            raw[section] = section_raw
            logger.debug("Config override from env: %s=%s", env_var, value)

    return raw


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------

def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load and validate application configuration.

    Precedence (highest → lowest):
        Environment variables > YAML file > Hard-coded defaults

    Args:
        config_path: Path to a YAML configuration file. If None,
                     the system runs entirely on defaults.

    Returns:
        A validated, frozen AppConfig instance.

    Raises:
        FileNotFoundError: If config_path is provided but does not exist.
        ValueError: If any configuration value is invalid.
        yaml.YAMLError: If the YAML file is malformed.
    """
    raw: dict = {}

    # --- Layer 1: YAML file ---
    if config_path is not None:
        resolved = Path(config_path)
        if not resolved.is_absolute():
            resolved = _PROJECT_ROOT / resolved

        if not resolved.is_file():
            raise FileNotFoundError(
                f"Configuration file not found: {resolved}. "
                f"Provide a valid path or omit to use defaults."
            )

        logger.info("Loading config from: %s", resolved)
        with open(resolved, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Configuration file must contain a mapping: {resolved}")

    # --- Layer 2: Environment variable overrides ---
    raw = _apply_env_overrides(raw)

    # --- Build typed configs ---
    config = AppConfig(
        model=_build_model_config(_section(raw, "model")),
        detection=_build_detection_config(_section(raw, "detection")),
        input=_build_input_config(_section(raw, "input")),
        scheduler=_build_scheduler_config(_section(raw, "scheduler")),
        render=_build_render_config(_section(raw, "render")),
        display=_build_display_config(_section(raw, "display")),
    )

    # --- Validate ---
    _validate(config)

    logger.debug("Configuration loaded: %s", config)
    return config
