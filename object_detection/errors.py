"""
Error taxonomy for the live detection pipeline.

Only session-fatal conditions (model load, video source) ever reach the
presentation layer. Per-frame faults are raised as FrameDetectionError and
absorbed by the frame scheduler.
"""


class DetectionSystemError(Exception):
    """Base error for known pipeline failures."""


class ModelLoadError(DetectionSystemError):
    """Raised when the detection model cannot be loaded. Fatal for the session."""

    user_message = "Failed to load detection model. Please restart."


class FrameDetectionError(DetectionSystemError):
    """Raised when inference on a single frame fails. The frame is skipped."""


class SourceUnavailableError(DetectionSystemError):
    """Raised when the camera or video file cannot be opened."""

    user_message = "Camera unavailable. Check the device index and permissions."
