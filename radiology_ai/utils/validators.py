"""
Input validation utilities for the radiology analysis view.
"""

import base64
import binascii
import math
from typing import Any, Dict, Mapping

from .exceptions import ValidationException, format_user_error

# Keys the inference API must return
RESPONSE_KEYS = ("prediction_mean", "prediction_variance", "superimposed_images")


def validate_image_payload(image: str) -> str:
    """
    Validate an encoded source image before it is sent for inference.
    
    Accepts a base64 string, optionally prefixed with a ``data:`` URI header.
    
    Returns:
        Cleaned base64 payload without the data URI header.
    
    Raises:
        ValidationException: If the payload is empty or not base64.
    """
    if not isinstance(image, str):
        raise ValidationException("Image payload must be a base64 string")
    
    image = image.strip()
    if image.startswith("data:") and "," in image:
        image = image.split(",", 1)[1]
    
    if not image:
        raise ValidationException(format_user_error("empty_image"))
    
    try:
        base64.b64decode(image, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationException("Image payload is not valid base64", str(e))
    
    return image


def validate_score(value: Any, label: str, field: str) -> float:
    """
    Coerce a mean/variance value to a finite float.

    Raises:
        ValidationException: If the value is not a finite number.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationException(
            f"{field} for '{label}' must be a number, got {type(value).__name__}"
        )
    value = float(value)
    if not math.isfinite(value):
        raise ValidationException(f"{field} for '{label}' must be finite, got {value}")
    return value


def validate_viewport_metric(value: Any, name: str) -> float:
    """Scroll metrics are pixel offsets and sizes; all must be >= 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationException(f"{name} must be a number")
    if not math.isfinite(value) or value < 0:
        raise ValidationException(f"{name} must be a finite value >= 0, got {value}")
    return float(value)


def describe_payload_shape(payload: Any) -> Dict[str, Any]:
    """
    Summarize an inference response for logging.

    Only key names and mapping sizes are reported so encoded images never
    end up in the logs.
    """
    if not isinstance(payload, Mapping):
        return {"type": type(payload).__name__}
    
    shape: Dict[str, Any] = {"keys": sorted(str(k) for k in payload.keys())}
    for key in RESPONSE_KEYS:
        section = payload.get(key)
        if isinstance(section, Mapping):
            shape[key] = {"size": len(section), "labels": sorted(str(k) for k in section)}
        elif key in payload:
            shape[key] = {"type": type(section).__name__}
    return shape
