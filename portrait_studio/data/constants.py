# portrait_studio/data/constants.py
from enum import Enum


class AspectKey(str, Enum):
    """Compositing dimensions a user can configure."""
    CLOTHING = "clothing"
    BACKGROUND = "background"
    VEHICLE = "vehicle"
    CELEBRITY = "celebrity"
    WEATHER = "weather"


# Value an aspect takes while custom reference images are attached
CUSTOM_MARKER = "custom"

ANGLE_VARIANTS: tuple[str, ...] = (
    "standard eye-level shot",
    "dynamic low-angle shot",
    "cinematic wide-angle shot",
    "intimate close-up shot",
)

IMAGE_MIME_PREFIX = "image/"
DEFAULT_IMAGE_MIME = "image/png"

DOWNLOAD_PREFIX = "portrait_studio_image"
