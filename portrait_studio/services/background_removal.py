# portrait_studio/services/background_removal.py
from typing import Any

import structlog

from portrait_studio.dto.generation import GeneratedImage

from .exceptions import BackgroundRemovalError
from .image_generation_service import generate_single_image
from .prompting.templates import BACKGROUND_REMOVAL_PROMPT

logger = structlog.get_logger(__name__)


async def remove_background(image: GeneratedImage, ai_client: Any) -> GeneratedImage:
    """Single call with the fixed removal instruction. No retry on failure."""
    log = logger.bind(angle=image.angle, input_bytes=len(image.image_bytes))
    log.info("Requesting background removal")
    try:
        result = await generate_single_image(
            BACKGROUND_REMOVAL_PROMPT,
            [image.as_part()],
            ai_client,
            purpose="background_removal",
        )
    except Exception as e:
        log.exception("Background removal failed")
        raise BackgroundRemovalError(str(e) or "The AI did not return an image after removing the background.") from e

    result.angle = image.angle
    result.background_removed = True
    log.info("Background removed", generation_time_ms=result.generation_time_ms)
    return result
