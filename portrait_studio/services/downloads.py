# portrait_studio/services/downloads.py
import asyncio
import io
from pathlib import Path

import structlog
from PIL import Image

from portrait_studio.data.constants import DOWNLOAD_PREFIX
from portrait_studio.dto.generation import GeneratedImage

logger = structlog.get_logger(__name__)


def download_filename(index: int, background_removed: bool = False) -> str:
    """portrait_studio_image_1.png, or portrait_studio_image_1_no_bg.png after background removal."""
    suffix = "_no_bg" if background_removed else ""
    return f"{DOWNLOAD_PREFIX}_{index + 1}{suffix}.png"


def export_png(image: GeneratedImage) -> bytes:
    """Returns the image as PNG bytes, converting only when it is not PNG already."""
    if image.content_type == "image/png":
        return image.image_bytes
    with Image.open(io.BytesIO(image.image_bytes)) as img:
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
    logger.debug("Converted image to PNG", source_type=image.content_type)
    return buffer.getvalue()


async def save_image(image: GeneratedImage, index: int, directory: str | Path) -> Path:
    directory = Path(directory)
    target = directory / download_filename(index, image.background_removed)

    def _write() -> None:
        directory.mkdir(parents=True, exist_ok=True)
        target.write_bytes(export_png(image))

    await asyncio.to_thread(_write)
    logger.info("Image saved", path=str(target))
    return target
