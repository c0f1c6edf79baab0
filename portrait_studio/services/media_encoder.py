# portrait_studio/services/media_encoder.py
import asyncio
from collections.abc import Sequence

import structlog

from portrait_studio.dto.generation import EncodedPart
from portrait_studio.dto.options import ReferenceImage

from .exceptions import MediaEncodingError

logger = structlog.get_logger(__name__)


async def encode_image(image: ReferenceImage) -> EncodedPart:
    """Converts one reference image into its transport part, bytes untouched."""
    if image.raw_bytes is not None:
        data = image.raw_bytes
    elif image.source_path is not None:
        try:
            data = await asyncio.to_thread(image.source_path.read_bytes)
        except OSError as e:
            raise MediaEncodingError(image.name, str(e)) from e
    else:
        raise MediaEncodingError(image.name, "image has neither data nor a source file")

    if not data:
        raise MediaEncodingError(image.name, "file is empty")

    return EncodedPart(data=data, mime_type=image.mime_type)


async def encode_images(images: Sequence[ReferenceImage]) -> list[EncodedPart]:
    """
    Encodes all images concurrently, preserving input order.

    Fails fast: the first failure is raised and no partial result is returned.
    """
    if not images:
        return []

    parts = await asyncio.gather(*(encode_image(image) for image in images))
    logger.debug(
        "Images encoded",
        count=len(parts),
        total_bytes=sum(len(part.data) for part in parts),
    )
    return list(parts)


def decode_part(part: EncodedPart, name: str) -> ReferenceImage:
    return ReferenceImage.from_bytes(part.data, name=name, mime_type=part.mime_type)
