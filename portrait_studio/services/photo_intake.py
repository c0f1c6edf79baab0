# portrait_studio/services/photo_intake.py
import io
import mimetypes
from collections.abc import Iterable
from pathlib import Path

import structlog
from PIL import Image, UnidentifiedImageError

from portrait_studio.data.constants import IMAGE_MIME_PREFIX
from portrait_studio.dto.options import ReferenceImage

from .exceptions import MediaEncodingError

logger = structlog.get_logger(__name__)


def guess_mime(data: bytes) -> str:
    """Guesses the MIME type of image data from its header."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError):
        return "application/octet-stream"
    return Image.MIME.get(fmt or "", "application/octet-stream")


def _mime_for_path(path: Path) -> str:
    content_type, _ = mimetypes.guess_type(path.name)
    if content_type:
        return content_type
    try:
        with path.open("rb") as fh:
            return guess_mime(fh.read(4096))
    except OSError:
        return "application/octet-stream"


def image_from_path(path: str | Path) -> ReferenceImage:
    path = Path(path)
    try:
        return ReferenceImage.from_path(path, mime_type=_mime_for_path(path))
    except OSError as e:
        raise MediaEncodingError(path.name, e.strerror or str(e)) from e


def image_from_bytes(data: bytes, name: str, mime_type: str | None = None) -> ReferenceImage:
    if not mime_type:
        mime_type, _ = mimetypes.guess_type(name)
    return ReferenceImage.from_bytes(data, name=name, mime_type=mime_type or guess_mime(data))


def is_image(image: ReferenceImage) -> bool:
    return image.mime_type.startswith(IMAGE_MIME_PREFIX)


def accept_images(
    candidates: Iterable[ReferenceImage | str | Path],
    existing: Iterable[ReferenceImage] = (),
) -> list[ReferenceImage]:
    """
    Filters incoming files to images and drops ones already present.

    Candidates may be ready ReferenceImages (pasted or dropped data) or filesystem
    paths. Files are identified by name and size, so re-adding the same file is a no-op.
    """
    known = {image.identity for image in existing}
    accepted: list[ReferenceImage] = []

    for candidate in candidates:
        image = candidate if isinstance(candidate, ReferenceImage) else image_from_path(candidate)
        if not is_image(image):
            logger.info("Skipping non-image file", name=image.name, mime_type=image.mime_type)
            continue
        if image.identity in known:
            logger.debug("Skipping duplicate image", name=image.name)
            continue
        known.add(image.identity)
        accepted.append(image)

    return accepted
