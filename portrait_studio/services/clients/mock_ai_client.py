# portrait_studio/services/clients/mock_ai_client.py
from __future__ import annotations
import asyncio
import hashlib
import io
from collections.abc import Sequence
from typing import Any

import structlog
from pydantic import BaseModel
from PIL import Image, ImageDraw

from portrait_studio.data.settings import settings
from portrait_studio.dto.generation import EncodedPart

logger = structlog.get_logger(__name__)

_MOCK_SIZE = (768, 1024)


class MockAIClientResponse(BaseModel):
    image_bytes: bytes
    content_type: str = "image/png"
    response_payload: dict[str, Any]


def _color_for(prompt: str) -> tuple[int, int, int]:
    digest = hashlib.sha256(prompt.encode("utf-8")).digest()
    return digest[0], digest[1], digest[2]


def _render_placeholder(prompt: str, transparent: bool) -> bytes:
    if transparent:
        img = Image.new("RGBA", _MOCK_SIZE, (0, 0, 0, 0))
        draw = ImageDraw.Draw(img)
        w, h = _MOCK_SIZE
        draw.ellipse((w // 4, h // 6, 3 * w // 4, 5 * h // 6), fill=(*_color_for(prompt), 255))
    else:
        img = Image.new("RGB", _MOCK_SIZE, _color_for(prompt))
        draw = ImageDraw.Draw(img)
        draw.text((24, 24), prompt[-60:], fill="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


class _MockImagesNamespace:
    def __init__(self, delay_seconds: float) -> None:
        self.delay_seconds = delay_seconds

    async def generate(
        self,
        prompt: str,
        image_parts: Sequence[EncodedPart] = (),
        **kwargs: Any,
    ) -> MockAIClientResponse:
        purpose = kwargs.get("purpose", "generation")
        logger.info("MOCK Images: Simulating image generation...", purpose=purpose)
        await asyncio.sleep(self.delay_seconds)

        image_bytes = _render_placeholder(prompt, transparent=purpose == "background_removal")
        return MockAIClientResponse(
            image_bytes=image_bytes,
            response_payload={"mock_data": True, "image_parts": len(image_parts)},
        )


class MockAIClient:
    def __init__(self, delay_seconds: float | None = None, **_kwargs: Any) -> None:
        if delay_seconds is None:
            delay_seconds = settings.generation.mock_delay_seconds
        self.images = _MockImagesNamespace(delay_seconds)
