"""
Shared fixtures for portrait studio tests.
"""

import asyncio
import io
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any

import pytest
from PIL import Image

from portrait_studio.data.constants import ANGLE_VARIANTS
from portrait_studio.dto.options import ReferenceImage
from portrait_studio.services.request_history import MemoryHistoryStorage, RequestHistory


def make_png(color: str = "red", size: tuple[int, int] = (8, 8)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_jpeg(color: str = "blue", size: tuple[int, int] = (8, 8)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="JPEG")
    return buffer.getvalue()


def angle_of(prompt: str) -> str | None:
    for angle in ANGLE_VARIANTS:
        if prompt.endswith(f"{angle}."):
            return angle
    return None


@dataclass
class FakeImagesNamespace:
    """Stand-in for `client.images`; behaviour is keyed by the angle named in the prompt."""
    delays: dict[str, float] = field(default_factory=dict)
    failures: dict[str, BaseException] = field(default_factory=dict)
    calls: list[dict[str, Any]] = field(default_factory=list)
    cancelled: list[str] = field(default_factory=list)
    background_removal_error: BaseException | None = None

    async def generate(self, prompt: str, image_parts=(), **kwargs: Any) -> SimpleNamespace:
        angle = angle_of(prompt)
        self.calls.append({"prompt": prompt, "image_parts": list(image_parts), "angle": angle, **kwargs})

        if kwargs.get("purpose") == "background_removal":
            if self.background_removal_error is not None:
                raise self.background_removal_error
            return SimpleNamespace(image_bytes=b"no-bg", content_type="image/png")

        try:
            await asyncio.sleep(self.delays.get(angle, 0))
        except asyncio.CancelledError:
            self.cancelled.append(angle)
            raise

        if angle in self.failures:
            raise self.failures[angle]
        return SimpleNamespace(image_bytes=angle.encode(), content_type="image/png")


@dataclass
class FakeAIClient:
    images: FakeImagesNamespace = field(default_factory=FakeImagesNamespace)


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def fake_client() -> FakeAIClient:
    return FakeAIClient()


@pytest.fixture
def character_image(png_bytes) -> ReferenceImage:
    return ReferenceImage.from_bytes(png_bytes, name="me.png", mime_type="image/png")


@pytest.fixture
def memory_history() -> RequestHistory:
    return RequestHistory(MemoryHistoryStorage(), max_entries=20)
