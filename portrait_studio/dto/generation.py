# portrait_studio/dto/generation.py
from pydantic import BaseModel, Field

from portrait_studio.data.constants import DEFAULT_IMAGE_MIME


class EncodedPart(BaseModel):
    """Transport representation of one image: raw payload plus declared MIME type."""
    data: bytes
    mime_type: str

    def redacted(self) -> dict[str, str]:
        """Small logging payload without the image bytes."""
        return {"mime_type": self.mime_type, "data": f"<redacted {len(self.data)} bytes>"}


class ComposedPrompt(BaseModel):
    base: str
    variants: list[str]
    angles: list[str]


class GenerationRequest(BaseModel):
    """One variant call of a batch. Built fresh per submission."""
    base_prompt: str
    angle_variant: str
    prompt: str
    character_parts: list[EncodedPart]
    custom_parts: list[EncodedPart] = Field(default_factory=list)

    @property
    def image_parts(self) -> list[EncodedPart]:
        return [*self.character_parts, *self.custom_parts]


class GeneratedImage(BaseModel):
    image_bytes: bytes
    content_type: str = DEFAULT_IMAGE_MIME
    angle: str | None = None
    generation_time_ms: int | None = None
    background_removed: bool = False

    def as_part(self) -> EncodedPart:
        return EncodedPart(data=self.image_bytes, mime_type=self.content_type)


class GenerationResult(BaseModel):
    """Images of one batch; index i holds the result of angle i."""
    images: list[GeneratedImage]

    def __len__(self) -> int:
        return len(self.images)

    def __getitem__(self, index: int) -> GeneratedImage:
        return self.images[index]
