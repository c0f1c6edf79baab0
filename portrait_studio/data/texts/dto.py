# portrait_studio/data/texts/dto.py
from pydantic import BaseModel

from portrait_studio.data.constants import AspectKey


class SuggestionTexts(BaseModel):
    """Templates used to pre-fill the additional-request field."""
    characters: str  # "{count}" is replaced by the number of uploaded people
    aspect_prefixes: dict[AspectKey, str]
    as_uploaded: str


class MessageTexts(BaseModel):
    """User-facing status and error messages."""
    progress: str
    no_character_images: str
    busy: str
    rate_limited: str
    unexpected_error: str
    background_removal_failed: str


class LocaleTexts(BaseModel):
    """A collection of all texts for a specific locale."""
    suggestion: SuggestionTexts
    messages: MessageTexts
