# portrait_studio/data/texts/en.py
from portrait_studio.data.constants import AspectKey

from .dto import LocaleTexts, MessageTexts, SuggestionTexts

texts = LocaleTexts(
    suggestion=SuggestionTexts(
        characters="A scene with {count} character(s).",
        aspect_prefixes={
            AspectKey.CLOTHING: "Wearing",
            AspectKey.BACKGROUND: "The setting is",
            AspectKey.VEHICLE: "With a",
            AspectKey.CELEBRITY: "Together with a",
            AspectKey.WEATHER: "The weather is",
        },
        as_uploaded="as in the uploaded image(s)",
    ),
    messages=MessageTexts(
        progress="Generating image {current} of {total}...",
        no_character_images="Please upload at least one character image.",
        busy="A generation is already in progress.",
        rate_limited="API quota exhausted. Please wait {seconds}s before trying again.",
        unexpected_error="An unexpected error occurred while generating images.",
        background_removal_failed="Could not remove the background. Please try again.",
    ),
)
