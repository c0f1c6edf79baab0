# portrait_studio/services/suggestion_engine.py
import structlog

from portrait_studio.data.aspects import ASPECTS
from portrait_studio.data.texts import get_texts
from portrait_studio.dto.options import AspectOption, OptionSet

logger = structlog.get_logger(__name__)


def _short_label(label: str) -> str:
    """Drops the parenthesised detail of a preset label: "Suit (navy)" -> "Suit"."""
    return label.split("(")[0].strip()


class SuggestionEngine:
    """
    Builds a human-readable summary of the selected options, used to pre-fill
    the additional-request field. The summary is never sent to the endpoint as-is.
    """

    def __init__(self, locale: str = "en") -> None:
        self.locale = locale
        self.texts = get_texts(locale).suggestion

    def build(self, options: OptionSet, character_count: int = 0) -> str:
        sentences: list[str] = []
        if character_count > 0:
            sentences.append(self.texts.characters.format(count=character_count))

        for aspect in ASPECTS:
            if sentence := self._aspect_sentence(options.aspect(aspect.key)):
                sentences.append(sentence)

        logger.info("Suggestion built", locale=self.locale, sentences=len(sentences))
        return " ".join(sentences)

    def _aspect_sentence(self, option: AspectOption) -> str:
        if not option.enabled:
            return ""

        prefix = self.texts.aspect_prefixes[option.key]
        part = ""
        if option.has_custom_files and option.allows_custom_upload:
            part = f"{prefix} {self.texts.as_uploaded}"
        elif preset := option.preset:
            part = f"{prefix} {_short_label(preset.label)}"

        if request := option.custom_request.strip():
            part += f" ({request})"

        part = part.strip()
        return f"{part}." if part else ""
