# portrait_studio/services/prompting/composer.py
from collections.abc import Sequence

import structlog

from portrait_studio.data.aspects import ASPECTS
from portrait_studio.data.constants import ANGLE_VARIANTS
from portrait_studio.dto.generation import ComposedPrompt
from portrait_studio.dto.options import AspectOption, OptionSet, ReferenceImage

from . import templates

logger = structlog.get_logger(__name__)


def _aspect_clauses(option: AspectOption, name: str, description: str) -> str:
    if not option.enabled:
        return ""

    text = ""
    if option.has_custom_files and option.allows_custom_upload:
        text += templates.CUSTOM_REFERENCE_CLAUSE.format(name=name)
    elif preset := option.preset:
        text += templates.PRESET_CLAUSE.format(description=description, label=preset.label)

    if request := option.custom_request.strip():
        text += templates.ASPECT_REQUEST_CLAUSE.format(name=name, request=request)
    return text


def compose_base_prompt(options: OptionSet) -> str:
    """
    Builds the shared instruction for every angle variant.

    Clause order is fixed: identity preservation, cosmetic toggles, one block per
    enabled aspect in table order, the free-text request, the photorealism closing.
    """
    prompt = templates.IDENTITY_PRESERVATION

    if options.adjust_skin_tone:
        prompt += templates.SKIN_TONE_CLAUSE
    if options.apply_makeup:
        prompt += templates.MAKEUP_CLAUSE

    for aspect in ASPECTS:
        prompt += _aspect_clauses(
            options.aspect(aspect.key), aspect.name, aspect.description_template
        )

    if request := options.additional_request.strip():
        prompt += templates.ADDITIONAL_REQUEST_CLAUSE.format(request=request)

    return prompt + templates.CLOSING_CLAUSE


def compose_variants(base_prompt: str, angles: Sequence[str] = ANGLE_VARIANTS) -> list[str]:
    return [base_prompt + templates.ANGLE_CLAUSE.format(angle=angle) for angle in angles]


def compose_prompt(options: OptionSet) -> ComposedPrompt:
    base = compose_base_prompt(options)
    variants = compose_variants(base)
    logger.debug("Prompt composed", base_length=len(base), variants=len(variants))
    return ComposedPrompt(base=base, variants=variants, angles=list(ANGLE_VARIANTS))


def collect_custom_images(options: OptionSet) -> list[ReferenceImage]:
    """Reference images of enabled aspects, in aspect table order."""
    images: list[ReferenceImage] = []
    for aspect in ASPECTS:
        option = options.aspect(aspect.key)
        if option.enabled and aspect.allows_custom_upload:
            images.extend(option.custom_files)
    return images
