# File: portrait_studio/services/image_generation_service.py
import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import structlog

from portrait_studio.dto.generation import (
    ComposedPrompt,
    EncodedPart,
    GeneratedImage,
    GenerationRequest,
    GenerationResult,
)

from .exceptions import GenerationError, NoImageReturnedError

logger = structlog.get_logger(__name__)

ProgressCallback = Callable[[int, int], Awaitable[None] | None]


async def generate_single_image(
    prompt: str,
    image_parts: Sequence[EncodedPart],
    ai_client: Any,
    **client_kwargs: Any,
) -> GeneratedImage:
    """Runs one endpoint call and normalizes the client response."""
    start_time = time.monotonic()
    client_response = await ai_client.images.generate(
        prompt=prompt, image_parts=list(image_parts), **client_kwargs
    )
    generation_time_ms = int((time.monotonic() - start_time) * 1000)

    image_bytes = getattr(client_response, "image_bytes", None)
    if not image_bytes:
        raise NoImageReturnedError("The AI did not return an image for one of the requests.")

    return GeneratedImage(
        image_bytes=image_bytes,
        content_type=getattr(client_response, "content_type", None) or "image/png",
        generation_time_ms=generation_time_ms,
    )


def build_requests(
    prompt: ComposedPrompt,
    character_parts: Sequence[EncodedPart],
    custom_parts: Sequence[EncodedPart],
) -> list[GenerationRequest]:
    return [
        GenerationRequest(
            base_prompt=prompt.base,
            angle_variant=angle,
            prompt=variant,
            character_parts=list(character_parts),
            custom_parts=list(custom_parts),
        )
        for angle, variant in zip(prompt.angles, prompt.variants, strict=True)
    ]


async def notify_progress(callback: ProgressCallback | None, completed: int, total: int) -> None:
    if callback is None:
        return
    result = callback(completed, total)
    if inspect.isawaitable(result):
        await result


async def generate_variants(
    prompt: ComposedPrompt,
    character_parts: Sequence[EncodedPart],
    custom_parts: Sequence[EncodedPart],
    ai_client: Any,
    progress_callback: ProgressCallback | None = None,
) -> GenerationResult:
    """
    Generates one image per angle variant, all calls running concurrently.

    The batch is all-or-nothing: the first failing call cancels the calls still
    in flight and the whole batch fails. Progress is reported once per finished
    call in completion order; the result keeps the submission order.
    """
    requests = build_requests(prompt, character_parts, custom_parts)
    total = len(requests)
    completed = 0

    log = logger.bind(
        variants=total,
        character_parts=len(character_parts),
        custom_parts=len(custom_parts),
    )

    async def run(index: int, request: GenerationRequest) -> GeneratedImage:
        nonlocal completed
        image = await generate_single_image(request.prompt, request.image_parts, ai_client)
        image.angle = request.angle_variant
        completed += 1
        log.info(
            "Variant generated",
            index=index,
            angle=request.angle_variant,
            generation_time_ms=image.generation_time_ms,
            progress=f"{completed}/{total}",
        )
        await notify_progress(progress_callback, completed, total)
        return image

    log.info("Sending batch to Image Generation API")
    start_time = time.monotonic()
    tasks = [asyncio.create_task(run(i, r)) for i, r in enumerate(requests)]

    try:
        images = await asyncio.gather(*tasks)
    except Exception as e:
        for task in tasks:
            task.cancel()
        # Drain the cancelled calls so none of their failures go unobserved
        await asyncio.gather(*tasks, return_exceptions=True)
        log.exception("An error occurred during image generation")
        if isinstance(e, GenerationError):
            raise
        raise GenerationError(str(e) or type(e).__name__) from e

    log.info(
        "Image generation successful",
        batch_time_ms=int((time.monotonic() - start_time) * 1000),
    )
    return GenerationResult(images=list(images))
