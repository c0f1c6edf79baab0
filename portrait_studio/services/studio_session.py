# portrait_studio/services/studio_session.py
import asyncio
import uuid
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog

from portrait_studio.data.settings import settings
from portrait_studio.data.texts import get_texts
from portrait_studio.dto.generation import GeneratedImage, GenerationResult
from portrait_studio.dto.options import OptionSet, ReferenceImage

from . import downloads, photo_intake
from .background_removal import remove_background
from .cooldown import CooldownController
from .exceptions import (
    BackgroundRemovalError,
    CooldownActiveError,
    RateLimitError,
    ValidationError,
)
from .image_generation_service import ProgressCallback, generate_variants, notify_progress
from .media_encoder import encode_images
from .prompting.composer import collect_custom_images, compose_prompt
from .request_history import RequestHistory
from .suggestion_engine import SuggestionEngine

logger = structlog.get_logger(__name__)


class StudioSession:
    """
    Owns the mutable state of one user session and runs submissions.

    Busy and progress indicators are reset on every exit path of `submit`,
    whether it succeeds, fails or is rejected by validation.
    """

    def __init__(
        self,
        ai_client: Any,
        history: RequestHistory,
        cooldown: CooldownController | None = None,
        locale: str | None = None,
    ) -> None:
        self.ai_client = ai_client
        self.history = history
        self.cooldown = cooldown or CooldownController()
        self.locale = locale or settings.locale
        self.messages = get_texts(self.locale).messages

        self.options = OptionSet()
        self.character_images: list[ReferenceImage] = []
        self.results: list[GeneratedImage] = []

        self.is_busy = False
        self.progress: str | None = None
        self.last_error: str | None = None
        self._bg_removal_in_flight: set[int] = set()

    # --- Character images ---

    def add_character_images(
        self, candidates: Iterable[ReferenceImage | str | Path]
    ) -> list[ReferenceImage]:
        added = photo_intake.accept_images(candidates, existing=self.character_images)
        self.character_images.extend(added)
        return added

    def remove_character_image(self, name: str) -> None:
        kept: list[ReferenceImage] = []
        for image in self.character_images:
            if image.name == name:
                image.release_preview()
            else:
                kept.append(image)
        self.character_images = kept

    def suggest_additional_request(self) -> str:
        suggestion = SuggestionEngine(self.locale).build(
            self.options, character_count=len(self.character_images)
        )
        self.options.additional_request = suggestion
        return suggestion

    # --- Generation ---

    def _validate_submission(self) -> None:
        if self.is_busy:
            raise ValidationError(self.messages.busy)
        if not self.character_images:
            raise ValidationError(self.messages.no_character_images)
        if self.cooldown.is_cooling_down:
            raise CooldownActiveError(self.cooldown.remaining_seconds)

    async def submit(self, progress_callback: ProgressCallback | None = None) -> GenerationResult:
        try:
            self._validate_submission()
        except (ValidationError, CooldownActiveError) as e:
            self.last_error = str(e)
            raise

        log = logger.bind(
            submission_id=uuid.uuid4().hex[:8],
            characters=len(self.character_images),
        )
        self.is_busy = True
        self.last_error = None
        self.results = []

        async def on_progress(completed: int, total: int) -> None:
            self.progress = self.messages.progress.format(current=completed, total=total)
            await notify_progress(progress_callback, completed, total)

        try:
            prompt = compose_prompt(self.options)
            character_parts, custom_parts = await asyncio.gather(
                encode_images(self.character_images),
                encode_images(collect_custom_images(self.options)),
            )
            result = await generate_variants(
                prompt, character_parts, custom_parts, self.ai_client, on_progress
            )
        except Exception as e:
            if self.cooldown.record_failure(e):
                self.cooldown.start_countdown()
                remaining = self.cooldown.remaining_seconds
                self.last_error = self.messages.rate_limited.format(seconds=remaining)
                log.warning("Submission rate limited", cooldown_seconds=remaining)
                raise RateLimitError(remaining) from e
            self.last_error = str(e) or self.messages.unexpected_error
            log.error("Submission failed", error=self.last_error)
            raise
        finally:
            self.is_busy = False
            self.progress = None

        self.results = list(result.images)
        self.cooldown.record_success()
        log.info("Submission completed", images=len(self.results))
        await self._remember_request(log)
        return result

    async def _remember_request(self, log: structlog.typing.FilteringBoundLogger) -> None:
        try:
            await self.history.add(self.options.additional_request)
        except Exception:
            # The images are already delivered; a history write failure must not undo that
            log.exception("Failed to persist request history")

    # --- Post-processing ---

    def _result_at(self, index: int) -> GeneratedImage:
        if not 0 <= index < len(self.results):
            raise ValidationError(f"No generated image at index {index}.")
        return self.results[index]

    async def remove_background(self, index: int) -> GeneratedImage:
        image = self._result_at(index)
        if index in self._bg_removal_in_flight:
            raise ValidationError(f"Background removal for image {index + 1} is already running.")

        self._bg_removal_in_flight.add(index)
        self.last_error = None
        try:
            cleaned = await remove_background(image, self.ai_client)
        except BackgroundRemovalError as e:
            self.last_error = str(e) or self.messages.background_removal_failed
            raise
        finally:
            self._bg_removal_in_flight.discard(index)

        self.results[index] = cleaned
        return cleaned

    def comparison_pair(self, index: int) -> tuple[ReferenceImage, GeneratedImage]:
        """Before/after pair: the first character image against generated image `index`."""
        if not self.character_images:
            raise ValidationError(self.messages.no_character_images)
        return self.character_images[0], self._result_at(index)

    async def download(self, index: int, directory: str | Path) -> Path:
        return await downloads.save_image(self._result_at(index), index, directory)

    async def close(self) -> None:
        await self.cooldown.stop()
