# portrait_studio/services/cooldown.py
import asyncio
from contextlib import suppress

import structlog
from pydantic import BaseModel

from portrait_studio.data.settings import settings

logger = structlog.get_logger(__name__)

# Substrings of the endpoint's error text that indicate quota exhaustion.
# Heuristic only: the endpoint does not guarantee these.
RATE_LIMIT_MARKERS = ("429", "quota", "resource_exhausted")


def is_rate_limit_error(error: BaseException) -> bool:
    """Checks the error and its chained causes for a quota/429 signal."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if getattr(current, "code", None) == 429:
            return True
        message = str(current).lower()
        if any(marker in message for marker in RATE_LIMIT_MARKERS):
            return True
        current = current.__cause__ or current.__context__
    return False


class CooldownState(BaseModel):
    remaining_seconds: int = 0
    next_delay_seconds: int


class CooldownController:
    """
    Tracks the rate-limit cooldown and the exponential retry delay.

    The controller never blocks calls; callers check `is_cooling_down` before submitting.
    """

    def __init__(
        self,
        initial_delay: int | None = None,
        max_delay: int | None = None,
    ) -> None:
        self.initial_delay = (
            settings.cooldown.initial_delay_seconds if initial_delay is None else initial_delay
        )
        self.max_delay = settings.cooldown.max_delay_seconds if max_delay is None else max_delay
        self._state = CooldownState(next_delay_seconds=self.initial_delay)
        self._countdown_task: asyncio.Task | None = None

    @property
    def state(self) -> CooldownState:
        return self._state.model_copy()

    @property
    def remaining_seconds(self) -> int:
        return self._state.remaining_seconds

    @property
    def next_delay_seconds(self) -> int:
        return self._state.next_delay_seconds

    @property
    def is_cooling_down(self) -> bool:
        return self._state.remaining_seconds > 0

    def record_success(self) -> None:
        self._state.next_delay_seconds = self.initial_delay

    def record_failure(self, error: BaseException) -> bool:
        """Updates the state after a failed submission. Returns True for rate-limit failures."""
        if not is_rate_limit_error(error):
            self._state.next_delay_seconds = self.initial_delay
            return False

        self._state.remaining_seconds = self._state.next_delay_seconds
        self._state.next_delay_seconds = min(self._state.next_delay_seconds * 2, self.max_delay)
        logger.warning(
            "Rate limit hit, cooldown started",
            cooldown_seconds=self._state.remaining_seconds,
            next_delay_seconds=self._state.next_delay_seconds,
        )
        return True

    def tick(self) -> int:
        """Advances the countdown by one second."""
        if self._state.remaining_seconds > 0:
            self._state.remaining_seconds -= 1
        return self._state.remaining_seconds

    async def run_countdown(self) -> None:
        while self._state.remaining_seconds > 0:
            await asyncio.sleep(1)
            self.tick()
        logger.info("Cooldown finished")

    def start_countdown(self) -> asyncio.Task:
        """Starts the once-per-second timer; an already running timer is reused."""
        if self._countdown_task is None or self._countdown_task.done():
            self._countdown_task = asyncio.create_task(self.run_countdown())
        return self._countdown_task

    async def stop(self) -> None:
        if self._countdown_task is not None and not self._countdown_task.done():
            self._countdown_task.cancel()
            with suppress(asyncio.CancelledError):
                await self._countdown_task
        self._countdown_task = None
