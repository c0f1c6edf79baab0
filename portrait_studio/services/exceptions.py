# portrait_studio/services/exceptions.py


class StudioError(Exception):
    """Base class for every failure surfaced by the studio core."""


class ValidationError(StudioError):
    """The submission or option change was rejected before any network call."""


class UnknownPresetError(ValidationError):
    def __init__(self, aspect: str, preset_id: str) -> None:
        super().__init__(f"Unknown preset '{preset_id}' for aspect '{aspect}'.")
        self.aspect = aspect
        self.preset_id = preset_id


class CooldownActiveError(StudioError):
    def __init__(self, remaining_seconds: int) -> None:
        super().__init__(
            f"Please wait {remaining_seconds}s before submitting another request."
        )
        self.remaining_seconds = remaining_seconds


class MediaEncodingError(StudioError):
    def __init__(self, image_name: str, reason: str) -> None:
        super().__init__(f"Could not read image '{image_name}': {reason}")
        self.image_name = image_name


class GenerationError(StudioError):
    """A generation batch failed; no partial results are delivered."""


class NoImageReturnedError(GenerationError):
    """The endpoint answered without an inline image part."""


class RateLimitError(GenerationError):
    def __init__(self, remaining_seconds: int) -> None:
        super().__init__(
            "API quota exhausted. Please wait for the cooldown "
            f"({remaining_seconds}s) to finish before trying again."
        )
        self.remaining_seconds = remaining_seconds


class BackgroundRemovalError(StudioError):
    """Background removal failed; previously generated images are untouched."""
