# portrait_studio/dto/options.py
import uuid
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from portrait_studio.data.aspects import ASPECTS_BY_KEY
from portrait_studio.data.constants import CUSTOM_MARKER, AspectKey
from portrait_studio.data.presets import Preset, find_preset
from portrait_studio.services.exceptions import UnknownPresetError, ValidationError


def _new_preview_handle() -> str:
    return f"preview-{uuid.uuid4().hex}"


class ReferenceImage(BaseModel):
    """
    An uploaded image, either held in memory or backed by a file on disk.
    The bytes of a file-backed image are read by the media encoder at submission time.
    """
    name: str
    mime_type: str
    size: int
    raw_bytes: bytes | None = None
    source_path: Path | None = None
    # Display-only token; released when the image is removed
    preview_handle: str | None = Field(default_factory=_new_preview_handle)

    @classmethod
    def from_bytes(cls, data: bytes, name: str, mime_type: str) -> "ReferenceImage":
        return cls(name=name, mime_type=mime_type, size=len(data), raw_bytes=data)

    @classmethod
    def from_path(cls, path: Path, mime_type: str) -> "ReferenceImage":
        return cls(
            name=path.name,
            mime_type=mime_type,
            size=path.stat().st_size,
            source_path=path,
        )

    @property
    def identity(self) -> tuple[str, int]:
        """Key used to skip re-uploads of the same file."""
        return self.name, self.size

    def release_preview(self) -> str | None:
        handle, self.preview_handle = self.preview_handle, None
        return handle


class AspectOption(BaseModel):
    """User-selected state of a single aspect (clothing, background, ...)."""
    key: AspectKey
    enabled: bool = False
    value: str = ""
    custom_files: list[ReferenceImage] = Field(default_factory=list)
    custom_request: str = ""

    @model_validator(mode="after")
    def _custom_files_force_marker(self) -> "AspectOption":
        if self.custom_files and not self.allows_custom_upload:
            raise ValidationError(f"Aspect '{self.key.value}' does not accept custom images.")
        if self.custom_files and self.value != CUSTOM_MARKER:
            self.value = CUSTOM_MARKER
        return self

    @property
    def allows_custom_upload(self) -> bool:
        return ASPECTS_BY_KEY[self.key].allows_custom_upload

    @property
    def has_custom_files(self) -> bool:
        return bool(self.custom_files)

    @property
    def preset(self) -> Preset | None:
        if not self.value or self.value == CUSTOM_MARKER:
            return None
        preset = find_preset(self.key, self.value)
        if preset is None:
            raise UnknownPresetError(self.key.value, self.value)
        return preset

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled

    def set_custom_request(self, text: str) -> None:
        self.custom_request = text

    def select_preset(self, preset_id: str) -> None:
        """Selects a preset; selecting the current one again deselects it."""
        if find_preset(self.key, preset_id) is None:
            raise UnknownPresetError(self.key.value, preset_id)

        if self.value == preset_id:
            self.value = ""
            return

        self._release_custom_files()
        self.value = preset_id

    def add_custom_files(self, images: Iterable[ReferenceImage]) -> list[ReferenceImage]:
        """Attaches reference images, skipping ones already attached. Returns the added images."""
        if not self.allows_custom_upload:
            raise ValidationError(f"Aspect '{self.key.value}' does not accept custom images.")

        known = {image.identity for image in self.custom_files}
        added: list[ReferenceImage] = []
        for image in images:
            if image.identity in known:
                continue
            known.add(image.identity)
            added.append(image)

        self.custom_files.extend(added)
        if self.custom_files:
            self.value = CUSTOM_MARKER
        return added

    def remove_custom_file(self, name: str) -> None:
        kept: list[ReferenceImage] = []
        for image in self.custom_files:
            if image.name == name:
                image.release_preview()
            else:
                kept.append(image)
        self.custom_files = kept
        if not kept and self.value == CUSTOM_MARKER:
            self.value = ""

    def _release_custom_files(self) -> None:
        for image in self.custom_files:
            image.release_preview()
        self.custom_files = []


def _default_aspects() -> dict[AspectKey, AspectOption]:
    return {key: AspectOption(key=key) for key in AspectKey}


class OptionSet(BaseModel):
    """Aggregate option state handed to the prompt composer."""
    aspects: dict[AspectKey, AspectOption] = Field(default_factory=_default_aspects)
    additional_request: str = ""
    adjust_skin_tone: bool = False
    apply_makeup: bool = False

    @model_validator(mode="after")
    def _fill_missing_aspects(self) -> "OptionSet":
        for key in AspectKey:
            self.aspects.setdefault(key, AspectOption(key=key))
        return self

    def aspect(self, key: AspectKey | str) -> AspectOption:
        return self.aspects[AspectKey(key)]
