# portrait_studio/services/clients/google_ai_client.py
from __future__ import annotations
import json
from collections.abc import Sequence
from typing import Any

import structlog
from pydantic import BaseModel

# Google Gen AI SDK (public Gemini API or Vertex AI backend)
from google import genai
from google.genai import types
from google.genai.types import Modality
from google.oauth2.service_account import Credentials

from portrait_studio.data.constants import DEFAULT_IMAGE_MIME
from portrait_studio.data.settings import GoogleConfig, settings
from portrait_studio.dto.generation import EncodedPart
from portrait_studio.services.exceptions import NoImageReturnedError

logger = structlog.get_logger(__name__)


class GoogleGeminiClientResponse(BaseModel):
    """Standardized response from Gemini client."""
    image_bytes: bytes
    content_type: str = DEFAULT_IMAGE_MIME
    response_payload: dict


def _serialize_response(resp: Any) -> dict:
    """Safe, small logging payload; redacts inline image bytes."""
    if not resp:
        return {}
    out: dict[str, Any] = {"candidates": []}
    try:
        for c in getattr(resp, "candidates", None) or []:
            content = getattr(c, "content", None)
            out_parts = []
            for p in getattr(content, "parts", None) or []:
                inline = getattr(p, "inline_data", None)
                if inline is not None and getattr(inline, "data", None):
                    out_parts.append(
                        EncodedPart(
                            data=inline.data,
                            mime_type=inline.mime_type or DEFAULT_IMAGE_MIME,
                        ).redacted()
                    )
                elif getattr(p, "text", None):
                    out_parts.append({"text": p.text[:200]})
            out["candidates"].append(
                {"finish_reason": str(getattr(c, "finish_reason", None)), "parts": out_parts}
            )
        return out
    except Exception as e:
        logger.warning("serialize_response_fallback", error=str(e))
        return {"content": str(resp)[:500]}


def _first_inline_image(response: Any) -> tuple[bytes, str] | None:
    """Return the first inline image (bytes, mime) of the first candidate."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for p in getattr(content, "parts", None) or []:
        inline = getattr(p, "inline_data", None)
        if inline and getattr(inline, "data", None):
            return inline.data, getattr(inline, "mime_type", None) or DEFAULT_IMAGE_MIME
    return None


def _build_genai_client(config: GoogleConfig) -> genai.Client:
    if config.use_vertex:
        creds_info = json.loads(config.service_account_creds_json.get_secret_value())
        scoped_creds = Credentials.from_service_account_info(creds_info).with_scopes(
            ["https://www.googleapis.com/auth/cloud-platform"]
        )
        return genai.Client(
            vertexai=True,
            project=config.project_id,
            location=config.location,
            credentials=scoped_creds,
        )

    if config.api_key is None:
        raise RuntimeError(
            "Missing Google configuration. Set GOOGLE__API_KEY, or "
            "GOOGLE__PROJECT_ID and GOOGLE__SERVICE_ACCOUNT_CREDS_JSON for Vertex AI."
        )
    return genai.Client(api_key=config.api_key.get_secret_value())


class _ImagesNamespace:
    """
    Handles image generation via the Gemini API using google-genai.

    Notes:
      - Every call asks for both IMAGE and TEXT response modalities.
      - Only the first inline image of the first candidate is used.
      - Timeouts are left to the SDK.
    """

    def __init__(self, genai_client: genai.Client | None = None) -> None:
        if genai_client is not None:
            self._client = genai_client
            return
        try:
            self._client = _build_genai_client(settings.google)
            logger.info(
                "GenAI client initialized.",
                backend="vertex" if settings.google.use_vertex else "gemini_api",
            )
        except Exception:
            logger.exception("Failed to initialize Google Gen AI client.")
            raise

    async def generate(
        self,
        prompt: str,
        image_parts: Sequence[EncodedPart] = (),
        **kwargs: Any,
    ) -> GoogleGeminiClientResponse:
        """Generate one image from reference images plus a text instruction."""
        model_name: str = kwargs.pop("model", None) or settings.generation.model
        temperature = kwargs.pop("temperature", settings.generation.temperature)
        aspect_ratio = kwargs.pop("aspect_ratio", settings.generation.aspect_ratio)
        purpose = kwargs.pop("purpose", "generation")
        if purpose == "background_removal":
            # Keep the source framing
            aspect_ratio = None

        log = logger.bind(model=model_name, image_parts=len(image_parts), purpose=purpose)

        # Images first, the instruction last
        contents: list[Any] = [
            types.Part.from_bytes(data=part.data, mime_type=part.mime_type)
            for part in image_parts
        ]
        contents.append(prompt)

        gen_config = types.GenerateContentConfig(
            temperature=temperature,
            response_modalities=[Modality.IMAGE, Modality.TEXT],
            image_config=types.ImageConfig(aspect_ratio=aspect_ratio) if aspect_ratio else None,
        )

        log.info("Calling Gemini for image generation.")
        try:
            response = await self._client.aio.models.generate_content(
                model=model_name,
                contents=contents,
                config=gen_config,
            )
        except Exception as e:
            log.error("Gemini API error during image generation", error=str(e))
            raise

        picked = _first_inline_image(response)
        if not picked:
            candidates = getattr(response, "candidates", None) or []
            finish_reason = getattr(candidates[0], "finish_reason", "UNKNOWN") if candidates else "NO_CANDIDATES"
            log.error(
                "No inline image in response.",
                reason=str(finish_reason),
                payload=_serialize_response(response),
            )
            raise NoImageReturnedError(
                f"The AI did not return an image for one of the requests (finish reason: {finish_reason}). "
                "Please try refining your request."
            )

        image_bytes, content_type = picked
        return GoogleGeminiClientResponse(
            image_bytes=image_bytes,
            content_type=content_type,
            response_payload=_serialize_response(response),
        )


class GoogleGeminiClient:
    """Gemini client focused on image generation."""
    def __init__(self, genai_client: genai.Client | None = None, **_kwargs: Any) -> None:
        self.images = _ImagesNamespace(genai_client)
