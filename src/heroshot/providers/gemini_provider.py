from __future__ import annotations

import base64
from typing import Any

from google import genai
from google.genai import types

from heroshot.config import settings
from heroshot.datauri import decode_data_uri
from heroshot.editor.intents import EditResult, NoAction, parse_edit_result
from heroshot.errors import GenerationError, NoImageGeneratedError
from heroshot.logger import get_logger
from heroshot.providers.base import CoverRequest
from heroshot.providers.prompts import (
    REFERENCE_INSTRUCTION,
    SUBJECT_INSTRUCTION,
    build_cover_prompt,
    build_edit_prompt,
    build_polish_prompt,
)

log = get_logger(__name__)

# Editor ratios the image model does not accept verbatim.
PROVIDER_RATIOS = {"2.35:1": "21:9"}


def provider_aspect_ratio(aspect_ratio: Any) -> str:
    ratio = str(getattr(aspect_ratio, "value", aspect_ratio))
    return PROVIDER_RATIOS.get(ratio, ratio)


class GeminiProvider:
    name = "gemini"

    def __init__(self, api_key: str, client: Any | None = None) -> None:
        self.client = client if client is not None else genai.Client(api_key=api_key)

    async def generate_cover_image(self, request: CoverRequest) -> str:
        """
        One generate_content call: reference image (style), subject image (content),
        then the composed prompt. Returns the first inline image as a PNG data URI.
        """
        model = settings.gemini_image_model
        prompt = build_cover_prompt(
            request.active_prompt,
            has_subject=bool(request.subject_image),
            tool_mode=request.tool_mode,
            theme_mode=request.theme_mode,
            viral_layout=request.viral_layout,
        )

        try:
            parts: list[types.Part] = []
            if request.reference_image:
                parts.append(_inline_image_part(request.reference_image, default_mime="image/jpeg"))
                parts.append(types.Part.from_text(text=REFERENCE_INSTRUCTION))
            if request.subject_image:
                parts.append(_inline_image_part(request.subject_image, default_mime="image/png"))
                parts.append(types.Part.from_text(text=SUBJECT_INSTRUCTION))
            parts.append(types.Part.from_text(text=prompt))

            resp = await self.client.aio.models.generate_content(
                model=model,
                contents=parts,
                config=types.GenerateContentConfig(
                    response_modalities=["IMAGE", "TEXT"],
                    image_config=types.ImageConfig(aspect_ratio=provider_aspect_ratio(request.aspect_ratio)),
                ),
            )
        except Exception as exc:
            log.error("Gemini generation error (model=%s): %s", model, exc)
            raise GenerationError(f"Gemini generation failed: {exc}") from exc

        data = _first_inline_image(resp)
        if data is None:
            log.error("Gemini returned no image part (model=%s)", model)
            raise NoImageGeneratedError()
        return f"data:image/png;base64,{data}"

    async def interpret_edit_command(
        self,
        command: str,
        current_prompt: str,
        current_scale: float,
    ) -> EditResult:
        prompt = build_edit_prompt(command, current_prompt, current_scale)
        try:
            resp = await self.client.aio.models.generate_content(
                model=settings.gemini_text_model,
                contents=prompt,
                config=types.GenerateContentConfig(response_mime_type="application/json"),
            )
        except Exception as exc:
            log.error("Interpreter failed: %s", exc)
            return NoAction()

        raw_text: str | None = getattr(resp, "text", None)
        result = parse_edit_result(raw_text)
        if isinstance(result, NoAction):
            log.info("Interpreter returned nothing actionable: %r", (raw_text or "")[:200])
        return result

    async def polish_title(self, title: str) -> str:
        try:
            resp = await self.client.aio.models.generate_content(
                model=settings.gemini_text_model,
                contents=build_polish_prompt(title),
            )
        except Exception as exc:
            log.error("Title polish failed: %s", exc)
            raise GenerationError(f"Title polish failed: {exc}") from exc
        return (getattr(resp, "text", "") or "").strip() or title


def _inline_image_part(value: str, default_mime: str) -> types.Part:
    mime, raw = decode_data_uri(value)
    if not mime.startswith("image/"):
        mime = default_mime
    return types.Part.from_bytes(data=raw, mime_type=mime)


def _first_inline_image(resp: Any) -> str | None:
    """Base64 payload of the first inline image part of the first candidate."""
    candidates = getattr(resp, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if not inline:
            continue
        data = getattr(inline, "data", None)
        if not data:
            continue
        if isinstance(data, bytes):
            return base64.b64encode(data).decode("ascii")
        return str(data)
    return None
