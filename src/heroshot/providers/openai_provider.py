from __future__ import annotations

from typing import Any

from openai import AsyncOpenAI

from heroshot.config import settings
from heroshot.editor.intents import EditResult, NoAction, parse_edit_result
from heroshot.errors import GenerationError
from heroshot.logger import get_logger
from heroshot.providers.prompts import build_edit_prompt, build_polish_prompt

log = get_logger(__name__)


class OpenAITextProvider:
    """Alternative backend for magic edit interpretation and title polish."""

    name = "openai"

    def __init__(self, api_key: str, client: Any | None = None) -> None:
        self.client = client if client is not None else AsyncOpenAI(api_key=api_key)

    async def interpret_edit_command(
        self,
        command: str,
        current_prompt: str,
        current_scale: float,
    ) -> EditResult:
        try:
            resp = await self.client.responses.create(
                model=settings.openai_text_model,
                input=build_edit_prompt(command, current_prompt, current_scale),
                text={"format": {"type": "json_object"}},
            )
        except Exception as exc:
            log.error("Interpreter failed: %s", exc)
            return NoAction()

        result = parse_edit_result(_output_text(resp))
        if isinstance(result, NoAction):
            log.info("Interpreter returned nothing actionable")
        return result

    async def polish_title(self, title: str) -> str:
        try:
            resp = await self.client.responses.create(
                model=settings.openai_text_model,
                input=build_polish_prompt(title),
            )
        except Exception as exc:
            log.error("Title polish failed: %s", exc)
            raise GenerationError(f"Title polish failed: {exc}") from exc
        return _output_text(resp).strip() or title


def _output_text(resp: Any) -> str:
    return getattr(resp, "output_text", None) or ""
