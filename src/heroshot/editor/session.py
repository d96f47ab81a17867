from __future__ import annotations

from collections.abc import Callable
from typing import Any

from heroshot.assembly.render import ExportedCover, export_cover_png
from heroshot.config import settings
from heroshot.editor.actions import Action, ActionType
from heroshot.editor.intents import EditResult, NoAction, Regenerate, UpdateStyle
from heroshot.editor.reducer import reduce
from heroshot.editor.state import CoverState, ViewMode, initial_state
from heroshot.errors import ExportError, GenerationBusyError, MissingCredentialError
from heroshot.logger import get_logger
from heroshot.providers.base import CoverRequest, ImageProvider, TextProvider
from heroshot.providers.gemini_provider import GeminiProvider

log = get_logger(__name__)

ImageProviderFactory = Callable[[str], ImageProvider]
TextProviderFactory = Callable[[str], TextProvider]


def default_image_provider(api_key: str) -> ImageProvider:
    return GeminiProvider(api_key=api_key)


def default_text_provider(api_key: str) -> TextProvider:
    if settings.text_provider.strip().lower() == "openai":
        from heroshot.providers.openai_provider import OpenAITextProvider

        if not settings.openai_api_key:
            raise MissingCredentialError("OPENAI_API_KEY is not set")
        return OpenAITextProvider(api_key=settings.openai_api_key)

    return GeminiProvider(api_key=api_key)


class CoverSession:
    """
    Owns the one CoverState of an editing session and the handlers that sequence
    reducer dispatches around provider calls. The API key lives only on this object.
    """

    def __init__(
        self,
        state: CoverState | None = None,
        api_key: str | None = None,
        image_provider_factory: ImageProviderFactory = default_image_provider,
        text_provider_factory: TextProviderFactory = default_text_provider,
    ) -> None:
        self.state = state or initial_state()
        self._api_key: str | None = None
        self.set_api_key(api_key)
        self._image_provider_factory = image_provider_factory
        self._text_provider_factory = text_provider_factory

    def __repr__(self) -> str:
        return f"CoverSession(has_api_key={self.has_api_key}, selected_style_id={self.state.selected_style_id!r})"

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    def set_api_key(self, api_key: str | None) -> None:
        self._api_key = (api_key or "").strip() or None

    def dispatch(self, action: Action) -> CoverState:
        self.state = reduce(self.state, action)
        return self.state

    def _set(self, kind: ActionType, payload: Any) -> CoverState:
        return self.dispatch(Action(kind, payload))

    def _require_key(self) -> str:
        if not self._api_key:
            raise MissingCredentialError()
        return self._api_key

    async def generate(self) -> str:
        """
        Generate a background for the current state and store it. The generating flag
        is cleared whatever happens; a second call while one is in flight is refused.
        """
        api_key = self._require_key()
        if self.state.is_generating:
            raise GenerationBusyError()
        self._set(ActionType.SET_VIEW_MODE, ViewMode.RESULT)
        return await self._generate(api_key)

    async def _generate(self, api_key: str, new_prompt: str | None = None) -> str:
        if self.state.is_generating:
            raise GenerationBusyError()

        provider = self._image_provider_factory(api_key)
        self._set(ActionType.SET_IS_GENERATING, True)
        if new_prompt is not None:
            self._set(ActionType.SET_ACTIVE_PROMPT, new_prompt)
        try:
            image = await provider.generate_cover_image(CoverRequest.from_state(self.state))
            self._set(ActionType.SET_GENERATED_IMAGE, image)
            return image
        except Exception:
            log.exception("Generation failed")
            raise
        finally:
            self._set(ActionType.SET_IS_GENERATING, False)

    async def polish_title(self) -> str:
        if not self.state.title:
            return self.state.title
        api_key = self._require_key()

        provider = self._text_provider_factory(api_key)
        self._set(ActionType.SET_IS_POLISHING, True)
        try:
            new_title = await provider.polish_title(self.state.title)
            self._set(ActionType.SET_TITLE, new_title)
            return new_title
        except Exception:
            log.exception("Title polish failed")
            raise
        finally:
            self._set(ActionType.SET_IS_POLISHING, False)

    async def magic_edit(self, command: str) -> EditResult:
        """
        Interpret a free-text instruction and replay it through the reducer: style
        tweaks are applied directly, content changes trigger a regeneration.
        """
        command = (command or "").strip()
        if not command:
            return NoAction()
        api_key = self._require_key()

        interpreter = self._text_provider_factory(api_key)
        result = await interpreter.interpret_edit_command(command, self.state.active_prompt, self.state.text_scale)

        if isinstance(result, UpdateStyle):
            if result.text_scale is not None:
                self._set(ActionType.SET_TEXT_SCALE, result.text_scale)
            if result.text_color is not None:
                self._set(ActionType.SET_TITLE_COLOR, result.text_color)
        elif isinstance(result, Regenerate):
            await self._generate(api_key, new_prompt=result.new_prompt)
        return result

    def export(self) -> ExportedCover:
        if not self.state.generated_image:
            raise ExportError("Generate an image before exporting.")
        return export_cover_png(self.state)
