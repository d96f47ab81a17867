from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from heroshot.editor.intents import EditResult
from heroshot.editor.state import AspectRatio, CoverState, ThemeMode, ToolMode, ViralLayout


@dataclass(frozen=True)
class CoverRequest:
    """Snapshot of the state fields that shape one background generation."""

    active_prompt: str
    aspect_ratio: AspectRatio | str
    subject_image: str | None = None
    reference_image: str | None = None
    tool_mode: ToolMode | str = ToolMode.PRODUCT_GEN
    theme_mode: ThemeMode | str = ThemeMode.LIGHT
    viral_layout: ViralLayout | str = ViralLayout.CLASSIC

    @classmethod
    def from_state(cls, state: CoverState) -> "CoverRequest":
        return cls(
            active_prompt=state.active_prompt,
            aspect_ratio=state.aspect_ratio,
            subject_image=state.subject_image,
            reference_image=state.reference_image,
            tool_mode=state.tool_mode,
            theme_mode=state.theme_mode,
            viral_layout=state.viral_layout,
        )


class ImageProvider(Protocol):
    name: str

    async def generate_cover_image(self, request: CoverRequest) -> str: ...


class TextProvider(Protocol):
    name: str

    async def interpret_edit_command(
        self,
        command: str,
        current_prompt: str,
        current_scale: float,
    ) -> EditResult: ...

    async def polish_title(self, title: str) -> str: ...
