from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ActionType(str, Enum):
    SET_VIEW_MODE = "SET_VIEW_MODE"
    SET_TOOL_MODE = "SET_TOOL_MODE"
    SET_TITLE = "SET_TITLE"
    SET_SUBTITLE = "SET_SUBTITLE"
    SET_FOOTER = "SET_FOOTER"
    SET_ASPECT_RATIO = "SET_ASPECT_RATIO"
    SET_THEME_MODE = "SET_THEME_MODE"
    SET_VIRAL_LAYOUT = "SET_VIRAL_LAYOUT"
    SELECT_STYLE = "SELECT_STYLE"
    ADD_STYLE = "ADD_STYLE"
    DELETE_STYLE = "DELETE_STYLE"
    SET_ACTIVE_PROMPT = "SET_ACTIVE_PROMPT"
    SET_IS_GENERATING = "SET_IS_GENERATING"
    SET_IS_POLISHING = "SET_IS_POLISHING"
    SET_GENERATED_IMAGE = "SET_GENERATED_IMAGE"
    SET_SUBJECT_IMAGE = "SET_SUBJECT_IMAGE"
    SET_REFERENCE_IMAGE = "SET_REFERENCE_IMAGE"
    SET_TEXT_SCALE = "SET_TEXT_SCALE"
    SET_TITLE_COLOR = "SET_TITLE_COLOR"
    SET_SUBTITLE_COLOR = "SET_SUBTITLE_COLOR"
    SET_FOOTER_COLOR = "SET_FOOTER_COLOR"


@dataclass(frozen=True)
class Action:
    # ActionType or its name; unknown names are tolerated by the reducer.
    type: ActionType | str
    payload: Any = None


# Actions that replace exactly one CoverState field with the payload.
SETTER_FIELDS: dict[ActionType, str] = {
    ActionType.SET_VIEW_MODE: "view_mode",
    ActionType.SET_TOOL_MODE: "tool_mode",
    ActionType.SET_TITLE: "title",
    ActionType.SET_SUBTITLE: "subtitle",
    ActionType.SET_FOOTER: "footer",
    ActionType.SET_ASPECT_RATIO: "aspect_ratio",
    ActionType.SET_THEME_MODE: "theme_mode",
    ActionType.SET_VIRAL_LAYOUT: "viral_layout",
    ActionType.SET_ACTIVE_PROMPT: "active_prompt",
    ActionType.SET_IS_GENERATING: "is_generating",
    ActionType.SET_IS_POLISHING: "is_polishing",
    ActionType.SET_GENERATED_IMAGE: "generated_image",
    ActionType.SET_SUBJECT_IMAGE: "subject_image",
    ActionType.SET_REFERENCE_IMAGE: "reference_image",
    ActionType.SET_TEXT_SCALE: "text_scale",
    ActionType.SET_TITLE_COLOR: "title_color",
    ActionType.SET_SUBTITLE_COLOR: "subtitle_color",
    ActionType.SET_FOOTER_COLOR: "footer_color",
}


def coerce_action_type(value: Any) -> ActionType | None:
    if isinstance(value, ActionType):
        return value
    try:
        return ActionType(str(value))
    except ValueError:
        return None
