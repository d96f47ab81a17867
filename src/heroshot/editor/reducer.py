from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from heroshot.editor.actions import SETTER_FIELDS, Action, ActionType, coerce_action_type
from heroshot.editor.state import FALLBACK_STYLE, CoverState, StyleOption, find_style


def reduce(state: CoverState, action: Action) -> CoverState:
    """
    Apply one action and return the next state. Never raises: unknown action types
    and unusable payloads return `state` untouched.
    """
    kind = coerce_action_type(action.type)
    if kind is None:
        return state

    field_name = SETTER_FIELDS.get(kind)
    if field_name is not None:
        return replace(state, **{field_name: action.payload})

    if kind is ActionType.SELECT_STYLE:
        return _select_style(state, action.payload)
    if kind is ActionType.ADD_STYLE:
        return _add_style(state, action.payload)
    if kind is ActionType.DELETE_STYLE:
        return _delete_style(state, action.payload)
    return state


def _select_style(state: CoverState, style_id: Any) -> CoverState:
    style = find_style(state.styles, style_id)
    if style is None:
        # The id may have been deleted between render and dispatch.
        return state
    return replace(state, selected_style_id=style.id, active_prompt=style.prompt)


def _add_style(state: CoverState, payload: Any) -> CoverState:
    if not isinstance(payload, Mapping):
        return state
    label = payload.get("label")
    prompt = payload.get("prompt")
    if not isinstance(label, str) or not isinstance(prompt, str):
        return state

    new_style = StyleOption(
        id=_new_style_id(state.styles),
        label=label,
        prompt=prompt,
        is_default=False,
    )
    # New styles are previewed right away.
    return replace(
        state,
        styles=state.styles + (new_style,),
        selected_style_id=new_style.id,
        active_prompt=new_style.prompt,
    )


def _delete_style(state: CoverState, style_id: Any) -> CoverState:
    remaining = tuple(s for s in state.styles if s.id != style_id)
    if not remaining:
        remaining = (FALLBACK_STYLE,)

    selected_id = state.selected_style_id
    active_prompt = state.active_prompt
    if selected_id == style_id or find_style(remaining, selected_id) is None:
        nxt = remaining[0]
        selected_id = nxt.id
        active_prompt = nxt.prompt

    return replace(state, styles=remaining, selected_style_id=selected_id, active_prompt=active_prompt)


def _new_style_id(styles: tuple[StyleOption, ...]) -> str:
    taken = {s.id for s in styles}
    stamp = int(time.time() * 1000)
    while str(stamp) in taken:
        stamp += 1
    return str(stamp)
