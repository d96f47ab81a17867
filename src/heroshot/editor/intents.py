from __future__ import annotations

import json
import math
import numbers
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class UpdateStyle:
    """Presentation-only change: text scale and/or title colour."""

    text_scale: float | None = None
    text_color: str | None = None
    action: str = "UPDATE_STYLE"


@dataclass(frozen=True)
class Regenerate:
    new_prompt: str
    action: str = "REGENERATE"


@dataclass(frozen=True)
class NoAction:
    action: str = "NONE"


EditResult = Union[UpdateStyle, Regenerate, NoAction]


def _strip_code_fences(text: str) -> str:
    s = text.strip()
    if s.startswith("```"):
        first_nl = s.find("\n")
        if first_nl != -1:
            s = s[first_nl + 1 :]
        if s.rstrip().endswith("```"):
            s = s.rstrip()[:-3]
    return s.strip()


def _parse_jsonish(raw_text: str | None) -> Any:
    if not raw_text:
        return None
    try:
        return json.loads(_strip_code_fences(raw_text))
    except ValueError:
        return None


def parse_edit_result(raw_text: str | None) -> EditResult:
    """
    Decode the interpreter's JSON reply into an EditResult.

    Each field is decoded on its own and dropped when it has the wrong type, so a
    partially sensible reply still yields whatever is usable. Anything that leaves
    nothing to apply becomes NoAction.
    """
    data = _parse_jsonish(raw_text)
    if not isinstance(data, dict):
        return NoAction()

    action = str(data.get("action") or "").strip().upper()
    updates = data.get("updates")
    if not isinstance(updates, dict):
        updates = {}

    if action == "UPDATE_STYLE":
        scale = updates.get("textScale")
        if isinstance(scale, bool) or not isinstance(scale, numbers.Real):
            scale = None
        elif not math.isfinite(scale) or scale <= 0:
            scale = None
        color = updates.get("textColor")
        if not isinstance(color, str) or not color.strip():
            color = None
        if scale is None and color is None:
            return NoAction()
        return UpdateStyle(
            text_scale=float(scale) if scale is not None else None,
            text_color=color.strip() if color else None,
        )

    if action == "REGENERATE":
        new_prompt = updates.get("newPrompt")
        if isinstance(new_prompt, str) and new_prompt.strip():
            return Regenerate(new_prompt=new_prompt.strip())
        return NoAction()

    return NoAction()
