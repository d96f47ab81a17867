from __future__ import annotations

from typing import Any

from heroshot.editor.state import ThemeMode, ToolMode, ViralLayout

# Negative space reserved for the text overlay, as fractions of frame height.
CLASSIC_TOP_SPACE = 0.30
CLASSIC_BOTTOM_SPACE = 0.20
SPLIT_TEXT_COLUMN = 0.40

REFERENCE_INSTRUCTION = "Follow the visual style, lighting, and color palette of this reference image."
SUBJECT_INSTRUCTION = "Use this specific object/product in the generation. Keep its details accurate."


def _value(v: Any) -> str:
    return str(getattr(v, "value", v) or "")


def _classic_space_rule() -> str:
    top = int(round(CLASSIC_TOP_SPACE * 100))
    bottom = int(round(CLASSIC_BOTTOM_SPACE * 100))
    return (
        f"LEAVE EMPTY SPACE: The top {top}% and bottom {bottom}% of the image MUST be relatively empty "
        "(negative space) or have very low detail. This is where text will be overlaid."
    )


def _layout_space_rule(layout: str) -> str:
    if layout == ViralLayout.SPLIT.value:
        right = int(round(SPLIT_TEXT_COLUMN * 100))
        return (
            f"SPLIT COMPOSITION: Place the subject in the left part of the frame. The right {right}% of the image "
            "MUST stay clean and low-detail so a block of text can sit there."
        )
    if layout == ViralLayout.DIAGONAL.value:
        return (
            "DIAGONAL COMPOSITION: Arrange the scene along a diagonal from bottom-right to top-left. Keep the "
            "upper-left triangle of the frame calm and uncluttered for a diagonal headline."
        )
    if layout == ViralLayout.BIG_TYPE.value:
        return (
            "OVERSIZED TYPE: Keep the whole frame low-contrast and softly lit with no busy detail, so very large "
            "type placed over the center stays legible."
        )
    return _classic_space_rule()


def build_cover_prompt(
    active_prompt: str,
    has_subject: bool,
    tool_mode: ToolMode | str = ToolMode.PRODUCT_GEN,
    theme_mode: ThemeMode | str = ThemeMode.LIGHT,
    viral_layout: ViralLayout | str = ViralLayout.CLASSIC,
) -> str:
    lines: list[str] = [
        "Create a high-quality, 8k resolution product advertising background.",
        "",
        "VISUAL DESCRIPTION:",
        active_prompt.strip(),
        "",
    ]

    if _value(tool_mode) == ToolMode.VIRAL_COVER.value:
        space_rule = _layout_space_rule(_value(viral_layout))
    else:
        if _value(theme_mode) == ThemeMode.DARK.value:
            background = "STRICTLY use a BLACK / Dark background."
        else:
            background = "STRICTLY use a WHITE / Light high-key background."
        lines += ["BACKGROUND COLOR:", background, ""]
        space_rule = _classic_space_rule()

    if has_subject:
        lines += ["IMPORTANT: Integrate the provided subject image into this scene naturally as the main hero product.", ""]

    lines += [
        "COMPOSITION RULES:",
        f"1. {space_rule}",
        "2. AESTHETIC: Photorealistic, commercial photography, high-end studio lighting.",
        "3. NO TEXT: Do not generate any text inside the image itself.",
    ]
    return "\n".join(lines).strip()


def build_edit_prompt(command: str, current_prompt: str, current_scale: float) -> str:
    return (
        "You are an AI assistant for a graphic design tool. The user wants to change the current design.\n"
        "\n"
        "Current State:\n"
        f'- Image Prompt: "{current_prompt}"\n'
        f"- Text Scale: {current_scale}\n"
        "\n"
        f'User Command: "{command}"\n'
        "\n"
        "Determine if the user wants to:\n"
        "1. MODIFY TEXT STYLE (Size, Color): Return action 'UPDATE_STYLE'.\n"
        '   - For size: return \'textScale\' (e.g., "bigger" -> current * 1.2, "smaller" -> current * 0.8).\n'
        '   - For color: return \'textColor\' as a HEX string (e.g., "#ff0000").\n'
        "2. MODIFY IMAGE CONTENT (Background, Objects, Vibe): Return action 'REGENERATE'.\n"
        "   - Return 'newPrompt': A rewritten full prompt incorporating the user's change.\n"
        "\n"
        "Return strictly JSON.\n"
        'Example 1: {"action": "UPDATE_STYLE", "updates": {"textScale": 1.5}}\n'
        'Example 2: {"action": "REGENERATE", "updates": {"newPrompt": "white minimalist background with a coffee cup"}}\n'
    )


def build_polish_prompt(title: str) -> str:
    return (
        "You are a copywriter for product launch posters.\n"
        "Rewrite the title below to be punchier and more memorable.\n"
        "Keep the same language, keep it short, keep any line breaks.\n"
        "Return ONLY the new title text. No quotes, no markdown, no commentary.\n"
        f"\nTitle:\n{title}\n"
    )
