from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


class AspectRatio(str, Enum):
    PORTRAIT = "3:4"
    SQUARE = "1:1"
    WIDE_2_35 = "2.35:1"
    STORY_9_16 = "9:16"
    VIDEO_4_3 = "4:3"


class ToolMode(str, Enum):
    PRODUCT_GEN = "PRODUCT_GEN"
    VIRAL_COVER = "VIRAL_COVER"


class ThemeMode(str, Enum):
    LIGHT = "LIGHT"
    DARK = "DARK"


class ViralLayout(str, Enum):
    CLASSIC = "CLASSIC"
    SPLIT = "SPLIT"
    DIAGONAL = "DIAGONAL"
    BIG_TYPE = "BIG_TYPE"


class ViewMode(str, Enum):
    EDITOR = "EDITOR"
    RESULT = "RESULT"


@dataclass(frozen=True)
class StyleOption:
    id: str
    label: str
    prompt: str
    is_default: bool = False


INITIAL_STYLES: tuple[StyleOption, ...] = (
    StyleOption(
        id="minimal_tech",
        label="极简科技 (Minimal)",
        prompt=(
            "clean, futuristic, matte textures, soft studio lighting, apple aesthetic, "
            "minimalist composition, ample negative space"
        ),
        is_default=True,
    ),
    StyleOption(
        id="warm_japanese",
        label="日系温馨 (Warm)",
        prompt=(
            "warm tones, natural wood and beige textures, soft sunlight, cozy, kinfolk style, "
            "film grain, organic shadows"
        ),
        is_default=True,
    ),
    StyleOption(
        id="high_fashion",
        label="高冷艺术 (Fashion)",
        prompt="high contrast, bold shadows, editorial photography, vogue style, avant-garde, abstract geometry",
        is_default=True,
    ),
    StyleOption(
        id="nature_organic",
        label="自然有机 (Nature)",
        prompt=(
            "earthy tones, green leaves, natural light, botanical, soft focus background, "
            "fresh atmosphere, flat lay style"
        ),
        is_default=True,
    ),
    StyleOption(
        id="neon_cyber",
        label="赛博朋克 (Cyber)",
        prompt=(
            "dark background, neon accents, glass reflections, cyberpunk city vibes, "
            "blue and purple gradients, high tech"
        ),
        is_default=True,
    ),
)

# Inserted when the user deletes every style so the catalog is never empty.
FALLBACK_STYLE = StyleOption(
    id="default_fallback",
    label="默认风格",
    prompt="minimalist, clean background, high quality",
    is_default=True,
)


@dataclass(frozen=True)
class CoverState:
    view_mode: ViewMode = ViewMode.EDITOR
    tool_mode: ToolMode = ToolMode.PRODUCT_GEN

    # Content
    title: str = "无线降噪\nPro Max"
    subtitle: str = "沉浸式音频体验"
    footer: str = "新品上市 • 限时直降"

    # Visuals
    aspect_ratio: AspectRatio = AspectRatio.PORTRAIT
    theme_mode: ThemeMode = ThemeMode.LIGHT
    viral_layout: ViralLayout = ViralLayout.CLASSIC
    styles: tuple[StyleOption, ...] = INITIAL_STYLES
    selected_style_id: str = INITIAL_STYLES[0].id
    active_prompt: str = INITIAL_STYLES[0].prompt

    # Images (data URIs)
    subject_image: str | None = None
    reference_image: str | None = None
    generated_image: str | None = None
    is_generating: bool = False
    is_polishing: bool = False

    # Typography
    text_scale: float = 1.0
    title_color: str = "#000000"
    subtitle_color: str = "#666666"
    footer_color: str = "#ffffff"  # white text on a black box

def initial_state() -> CoverState:
    return CoverState()


def find_style(styles: tuple[StyleOption, ...], style_id: Any) -> StyleOption | None:
    for s in styles:
        if s.id == style_id:
            return s
    return None


def state_to_public_dict(state: CoverState) -> dict[str, Any]:
    """
    JSON-friendly view of the state. Image payloads are replaced by presence flags;
    they are large and the page embeds them directly.
    """
    data = asdict(state)
    for key in ("subject_image", "reference_image", "generated_image"):
        data[f"has_{key}"] = bool(data.pop(key))
    for key, value in list(data.items()):
        if isinstance(value, Enum):
            data[key] = value.value
    return data
