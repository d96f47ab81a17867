from __future__ import annotations

import math
import re
import time
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Any

from PIL import Image, ImageDraw, ImageFont

from heroshot.config import settings
from heroshot.datauri import open_data_uri
from heroshot.editor.state import AspectRatio, CoverState, ThemeMode, ToolMode, ViralLayout
from heroshot.errors import ExportError
from heroshot.logger import get_logger

log = get_logger(__name__)

REM = 16  # base canvas px per rem
PADDING = 0.08
CORNER_RADIUS = 20
HEADER_GAP_REM = 1.5
SPLIT_TEXT_COLUMN = 0.40

TITLE_REM = 2.0
SUBTITLE_REM = 0.9
FOOTER_REM = 0.7

_CJK = r"\u2e80-\u9fff\uf900-\ufaff\uff00-\uffef"
_TOKEN_RE = re.compile(rf"[{_CJK}]|[^\s{_CJK}]+|\s+")


@dataclass(frozen=True)
class ExportedCover:
    filename: str
    data: bytes
    size: tuple[int, int]


@dataclass(frozen=True)
class _Block:
    text: str
    font: Any
    fill: tuple[int, int, int, int]
    spacing: int
    size: tuple[int, int]


def canvas_size(aspect_ratio: AspectRatio | str) -> tuple[int, int]:
    ratio = str(getattr(aspect_ratio, "value", aspect_ratio))
    return settings.canvas_sizes.get(ratio) or settings.canvas_sizes[AspectRatio.PORTRAIT.value]


def export_filename(now_ms: int | None = None) -> str:
    stamp = int(time.time() * 1000) if now_ms is None else now_ms
    return f"HeroShot-{stamp}.png"


def export_cover_png(state: CoverState, scale: int | None = None, now_ms: int | None = None) -> ExportedCover:
    """
    Rasterize the composite and encode it as PNG. Any failure is raised as ExportError
    and no bytes are returned.
    """
    try:
        img = render_cover(state, scale=scale)
        buf = BytesIO()
        img.save(buf, format="PNG")
    except Exception as exc:
        log.error("Export failed: %s", exc)
        raise ExportError("Export failed, please try again.") from exc
    return ExportedCover(filename=export_filename(now_ms), data=buf.getvalue(), size=img.size)


def render_cover(state: CoverState, scale: int | None = None) -> Image.Image:
    """
    Background (generated image, cover-cropped, or the theme colour) plus the title,
    subtitle and footer layers, supersampled by `scale`. Corners outside the rounded
    frame are transparent.
    """
    s = max(1, int(scale or settings.export_scale))
    bw, bh = canvas_size(state.aspect_ratio)
    size = (bw * s, bh * s)

    if state.generated_image:
        kv = open_data_uri(state.generated_image)
        base = _resize_cover(kv.convert("RGB"), size).convert("RGBA")
    else:
        bg = (0, 0, 0) if _value(state.theme_mode) == ThemeMode.DARK.value else (255, 255, 255)
        base = Image.new("RGBA", size, bg + (255,))

    draw = ImageDraw.Draw(base)
    layout = ViralLayout.CLASSIC.value
    if _value(state.tool_mode) == ToolMode.VIRAL_COVER.value:
        layout = _value(state.viral_layout)

    if layout == ViralLayout.SPLIT.value:
        _layout_split(draw, state, size, s)
    elif layout == ViralLayout.DIAGONAL.value:
        _layout_diagonal(draw, state, size, s)
    elif layout == ViralLayout.BIG_TYPE.value:
        _layout_big_type(draw, state, size, s)
    else:
        _layout_classic(draw, state, size, s)

    return _round_corners(base, CORNER_RADIUS * s)


def is_light_color(hex_color: str) -> bool:
    r, g, b = _hex_to_rgb(hex_color, default=(255, 255, 255))
    luma = 0.2126 * r + 0.7152 * g + 0.0722 * b
    return luma > 128


# Layouts


def _layout_classic(draw: ImageDraw.ImageDraw, state: CoverState, size: tuple[int, int], s: int) -> None:
    w, h = size
    pad = int(w * PADDING)
    max_w = w - 2 * pad

    title = _title_block(draw, state, s, max_w)
    subtitle = _subtitle_block(draw, state, s, max_w)

    y = pad + 16 * s
    if title:
        _draw_block(draw, title, x=w // 2, y=y, align="center")
        y += title.size[1] + int(HEADER_GAP_REM * REM * s)
    if subtitle:
        _draw_block(draw, subtitle, x=w // 2, y=y, align="center")

    _draw_footer(draw, state, s, x=w // 2, bottom=h - pad - 8 * s, align="center", max_w=max_w)


def _layout_split(draw: ImageDraw.ImageDraw, state: CoverState, size: tuple[int, int], s: int) -> None:
    # Text column on the right, vertically centred.
    w, h = size
    pad = int(w * PADDING)
    x0 = int(w * (1 - SPLIT_TEXT_COLUMN)) + pad // 2
    max_w = max(1, w - pad - x0)

    title = _title_block(draw, state, s, max_w)
    subtitle = _subtitle_block(draw, state, s, max_w)
    gap = int(HEADER_GAP_REM * REM * s)
    footer_h = _footer_height(state, s) if state.footer else 0

    blocks = [b for b in (title, subtitle) if b]
    total = sum(b.size[1] for b in blocks) + gap * max(0, len(blocks) - 1)
    if footer_h:
        total += gap + footer_h

    y = max(pad, (h - total) // 2)
    for b in blocks:
        _draw_block(draw, b, x=x0, y=y, align="left")
        y += b.size[1] + gap
    if footer_h:
        _draw_footer(draw, state, s, x=x0, bottom=y + footer_h, align="left", max_w=max_w)


def _layout_diagonal(draw: ImageDraw.ImageDraw, state: CoverState, size: tuple[int, int], s: int) -> None:
    w, h = size
    pad = int(w * PADDING)
    max_w = int((w - 2 * pad) * 0.7)

    title = _title_block(draw, state, s, max_w)
    subtitle = _subtitle_block(draw, state, s, max_w)

    y = pad
    if title:
        _draw_block(draw, title, x=pad, y=y, align="left")
        y += title.size[1] + int(HEADER_GAP_REM * REM * s)
    if subtitle:
        _draw_block(draw, subtitle, x=pad, y=y, align="left")

    _draw_footer(draw, state, s, x=w - pad, bottom=h - pad, align="right", max_w=max_w)


def _layout_big_type(draw: ImageDraw.ImageDraw, state: CoverState, size: tuple[int, int], s: int) -> None:
    w, h = size
    pad = int(w * PADDING)
    max_w = w - 2 * pad

    title = _title_block(draw, state, s, max_w, factor=2.0)
    subtitle = _subtitle_block(draw, state, s, max_w)
    gap = int(HEADER_GAP_REM * REM * s)

    blocks = [b for b in (title, subtitle) if b]
    total = sum(b.size[1] for b in blocks) + gap * max(0, len(blocks) - 1)
    y = max(pad, (h - total) // 2)
    for b in blocks:
        _draw_block(draw, b, x=w // 2, y=y, align="center")
        y += b.size[1] + gap

    _draw_footer(draw, state, s, x=w // 2, bottom=h - pad - 8 * s, align="center", max_w=max_w)


# Text blocks


def _font_px(rem: float, state: CoverState, s: int, factor: float = 1.0) -> int:
    try:
        text_scale = float(state.text_scale)
    except (TypeError, ValueError):
        text_scale = 1.0
    if not math.isfinite(text_scale) or text_scale <= 0:
        text_scale = 1.0
    return max(6, int(round(rem * REM * text_scale * factor * s)))


def _title_block(
    draw: ImageDraw.ImageDraw,
    state: CoverState,
    s: int,
    max_w: int,
    factor: float = 1.0,
) -> _Block | None:
    if not state.title:
        return None
    px = _font_px(TITLE_REM, state, s, factor)
    # line-height ~1.1
    font = _load_font(px, bold=True)
    return _make_block(draw, state.title, font, state.title_color, (0, 0, 0), max(1, int(px * 0.1)), max_w)


def _subtitle_block(draw: ImageDraw.ImageDraw, state: CoverState, s: int, max_w: int) -> _Block | None:
    if not state.subtitle:
        return None
    px = _font_px(SUBTITLE_REM, state, s)
    spacing = max(2, int(px * 0.18))
    return _make_block(draw, state.subtitle, _load_font(px), state.subtitle_color, (102, 102, 102), spacing, max_w)


def _make_block(
    draw: ImageDraw.ImageDraw,
    text: str,
    font,
    hex_color: str,
    default_rgb: tuple[int, int, int],
    spacing: int,
    max_w: int,
) -> _Block:
    wrapped = _wrap_to_width(draw, text, font, max_w)
    bbox = draw.multiline_textbbox((0, 0), wrapped, font=font, spacing=spacing)
    fill = _hex_to_rgb(hex_color, default=default_rgb) + (255,)
    return _Block(text=wrapped, font=font, fill=fill, spacing=spacing, size=(bbox[2] - bbox[0], bbox[3]))


def _draw_block(draw: ImageDraw.ImageDraw, block: _Block, x: int, y: int, align: str) -> None:
    bw = block.size[0]
    if align == "center":
        x0 = x - bw // 2
    elif align == "right":
        x0 = x - bw
    else:
        x0 = x
    draw.multiline_text((x0, y), block.text, font=block.font, fill=block.fill, spacing=block.spacing, align=align)


def _footer_height(state: CoverState, s: int) -> int:
    px = _font_px(FOOTER_REM, state, s)
    return int(px * 1.2) + px  # text line + 0.5em padding top and bottom


def _draw_footer(
    draw: ImageDraw.ImageDraw,
    state: CoverState,
    s: int,
    x: int,
    bottom: int,
    align: str,
    max_w: int,
) -> None:
    """
    Footer tag: uppercased text in a rounded box whose fill contrasts with the text colour.
    """
    if not state.footer:
        return
    px = _font_px(FOOTER_REM, state, s)
    font = _load_font(px, bold=True)
    text = state.footer.upper()
    pad_x, pad_y = px, px // 2

    wrapped = _wrap_to_width(draw, text, font, max(1, max_w - 2 * pad_x))
    spacing = max(2, int(px * 0.18))
    bbox = draw.multiline_textbbox((0, 0), wrapped, font=font, spacing=spacing)
    tw, th = bbox[2] - bbox[0], max(bbox[3], int(px * 1.2))

    box_w, box_h = tw + 2 * pad_x, th + 2 * pad_y
    if align == "center":
        bx1 = x - box_w // 2
    elif align == "right":
        bx1 = x - box_w
    else:
        bx1 = x
    by1 = bottom - box_h

    text_rgb = _hex_to_rgb(state.footer_color, default=(255, 255, 255))
    box_rgb = (0, 0, 0) if is_light_color(state.footer_color) else (255, 255, 255)
    draw.rounded_rectangle([(bx1, by1), (bx1 + box_w, by1 + box_h)], radius=6 * s, fill=box_rgb + (255,))
    draw.multiline_text(
        (bx1 + pad_x - bbox[0], by1 + pad_y),
        wrapped,
        font=font,
        fill=text_rgb + (255,),
        spacing=spacing,
        align="center",
    )


# Helpers


def _value(v: Any) -> str:
    return str(getattr(v, "value", v) or "")


def _resize_cover(img: Image.Image, size: tuple[int, int]) -> Image.Image:
    """
    Resize to cover the target canvas (no stretching), then center-crop.
    """
    tw, th = size
    iw, ih = img.size
    if iw <= 0 or ih <= 0:
        return img.resize(size, Image.Resampling.LANCZOS)

    scale = max(tw / iw, th / ih)
    nw, nh = max(tw, int(round(iw * scale))), max(th, int(round(ih * scale)))
    resized = img.resize((nw, nh), Image.Resampling.LANCZOS)

    left = max(0, (nw - tw) // 2)
    top = max(0, (nh - th) // 2)
    return resized.crop((left, top, left + tw, top + th))


def _round_corners(img_rgba: Image.Image, radius: int) -> Image.Image:
    w, h = img_rgba.size
    mask = Image.new("L", (w, h), 0)
    ImageDraw.Draw(mask).rounded_rectangle([(0, 0), (w - 1, h - 1)], radius=radius, fill=255)
    img_rgba.putalpha(mask)
    return img_rgba


_FONT_CANDIDATES: list[str] = [
    "assets/fonts/NotoSansSC-Regular.ttf",
    "/System/Library/Fonts/PingFang.ttc",
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc",
    "C:\\Windows\\Fonts\\msyh.ttc",
    "/System/Library/Fonts/Helvetica.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "C:\\Windows\\Fonts\\arial.ttf",
]

_BOLD_FONT_CANDIDATES: list[str] = [
    "assets/fonts/NotoSansSC-Bold.ttf",
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Bold.ttc",
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Bold.ttc",
    "C:\\Windows\\Fonts\\msyhbd.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "C:\\Windows\\Fonts\\arialbd.ttf",
]


def _load_font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """
    Prefer a configured TTF, then common system fonts (CJK-capable first). Falls back
    to Pillow's bundled default font so rendering never depends on the host.
    """
    configured = settings.bold_font_path if bold else settings.font_path
    candidates = ([configured] if configured else []) + (_BOLD_FONT_CANDIDATES if bold else []) + _FONT_CANDIDATES
    for c in candidates:
        if Path(c).exists():
            try:
                return ImageFont.truetype(c, size=size)
            except OSError:
                continue
    return ImageFont.load_default(size=size)


def _hex_to_rgb(hex_color: Any, default: tuple[int, int, int]) -> tuple[int, int, int]:
    s = str(hex_color or "").strip().lstrip("#")
    if len(s) == 3:
        s = "".join([c * 2 for c in s])
    if len(s) != 6:
        return default
    try:
        return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))
    except ValueError:
        return default


def _wrap_to_width(draw: ImageDraw.ImageDraw, text: str, font, max_w: int) -> str:
    """
    Greedy wrap that keeps explicit line breaks. Latin text breaks between words,
    CJK text between characters.
    """
    lines: list[str] = []
    for paragraph in (text or "").split("\n"):
        lines.extend(_wrap_paragraph(draw, paragraph, font, max_w))
    return "\n".join(lines)


def _wrap_paragraph(draw: ImageDraw.ImageDraw, paragraph: str, font, max_w: int) -> list[str]:
    if not paragraph.strip():
        return [""]
    lines: list[str] = []
    cur = ""
    for tok in _TOKEN_RE.findall(paragraph):
        trial = cur + tok
        if cur.strip() and draw.textlength(trial.rstrip(), font=font) > max_w:
            lines.append(cur.rstrip())
            cur = tok.lstrip()
        else:
            cur = trial
    if cur.strip():
        lines.append(cur.rstrip())
    return lines or [""]
