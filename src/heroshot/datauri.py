from __future__ import annotations

import base64
import binascii
from io import BytesIO

from PIL import Image


def to_data_uri(data: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def split_data_uri(value: str, default_mime: str = "image/png") -> tuple[str, str]:
    """
    Return (mime_type, base64 payload). Bare base64 strings are accepted as-is.
    """
    s = (value or "").strip()
    if s.startswith("data:") and "," in s:
        header, payload = s.split(",", 1)
        mime = header[5:].split(";", 1)[0] or default_mime
        return mime, payload
    return default_mime, s


def decode_data_uri(value: str) -> tuple[str, bytes]:
    mime, payload = split_data_uri(value)
    try:
        return mime, base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"invalid base64 image payload: {exc}") from exc


def open_data_uri(value: str) -> Image.Image:
    _, raw = decode_data_uri(value)
    img = Image.open(BytesIO(raw))
    img.load()
    return img
