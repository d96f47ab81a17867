# tests/conftest.py
import base64
import io
from types import SimpleNamespace

import pytest
from PIL import Image

from heroshot.editor.intents import NoAction
from heroshot.editor.session import CoverSession


# -------- Utilities --------
def png_bytes(color=(200, 10, 10), size=(8, 8)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def png_data_uri(color=(200, 10, 10), size=(8, 8)) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes(color, size)).decode("ascii")


@pytest.fixture
def red_png_uri() -> str:
    return png_data_uri()


# -------- Fake google-genai client --------
def image_response(data: bytes):
    parts = [
        SimpleNamespace(text="Here is your image", inline_data=None),
        SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type="image/png")),
    ]
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))], text=None)


def text_response(text):
    return SimpleNamespace(candidates=[], text=text)


class FakeModels:
    def __init__(self):
        self.calls = []
        self.responses = []
        self.error = None

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


class FakeGenaiClient:
    def __init__(self):
        self.models = FakeModels()
        self.aio = SimpleNamespace(models=self.models)


@pytest.fixture
def genai_client():
    return FakeGenaiClient()


# -------- Fake providers for the session --------
class FakeImageProvider:
    name = "fake"

    def __init__(self, result=None, error=None, gate=None):
        self.result = result or png_data_uri()
        self.error = error
        self.gate = gate
        self.requests = []

    async def generate_cover_image(self, request):
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


class FakeTextProvider:
    name = "fake"

    def __init__(self, edit_result=None, polished="Polished Title", error=None):
        self.edit_result = edit_result or NoAction()
        self.polished = polished
        self.error = error
        self.commands = []

    async def interpret_edit_command(self, command, current_prompt, current_scale):
        self.commands.append((command, current_prompt, current_scale))
        return self.edit_result

    async def polish_title(self, title):
        if self.error is not None:
            raise self.error
        return self.polished


@pytest.fixture
def image_provider():
    return FakeImageProvider()


@pytest.fixture
def text_provider():
    return FakeTextProvider()


@pytest.fixture
def make_session(image_provider, text_provider):
    def _make(api_key="test-key", **kwargs):
        return CoverSession(
            api_key=api_key,
            image_provider_factory=kwargs.pop("image_provider_factory", lambda key: image_provider),
            text_provider_factory=kwargs.pop("text_provider_factory", lambda key: text_provider),
            **kwargs,
        )

    return _make
