from types import SimpleNamespace

import pytest

from heroshot.editor.intents import NoAction, UpdateStyle
from heroshot.errors import GenerationError
from heroshot.providers.openai_provider import OpenAITextProvider


class _FakeResponses:
    def __init__(self, output_text=None, error=None):
        self.output_text = output_text
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(output_text=self.output_text)


def _provider(**kwargs):
    responses = _FakeResponses(**kwargs)
    return OpenAITextProvider(api_key="k", client=SimpleNamespace(responses=responses)), responses


@pytest.mark.asyncio
async def test_interpret_requests_json_and_parses():
    provider, responses = _provider(output_text='{"action":"UPDATE_STYLE","updates":{"textScale":1.2}}')

    result = await provider.interpret_edit_command("bigger", "p", 1.0)

    assert result == UpdateStyle(text_scale=1.2)
    assert responses.calls[0]["text"] == {"format": {"type": "json_object"}}


@pytest.mark.asyncio
async def test_interpret_error_is_no_action():
    provider, _ = _provider(error=RuntimeError("network"))
    assert await provider.interpret_edit_command("bigger", "p", 1.0) == NoAction()


@pytest.mark.asyncio
async def test_polish_title_falls_back_to_original_on_empty_reply():
    provider, _ = _provider(output_text="   ")
    assert await provider.polish_title("Original") == "Original"


@pytest.mark.asyncio
async def test_polish_title_error_raises():
    provider, _ = _provider(error=RuntimeError("quota"))
    with pytest.raises(GenerationError):
        await provider.polish_title("Original")
