import base64

import pytest

from conftest import image_response, png_bytes, png_data_uri, text_response
from heroshot.editor.intents import NoAction, Regenerate, UpdateStyle
from heroshot.editor.state import AspectRatio, ThemeMode, ToolMode, ViralLayout
from heroshot.errors import GenerationError, NoImageGeneratedError
from heroshot.providers.base import CoverRequest
from heroshot.providers.gemini_provider import GeminiProvider, provider_aspect_ratio
from heroshot.providers.prompts import REFERENCE_INSTRUCTION, SUBJECT_INSTRUCTION, build_cover_prompt


def _request(**kwargs):
    base = dict(active_prompt="soft studio light, marble table", aspect_ratio=AspectRatio.PORTRAIT)
    base.update(kwargs)
    return CoverRequest(**base)


@pytest.mark.asyncio
async def test_generate_returns_png_data_uri(genai_client):
    raw = png_bytes()
    genai_client.models.responses.append(image_response(raw))
    provider = GeminiProvider(api_key="k", client=genai_client)

    uri = await provider.generate_cover_image(_request())

    assert uri == "data:image/png;base64," + base64.b64encode(raw).decode("ascii")
    assert len(genai_client.models.calls) == 1


@pytest.mark.asyncio
async def test_generate_orders_reference_then_subject_then_prompt(genai_client):
    genai_client.models.responses.append(image_response(png_bytes()))
    provider = GeminiProvider(api_key="k", client=genai_client)
    ref = "data:image/jpeg;base64," + base64.b64encode(b"ref-bytes").decode("ascii")
    subject = png_data_uri()

    await provider.generate_cover_image(_request(reference_image=ref, subject_image=subject))

    parts = genai_client.models.calls[0]["contents"]
    assert parts[0].inline_data.mime_type == "image/jpeg"
    assert parts[0].inline_data.data == b"ref-bytes"
    assert parts[1].text == REFERENCE_INSTRUCTION
    assert parts[2].inline_data.mime_type == "image/png"
    assert parts[3].text == SUBJECT_INSTRUCTION
    assert "soft studio light, marble table" in parts[4].text
    assert "main hero product" in parts[4].text


@pytest.mark.asyncio
async def test_generate_sends_provider_aspect_ratio(genai_client):
    genai_client.models.responses.append(image_response(png_bytes()))
    provider = GeminiProvider(api_key="k", client=genai_client)

    await provider.generate_cover_image(_request(aspect_ratio=AspectRatio.WIDE_2_35))

    config = genai_client.models.calls[0]["config"]
    assert config.image_config.aspect_ratio == "21:9"
    assert provider_aspect_ratio(AspectRatio.PORTRAIT) == "3:4"


@pytest.mark.asyncio
async def test_generate_without_image_part_raises(genai_client):
    genai_client.models.responses.append(text_response("I cannot draw that."))
    provider = GeminiProvider(api_key="k", client=genai_client)

    with pytest.raises(NoImageGeneratedError):
        await provider.generate_cover_image(_request())


@pytest.mark.asyncio
async def test_generate_wraps_provider_errors(genai_client):
    genai_client.models.error = RuntimeError("quota exceeded")
    provider = GeminiProvider(api_key="k", client=genai_client)

    with pytest.raises(GenerationError) as exc_info:
        await provider.generate_cover_image(_request())
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert len(genai_client.models.calls) == 1


def test_product_prompt_reserves_top_and_bottom():
    prompt = build_cover_prompt("marble", has_subject=False, theme_mode=ThemeMode.DARK)
    assert "top 30% and bottom 20%" in prompt
    assert "BLACK" in prompt
    assert "Do not generate any text" in prompt
    assert "hero product" not in prompt


def test_viral_split_prompt_reserves_right_column():
    prompt = build_cover_prompt(
        "marble",
        has_subject=False,
        tool_mode=ToolMode.VIRAL_COVER,
        viral_layout=ViralLayout.SPLIT,
    )
    assert "right 40%" in prompt
    assert "BACKGROUND COLOR" not in prompt


def test_viral_big_type_prompt_keeps_frame_low_contrast():
    prompt = build_cover_prompt("x", has_subject=False, tool_mode="VIRAL_COVER", viral_layout="BIG_TYPE")
    assert "low-contrast" in prompt


@pytest.mark.asyncio
async def test_interpret_update_style(genai_client):
    genai_client.models.responses.append(text_response('{"action":"UPDATE_STYLE","updates":{"textScale":1.5}}'))
    provider = GeminiProvider(api_key="k", client=genai_client)

    result = await provider.interpret_edit_command("bigger text", "prompt", 1.25)

    assert result == UpdateStyle(text_scale=1.5)
    call = genai_client.models.calls[0]
    assert call["config"].response_mime_type == "application/json"
    assert "bigger text" in call["contents"]
    assert "Text Scale: 1.25" in call["contents"]


@pytest.mark.asyncio
async def test_interpret_regenerate(genai_client):
    genai_client.models.responses.append(
        text_response('{"action": "REGENERATE", "updates": {"newPrompt": "snowy mountain backdrop"}}')
    )
    provider = GeminiProvider(api_key="k", client=genai_client)

    assert await provider.interpret_edit_command("snow", "p", 1) == Regenerate(new_prompt="snowy mountain backdrop")


@pytest.mark.asyncio
async def test_interpret_malformed_json_is_none(genai_client):
    genai_client.models.responses.append(text_response("{not json"))
    provider = GeminiProvider(api_key="k", client=genai_client)

    assert await provider.interpret_edit_command("x", "p", 1) == NoAction()


@pytest.mark.asyncio
async def test_interpret_provider_error_is_none(genai_client):
    genai_client.models.error = RuntimeError("boom")
    provider = GeminiProvider(api_key="k", client=genai_client)

    assert isinstance(await provider.interpret_edit_command("x", "p", 1), NoAction)


@pytest.mark.asyncio
async def test_polish_title_trims(genai_client):
    genai_client.models.responses.append(text_response("  Silence, Perfected \n"))
    provider = GeminiProvider(api_key="k", client=genai_client)

    assert await provider.polish_title("Noise cancelling") == "Silence, Perfected"


@pytest.mark.asyncio
async def test_polish_title_error_raises(genai_client):
    genai_client.models.error = RuntimeError("auth")
    provider = GeminiProvider(api_key="k", client=genai_client)

    with pytest.raises(GenerationError):
        await provider.polish_title("t")
