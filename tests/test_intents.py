import pytest

from heroshot.editor.intents import NoAction, Regenerate, UpdateStyle, parse_edit_result


def test_update_style_with_color_only():
    result = parse_edit_result('{"action": "UPDATE_STYLE", "updates": {"textColor": "#ff0000"}}')
    assert result == UpdateStyle(text_scale=None, text_color="#ff0000")


def test_code_fenced_json_is_accepted():
    raw = '```json\n{"action": "UPDATE_STYLE", "updates": {"textScale": 0.8}}\n```'
    assert parse_edit_result(raw) == UpdateStyle(text_scale=0.8)


def test_wrong_typed_fields_are_dropped():
    raw = '{"action": "UPDATE_STYLE", "updates": {"textScale": "huge", "textColor": "#00ff00"}}'
    assert parse_edit_result(raw) == UpdateStyle(text_color="#00ff00")


def test_non_finite_scale_is_dropped_but_colour_kept():
    raw = '{"action": "UPDATE_STYLE", "updates": {"textScale": NaN, "textColor": "#ff0000"}}'
    assert parse_edit_result(raw) == UpdateStyle(text_color="#ff0000")


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "not json at all",
        "[1, 2, 3]",
        '{"action": "DANCE"}',
        '{"action": "NONE"}',
        '{"action": "UPDATE_STYLE", "updates": {"textScale": true}}',
        '{"action": "UPDATE_STYLE", "updates": {"textScale": -1}}',
        '{"action": "UPDATE_STYLE", "updates": {"textScale": NaN}}',
        '{"action": "UPDATE_STYLE", "updates": {"textScale": Infinity}}',
        '{"action": "REGENERATE", "updates": {}}',
        '{"action": "REGENERATE", "updates": {"newPrompt": "   "}}',
        '{"action": "REGENERATE", "updates": "newPrompt"}',
    ],
)
def test_unusable_replies_become_no_action(raw):
    assert parse_edit_result(raw) == NoAction()


def test_regenerate_prompt_is_trimmed():
    raw = '{"action": "regenerate", "updates": {"newPrompt": "  beach at dusk  "}}'
    assert parse_edit_result(raw) == Regenerate(new_prompt="beach at dusk")
