import json
from unittest.mock import MagicMock, patch
import pytest
from core.exceptions import ConfigError, GenerationFailed
from flashcards import generator

PHOTOSYNTHESIS = (
    "Photosynthesis converts light energy into chemical energy. It happens in the chloroplasts "
    "of plant cells. The light reactions produce ATP and NADPH, and the Calvin cycle fixes carbon "
    "dioxide into glucose."
)

CARDS = [
    {"question": "Where does photosynthesis happen?", "answer": "In the chloroplasts."},
    {"question": "What do the light reactions produce?", "answer": "ATP and NADPH."},
    {"question": "What does the Calvin cycle do?", "answer": "Fixes carbon dioxide into glucose."},
]


@pytest.fixture(autouse=True)
def gemini(settings, monkeypatch):
    settings.GOOGLE_API_KEY = "test-key"
    monkeypatch.setattr(generator, "_client", None)
    monkeypatch.setattr(generator, "_client_key", None)
    with patch("flashcards.generator.genai.Client") as client_cls:
        yield client_cls


def _reply(client_cls, text):
    client_cls.return_value.models.generate_content.return_value = MagicMock(text=text)


def _sent_prompt(client_cls):
    return client_cls.return_value.models.generate_content.call_args.kwargs["contents"]


def test_generates_cards_from_notes(gemini):
    _reply(gemini, json.dumps(CARDS))

    cards = generator.generate_flashcards(PHOTOSYNTHESIS)

    assert 1 <= len(cards) <= 20
    assert cards == CARDS
    assert PHOTOSYNTHESIS in _sent_prompt(gemini)


def test_code_fences_are_stripped(gemini):
    _reply(gemini, "```json\n" + json.dumps(CARDS) + "\n```")
    assert generator.generate_flashcards(PHOTOSYNTHESIS) == CARDS


def test_card_text_is_trimmed_and_extra_keys_dropped(gemini):
    _reply(gemini, json.dumps([{"question": " Q? ", "answer": " A. ", "difficulty": "easy"}]))
    assert generator.generate_flashcards("notes") == [{"question": "Q?", "answer": "A."}]


def test_long_notes_are_truncated(gemini):
    _reply(gemini, json.dumps(CARDS))
    notes = "x" * 6000

    generator.generate_flashcards(notes)

    prompt = _sent_prompt(gemini)
    assert "x" * 5000 + "..." in prompt
    assert "x" * 5001 not in prompt


def test_truncate_content_leaves_short_text_alone():
    assert generator.truncate_content("short", 10) == "short"
    assert generator.truncate_content("abcdef", 3) == "abc..."


@pytest.mark.parametrize("reply", [
    "not json at all",
    "[]",
    '{"question": "Q", "answer": "A"}',
    '[{"question": "Q"}]',
    '[{"question": "", "answer": "A"}]',
    '[{"question": "Q", "answer": 42}]',
    '["just a string"]',
])
def test_unusable_replies_fail(gemini, reply):
    _reply(gemini, reply)
    with pytest.raises(GenerationFailed) as excinfo:
        generator.generate_flashcards(PHOTOSYNTHESIS)
    assert str(excinfo.value.detail) == generator.FLASHCARD_ERROR


def test_sdk_errors_become_generation_failed(gemini):
    gemini.return_value.models.generate_content.side_effect = RuntimeError("quota exceeded")
    with pytest.raises(GenerationFailed):
        generator.generate_flashcards(PHOTOSYNTHESIS)


def test_missing_api_key(settings, gemini):
    settings.GOOGLE_API_KEY = None
    with pytest.raises(ConfigError) as excinfo:
        generator.generate_flashcards(PHOTOSYNTHESIS)
    assert "GOOGLE_API_KEY" in str(excinfo.value.detail)
    gemini.assert_not_called()


def test_client_is_built_once_per_key(settings, gemini):
    first = generator.get_client()
    second = generator.get_client()
    assert first is second
    gemini.assert_called_once_with(api_key="test-key")

    settings.GOOGLE_API_KEY = "rotated-key"
    generator.get_client()
    assert gemini.call_count == 2


def test_answer_question(gemini):
    _reply(gemini, "  In the chloroplasts.  ")

    answer = generator.answer_question(PHOTOSYNTHESIS, "Where does photosynthesis happen?")

    assert answer == "In the chloroplasts."
    prompt = _sent_prompt(gemini)
    assert "Where does photosynthesis happen?" in prompt
    assert PHOTOSYNTHESIS in prompt


def test_answer_prompt_uses_smaller_window():
    prompt = generator.build_answer_prompt("y" * 4500, "why?")
    assert "y" * 4000 + "..." in prompt
    assert "y" * 4001 not in prompt


@pytest.mark.parametrize("reply", ["", "   ", None])
def test_empty_answer_fails(gemini, reply):
    _reply(gemini, reply)
    with pytest.raises(GenerationFailed) as excinfo:
        generator.answer_question(PHOTOSYNTHESIS, "What is ATP?")
    assert str(excinfo.value.detail) == generator.ANSWER_ERROR
