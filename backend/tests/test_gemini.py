from types import SimpleNamespace

import pytest

from skillsense.services import gemini
from skillsense.services.gemini import (
    GeminiError, GeminiResponseError, generate_json, parse_json_response,
)


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def install_client(monkeypatch, models):
    client = SimpleNamespace(aio=SimpleNamespace(models=models))
    monkeypatch.setattr(gemini, "get_genai_client", lambda: client)


def test_parses_plain_json():
    assert parse_json_response('{"skills": []}') == {"skills": []}


def test_strips_markdown_fences():
    text = '```json\n{"skills": [{"skill_name": "Go"}]}\n```'
    assert parse_json_response(text) == {"skills": [{"skill_name": "Go"}]}


def test_extracts_object_wrapped_in_prose():
    text = 'Here is the analysis:\n{"matching_skills": ["SQL"]}\nHope this helps!'
    assert parse_json_response(text) == {"matching_skills": ["SQL"]}


@pytest.mark.parametrize("text", ["", "   ", "not json at all", "{broken: json}"])
def test_unusable_answers_raise(text):
    with pytest.raises(GeminiResponseError):
        parse_json_response(text)


def test_client_is_not_created_without_api_key(monkeypatch):
    monkeypatch.setattr(gemini, "_genai_client", None)
    monkeypatch.setattr(gemini.settings, "gemini_api_key", "")
    assert gemini.get_genai_client() is None


async def test_generate_json_requires_configured_client(monkeypatch):
    monkeypatch.setattr(gemini, "get_genai_client", lambda: None)
    with pytest.raises(GeminiError, match="not configured"):
        await generate_json("prompt")


async def test_generate_json_returns_parsed_answer(monkeypatch):
    models = FakeModels(text='{"skills": [{"skill_name": "Python"}]}')
    install_client(monkeypatch, models)

    payload = await generate_json("extract this", temperature=0.2)

    assert payload == {"skills": [{"skill_name": "Python"}]}
    call = models.calls[0]
    assert call["contents"] == "extract this"
    assert call["model"] == gemini.settings.gemini_model
    assert call["config"].temperature == 0.2
    assert call["config"].response_mime_type == "application/json"


async def test_api_failure_is_wrapped(monkeypatch):
    install_client(monkeypatch, FakeModels(error=RuntimeError("quota exceeded")))
    with pytest.raises(GeminiError, match="quota exceeded") as exc_info:
        await generate_json("prompt")
    assert not isinstance(exc_info.value, GeminiResponseError)


async def test_empty_answer_is_a_response_error(monkeypatch):
    install_client(monkeypatch, FakeModels(text=None))
    with pytest.raises(GeminiResponseError):
        await generate_json("prompt")
