from types import SimpleNamespace

import pytest

from mirador.analysis import GeminiProvider, GroqProvider, TrustLayerAssistant, get_llm_provider
from mirador.config import Settings


class StubCompletions:
    """Imita `client.chat.completions` de Groq guardando los kwargs."""

    def __init__(self, content='{"answer": "ok"}'):
        self.content = content
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        message = SimpleNamespace(content=f"  {self.content}\n")
        return SimpleNamespace(
            choices=[SimpleNamespace(message=message)],
            usage=SimpleNamespace(total_tokens=42),
        )


def stub_groq_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def groq_settings(**overrides):
    values = dict(
        _env_file=None,
        llm_provider="groq",
        groq_api_key="gsk-test",
        groq_model="llama-3.1-8b-instant",
    )
    values.update(overrides)
    return Settings(**values)


def test_factory_uses_injected_settings():
    client = stub_groq_client(StubCompletions())
    provider = get_llm_provider(groq_settings(), client=client)

    assert isinstance(provider, GroqProvider)
    assert provider.model == "llama-3.1-8b-instant"
    assert provider.api_key == "gsk-test"
    assert provider.client is client


def test_factory_builds_gemini_from_settings():
    settings = Settings(
        _env_file=None,
        llm_provider="Gemini",
        gemini_api_key="gem-test",
        gemini_model="gemini-2.0-flash-lite",
    )
    provider = get_llm_provider(settings, client=object())
    assert isinstance(provider, GeminiProvider)
    assert provider.model == "gemini-2.0-flash-lite"


def test_assistant_builds_provider_from_its_settings():
    assistant = TrustLayerAssistant(settings=groq_settings())
    assert isinstance(assistant.provider, GroqProvider)
    assert assistant.provider.model == "llama-3.1-8b-instant"


def test_unknown_provider_is_rejected():
    with pytest.raises(ValueError, match="no soportado"):
        get_llm_provider(groq_settings(llm_provider="openai"), client=object())


@pytest.mark.parametrize(
    "settings",
    [
        Settings(_env_file=None, llm_provider="groq", groq_api_key=None),
        Settings(_env_file=None, llm_provider="gemini", gemini_api_key=None),
    ],
)
def test_missing_api_key_is_rejected(settings):
    with pytest.raises(ValueError, match="API_KEY no configurada"):
        get_llm_provider(settings, client=object())


async def test_groq_requests_json_object_when_asked():
    completions = StubCompletions()
    provider = get_llm_provider(groq_settings(), client=stub_groq_client(completions))

    response = await provider.generate("system", "question", temperature=0.2, json_output=True)

    assert completions.kwargs["response_format"] == {"type": "json_object"}
    assert completions.kwargs["model"] == "llama-3.1-8b-instant"
    assert completions.kwargs["messages"] == [
        {"role": "system", "content": "system"},
        {"role": "user", "content": "question"},
    ]
    assert completions.kwargs["temperature"] == 0.2
    assert response.text == '{"answer": "ok"}'
    assert response.tokens_used == 42
    assert response.provider == "groq"


async def test_groq_plain_text_has_no_response_format():
    completions = StubCompletions(content="plain")
    provider = get_llm_provider(groq_settings(), client=stub_groq_client(completions))

    await provider.generate("system", "question")

    assert "response_format" not in completions.kwargs
