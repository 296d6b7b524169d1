from types import SimpleNamespace

from blo_register.config import AssistantConfig
from blo_register.services import FALLBACK_MESSAGE, GREETING, DataAssistant, build_system_prompt


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(**kwargs):
    completions = FakeCompletions(**kwargs)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def test_prompt_carries_data_snapshot(households, voters):
    prompt = build_system_prompt(households, voters)
    assert "Booth Level Officer" in prompt
    assert '"houseNo": "23"' in prompt
    assert '"epicNo": "ABC7654321"' in prompt


def test_ask_sends_question_and_snapshot(households, voters):
    client, completions = fake_client(content="There are 2 households.")
    assistant = DataAssistant(AssistantConfig(api_key="k", model="gemini-2.5-flash"), client=client)

    answer = assistant.ask("How many households?", households, voters)

    assert answer == "There are 2 households."
    call = completions.calls[0]
    assert call["model"] == "gemini-2.5-flash"
    assert call["messages"][0]["role"] == "system"
    assert "Meena Devi" in call["messages"][0]["content"]
    assert call["messages"][1] == {"role": "user", "content": "How many households?"}
    assert [m.role for m in assistant.transcript] == ["model", "user", "model"]
    assert assistant.transcript[0].content == GREETING


def test_endpoint_failure_returns_fallback(households, voters):
    client, completions = fake_client(error=RuntimeError("connection reset"))
    assistant = DataAssistant(AssistantConfig(api_key="k"), client=client)

    assert assistant.ask("Anything?", households, voters) == FALLBACK_MESSAGE
    # No retries
    assert len(completions.calls) == 1


def test_empty_response_returns_fallback(households, voters):
    client, _ = fake_client(content="   ")
    assistant = DataAssistant(AssistantConfig(api_key="k"), client=client)
    assert assistant.ask("Anything?", households, voters) == FALLBACK_MESSAGE


def test_missing_api_key_returns_fallback(households, voters):
    assistant = DataAssistant(AssistantConfig(api_key=""))
    assert assistant.ask("Anything?", households, voters) == FALLBACK_MESSAGE
    assert assistant.transcript[-1].content == FALLBACK_MESSAGE


def test_gemini_base_url_default():
    config = AssistantConfig(provider="Gemini", base_url="")
    assert config.get_normalized_base_url().endswith("/v1beta/openai/")
    config = AssistantConfig(base_url="https://api.example.com/v1/chat/completions")
    assert config.get_normalized_base_url() == "https://api.example.com/v1/"


def test_is_configured_follows_api_key():
    assert AssistantConfig(api_key="k").is_configured
    assert not AssistantConfig(api_key="").is_configured
