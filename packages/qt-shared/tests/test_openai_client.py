from __future__ import annotations

from types import SimpleNamespace

import pytest

from qt_shared.config import Settings


def _install_fake_openai(monkeypatch, captured_kwargs: dict, content: str | None = '{"ok":true}') -> None:
    class _FakeCompletions:
        @staticmethod
        def create(**kwargs):
            captured_kwargs.update(kwargs)
            usage = SimpleNamespace(
                prompt_tokens=10,
                completion_tokens=5,
                total_tokens=15,
            )
            message = SimpleNamespace(content=content)
            choice = SimpleNamespace(message=message)
            return SimpleNamespace(choices=[choice], usage=usage)

    class _FakeChat:
        completions = _FakeCompletions()

    class _FakeOpenAIClient:
        def __init__(self, api_key: str, base_url: str | None = None):
            captured_kwargs["client_api_key"] = api_key
            captured_kwargs["client_base_url"] = base_url
            self.chat = _FakeChat()

    fake_module = SimpleNamespace(OpenAI=_FakeOpenAIClient)
    monkeypatch.setitem(__import__("sys").modules, "openai", fake_module)


@pytest.mark.parametrize("base_url,expected", [
    ("https://api.openai.com", "https://api.openai.com/v1/chat/completions"),
    ("https://api.openai.com/v1", "https://api.openai.com/v1/chat/completions"),
    ("https://api.openai.com/v1/", "https://api.openai.com/v1/chat/completions"),
    ("https://gw.local/v1/chat/completions", "https://gw.local/v1/chat/completions"),
    ("  https://gw.local  ", "https://gw.local/v1/chat/completions"),
    ("", ""),
])
def test_build_endpoint(base_url, expected) -> None:
    from qt_shared.llm import build_endpoint

    assert build_endpoint(base_url) == expected


def test_normalize_base_url_drops_completions_path() -> None:
    from qt_shared.llm import normalize_base_url

    assert normalize_base_url("https://gw.local/v1/chat/completions") == "https://gw.local/v1"
    assert normalize_base_url("https://gw.local") == "https://gw.local/v1"
    assert normalize_base_url("") == ""


def test_analyze_sends_system_and_user_messages(monkeypatch) -> None:
    from qt_shared.llm.openai import OpenAIClient

    captured = {}
    _install_fake_openai(monkeypatch, captured)

    client = OpenAIClient(
        api_key="test",
        model="gpt-4o",
        base_url="https://gw.local",
        temperature=0.2,
        max_tokens=900,
    )
    response = client.analyze("Return JSON", system="Be brief")

    assert response == '{"ok":true}'
    assert captured["client_api_key"] == "test"
    assert captured["client_base_url"] == "https://gw.local/v1"
    assert captured["model"] == "gpt-4o"
    assert captured["temperature"] == 0.2
    assert captured["max_tokens"] == 900
    assert captured["messages"] == [
        {"role": "system", "content": "Be brief"},
        {"role": "user", "content": "Return JSON"},
    ]
    assert client.last_usage == {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}


def test_analyze_without_system_message(monkeypatch) -> None:
    from qt_shared.llm.openai import OpenAIClient

    captured = {}
    _install_fake_openai(monkeypatch, captured, content=None)

    client = OpenAIClient(api_key="test")
    assert client.analyze("hi") == ""
    assert [m["role"] for m in captured["messages"]] == ["user"]
    assert captured["client_base_url"] is None


class TestCreateLLMClient:
    @pytest.fixture
    def settings(self, monkeypatch):
        settings = Settings(
            _env_file=None,
            ai_base_url="https://gw.local/v1",
            ai_api_key="",
            ai_model="",
            ai_temperature=0.5,
            ai_max_tokens=300,
        )
        monkeypatch.setattr("qt_shared.llm.factory.get_settings", lambda: settings)
        return settings

    def test_unconfigured_returns_none(self, settings) -> None:
        from qt_shared.llm import create_llm_client

        assert create_llm_client() is None

    def test_blank_override_returns_none(self, settings) -> None:
        from qt_shared.llm import create_llm_client

        settings.ai_api_key = "key"
        settings.ai_model = "model"
        assert create_llm_client(api_key="   ") is None

    def test_settings_supply_missing_values(self, settings) -> None:
        from qt_shared.llm import OpenAIClient, create_llm_client

        settings.ai_api_key = "key"
        settings.ai_model = "model"
        client = create_llm_client()
        assert isinstance(client, OpenAIClient)
        assert client.base_url == "https://gw.local/v1"
        assert client.temperature == 0.5
        assert client.max_tokens == 300

    def test_arguments_override_settings(self, settings) -> None:
        from qt_shared.llm import create_llm_client

        client = create_llm_client(base_url="https://other.host", model=" m ", api_key="k")
        assert client.base_url == "https://other.host/v1"
        assert client.model == "m"
        assert client.api_key == "k"

    def test_overrides_leave_settings_untouched(self, settings) -> None:
        from qt_shared.llm import create_llm_client

        client = create_llm_client(model="m", api_key="k")
        assert client is not None
        assert settings.ai_model == ""
        assert settings.ai_api_key == ""
        assert settings.ai_configured is False

    def test_follows_settings_ai_configured(self, settings) -> None:
        from qt_shared.llm import create_llm_client

        settings.ai_api_key = "key"
        settings.ai_model = "model"
        settings.ai_base_url = "  "
        assert settings.ai_configured is False
        assert create_llm_client() is None
