"""Tests for environment-driven configuration."""

import pytest

from talk2notes.config import Config, Provider, SummaryOverflow
from talk2notes.errors import ConfigError
from talk2notes.llm import AnthropicChatBackend, OpenAIChatBackend, get_chat_backend
from talk2notes.llm.openai_chat import GROQ_BASE_URL


class TestConfigFromEnv:
    def test_defaults_to_openai(self) -> None:
        config = Config.from_env({"OPENAI_API_KEY": "sk-test"})

        assert config.ai.provider is Provider.OPENAI
        assert config.ai.transcription_model == "whisper-1"
        assert config.ai.summarization_model == "gpt-4-turbo-preview"
        assert config.ai.api_key == "sk-test"
        assert config.ai.max_input_tokens == 100_000
        assert config.summary_overflow is SummaryOverflow.CROP
        assert config.limits.max_file_size_mb == 100
        assert config.transcription_language == "en"

    def test_groq_defaults(self) -> None:
        config = Config.from_env({"AI_PROVIDER": "groq", "GROQ_API_KEY": "gsk"})

        assert config.ai.provider is Provider.GROQ
        assert config.ai.transcription_model == "whisper-large-v3"
        assert config.ai.summarization_model == "llama-3.3-70b-versatile"
        assert config.ai.api_key == "gsk"
        assert config.ai.max_input_tokens == 9000

    def test_deepgram_borrows_openai_for_summaries(self) -> None:
        config = Config.from_env({
            "AI_PROVIDER": "deepgram",
            "DEEPGRAM_API_KEY": "dg",
            "OPENAI_API_KEY": "sk",
        })
        assert config.ai.transcription_model == "nova-2"
        assert config.ai.api_key == "dg"
        assert config.ai.openai_api_key == "sk"

    def test_provider_is_case_insensitive(self) -> None:
        assert Config.from_env({"AI_PROVIDER": "Anthropic"}).ai.provider is Provider.ANTHROPIC

    def test_unknown_provider(self) -> None:
        with pytest.raises(ConfigError, match="Unsupported AI provider: whisperx"):
            Config.from_env({"AI_PROVIDER": "whisperx"})

    def test_overrides_win_over_env(self) -> None:
        config = Config.from_env(
            {"AI_PROVIDER": "openai"},
            provider="groq",
            summary_overflow=SummaryOverflow.CHUNK,
        )
        assert config.ai.provider is Provider.GROQ
        assert config.summary_overflow is SummaryOverflow.CHUNK

    def test_limits_from_env(self) -> None:
        config = Config.from_env({
            "MAX_FILE_SIZE_MB": "250",
            "ALLOWED_AUDIO_FORMATS": "MP3, .wav",
            "SUMMARY_OVERFLOW": "chunk",
        })
        assert config.limits.max_file_size_mb == 250
        assert config.limits.audio_formats == ("mp3", "wav")
        assert config.summary_overflow is SummaryOverflow.CHUNK

    def test_invalid_number(self) -> None:
        with pytest.raises(ConfigError, match="MAX_FILE_SIZE_MB"):
            Config.from_env({"MAX_FILE_SIZE_MB": "lots"})

    def test_invalid_overflow(self) -> None:
        with pytest.raises(ConfigError, match="SUMMARY_OVERFLOW"):
            Config.from_env({"SUMMARY_OVERFLOW": "truncate"})


class TestGetChatBackend:
    def test_no_key_means_no_backend(self) -> None:
        assert get_chat_backend(Config.from_env({}).ai) is None

    def test_openai(self) -> None:
        backend = get_chat_backend(Config.from_env({"OPENAI_API_KEY": "sk"}).ai)
        assert isinstance(backend, OpenAIChatBackend)
        assert backend.model == "gpt-4-turbo-preview"

    def test_groq_uses_compatible_endpoint(self) -> None:
        backend = get_chat_backend(Config.from_env({"AI_PROVIDER": "groq", "GROQ_API_KEY": "gsk"}).ai)
        assert isinstance(backend, OpenAIChatBackend)
        assert str(backend.client.base_url).rstrip("/") == GROQ_BASE_URL

    def test_deepgram_needs_openai_key(self) -> None:
        ai = Config.from_env({"AI_PROVIDER": "deepgram", "DEEPGRAM_API_KEY": "dg"}).ai
        assert get_chat_backend(ai) is None

    def test_anthropic(self) -> None:
        pytest.importorskip("anthropic")
        ai = Config.from_env({"AI_PROVIDER": "anthropic", "ANTHROPIC_API_KEY": "sk-ant"}).ai
        assert isinstance(get_chat_backend(ai), AnthropicChatBackend)
