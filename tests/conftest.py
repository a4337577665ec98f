"""共用的 fake 组件：不调用 ffmpeg，也不访问网络"""

import json
import os
from collections.abc import Callable

import pytest

from talk2notes.config import Config, Provider, ProviderConfig
from talk2notes.errors import TranscoderError
from talk2notes.llm.base import AbstractChatBackend
from talk2notes.media.base import AbstractTranscoder
from talk2notes.models import AudioMetadata, TranscriptionOptions, TranscriptionResult
from talk2notes.transcriber.base import AbstractTranscriber
from talk2notes.utils import MB


def make_sparse_file(path, size_bytes: int) -> str:
    """只占元数据不占磁盘空间的大文件"""
    with open(path, "wb") as f:
        f.truncate(size_bytes)
    return str(path)


class SleepRecorder:
    """代替 asyncio.sleep，只记录等待时长"""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FakeTranscoder(AbstractTranscoder):
    """每次 transcode 按顺序写出指定大小的文件"""

    def __init__(
        self,
        output_sizes_mb: list[float] | None = None,
        duration: float = 1200.0,
        fail: bool = False,
    ) -> None:
        self.output_sizes_mb = list(output_sizes_mb or [1])
        self.duration = duration
        self.fail = fail
        self.transcode_calls: list[dict] = []
        self.probed: list[str] = []

    async def transcode(self, input_path, output_path, **kwargs) -> None:
        self.transcode_calls.append({"input": input_path, "output": output_path, **kwargs})
        size = self.output_sizes_mb.pop(0) if self.output_sizes_mb else 1
        make_sparse_file(output_path, int(size * MB))
        if self.fail:
            raise TranscoderError("ffmpeg exited with code 1: Invalid data found when processing input")

    async def probe(self, path: str) -> AudioMetadata:
        self.probed.append(path)
        return AudioMetadata(duration=self.duration, bitrate=64000, sample_rate=16000, channels=1)


class FakeChatBackend(AbstractChatBackend):
    """responder(system_prompt, user_content, temperature, json_mode) → 文本"""

    model = "fake-chat"

    def __init__(self, responder: Callable[..., str] | str | Exception) -> None:
        self.responder = responder
        self.calls: list[dict] = []

    async def complete(
        self,
        system_prompt: str,
        user_content: str,
        *,
        temperature: float = 0.3,
        json_mode: bool = False,
        max_tokens: int | None = None,
    ) -> str:
        self.calls.append({
            "system": system_prompt,
            "user": user_content,
            "temperature": temperature,
            "json_mode": json_mode,
        })
        if isinstance(self.responder, Exception):
            raise self.responder
        if isinstance(self.responder, str):
            return self.responder
        return self.responder(system_prompt, user_content, temperature, json_mode)


class FakeTranscriber(AbstractTranscriber):
    name = "Fake"
    max_file_size_mb = 25

    def __init__(self, text: str = "Hello class. Today we talk about patience.", duration: float | None = 1500.0,
                 error: Exception | None = None) -> None:
        super().__init__(api_key="test-key", model="fake-whisper")
        self.text = text
        self.duration = duration
        self.error = error
        self.seen: list[tuple[str, int]] = []

    async def _transcribe_once(self, audio_path: str, options: TranscriptionOptions) -> TranscriptionResult:
        self.seen.append((audio_path, os.path.getsize(audio_path)))
        if self.error is not None:
            raise self.error
        return TranscriptionResult(text=self.text, duration=self.duration, language="en")


def notes_json(**overrides) -> str:
    payload = {
        "title": "Patience in Hardship",
        "summary": "The lecture explains patience.",
        "paragraphs": ["Patience is a virtue."],
        "bulletPoints": ["Be patient"],
        "keyConcepts": [{"concept": "Sabr", "explanation": "Patience", "importance": "high"}],
        "definitions": [{"term": "Sabr", "definition": "Steadfastness"}],
        "exampleProblems": [],
        "actionItems": ["Reflect daily"],
    }
    payload.update(overrides)
    return json.dumps(payload)


@pytest.fixture
def openai_ai() -> ProviderConfig:
    return ProviderConfig(
        provider=Provider.OPENAI,
        transcription_model="whisper-1",
        summarization_model="gpt-4-turbo-preview",
        api_key="sk-test",
        openai_api_key="sk-test",
    )


@pytest.fixture
def groq_ai() -> ProviderConfig:
    return ProviderConfig(
        provider=Provider.GROQ,
        transcription_model="whisper-large-v3",
        summarization_model="llama-3.3-70b-versatile",
        api_key="gsk-test",
    )


@pytest.fixture
def config(tmp_path, openai_ai) -> Config:
    return Config(
        ai=openai_ai,
        temp_dir=str(tmp_path / "work"),
        upload_dir=str(tmp_path / "uploads"),
    )
