"""OpenAI Whisper API 转录实现（单次上传完整音频，verbose_json 带时间戳片段）"""

from typing import Any

import aiofiles
from openai import AsyncOpenAI

from talk2notes.models import Segment, TranscriptionOptions, TranscriptionResult
from talk2notes.retry import RetryPolicy
from talk2notes.transcriber.base import AbstractTranscriber
from talk2notes.utils import log_info


class OpenAITranscriber(AbstractTranscriber):
    name = "OpenAI Whisper"
    max_file_size_mb = 25

    def __init__(
        self,
        api_key: str,
        model: str = "whisper-1",
        retry: RetryPolicy | None = None,
        timeout: float = 600.0,
        client: AsyncOpenAI | None = None,
    ) -> None:
        super().__init__(api_key=api_key, model=model, retry=retry)
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            # 重试由 RetryPolicy 负责，关闭 SDK 自带的重试
            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    async def _transcribe_once(
        self,
        audio_path: str,
        options: TranscriptionOptions,
    ) -> TranscriptionResult:
        async with aiofiles.open(audio_path, "rb") as f:
            audio_bytes = await f.read()
        log_info(f"Uploading {len(audio_bytes)} bytes to OpenAI...")

        params: dict[str, Any] = {
            "file": ("audio.mp3", audio_bytes, "audio/mpeg"),
            "model": self.model,
            "response_format": "verbose_json",
            "temperature": options.temperature or 0,
        }
        if options.language:
            params["language"] = options.language
        if options.prompt:
            params["prompt"] = options.prompt

        response = await self.client.audio.transcriptions.create(**params)
        return _normalize(response)


def _normalize(response: Any) -> TranscriptionResult:
    raw_segments = getattr(response, "segments", None) or []
    segments = tuple(
        Segment(
            id=idx,
            start=float(_field(seg, "start")),
            end=float(_field(seg, "end")),
            text=str(_field(seg, "text")).strip(),
        )
        for idx, seg in enumerate(raw_segments)
    )
    duration = getattr(response, "duration", None)
    return TranscriptionResult(
        text=response.text,
        duration=float(duration) if duration is not None else None,
        language=getattr(response, "language", None),
        segments=segments,
    )


def _field(seg: Any, key: str) -> Any:
    if isinstance(seg, dict):
        return seg.get(key, 0 if key != "text" else "")
    return getattr(seg, key)
