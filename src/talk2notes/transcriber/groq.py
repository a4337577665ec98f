"""Groq Whisper 转录实现（multipart 上传，Bearer 鉴权）"""

from typing import Any

import aiofiles
import httpx

from talk2notes.models import Segment, TranscriptionOptions, TranscriptionResult
from talk2notes.retry import RetryPolicy
from talk2notes.transcriber.base import AbstractTranscriber
from talk2notes.utils import log_info

GROQ_TRANSCRIPTION_URL = "https://api.groq.com/openai/v1/audio/transcriptions"


class GroqTranscriber(AbstractTranscriber):
    name = "Groq"
    max_file_size_mb = 25

    def __init__(
        self,
        api_key: str,
        model: str = "whisper-large-v3",
        retry: RetryPolicy | None = None,
        timeout: float = 600.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(api_key=api_key, model=model, retry=retry)
        self.timeout = timeout
        self._transport = transport

    async def _transcribe_once(
        self,
        audio_path: str,
        options: TranscriptionOptions,
    ) -> TranscriptionResult:
        async with aiofiles.open(audio_path, "rb") as f:
            audio_bytes = await f.read()
        log_info(f"Uploading {len(audio_bytes)} bytes to Groq...")

        data: dict[str, str] = {"model": self.model}
        if options.language:
            data["language"] = options.language
        if options.prompt:
            data["prompt"] = options.prompt
        if options.temperature:
            data["temperature"] = str(options.temperature)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                GROQ_TRANSCRIPTION_URL,
                headers={"Authorization": f"Bearer {self.api_key}"},
                data=data,
                files={"file": ("audio.mp3", audio_bytes, "audio/mpeg")},
            )
            response.raise_for_status()
            payload = response.json()

        return normalize_groq_response(payload)


def normalize_groq_response(payload: dict[str, Any]) -> TranscriptionResult:
    """Groq 默认只返回 text，时间戳片段不保证存在"""
    segments = tuple(
        Segment(
            id=idx,
            start=float(seg.get("start", 0.0)),
            end=float(seg.get("end", 0.0)),
            text=str(seg.get("text", "")).strip(),
        )
        for idx, seg in enumerate(payload.get("segments") or [])
    )
    duration = payload.get("duration")
    return TranscriptionResult(
        text=payload.get("text", ""),
        duration=float(duration) if duration is not None else None,
        language=payload.get("language"),
        segments=segments,
    )
