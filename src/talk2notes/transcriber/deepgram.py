"""Deepgram 转录实现（直接 POST 原始音频字节，选项走 query 参数）"""

from typing import Any

import aiofiles
import httpx

from talk2notes.models import Segment, TranscriptionOptions, TranscriptionResult
from talk2notes.retry import RetryPolicy
from talk2notes.transcriber.base import AbstractTranscriber
from talk2notes.utils import log_info

DEEPGRAM_LISTEN_URL = "https://api.deepgram.com/v1/listen"


class DeepgramTranscriber(AbstractTranscriber):
    name = "Deepgram"
    max_file_size_mb = None

    def __init__(
        self,
        api_key: str,
        model: str = "nova-2",
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
        log_info(f"Streaming {len(audio_bytes)} bytes to Deepgram...")

        params = {
            "model": self.model,
            "smart_format": "true",
            "punctuate": "true",
            "paragraphs": "true",
        }
        if options.language:
            params["language"] = options.language
        else:
            params["detect_language"] = "true"

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                DEEPGRAM_LISTEN_URL,
                params=params,
                headers={
                    "Authorization": f"Token {self.api_key}",
                    "Content-Type": "audio/mpeg",
                },
                content=audio_bytes,
            )
            response.raise_for_status()
            payload = response.json()

        return normalize_deepgram_response(payload)


def normalize_deepgram_response(payload: dict[str, Any]) -> TranscriptionResult:
    """results.channels[0].alternatives[0] → TranscriptionResult"""
    channel = payload["results"]["channels"][0]
    alternative = channel["alternatives"][0]

    segments: list[Segment] = []
    paragraphs = (alternative.get("paragraphs") or {}).get("paragraphs") or []
    for paragraph in paragraphs:
        for sentence in paragraph.get("sentences") or []:
            segments.append(Segment(
                id=len(segments),
                start=float(sentence.get("start", 0.0)),
                end=float(sentence.get("end", 0.0)),
                text=str(sentence.get("text", "")).strip(),
            ))

    duration = (payload.get("metadata") or {}).get("duration")
    return TranscriptionResult(
        text=alternative.get("transcript", ""),
        duration=float(duration) if duration is not None else None,
        language=channel.get("detected_language"),
        segments=tuple(segments),
    )
