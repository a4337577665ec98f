"""转录器抽象基类 - 大小检查 + 重试 + 统一错误信息"""

import os
from abc import ABC, abstractmethod

from talk2notes.errors import TranscriptionError
from talk2notes.models import TranscriptionOptions, TranscriptionResult
from talk2notes.retry import RetryExhausted, RetryPolicy, error_status_code
from talk2notes.utils import MB, log_error, log_info, log_step, log_success


class AbstractTranscriber(ABC):
    name: str = ""
    # 单文件上限（MB），None 表示不限制
    max_file_size_mb: float | None = None

    def __init__(self, api_key: str, model: str, retry: RetryPolicy | None = None) -> None:
        self.api_key = api_key
        self.model = model
        self.retry = retry or RetryPolicy()

    async def transcribe(
        self,
        audio_path: str,
        options: TranscriptionOptions | None = None,
    ) -> TranscriptionResult:
        """转录音频，返回 TranscriptionResult；失败统一抛 TranscriptionError"""
        options = options or TranscriptionOptions()

        if not self.api_key:
            raise TranscriptionError(f"API key not configured for provider: {self.name}")

        file_mb = os.path.getsize(audio_path) / MB
        if self.max_file_size_mb is not None and file_mb > self.max_file_size_mb:
            raise TranscriptionError(
                f"Audio file is {file_mb:.2f}MB. {self.name} has a {self.max_file_size_mb:g}MB limit. "
                f"Please use a shorter audio file or compress it further.",
                file_size_mb=file_mb,
            )

        log_step("🎙️", f"Transcribing with {self.name} ({self.model})...")
        log_info(f"Audio: {audio_path} ({file_mb:.2f}MB)")

        try:
            result = await self.retry.run(
                lambda: self._transcribe_once(audio_path, options),
                label="Transcription",
            )
        except RetryExhausted as e:
            log_error(f"Transcription failed after {e.attempts} attempts")
            raise TranscriptionError(
                f"Failed to transcribe after {e.attempts} attempts. File size: {file_mb:.2f}MB. "
                f"Last error: {e.last_error}. "
                f"Try with a smaller file (< 10MB recommended) or check your internet connection.",
                attempts=e.attempts,
                file_size_mb=file_mb,
                last_error=e.last_error,
            ) from e.last_error
        except TranscriptionError:
            raise
        except Exception as e:
            # 鉴权失败、请求格式错误等不重试，直接失败
            status = error_status_code(e)
            prefix = f"{self.name} transcription failed"
            if status is not None:
                prefix += f" (HTTP {status})"
            log_error(f"{prefix}: {e}")
            raise TranscriptionError(
                f"{prefix}: {e}",
                file_size_mb=file_mb,
                last_error=e,
            ) from e

        log_success(f"Transcribed: {len(result.text)} characters"
                    + (f", duration {result.duration:.0f}s" if result.duration else ""))
        return result

    @abstractmethod
    async def _transcribe_once(
        self,
        audio_path: str,
        options: TranscriptionOptions,
    ) -> TranscriptionResult:
        """单次请求，不做重试"""
        ...
