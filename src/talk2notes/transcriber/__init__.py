"""转录模块 - 根据 provider 选择转录器"""

from talk2notes.config import Provider, ProviderConfig
from talk2notes.retry import RetryPolicy
from talk2notes.transcriber.base import AbstractTranscriber
from talk2notes.transcriber.deepgram import DeepgramTranscriber
from talk2notes.transcriber.groq import GroqTranscriber
from talk2notes.transcriber.openai_whisper import OpenAITranscriber


def get_transcriber(
    ai: ProviderConfig,
    retry: RetryPolicy | None = None,
    timeout: float = 600.0,
) -> AbstractTranscriber:
    """
    openai / anthropic → OpenAITranscriber（anthropic 没有语音接口，借用 OpenAI Whisper）
    groq               → GroqTranscriber
    deepgram           → DeepgramTranscriber
    """
    if ai.provider is Provider.GROQ:
        return GroqTranscriber(api_key=ai.api_key, model=ai.transcription_model, retry=retry, timeout=timeout)
    if ai.provider is Provider.DEEPGRAM:
        return DeepgramTranscriber(api_key=ai.api_key, model=ai.transcription_model, retry=retry, timeout=timeout)
    return OpenAITranscriber(
        api_key=ai.openai_api_key,
        model=ai.transcription_model,
        retry=retry,
        timeout=timeout,
    )


__all__ = [
    "AbstractTranscriber",
    "DeepgramTranscriber",
    "GroqTranscriber",
    "OpenAITranscriber",
    "get_transcriber",
]
