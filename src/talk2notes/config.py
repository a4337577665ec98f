"""配置管理 - 进程启动时从环境变量构造一次，之后只读"""

import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from talk2notes.errors import ConfigError


class Provider(str, Enum):
    OPENAI = "openai"
    GROQ = "groq"
    DEEPGRAM = "deepgram"
    ANTHROPIC = "anthropic"


class SummaryOverflow(str, Enum):
    """转录文本超出 token 上限时的处理方式"""
    CROP = "crop"      # 在句子边界截断，丢弃剩余部分
    CHUNK = "chunk"    # 分块总结后合并


DEFAULT_AUDIO_FORMATS = ("mp3", "wav", "m4a", "aac", "ogg", "flac")
DEFAULT_VIDEO_FORMATS = ("mp4", "mkv", "mov", "avi", "webm")

# 各 provider 单次请求可接受的输入 token 上限（groq 上下文较小，留出余量）
MAX_INPUT_TOKENS = {
    Provider.OPENAI: 100_000,
    Provider.GROQ: 9_000,
    Provider.DEEPGRAM: 100_000,
    Provider.ANTHROPIC: 100_000,
}


@dataclass(frozen=True)
class ProviderConfig:
    provider: Provider
    transcription_model: str
    summarization_model: str
    api_key: str
    # anthropic 转录 / deepgram 总结 都借用 OpenAI
    openai_api_key: str = ""

    @property
    def max_input_tokens(self) -> int:
        return MAX_INPUT_TOKENS[self.provider]


@dataclass(frozen=True)
class MediaLimits:
    """上传/转码相关的大小限制（单位 MB）"""
    max_file_size_mb: float = 100
    audio_formats: tuple[str, ...] = DEFAULT_AUDIO_FORMATS
    video_formats: tuple[str, ...] = DEFAULT_VIDEO_FORMATS
    max_audio_mb: float = 25           # 转录接口硬上限
    max_video_mb: float = 500          # 视频会先抽音轨，允许更大
    compress_trigger_mb: float = 10
    compress_target_mb: float = 8
    extraction_warn_mb: float = 10
    small_video_mb: float = 100        # 小于此值的视频用较高码率抽音轨


@dataclass(frozen=True)
class Config:
    """统一配置，CLI 启动时构造一次后传入流水线"""
    ai: ProviderConfig
    limits: MediaLimits = field(default_factory=MediaLimits)

    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    temp_dir: str = field(default_factory=tempfile.gettempdir)
    upload_dir: str = "./uploads"

    transcription_language: str | None = "en"
    transcription_timeout: float = 600.0
    summary_overflow: SummaryOverflow = SummaryOverflow.CROP

    # yt-dlp
    cookies: str | None = None
    cookies_from_browser: str | None = None

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides,
    ) -> "Config":
        """从环境变量读取全部配置；overrides 用于 CLI 参数覆盖"""
        env = os.environ if environ is None else environ

        provider_name = overrides.pop("provider", None) or env.get("AI_PROVIDER", "openai")
        ai = resolve_provider_config(provider_name, env)

        limits = MediaLimits(
            max_file_size_mb=_float(env, "MAX_FILE_SIZE_MB", 100),
            audio_formats=_csv(env, "ALLOWED_AUDIO_FORMATS", DEFAULT_AUDIO_FORMATS),
            video_formats=_csv(env, "ALLOWED_VIDEO_FORMATS", DEFAULT_VIDEO_FORMATS),
        )

        overflow_name = env.get("SUMMARY_OVERFLOW", "crop").strip().lower()
        try:
            overflow = SummaryOverflow(overflow_name)
        except ValueError:
            raise ConfigError(f"Unsupported SUMMARY_OVERFLOW: {overflow_name} (use 'crop' or 'chunk')")

        values = dict(
            ai=ai,
            limits=limits,
            ffmpeg_path=env.get("FFMPEG_PATH", "ffmpeg"),
            ffprobe_path=env.get("FFPROBE_PATH", "ffprobe"),
            temp_dir=env.get("TALK2NOTES_TEMP_DIR") or tempfile.gettempdir(),
            upload_dir=env.get("TALK2NOTES_UPLOAD_DIR", "./uploads"),
            transcription_language=env.get("TRANSCRIPTION_LANGUAGE", "en") or None,
            summary_overflow=overflow,
            cookies=env.get("TALK2NOTES_COOKIES") or None,
        )
        values.update(overrides)
        return cls(**values)


def resolve_provider_config(provider_name: str, env: Mapping[str, str]) -> ProviderConfig:
    """根据 provider 名称选出模型和密钥"""
    try:
        provider = Provider(provider_name.strip().lower())
    except ValueError:
        raise ConfigError(f"Unsupported AI provider: {provider_name}")

    openai_key = env.get("OPENAI_API_KEY", "")
    openai_summary_model = env.get("OPENAI_SUMMARIZATION_MODEL", "gpt-4-turbo-preview")
    openai_transcription_model = env.get("OPENAI_TRANSCRIPTION_MODEL", "whisper-1")

    if provider is Provider.OPENAI:
        return ProviderConfig(
            provider=provider,
            transcription_model=openai_transcription_model,
            summarization_model=openai_summary_model,
            api_key=openai_key,
            openai_api_key=openai_key,
        )
    if provider is Provider.GROQ:
        return ProviderConfig(
            provider=provider,
            transcription_model=env.get("GROQ_TRANSCRIPTION_MODEL", "whisper-large-v3"),
            summarization_model=env.get("GROQ_SUMMARIZATION_MODEL", "llama-3.3-70b-versatile"),
            api_key=env.get("GROQ_API_KEY", ""),
            openai_api_key=openai_key,
        )
    if provider is Provider.DEEPGRAM:
        return ProviderConfig(
            provider=provider,
            transcription_model="nova-2",
            summarization_model=openai_summary_model,
            api_key=env.get("DEEPGRAM_API_KEY", ""),
            openai_api_key=openai_key,
        )
    return ProviderConfig(
        provider=provider,
        transcription_model=openai_transcription_model,
        summarization_model=env.get("ANTHROPIC_MODEL", "claude-3-opus-20240229"),
        api_key=env.get("ANTHROPIC_API_KEY", ""),
        openai_api_key=openai_key,
    )


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}")


def _csv(env: Mapping[str, str], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = env.get(key)
    if not raw:
        return default
    return tuple(part.strip().lower().lstrip(".") for part in raw.split(",") if part.strip())
