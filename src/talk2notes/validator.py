"""上传文件校验 - MIME 类型、扩展名、大小（纯函数，无副作用）"""

import mimetypes
import os

from talk2notes.config import MediaLimits
from talk2notes.models import MediaKind, ValidationResult
from talk2notes.utils import MB

AUDIO_MIME_TYPES = frozenset({
    "audio/mpeg",
    "audio/mp3",
    "audio/wav",
    "audio/wave",
    "audio/x-wav",
    "audio/x-m4a",
    "audio/m4a",
    "audio/aac",
    "audio/ogg",
    "audio/flac",
})

VIDEO_MIME_TYPES = frozenset({
    "video/mp4",
    "video/x-matroska",
    "video/quicktime",
    "video/x-msvideo",
    "video/webm",
})

# mimetypes 在部分系统上认不出这些扩展名
_FALLBACK_MIME = {
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "m4a": "audio/x-m4a",
    "aac": "audio/aac",
    "ogg": "audio/ogg",
    "flac": "audio/flac",
    "mp4": "video/mp4",
    "mkv": "video/x-matroska",
    "mov": "video/quicktime",
    "avi": "video/x-msvideo",
    "webm": "video/webm",
}


def get_extension(filename: str) -> str:
    return os.path.splitext(filename)[1].lstrip(".").lower()


def guess_mime_type(filename: str) -> str:
    """本地文件/下载文件没有声明 MIME 时，按扩展名推断"""
    ext = get_extension(filename)
    if ext in _FALLBACK_MIME:
        return _FALLBACK_MIME[ext]
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


def validate_file(
    mime_type: str,
    size_bytes: int,
    filename: str,
    limits: MediaLimits | None = None,
) -> ValidationResult:
    limits = limits or MediaLimits()
    max_bytes = limits.max_file_size_mb * MB

    if size_bytes > max_bytes:
        return ValidationResult(
            valid=False,
            error=f"File size exceeds maximum allowed size of {limits.max_file_size_mb:g}MB",
        )

    ext = get_extension(filename)
    if not ext:
        return ValidationResult(valid=False, error="File must have a valid extension")

    mime = (mime_type or "").lower()
    is_audio = ext in limits.audio_formats and mime in AUDIO_MIME_TYPES
    is_video = ext in limits.video_formats and mime in VIDEO_MIME_TYPES

    if not is_audio and not is_video:
        allowed = ", ".join([*limits.audio_formats, *limits.video_formats])
        return ValidationResult(
            valid=False,
            error=f"Invalid file format. Allowed formats: {allowed}",
        )

    if is_audio and size_bytes > limits.max_audio_mb * MB:
        return ValidationResult(
            valid=False,
            error=(
                f"Audio file is {size_bytes / MB:.2f}MB, over the {limits.max_audio_mb:g}MB limit "
                f"of the transcription service. Please compress it before uploading."
            ),
        )

    if is_video and size_bytes > limits.max_video_mb * MB:
        return ValidationResult(
            valid=False,
            error=f"Video file exceeds maximum allowed size of {limits.max_video_mb:g}MB",
        )

    return ValidationResult(
        valid=True,
        file_type=MediaKind.AUDIO if is_audio else MediaKind.VIDEO,
    )
