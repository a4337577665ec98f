"""从视频中抽取单声道低码率 mp3 音轨"""

import os

from talk2notes.config import MediaLimits
from talk2notes.errors import ExtractionError, TranscoderError
from talk2notes.media.base import AbstractTranscoder
from talk2notes.models import ExtractionResult
from talk2notes.utils import MB, log_info, log_step, log_success, log_warn, remove_file, unique_filename

DEFAULT_BITRATE_KBPS = 48    # 大视频用保守码率，尽量让输出在 10MB 左右
SMALL_VIDEO_BITRATE_KBPS = 64


def choose_bitrate(video_size_bytes: int, small_video_mb: float = 100) -> int:
    if video_size_bytes / MB < small_video_mb:
        return SMALL_VIDEO_BITRATE_KBPS
    return DEFAULT_BITRATE_KBPS


def extraction_timeout(video_size_bytes: int) -> float:
    """按源文件大小估算转码超时，至少 2 分钟"""
    return max(120.0, 60.0 + video_size_bytes / MB * 3)


class AudioExtractor:
    def __init__(
        self,
        transcoder: AbstractTranscoder,
        output_dir: str,
        limits: MediaLimits | None = None,
    ) -> None:
        self.transcoder = transcoder
        self.output_dir = output_dir
        self.limits = limits or MediaLimits()

    async def extract(self, video_path: str) -> ExtractionResult:
        log_step("🎬", "Extracting audio from video...")

        video_size = os.path.getsize(video_path)
        bitrate = choose_bitrate(video_size, self.limits.small_video_mb)
        log_info(f"Video size: {video_size / MB:.2f}MB, using {bitrate}kbps audio bitrate")

        os.makedirs(self.output_dir, exist_ok=True)
        output_path = os.path.join(self.output_dir, unique_filename("extracted_audio.mp3"))

        try:
            await self.transcoder.transcode(
                video_path,
                output_path,
                bitrate_kbps=bitrate,
                channels=1,
                sample_rate=16000,
                codec="libmp3lame",
                fmt="mp3",
                timeout=extraction_timeout(video_size),
            )
            # 容器/编码变化会影响时长，必须探测输出文件
            metadata = await self.transcoder.probe(output_path)
        except TranscoderError as e:
            remove_file(output_path)
            raise ExtractionError(f"FFmpeg extraction failed: {e}") from e
        except BaseException:
            remove_file(output_path)
            raise

        audio_mb = os.path.getsize(output_path) / MB
        log_info(f"Extracted audio: {audio_mb:.2f}MB, duration: {metadata.duration:.2f}s")

        if audio_mb > self.limits.max_audio_mb:
            remove_file(output_path)
            raise ExtractionError(
                f"Extracted audio is {audio_mb:.2f}MB, exceeds {self.limits.max_audio_mb:g}MB limit. "
                f"Please use a shorter video."
            )
        if audio_mb > self.limits.extraction_warn_mb:
            log_warn(f"Audio file is {audio_mb:.2f}MB, may cause upload issues")

        log_success(f"Audio extracted → {output_path}")
        return ExtractionResult(audio_path=output_path, duration=metadata.duration, format="mp3")
