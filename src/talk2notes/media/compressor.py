"""音频压缩 - 按目标大小反推码率后重新编码"""

import math
import os

from talk2notes.errors import CompressionError, TranscoderError
from talk2notes.media.base import AbstractTranscoder
from talk2notes.utils import MB, log_info, log_step, log_success, remove_file, unique_filename

MIN_BITRATE_KBPS = 32    # 再低语音就听不清了
MAX_BITRATE_KBPS = 64


def compute_bitrate(target_size_mb: float, duration_seconds: float) -> int:
    """target_size_mb * 8192 kbit / 秒数，夹在 [32, 64] kbps"""
    if duration_seconds <= 0:
        return MIN_BITRATE_KBPS
    target = math.floor(target_size_mb * 8192 / duration_seconds)
    return max(MIN_BITRATE_KBPS, min(target, MAX_BITRATE_KBPS))


class AudioCompressor:
    def __init__(self, transcoder: AbstractTranscoder, output_dir: str) -> None:
        self.transcoder = transcoder
        self.output_dir = output_dir

    async def compress_if_needed(self, audio_path: str, target_size_mb: float) -> str:
        """已经不超过目标大小时原样返回输入路径"""
        current_mb = os.path.getsize(audio_path) / MB
        log_info(f"Current size: {current_mb:.2f}MB, target: {target_size_mb:g}MB")

        if current_mb <= target_size_mb:
            log_info("File already within target size")
            return audio_path

        log_step("🗜️", "Compressing audio...")
        os.makedirs(self.output_dir, exist_ok=True)
        output_path = os.path.join(self.output_dir, unique_filename("compressed.mp3"))

        try:
            metadata = await self.transcoder.probe(audio_path)
            bitrate = compute_bitrate(target_size_mb, metadata.duration)
            log_info(f"Compressing with {bitrate}kbps (duration: {metadata.duration:.2f}s)")

            await self.transcoder.transcode(
                audio_path,
                output_path,
                bitrate_kbps=bitrate,
                channels=1,
                sample_rate=16000,
                codec="libmp3lame",
                fmt="mp3",
                timeout=max(120.0, 60.0 + metadata.duration / 2),
            )
        except TranscoderError as e:
            remove_file(output_path)
            raise CompressionError(f"Audio compression failed: {e}") from e
        except BaseException:
            remove_file(output_path)
            raise

        log_success(f"Compressed to {os.path.getsize(output_path) / MB:.2f}MB")
        return output_path
