"""媒体处理模块 - 抽音轨、压缩"""

from talk2notes.config import Config
from talk2notes.media.base import AbstractTranscoder
from talk2notes.media.compressor import AudioCompressor, compute_bitrate
from talk2notes.media.extractor import AudioExtractor
from talk2notes.media.ffmpeg import FfmpegTranscoder


def get_transcoder(config: Config) -> AbstractTranscoder:
    return FfmpegTranscoder(ffmpeg_path=config.ffmpeg_path, ffprobe_path=config.ffprobe_path)


__all__ = [
    "AbstractTranscoder",
    "AudioCompressor",
    "AudioExtractor",
    "FfmpegTranscoder",
    "compute_bitrate",
    "get_transcoder",
]
