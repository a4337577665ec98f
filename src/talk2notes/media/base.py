"""转码器抽象基类"""

from abc import ABC, abstractmethod

from talk2notes.models import AudioMetadata


class AbstractTranscoder(ABC):
    @abstractmethod
    async def transcode(
        self,
        input_path: str,
        output_path: str,
        *,
        bitrate_kbps: int,
        channels: int = 1,
        sample_rate: int = 16000,
        codec: str = "libmp3lame",
        fmt: str = "mp3",
        timeout: float | None = None,
    ) -> None:
        """转码写出 output_path，失败抛 TranscoderError"""
        ...

    @abstractmethod
    async def probe(self, path: str) -> AudioMetadata:
        """探测时长、码率、采样率、声道数"""
        ...
