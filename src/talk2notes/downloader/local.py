"""本地文件处理"""

import os
from pathlib import Path

from talk2notes.config import MediaLimits
from talk2notes.downloader.base import AbstractDownloader
from talk2notes.errors import DownloadError
from talk2notes.models import DownloadResult
from talk2notes.utils import log_error, log_info, log_step


class LocalDownloader(AbstractDownloader):
    def __init__(self, limits: MediaLimits | None = None) -> None:
        self.limits = limits or MediaLimits()

    async def download(self, source: str) -> DownloadResult:
        path = os.path.abspath(os.path.expanduser(source))

        if not os.path.isfile(path):
            log_error(f"File not found: {path}")
            raise DownloadError(f"File not found: {path}")

        ext = Path(path).suffix.lower().lstrip(".")
        supported = set(self.limits.audio_formats) | set(self.limits.video_formats)
        if ext not in supported:
            log_error(f"Unsupported file format: .{ext}")
            log_info(f"Supported formats: {', '.join(sorted(supported))}")
            raise DownloadError(f"Unsupported format: .{ext}")

        log_step("📂", "Using local file")
        log_info(f"File: {path}")

        # 用户自己的文件，处理完不能删
        return DownloadResult(path=path, title=Path(path).stem, owned=False)
