"""下载器抽象基类"""

from abc import ABC, abstractmethod

from talk2notes.models import DownloadResult


class AbstractDownloader(ABC):
    @abstractmethod
    async def download(self, source: str) -> DownloadResult:
        """把输入落到本地磁盘，返回 DownloadResult"""
        ...
