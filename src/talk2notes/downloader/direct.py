"""直链媒体下载（任意 http/https 地址）"""

import os
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

import aiofiles
import httpx

from talk2notes.downloader.base import AbstractDownloader
from talk2notes.errors import DownloadError
from talk2notes.models import DownloadResult
from talk2notes.utils import log_error, log_info, log_step, log_success, remove_file, size_mb, unique_filename

USER_AGENT = "Mozilla/5.0 (compatible; Talk2Notes/1.0)"
CHUNK_SIZE = 64 * 1024


class HttpDownloader(AbstractDownloader):
    def __init__(
        self,
        output_dir: str,
        timeout: float = 300.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.output_dir = output_dir
        self.timeout = timeout
        self._transport = transport

    async def download(self, source: str) -> DownloadResult:
        url_path = PurePosixPath(unquote(urlparse(source).path))
        ext = url_path.suffix.lower() or ".mp3"

        os.makedirs(self.output_dir, exist_ok=True)
        output_path = os.path.join(self.output_dir, unique_filename(f"media{ext}"))

        log_step("📥", "Downloading media...")
        log_info(f"URL: {source}")
        try:
            await self._fetch(source, output_path)
            if os.path.getsize(output_path) == 0:
                raise DownloadError("Downloaded file is empty")
        except (DownloadError, httpx.HTTPError, OSError) as e:
            remove_file(output_path)
            log_error(f"Download failed: {e}")
            raise DownloadError(f"Failed to download media: {e}") from e
        except BaseException:
            remove_file(output_path)
            raise

        log_success(f"Media downloaded: {size_mb(output_path):.2f} MB")
        title = url_path.stem if url_path.suffix else url_path.name
        return DownloadResult(path=output_path, title=title or "Media")

    async def _fetch(self, url: str, output_path: str) -> None:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
            transport=self._transport,
        ) as client:
            async with client.stream("GET", url) as response:
                if not response.is_success:
                    raise DownloadError(f"HTTP {response.status_code}: {response.reason_phrase}")
                async with aiofiles.open(output_path, "wb") as f:
                    async for chunk in response.aiter_bytes(CHUNK_SIZE):
                        await f.write(chunk)
