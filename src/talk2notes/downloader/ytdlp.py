"""yt-dlp 下载器实现（YouTube）"""

import asyncio
import os
import shutil

from talk2notes.downloader.base import AbstractDownloader
from talk2notes.errors import DownloadError
from talk2notes.models import DownloadResult
from talk2notes.utils import log_error, log_info, log_step, log_success, size_mb, unique_filename

DOWNLOAD_TIMEOUT = 300
MAX_FILESIZE = "500M"
AUDIO_EXTENSIONS = (".mp3", ".webm", ".m4a", ".opus", ".ogg", ".aac")


def build_ytdlp_command(
    url: str,
    output_base: str,
    cookies: str | None = None,
    cookies_from_browser: str | None = None,
    binary: str = "yt-dlp",
) -> list[str]:
    cmd = [
        binary,
        "-x",
        "--audio-format", "mp3",
        "--audio-quality", "0",
        "--max-filesize", MAX_FILESIZE,
        "--no-playlist",
        "--newline",
        "--no-simulate",
        "-o", f"{output_base}.%(ext)s",
        "--print", "title",
        "--print", "duration",
    ]
    if cookies_from_browser:
        cmd.extend(["--cookies-from-browser", cookies_from_browser])
    elif cookies:
        cmd.extend(["--cookies", cookies])
    cmd.append(url)
    return cmd


def parse_print_output(stdout: str) -> tuple[str, float | None]:
    """--print title / --print duration 各占一行"""
    lines = [line.strip() for line in stdout.splitlines() if line.strip()]
    title = lines[0] if lines else "YouTube Video"
    duration = None
    if len(lines) > 1:
        try:
            duration = float(lines[1])
        except ValueError:
            duration = None
    return title, duration


def map_ytdlp_error(stderr: str) -> str:
    if "max-filesize" in stderr:
        return "Video is too large (>500MB). Try a shorter video."
    if "Private video" in stderr or "unavailable" in stderr:
        return "Video is private or unavailable"
    return f"yt-dlp error: {stderr.strip() or 'Unknown error'}"


class YtdlpDownloader(AbstractDownloader):
    def __init__(
        self,
        output_dir: str,
        cookies: str | None = None,
        cookies_from_browser: str | None = None,
        binary: str = "yt-dlp",
        timeout: float = DOWNLOAD_TIMEOUT,
    ) -> None:
        self.output_dir = output_dir
        self.cookies = cookies
        self.cookies_from_browser = cookies_from_browser
        self.binary = binary
        self.timeout = timeout

    async def download(self, source: str) -> DownloadResult:
        if shutil.which(self.binary) is None:
            log_error("yt-dlp not found. Install it: brew install yt-dlp")
            raise DownloadError("yt-dlp is not installed. Install it: brew install yt-dlp or pip install yt-dlp")

        log_step("📥", "Downloading audio...")
        log_info(f"URL: {source}")
        if self.cookies_from_browser:
            log_info(f"Reading cookies from: {self.cookies_from_browser}")
        elif self.cookies:
            log_info(f"Using cookies file: {self.cookies}")

        os.makedirs(self.output_dir, exist_ok=True)
        prefix = unique_filename("youtube")
        output_base = os.path.join(self.output_dir, prefix)
        cmd = build_ytdlp_command(
            source, output_base, self.cookies, self.cookies_from_browser, self.binary
        )

        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            self._cleanup(prefix)
            log_error("Download timed out (5 min limit)")
            raise DownloadError("Download timeout (video too long). Try a shorter video.")
        except asyncio.CancelledError:
            proc.kill()
            await proc.wait()
            self._cleanup(prefix)
            raise

        err_text = stderr.decode(errors="replace")
        if proc.returncode != 0:
            self._cleanup(prefix)
            log_error(f"yt-dlp failed:\n{err_text}")
            log_info("Try downloading the file manually and use the local file path instead.")
            raise DownloadError(f"Failed to download YouTube video: {map_ytdlp_error(err_text)}")

        title, duration = parse_print_output(stdout.decode(errors="replace"))
        log_info(f"Title: {title}")

        audio_path = self._find_audio(prefix)
        log_success(f"Audio downloaded: {size_mb(audio_path):.1f} MB")
        return DownloadResult(path=audio_path, title=title, duration=duration)

    def _find_audio(self, prefix: str) -> str:
        """按唯一前缀查找 yt-dlp 的输出文件"""
        base = os.path.join(self.output_dir, prefix)
        for ext in AUDIO_EXTENSIONS:
            if os.path.exists(base + ext):
                return base + ext

        for f in os.listdir(self.output_dir):
            if f.startswith(prefix):
                return os.path.join(self.output_dir, f)

        log_error("Failed to find downloaded audio file")
        raise DownloadError(f"Audio file not found with pattern {prefix}.*")

    def _cleanup(self, prefix: str) -> None:
        for f in os.listdir(self.output_dir):
            if f.startswith(prefix):
                os.remove(os.path.join(self.output_dir, f))
