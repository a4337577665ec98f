"""下载模块 - 根据输入自动选择下载器"""

from urllib.parse import parse_qs, urlparse

from talk2notes.config import Config
from talk2notes.downloader.base import AbstractDownloader
from talk2notes.downloader.direct import HttpDownloader
from talk2notes.downloader.local import LocalDownloader
from talk2notes.downloader.ytdlp import YtdlpDownloader

YOUTUBE_HOSTS = frozenset({"www.youtube.com", "youtube.com", "youtu.be", "m.youtube.com"})


def is_valid_media_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_youtube_url(url: str) -> bool:
    if not is_valid_media_url(url):
        return False
    return (urlparse(url).hostname or "").lower() in YOUTUBE_HOSTS


def get_youtube_video_id(url: str) -> str | None:
    if not is_valid_media_url(url):
        return None
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if host == "youtu.be":
        return parsed.path.lstrip("/") or None
    if "youtube.com" in host:
        return (parse_qs(parsed.query).get("v") or [None])[0]
    return None


def get_downloader(source: str, config: Config) -> AbstractDownloader:
    """YouTube 链接用 yt-dlp，其他 http(s) 直链用 httpx，本地路径直接使用"""
    if is_youtube_url(source):
        return YtdlpDownloader(
            output_dir=config.upload_dir,
            cookies=config.cookies,
            cookies_from_browser=config.cookies_from_browser,
        )
    if is_valid_media_url(source):
        return HttpDownloader(output_dir=config.upload_dir)
    return LocalDownloader(limits=config.limits)


__all__ = [
    "AbstractDownloader",
    "HttpDownloader",
    "LocalDownloader",
    "YtdlpDownloader",
    "get_downloader",
    "get_youtube_video_id",
    "is_valid_media_url",
    "is_youtube_url",
]
