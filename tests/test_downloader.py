"""Tests for source resolution and media downloads (httpx.MockTransport, no network)."""

import asyncio
import os

import httpx
import pytest

from conftest import make_sparse_file
from talk2notes.downloader import (
    HttpDownloader,
    LocalDownloader,
    YtdlpDownloader,
    get_downloader,
    get_youtube_video_id,
    is_valid_media_url,
    is_youtube_url,
)
from talk2notes.downloader.direct import USER_AGENT
from talk2notes.downloader.ytdlp import build_ytdlp_command, map_ytdlp_error, parse_print_output
from talk2notes.errors import DownloadError


class TestUrlHelpers:
    def test_youtube_hosts(self) -> None:
        assert is_youtube_url("https://www.youtube.com/watch?v=abc123")
        assert is_youtube_url("https://youtu.be/abc123")
        assert is_youtube_url("https://m.youtube.com/watch?v=abc123")
        assert not is_youtube_url("https://vimeo.com/123")
        assert not is_youtube_url("lecture.mp4")

    def test_video_id(self) -> None:
        assert get_youtube_video_id("https://www.youtube.com/watch?v=abc123&t=30") == "abc123"
        assert get_youtube_video_id("https://youtu.be/xyz789") == "xyz789"
        assert get_youtube_video_id("https://example.com/a.mp3") is None

    def test_media_url(self) -> None:
        assert is_valid_media_url("https://example.com/a.mp3")
        assert is_valid_media_url("http://example.com/a")
        assert not is_valid_media_url("ftp://example.com/a.mp3")
        assert not is_valid_media_url("/home/user/a.mp3")

    def test_get_downloader(self, config) -> None:
        assert isinstance(get_downloader("https://youtu.be/x", config), YtdlpDownloader)
        assert isinstance(get_downloader("https://cdn.example.com/a.mp3", config), HttpDownloader)
        assert isinstance(get_downloader("./a.mp3", config), LocalDownloader)


class _StallingStream(httpx.AsyncByteStream):
    """Yields one chunk and then hangs."""

    def __init__(self, started: asyncio.Event) -> None:
        self.started = started

    async def __aiter__(self):
        yield b"\x00" * 1024
        self.started.set()
        await asyncio.Event().wait()


class TestHttpDownloader:
    @pytest.mark.asyncio
    async def test_follows_redirect_and_saves_file(self, tmp_path) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.host == "short.example.com":
                return httpx.Response(302, headers={"Location": "https://cdn.example.com/files/lecture.mp3"})
            return httpx.Response(200, content=b"ID3" + b"\x01" * 1000)

        downloader = HttpDownloader(str(tmp_path), transport=httpx.MockTransport(handler))
        result = await downloader.download("https://short.example.com/files/lecture.mp3")

        assert [r.url.host for r in seen] == ["short.example.com", "cdn.example.com"]
        assert seen[0].headers["User-Agent"] == USER_AGENT
        assert result.title == "lecture"
        assert result.owned
        assert result.path.endswith(".mp3")
        with open(result.path, "rb") as f:
            assert f.read().startswith(b"ID3")

    @pytest.mark.asyncio
    async def test_http_error(self, tmp_path) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        downloader = HttpDownloader(str(tmp_path), transport=transport)

        with pytest.raises(DownloadError, match="HTTP 404"):
            await downloader.download("https://example.com/missing.mp3")
        assert os.listdir(tmp_path) == []

    @pytest.mark.asyncio
    async def test_empty_body(self, tmp_path) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b""))
        downloader = HttpDownloader(str(tmp_path), transport=transport)

        with pytest.raises(DownloadError, match="empty"):
            await downloader.download("https://example.com/empty.wav")
        assert os.listdir(tmp_path) == []

    @pytest.mark.asyncio
    async def test_non_200_success_status_is_accepted(self, tmp_path) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(203, content=b"data"))
        result = await HttpDownloader(str(tmp_path), transport=transport).download("https://example.com/talk.mp3")
        assert os.path.getsize(result.path) == 4

    @pytest.mark.asyncio
    async def test_cancelled_download_removes_partial_file(self, tmp_path) -> None:
        started = asyncio.Event()
        transport = httpx.MockTransport(lambda request: httpx.Response(200, stream=_StallingStream(started)))
        downloader = HttpDownloader(str(tmp_path), transport=transport)

        task = asyncio.create_task(downloader.download("https://example.com/long.mp3"))
        await asyncio.wait_for(started.wait(), timeout=5)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert os.listdir(tmp_path) == []

    @pytest.mark.asyncio
    async def test_url_without_extension_defaults_to_mp3(self, tmp_path) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"data"))
        result = await HttpDownloader(str(tmp_path), transport=transport).download("https://example.com/stream")
        assert result.path.endswith(".mp3")
        assert result.title == "stream"


class TestLocalDownloader:
    @pytest.mark.asyncio
    async def test_existing_file_is_not_owned(self, tmp_path) -> None:
        path = make_sparse_file(tmp_path / "Lecture 01.mkv", 1024)
        result = await LocalDownloader().download(path)
        assert result.path == path
        assert result.title == "Lecture 01"
        assert not result.owned

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(DownloadError, match="File not found"):
            await LocalDownloader().download(str(tmp_path / "missing.mp3"))

    @pytest.mark.asyncio
    async def test_unsupported_format(self, tmp_path) -> None:
        path = make_sparse_file(tmp_path / "slides.pdf", 10)
        with pytest.raises(DownloadError, match="Unsupported format"):
            await LocalDownloader().download(path)


class TestYtdlpHelpers:
    def test_command(self) -> None:
        cmd = build_ytdlp_command("https://youtu.be/x", "/tmp/out/abc", cookies="c.txt")
        assert cmd[:3] == ["yt-dlp", "-x", "--audio-format"]
        assert "--no-playlist" in cmd
        assert cmd[cmd.index("--max-filesize") + 1] == "500M"
        assert cmd[cmd.index("--audio-quality") + 1] == "0"
        assert cmd[cmd.index("-o") + 1] == "/tmp/out/abc.%(ext)s"
        assert cmd[cmd.index("--cookies") + 1] == "c.txt"
        assert cmd[-1] == "https://youtu.be/x"

    def test_browser_cookies_take_precedence(self) -> None:
        cmd = build_ytdlp_command("u", "o", cookies="c.txt", cookies_from_browser="chrome")
        assert "--cookies-from-browser" in cmd
        assert "--cookies" not in cmd

    def test_print_output(self) -> None:
        assert parse_print_output("My Lecture\n3600\n") == ("My Lecture", 3600.0)
        assert parse_print_output("") == ("YouTube Video", None)
        assert parse_print_output("Title\nNA\n") == ("Title", None)

    def test_error_mapping(self) -> None:
        assert "too large" in map_ytdlp_error("ERROR: File is larger than max-filesize")
        assert map_ytdlp_error("ERROR: Private video. Sign in") == "Video is private or unavailable"
        assert map_ytdlp_error("ERROR: Video unavailable") == "Video is private or unavailable"
        assert map_ytdlp_error("boom").startswith("yt-dlp error: boom")
