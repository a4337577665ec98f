"""ffmpeg / ffprobe 实现（asyncio 子进程，超时或任务取消时杀掉子进程）"""

import asyncio
import json
import shutil

from talk2notes.errors import TranscoderError
from talk2notes.media.base import AbstractTranscoder
from talk2notes.models import AudioMetadata
from talk2notes.utils import log_info

_STDERR_TAIL = 800


class FfmpegTranscoder(AbstractTranscoder):
    def __init__(self, ffmpeg_path: str = "ffmpeg", ffprobe_path: str = "ffprobe") -> None:
        self.ffmpeg_path = ffmpeg_path
        self.ffprobe_path = ffprobe_path

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
        cmd = [
            self.ffmpeg_path,
            "-hide_banner", "-loglevel", "error",
            "-y",
            "-i", input_path,
            "-vn",
            "-acodec", codec,
            "-b:a", f"{bitrate_kbps}k",
            "-ac", str(channels),
            "-ar", str(sample_rate),
            "-f", fmt,
            output_path,
        ]
        log_info(f"Running: {' '.join(cmd)}")
        returncode, _, stderr = await _run(cmd, timeout=timeout)
        if returncode != 0:
            raise TranscoderError(f"ffmpeg exited with code {returncode}: {_tail(stderr)}")

    async def probe(self, path: str) -> AudioMetadata:
        cmd = [
            self.ffprobe_path,
            "-v", "error",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            path,
        ]
        returncode, stdout, stderr = await _run(cmd, timeout=60)
        if returncode != 0:
            raise TranscoderError(f"Failed to probe {path}: {_tail(stderr)}")

        try:
            data = json.loads(stdout or "{}")
        except json.JSONDecodeError as e:
            raise TranscoderError(f"ffprobe returned invalid JSON for {path}") from e

        return parse_probe_output(data)


def parse_probe_output(data: dict) -> AudioMetadata:
    """ffprobe -show_format -show_streams 的 JSON → AudioMetadata"""
    fmt = data.get("format") or {}
    audio = next(
        (s for s in data.get("streams") or [] if s.get("codec_type") == "audio"),
        {},
    )
    return AudioMetadata(
        duration=_to_float(fmt.get("duration")),
        bitrate=int(_to_float(fmt.get("bit_rate"))),
        sample_rate=int(_to_float(audio.get("sample_rate"))),
        channels=int(_to_float(audio.get("channels"))),
    )


async def _run(cmd: list[str], timeout: float | None) -> tuple[int, str, str]:
    if shutil.which(cmd[0]) is None:
        raise TranscoderError(f"{cmd[0]} not found. Install it: brew install ffmpeg")

    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        _kill(proc)
        await proc.wait()
        raise TranscoderError(f"{cmd[0]} timed out after {timeout:.0f}s")
    except asyncio.CancelledError:
        _kill(proc)
        raise

    return (
        proc.returncode if proc.returncode is not None else -1,
        stdout.decode("utf-8", errors="replace"),
        stderr.decode("utf-8", errors="replace"),
    )


def _kill(proc: asyncio.subprocess.Process) -> None:
    try:
        proc.kill()
    except ProcessLookupError:
        pass


def _to_float(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _tail(stderr: str) -> str:
    stderr = stderr.strip()
    return stderr[-_STDERR_TAIL:] if stderr else "no output"
