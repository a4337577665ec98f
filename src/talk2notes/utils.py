"""工具函数 - 日志美化、时间/大小格式化、文件命名"""

import math
import os
import secrets
import time


class _Colors:
    CYAN    = "\033[96m"
    GREEN   = "\033[92m"
    YELLOW  = "\033[93m"
    RED     = "\033[91m"
    MAGENTA = "\033[95m"
    BOLD    = "\033[1m"
    DIM     = "\033[2m"
    RESET   = "\033[0m"

_C = _Colors

MB = 1024 * 1024


def log_step(emoji: str, msg: str) -> None:
    """步骤标题，cyan + bold"""
    print(f"\n{_C.CYAN}{_C.BOLD}{emoji}  {msg}{_C.RESET}")


def log_info(msg: str) -> None:
    """详细信息，dim"""
    print(f"   {_C.DIM}{msg}{_C.RESET}")


def log_success(msg: str) -> None:
    """成功，green"""
    print(f"   {_C.GREEN}✓ {msg}{_C.RESET}")


def log_warn(msg: str) -> None:
    """警告，yellow"""
    print(f"   {_C.YELLOW}⚠ {msg}{_C.RESET}")


def log_error(msg: str) -> None:
    """错误，red"""
    print(f"   {_C.RED}✗ {msg}{_C.RESET}")


def format_duration(seconds: float) -> str:
    """格式化为 M:SS 或 H:MM:SS（用于展示媒体时长）"""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_file_size(size_bytes: int) -> str:
    """1536 → '1.5 KB'"""
    if size_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    i = min(int(math.log(size_bytes, 1024)), len(units) - 1)
    value = round(size_bytes / (1024 ** i), 2)
    return f"{value:g} {units[i]}"


def size_mb(path: str) -> float:
    return os.path.getsize(path) / MB


def unique_filename(suffix: str) -> str:
    """毫秒时间戳 + 随机后缀，保证并发任务之间不会撞名"""
    return f"{int(time.time() * 1000)}_{secrets.token_hex(4)}_{suffix}"


def remove_file(path: str | None) -> None:
    """删除临时文件，文件已不存在时静默"""
    if not path:
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        log_warn(f"Failed to clean up {path}: {e}")
