"""重试策略 - 指数退避，可注入 sleep 便于测试"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

import httpx
import openai

from talk2notes.utils import log_info, log_warn

T = TypeVar("T")


class RetryExhausted(Exception):
    def __init__(self, attempts: int, last_error: BaseException) -> None:
        super().__init__(f"Gave up after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


def is_transient_error(exc: BaseException) -> bool:
    """网络类错误（连接重置、超时）和 5xx 才重试，4xx 一律不重试"""
    if isinstance(exc, openai.APIStatusError):
        return exc.status_code >= 500
    if isinstance(exc, openai.APIConnectionError):
        # APITimeoutError 是它的子类
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    if isinstance(exc, httpx.TransportError):
        return True
    return isinstance(exc, (ConnectionError, TimeoutError))


def error_status_code(exc: BaseException) -> int | None:
    if isinstance(exc, openai.APIStatusError):
        return exc.status_code
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    return None


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 2.0
    is_retryable: Callable[[BaseException], bool] = is_transient_error
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    def backoff(self, attempt: int) -> float:
        """第 n 次失败后的等待时间：2s, 4s, 8s ..."""
        return self.base_delay * 2 ** (attempt - 1)

    async def run(self, fn: Callable[[], Awaitable[T]], label: str = "Request") -> T:
        last_error: BaseException | None = None
        for attempt in range(1, self.max_attempts + 1):
            log_info(f"{label} attempt {attempt}/{self.max_attempts}...")
            try:
                return await fn()
            except Exception as e:
                last_error = e
                log_warn(f"{label} attempt {attempt} failed: {e}")
                if not self.is_retryable(e):
                    raise
                if attempt < self.max_attempts:
                    wait = self.backoff(attempt)
                    log_info(f"Waiting {wait:g}s before retry...")
                    await self.sleep(wait)

        assert last_error is not None
        raise RetryExhausted(self.max_attempts, last_error)
