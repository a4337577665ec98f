"""Token 预算 - 估算、按句子边界截断、分块"""

import math
import re
from collections.abc import Callable
from dataclasses import dataclass

TokenEstimator = Callable[[str], int]

CHARS_PER_TOKEN = 4

_SENTENCE_END_RE = re.compile(r"[.!?]\s+")
# 截断窗口末尾的句号也算句子边界
_CROP_END_RE = re.compile(r"[.!?](?=\s|$)")


def estimate_tokens(text: str) -> int:
    """粗略估算：1 token ≈ 4 个字符"""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


@dataclass(frozen=True)
class CropResult:
    text: str
    cropped: bool


def crop_to_token_budget(
    text: str,
    max_tokens: int,
    estimator: TokenEstimator = estimate_tokens,
) -> CropResult:
    """超出预算时只保留预算内最后一个完整句子之前的内容"""
    if estimator(text) <= max_tokens:
        return CropResult(text=text, cropped=False)

    window = text[: max_tokens * CHARS_PER_TOKEN]

    last_end = None
    for m in _CROP_END_RE.finditer(window):
        last_end = m
    if last_end is not None:
        # 保留句末标点，丢弃其后的空白
        return CropResult(text=window[: last_end.start() + 1], cropped=True)

    # 预算内没有句子边界，退而求其次按空白截断
    cut = window.rfind(" ")
    if cut > 0:
        return CropResult(text=window[:cut].rstrip(), cropped=True)
    return CropResult(text=window, cropped=True)


def split_sentences(text: str) -> list[str]:
    """按 [.!?] + 空白 切分，保留句末标点"""
    sentences: list[str] = []
    start = 0
    for m in _SENTENCE_END_RE.finditer(text):
        sentences.append(text[start : m.start() + 1])
        start = m.end()
    tail = text[start:]
    if tail.strip():
        sentences.append(tail)
    return sentences


def chunk_transcript(text: str, max_tokens: int = 10_000) -> list[str]:
    """把整句装进不超过 max_tokens 的块里；单句超长时独占一块"""
    max_chars = max_tokens * CHARS_PER_TOKEN
    if len(text) <= max_chars:
        return [text]

    chunks: list[str] = []
    current = ""
    for sentence in split_sentences(text):
        candidate = f"{current} {sentence}" if current else sentence
        if len(candidate) > max_chars and current:
            chunks.append(current.strip())
            current = sentence
        else:
            current = candidate

    if current.strip():
        chunks.append(current.strip())
    return chunks
