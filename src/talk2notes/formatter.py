"""排版 - 分段、加小标题，保留所有引文区块"""

import re
import time

from talk2notes.llm.base import AbstractChatBackend
from talk2notes.models import NotesLanguage
from talk2notes.prompts import build_formatting_prompt
from talk2notes.tokens import crop_to_token_budget
from talk2notes.utils import log_step, log_success, log_warn

FORMATTING_TEMPERATURE = 0.2
PARAGRAPH_CHARS = 500

_SENTENCE_SPLIT_RE = re.compile(r"([.!?]\s+)")


def add_basic_paragraphs(text: str) -> str:
    """不依赖模型的兜底排版：累计超过 500 字符后在下一个句末换段"""
    pieces = _SENTENCE_SPLIT_RE.split(text)
    out: list[str] = []
    char_count = 0

    for piece in pieces:
        out.append(piece)
        char_count += len(piece)
        if char_count > PARAGRAPH_CHARS and _SENTENCE_SPLIT_RE.fullmatch(piece):
            out.append("\n\n")
            char_count = 0

    return "".join(out).strip()


class Formatter:
    def __init__(self, backend: AbstractChatBackend | None, max_input_tokens: int) -> None:
        self.backend = backend
        self.max_input_tokens = max_input_tokens

    async def format(self, transcript: str, language: NotesLanguage) -> str:
        if self.backend is None:
            log_warn("No chat backend configured, using basic paragraph formatting")
            return add_basic_paragraphs(transcript)

        cropped = crop_to_token_budget(transcript, self.max_input_tokens)
        if cropped.cropped:
            log_warn(f"Transcript exceeds ~{self.max_input_tokens} tokens, cropping before formatting")

        log_step("📝", "Formatting transcript...")
        try:
            t0 = time.time()
            formatted = await self.backend.complete(
                build_formatting_prompt(language),
                cropped.text,
                temperature=FORMATTING_TEMPERATURE,
            )
        except Exception as e:
            log_warn(f"Formatting failed, falling back to basic paragraphs: {e}")
            return add_basic_paragraphs(transcript)

        if not formatted or not formatted.strip():
            log_warn("Formatter returned empty text, falling back to basic paragraphs")
            return add_basic_paragraphs(transcript)

        log_success(f"Formatted in {time.time() - t0:.1f}s")
        return formatted.strip()
