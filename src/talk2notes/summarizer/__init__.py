"""总结模块"""

from talk2notes.config import Config
from talk2notes.llm.base import AbstractChatBackend
from talk2notes.summarizer.base import AbstractSummarizer
from talk2notes.summarizer.notes import LectureNotesSummarizer
from talk2notes.summarizer.parsing import parse_notes_payload


def get_summarizer(config: Config, backend: AbstractChatBackend | None) -> AbstractSummarizer:
    """按配置的 provider 和溢出策略创建笔记总结器"""
    return LectureNotesSummarizer(backend=backend, ai=config.ai, overflow=config.summary_overflow)


__all__ = [
    "AbstractSummarizer",
    "LectureNotesSummarizer",
    "get_summarizer",
    "parse_notes_payload",
]
