"""总结器抽象基类"""

from abc import ABC, abstractmethod

from talk2notes.models import LectureNotes, SummarizationOptions


class AbstractSummarizer(ABC):
    @abstractmethod
    async def summarize(
        self,
        transcript: str,
        original_filename: str,
        options: SummarizationOptions | None = None,
    ) -> LectureNotes:
        """把（已排版的）转录文本整理成结构化笔记"""
        ...
