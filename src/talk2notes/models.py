"""数据模型定义"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any


class MediaKind(str, Enum):
    AUDIO = "audio"
    VIDEO = "video"


class DetailLevel(str, Enum):
    CONCISE = "concise"
    DETAILED = "detailed"
    COMPREHENSIVE = "comprehensive"


class NotesLanguage(str, Enum):
    ENGLISH = "english"
    INDONESIAN = "indonesian"


DEFAULT_LANGUAGE = NotesLanguage.ENGLISH


class ProcessingStep(str, Enum):
    UPLOADING = "uploading"
    DOWNLOADING = "downloading"
    EXTRACTING = "extracting"
    COMPRESSING = "compressing"
    TRANSCRIBING = "transcribing"
    TRANSLATING = "translating"
    FORMATTING = "formatting"
    SUMMARIZING = "summarizing"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class MediaAsset:
    """磁盘上的一个媒体文件，由当前处理它的阶段独占"""
    path: str
    declared_mime_type: str
    declared_extension: str
    size_bytes: int
    kind: MediaKind
    original_filename: str = ""

    @classmethod
    def from_path(
        cls,
        path: str,
        kind: MediaKind,
        mime_type: str = "",
        original_filename: str | None = None,
    ) -> "MediaAsset":
        filename = original_filename or os.path.basename(path)
        ext = os.path.splitext(filename)[1].lstrip(".").lower()
        return cls(
            path=path,
            declared_mime_type=mime_type,
            declared_extension=ext,
            size_bytes=os.path.getsize(path),
            kind=kind,
            original_filename=filename,
        )


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    file_type: MediaKind | None = None
    error: str | None = None


@dataclass(frozen=True)
class AudioMetadata:
    """ffprobe 探测结果"""
    duration: float = 0.0       # 秒
    bitrate: int = 0            # bit/s
    sample_rate: int = 0
    channels: int = 0


@dataclass(frozen=True)
class ExtractionResult:
    audio_path: str
    duration: float
    format: str = "mp3"


@dataclass(frozen=True)
class DownloadResult:
    """下载结果"""
    path: str             # 本地文件路径
    title: str = ""       # 视频标题（如果能获取到）
    duration: float | None = None
    owned: bool = True    # True 表示文件由本程序创建，处理完需要删除


@dataclass(frozen=True)
class Segment:
    """单个语音片段"""
    id: int
    start: float          # 开始时间（秒）
    end: float            # 结束时间（秒）
    text: str


@dataclass(frozen=True)
class TranscriptionOptions:
    language: str | None = None
    prompt: str | None = None
    temperature: float = 0.0


@dataclass(frozen=True)
class TranscriptionResult:
    """转录结果 - 所有 transcriber 统一返回此类型"""
    text: str
    duration: float | None = None
    language: str | None = None
    segments: tuple[Segment, ...] = ()


@dataclass(frozen=True)
class SummarizationOptions:
    detail_level: DetailLevel = DetailLevel.DETAILED
    focus_areas: tuple[str, ...] = ()        # 空表示覆盖全部主题
    language: NotesLanguage = DEFAULT_LANGUAGE


@dataclass(frozen=True)
class KeyConcept:
    concept: str
    explanation: str
    importance: str = "medium"     # high / medium / low


@dataclass(frozen=True)
class Definition:
    term: str
    definition: str
    context: str | None = None


@dataclass(frozen=True)
class ExampleProblem:
    problem: str
    solution: str | None = None
    explanation: str | None = None


@dataclass(frozen=True)
class NotesMetadata:
    generated_at: str
    transcription_model: str
    summarization_model: str
    original_filename: str
    word_count: int
    duration: float | None = None
    cropped_note: str | None = None

    @property
    def was_cropped(self) -> bool:
        return self.cropped_note is not None


@dataclass(frozen=True)
class LectureNotes:
    """最终产物，生成后不再修改"""
    title: str
    summary: str
    metadata: NotesMetadata
    paragraphs: tuple[str, ...] = ()
    bullet_points: tuple[str, ...] = ()
    key_concepts: tuple[KeyConcept, ...] = ()
    definitions: tuple[Definition, ...] = ()
    example_problems: tuple[ExampleProblem, ...] = ()
    action_items: tuple[str, ...] = ()
    transcript: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """camelCase 结构，与前端/历史记录使用的 JSON 一致"""
        meta: dict[str, Any] = {
            "generatedAt": self.metadata.generated_at,
            "transcriptionModel": self.metadata.transcription_model,
            "summarizationModel": self.metadata.summarization_model,
            "originalFilename": self.metadata.original_filename,
            "wordCount": self.metadata.word_count,
        }
        if self.metadata.duration is not None:
            meta["duration"] = self.metadata.duration
        if self.metadata.cropped_note:
            meta["croppedNote"] = self.metadata.cropped_note

        data: dict[str, Any] = {
            "title": self.title,
            "summary": self.summary,
            "paragraphs": list(self.paragraphs),
            "bulletPoints": list(self.bullet_points),
            "keyConcepts": [
                {"concept": c.concept, "explanation": c.explanation, "importance": c.importance}
                for c in self.key_concepts
            ],
            "definitions": [
                _drop_none({"term": d.term, "definition": d.definition, "context": d.context})
                for d in self.definitions
            ],
            "exampleProblems": [
                _drop_none({"problem": p.problem, "solution": p.solution, "explanation": p.explanation})
                for p in self.example_problems
            ],
            "actionItems": list(self.action_items),
            "metadata": meta,
        }
        if self.transcript is not None:
            data["transcript"] = self.transcript
        return data


@dataclass(frozen=True)
class ProcessResult:
    """对调用方暴露的结果：成功带 data，失败只带可读的 error"""
    success: bool
    data: LectureNotes | None = None
    error: str | None = None


def _drop_none(d: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}
