"""处理流水线 - 抽音轨 → 压缩 → 转录 → 翻译 → 排版 → 总结

每个阶段产生的中间文件都登记下来，无论成功失败都在 finally 里删掉。
"""

import os
from collections.abc import Callable
from dataclasses import replace

from talk2notes.config import Config, MediaLimits
from talk2notes.downloader import get_downloader
from talk2notes.errors import CompressionError, ValidationError
from talk2notes.formatter import Formatter
from talk2notes.llm import AbstractChatBackend, get_chat_backend
from talk2notes.media import AbstractTranscoder, AudioCompressor, AudioExtractor, get_transcoder
from talk2notes.models import (
    LectureNotes,
    MediaAsset,
    MediaKind,
    NotesLanguage,
    ProcessingStep,
    ProcessResult,
    SummarizationOptions,
    TranscriptionOptions,
)
from talk2notes.retry import RetryPolicy
from talk2notes.summarizer import AbstractSummarizer, get_summarizer
from talk2notes.transcriber import AbstractTranscriber, get_transcriber
from talk2notes.translator import Translator
from talk2notes.utils import MB, format_file_size, log_error, log_info, log_warn, remove_file
from talk2notes.validator import guess_mime_type, validate_file

ProgressCallback = Callable[[ProcessingStep, str], None]


def _source_limits(limits: MediaLimits) -> MediaLimits:
    """本地/下载的媒体在转录前会先压缩，只受下载上限约束，不套用转录接口的音频上限"""
    return replace(limits, max_file_size_mb=limits.max_video_mb, max_audio_mb=limits.max_video_mb)



class Pipeline:
    def __init__(
        self,
        config: Config,
        *,
        transcoder: AbstractTranscoder | None = None,
        transcriber: AbstractTranscriber | None = None,
        chat_backend: AbstractChatBackend | None = None,
        summarizer: AbstractSummarizer | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.config = config
        self.on_progress = on_progress

        transcoder = transcoder or get_transcoder(config)
        self.extractor = AudioExtractor(transcoder, config.temp_dir, config.limits)
        self.compressor = AudioCompressor(transcoder, config.temp_dir)

        self.transcriber = transcriber or get_transcriber(
            config.ai, retry=RetryPolicy(), timeout=config.transcription_timeout
        )
        backend = chat_backend if chat_backend is not None else get_chat_backend(config.ai)
        self.translator = Translator(backend)
        self.formatter = Formatter(backend, config.ai.max_input_tokens)
        self.summarizer = summarizer or get_summarizer(config, backend)

    def _progress(self, step: ProcessingStep, message: str) -> None:
        if self.on_progress is not None:
            self.on_progress(step, message)

    async def process_media(
        self,
        asset: MediaAsset,
        options: SummarizationOptions | None = None,
        *,
        delete_source: bool = False,
    ) -> LectureNotes:
        """跑完整条流水线；抛出的异常由 run_* 转成 ProcessResult"""
        options = options or SummarizationOptions()
        limits = self.config.limits
        derived: list[str] = []

        try:
            audio_path = asset.path
            duration = None

            if asset.kind is MediaKind.VIDEO:
                self._progress(ProcessingStep.EXTRACTING, "Extracting audio from video")
                extraction = await self.extractor.extract(asset.path)
                derived.append(extraction.audio_path)
                audio_path = extraction.audio_path
                duration = extraction.duration

            if os.path.getsize(audio_path) / MB > limits.compress_trigger_mb:
                self._progress(ProcessingStep.COMPRESSING, "Compressing audio")
                try:
                    compressed = await self.compressor.compress_if_needed(
                        audio_path, limits.compress_target_mb
                    )
                except CompressionError as e:
                    # 未压缩的音频可能仍在转录服务的上限之内，交给转录器判断
                    log_warn(f"Compression failed, continuing with original audio: {e}")
                else:
                    if compressed != audio_path:
                        derived.append(compressed)
                        audio_path = compressed

            self._progress(ProcessingStep.TRANSCRIBING, "Transcribing audio")
            transcription = await self.transcriber.transcribe(
                audio_path,
                TranscriptionOptions(language=self.config.transcription_language, temperature=0.0),
            )

            text = transcription.text
            if options.language is not NotesLanguage.ENGLISH:
                self._progress(ProcessingStep.TRANSLATING, f"Translating to {options.language.value}")
                text = await self.translator.translate(text, options.language)

            self._progress(ProcessingStep.FORMATTING, "Formatting transcript")
            formatted = await self.formatter.format(text, options.language)

            self._progress(ProcessingStep.SUMMARIZING, "Generating notes")
            notes = await self.summarizer.summarize(
                formatted,
                asset.original_filename or os.path.basename(asset.path),
                options,
            )

            if transcription.duration is not None:
                duration = transcription.duration
            notes = replace(
                notes,
                transcript=formatted,
                metadata=replace(notes.metadata, duration=duration),
            )
            self._progress(ProcessingStep.COMPLETE, "Notes ready")
            return notes
        finally:
            for path in derived:
                remove_file(path)
            if delete_source:
                remove_file(asset.path)

    async def run_upload(
        self,
        path: str,
        filename: str,
        mime_type: str,
        options: SummarizationOptions | None = None,
    ) -> ProcessResult:
        """处理一个已经落盘的上传文件；文件归流水线所有，结束后删除"""
        try:
            self._progress(ProcessingStep.UPLOADING, f"Received {filename}")
            result = validate_file(mime_type, os.path.getsize(path), filename, self.config.limits)
            if not result.valid:
                remove_file(path)
                raise ValidationError(result.error or "Invalid file")

            asset = MediaAsset(
                path=path,
                declared_mime_type=mime_type,
                declared_extension=os.path.splitext(filename)[1].lstrip(".").lower(),
                size_bytes=os.path.getsize(path),
                kind=result.file_type,
                original_filename=filename,
            )
            notes = await self.process_media(asset, options, delete_source=True)
        except Exception as e:
            return self._failure(e)
        return ProcessResult(success=True, data=notes)

    async def run_source(
        self,
        source: str,
        options: SummarizationOptions | None = None,
        *,
        keep_source: bool = False,
    ) -> ProcessResult:
        """本地路径或 URL；下载得到的文件默认用完即删，本地文件保持不动"""
        try:
            self._progress(ProcessingStep.DOWNLOADING, f"Fetching {source}")
            downloaded = await get_downloader(source, self.config).download(source)

            mime_type = guess_mime_type(downloaded.path)
            result = validate_file(
                mime_type,
                os.path.getsize(downloaded.path),
                downloaded.path,
                _source_limits(self.config.limits),
            )
            if not result.valid:
                if downloaded.owned:
                    remove_file(downloaded.path)
                raise ValidationError(result.error or "Invalid file")

            ext = os.path.splitext(downloaded.path)[1]
            filename = f"{downloaded.title}{ext}" if downloaded.title else os.path.basename(downloaded.path)
            asset = MediaAsset.from_path(downloaded.path, result.file_type, mime_type, original_filename=filename)
            log_info(f"Processing {asset.kind.value}: {filename} ({format_file_size(asset.size_bytes)})")

            notes = await self.process_media(asset, options, delete_source=downloaded.owned and not keep_source)
        except Exception as e:
            return self._failure(e)
        return ProcessResult(success=True, data=notes)

    def _failure(self, error: Exception) -> ProcessResult:
        log_error(str(error))
        self._progress(ProcessingStep.ERROR, str(error))
        return ProcessResult(success=False, error=str(error) or type(error).__name__)

