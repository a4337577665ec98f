"""异常定义 - 每个阶段对外只抛出自己的异常类型"""


class Talk2NotesError(RuntimeError):
    """所有流水线异常的基类，message 可直接展示给用户"""


class ConfigError(Talk2NotesError):
    pass


class ValidationError(Talk2NotesError):
    pass


class DownloadError(Talk2NotesError):
    pass


class TranscoderError(Talk2NotesError):
    """ffmpeg / ffprobe 调用失败"""


class ExtractionError(Talk2NotesError):
    pass


class CompressionError(Talk2NotesError):
    pass


class TranscriptionError(Talk2NotesError):
    def __init__(
        self,
        message: str,
        *,
        attempts: int = 0,
        file_size_mb: float | None = None,
        last_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.file_size_mb = file_size_mb
        self.last_error = last_error


class SummarizationError(Talk2NotesError):
    pass


class ParseError(SummarizationError):
    """模型返回的内容不是合法的 JSON 对象"""
