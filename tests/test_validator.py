"""Tests for upload validation (pure functions, no I/O)."""

import pytest

from talk2notes.config import DEFAULT_AUDIO_FORMATS, DEFAULT_VIDEO_FORMATS, MediaLimits
from talk2notes.models import MediaKind
from talk2notes.utils import MB
from talk2notes.validator import AUDIO_MIME_TYPES, guess_mime_type, validate_file


class TestValidateFile:
    def test_exactly_at_max_size_is_accepted(self) -> None:
        result = validate_file("video/mp4", 100 * MB, "lecture.mp4")
        assert result.valid
        assert result.file_type is MediaKind.VIDEO

    def test_one_byte_over_max_size_is_rejected(self) -> None:
        result = validate_file("video/mp4", 100 * MB + 1, "lecture.mp4")
        assert not result.valid
        assert result.error == "File size exceeds maximum allowed size of 100MB"

    def test_size_check_runs_before_extension_check(self) -> None:
        result = validate_file("", 200 * MB, "no_extension")
        assert "maximum allowed size" in result.error

    def test_missing_extension(self) -> None:
        result = validate_file("audio/mpeg", 1024, "recording")
        assert not result.valid
        assert result.error == "File must have a valid extension"

    def test_extension_and_mime_must_agree(self) -> None:
        result = validate_file("video/mp4", 1024, "talk.mp3")
        assert not result.valid
        assert result.error.startswith("Invalid file format. Allowed formats:")
        assert "mp3" in result.error and "mp4" in result.error

    def test_unknown_extension(self) -> None:
        result = validate_file("application/octet-stream", 1024, "setup.exe")
        assert not result.valid
        assert "Invalid file format" in result.error

    def test_audio_over_transcription_limit(self) -> None:
        result = validate_file("audio/mpeg", 26 * MB, "long_talk.mp3")
        assert not result.valid
        assert "25MB" in result.error
        assert "compress" in result.error

    def test_audio_at_transcription_limit(self) -> None:
        result = validate_file("audio/mpeg", 25 * MB, "talk.mp3")
        assert result.valid
        assert result.file_type is MediaKind.AUDIO

    def test_video_between_audio_and_video_limits(self) -> None:
        result = validate_file("video/mp4", 40 * MB, "lecture.mp4")
        assert result.valid
        assert result.file_type is MediaKind.VIDEO

    def test_video_over_video_limit(self) -> None:
        limits = MediaLimits(max_file_size_mb=1000)
        result = validate_file("video/webm", 501 * MB, "lecture.webm", limits)
        assert not result.valid
        assert "exceeds maximum" in result.error

    def test_extension_is_case_insensitive(self) -> None:
        assert validate_file("audio/x-m4a", 1024, "Voice Memo.M4A").valid

    def test_custom_formats(self) -> None:
        limits = MediaLimits(audio_formats=("mp3",), video_formats=())
        assert validate_file("audio/mpeg", 1024, "a.mp3", limits).valid
        assert not validate_file("audio/wav", 1024, "a.wav", limits).valid


class TestGuessMimeType:
    def test_known_extensions(self) -> None:
        assert guess_mime_type("a.mp3") == "audio/mpeg"
        assert guess_mime_type("a.mkv") == "video/x-matroska"
        assert guess_mime_type("clip.MOV") == "video/quicktime"

    def test_unknown_extension(self) -> None:
        assert guess_mime_type("notes") == "application/octet-stream"


class TestAllowListPairs:
    @pytest.mark.parametrize("ext", DEFAULT_AUDIO_FORMATS)
    def test_every_audio_extension_with_its_mime_is_audio(self, ext: str) -> None:
        result = validate_file(guess_mime_type(f"a.{ext}"), 1024, f"a.{ext}")
        assert result.valid
        assert result.file_type is MediaKind.AUDIO

    @pytest.mark.parametrize("mime", sorted(AUDIO_MIME_TYPES))
    def test_every_audio_mime_with_mp3_is_audio(self, mime: str) -> None:
        result = validate_file(mime, 1024, "talk.mp3")
        assert result.file_type is MediaKind.AUDIO

    @pytest.mark.parametrize("ext", DEFAULT_VIDEO_FORMATS)
    def test_every_video_extension_with_its_mime_is_video(self, ext: str) -> None:
        result = validate_file(guess_mime_type(f"a.{ext}"), 1024, f"a.{ext}")
        assert result.valid
        assert result.file_type is MediaKind.VIDEO

    @pytest.mark.parametrize(
        "filename, mime",
        [
            ("lecture.mp4", "audio/mpeg"),
            ("lecture.webm", "audio/ogg"),
            ("lecture.mkv", "audio/x-m4a"),
            ("talk.ogg", "video/webm"),
            ("talk.m4a", "video/mp4"),
        ],
    )
    def test_extension_and_mime_from_different_kinds_are_rejected(self, filename: str, mime: str) -> None:
        result = validate_file(mime, 1024, filename)
        assert not result.valid
        assert result.error.startswith("Invalid file format")
