"""Tests for formatting and temp-file helpers."""

import os

from talk2notes.utils import format_duration, format_file_size, remove_file, unique_filename


def test_format_file_size():
    assert format_file_size(0) == "0 Bytes"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(5 * 1024 * 1024) == "5 MB"


def test_format_duration():
    assert format_duration(65) == "1:05"
    assert format_duration(3725) == "1:02:05"


def test_unique_filename_does_not_collide():
    names = {unique_filename("extracted_audio.mp3") for _ in range(100)}
    assert len(names) == 100
    assert all(n.endswith("_extracted_audio.mp3") for n in names)


def test_remove_file_is_silent_for_missing(tmp_path):
    path = tmp_path / "a.mp3"
    path.write_bytes(b"x")
    remove_file(str(path))
    assert not os.path.exists(path)
    remove_file(str(path))
    remove_file(None)
