"""Tests for CLI argument handling and markdown rendering."""

from talk2notes.cli import _parse_args, _sanitize_title, render_markdown
from talk2notes.models import Definition, KeyConcept, LectureNotes, NotesMetadata


def _notes(**kw) -> LectureNotes:
    values = dict(
        title="Sabr: Patience",
        summary="A talk on patience.",
        metadata=NotesMetadata(
            generated_at="2024-05-01T10:00:00+00:00",
            transcription_model="whisper-1",
            summarization_model="gpt-4-turbo-preview",
            original_filename="sabr.mp3",
            word_count=1234,
            duration=3725.0,
        ),
        bullet_points=("Be patient",),
        key_concepts=(KeyConcept("Sabr", "Steadfastness", "high"),),
        definitions=(Definition("Sabr", "Patience", context="Used for trials"),),
        action_items=("Read Surah Al-Asr",),
    )
    values.update(kw)
    return LectureNotes(**values)


class TestRenderMarkdown:
    def test_sections(self) -> None:
        md = render_markdown(_notes())
        assert md.startswith("# Sabr: Patience\n")
        assert "## Summary\n\nA talk on patience." in md
        assert "- **Sabr** (high): Steadfastness" in md
        assert "- **Sabr**: Patience _(Used for trials)_" in md
        assert "- [ ] Read Surah Al-Asr" in md
        assert "> Words: 1234" in md
        assert "## Examples" not in md

    def test_cropped_note(self) -> None:
        notes = _notes()
        notes = LectureNotes(
            title=notes.title,
            summary=notes.summary,
            metadata=NotesMetadata(**{**notes.metadata.__dict__, "cropped_note": "Transcript was cropped"}),
        )
        assert "Transcript was cropped" in render_markdown(notes)


class TestCliArgs:
    def test_defaults(self) -> None:
        args = _parse_args(["lecture.mp4"])
        assert args.language == "english"
        assert args.detail == "detailed"
        assert args.focus is None
        assert not args.chunked
        assert not args.keep_source

    def test_all_options(self) -> None:
        args = _parse_args([
            "https://youtu.be/x", "-l", "indonesian", "-d", "concise",
            "-f", "fiqh", "aqidah", "-p", "groq", "--chunked", "--keep-source",
        ])
        assert args.language == "indonesian"
        assert args.focus == ["fiqh", "aqidah"]
        assert args.provider == "groq"
        assert args.chunked and args.keep_source

    def test_sanitize_title(self) -> None:
        assert _sanitize_title('Kajian: "Sabar" / Ikhlas') == "Kajian_Sabar_Ikhlas"
        assert _sanitize_title("...") == "untitled"
