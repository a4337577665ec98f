"""CLI 入口 - argparse 参数解析与结果保存"""

import argparse
import asyncio
import json
import os
import re
import shutil
import sys
from datetime import datetime

from talk2notes import __version__
from talk2notes.config import Config, Provider, SummaryOverflow
from talk2notes.errors import ConfigError
from talk2notes.models import (
    DetailLevel,
    LectureNotes,
    NotesLanguage,
    ProcessingStep,
    SummarizationOptions,
)
from talk2notes.pipeline import Pipeline
from talk2notes.utils import (
    _Colors as _C,
    format_duration,
    log_error,
    log_info,
    log_step,
    log_success,
    log_warn,
)

_STEP_EMOJI = {
    ProcessingStep.UPLOADING: "📤",
    ProcessingStep.DOWNLOADING: "📥",
    ProcessingStep.EXTRACTING: "🎬",
    ProcessingStep.COMPRESSING: "🗜️",
    ProcessingStep.TRANSCRIBING: "🎙️",
    ProcessingStep.TRANSLATING: "🌐",
    ProcessingStep.FORMATTING: "📝",
    ProcessingStep.SUMMARIZING: "🤖",
    ProcessingStep.COMPLETE: "✅",
}


def _check_system_deps(config: Config) -> None:
    """检查系统依赖（ffmpeg, yt-dlp）"""
    missing = []
    if shutil.which(config.ffmpeg_path) is None:
        missing.append("ffmpeg")
    if shutil.which("yt-dlp") is None:
        missing.append("yt-dlp")
    if missing:
        log_warn(f"System tools not found: {', '.join(missing)}")
        log_info("Install them: brew install ffmpeg yt-dlp")
        log_info("(ffmpeg is needed for video and large audio, yt-dlp only for YouTube links)")


def _sanitize_title(title: str) -> str:
    """简化标题：取前30字符，去掉特殊符号，空格换下划线"""
    title = title[:30]
    title = re.sub(r'[\\/:*?"<>|.\n\r\t]', '', title)
    title = title.strip()
    title = re.sub(r'\s+', '_', title)
    return title or "untitled"


def _build_output_dir(base_dir: str, title: str) -> tuple[str, str]:
    """构建按日期分组的输出目录，返回 (output_dir, file_prefix)"""
    now = datetime.now()
    file_prefix = f"{_sanitize_title(title)}_{now.strftime('%H%M%S')}"
    output_dir = os.path.join(base_dir, now.strftime("%Y-%m-%d"))
    os.makedirs(output_dir, exist_ok=True)
    return output_dir, file_prefix


def render_markdown(notes: LectureNotes) -> str:
    """笔记 → Markdown 文档"""
    lines = [f"# {notes.title}", ""]

    meta = notes.metadata
    lines.append(f"> Source: {meta.original_filename}  ")
    lines.append(f"> Generated: {meta.generated_at}  ")
    lines.append(f"> Models: {meta.transcription_model} / {meta.summarization_model}  ")
    if meta.duration:
        lines.append(f"> Duration: {format_duration(meta.duration)}  ")
    lines.append(f"> Words: {meta.word_count}")
    if meta.cropped_note:
        lines.append(f">\n> ⚠️ {meta.cropped_note}")
    lines.append("")

    lines += ["## Summary", "", notes.summary, ""]

    if notes.paragraphs:
        lines += ["## Notes", ""]
        for paragraph in notes.paragraphs:
            lines += [paragraph, ""]

    if notes.bullet_points:
        lines += ["## Key Points", ""]
        lines += [f"- {point}" for point in notes.bullet_points]
        lines.append("")

    if notes.key_concepts:
        lines += ["## Key Concepts", ""]
        for c in notes.key_concepts:
            lines.append(f"- **{c.concept}** ({c.importance}): {c.explanation}")
        lines.append("")

    if notes.definitions:
        lines += ["## Definitions", ""]
        for d in notes.definitions:
            entry = f"- **{d.term}**: {d.definition}"
            if d.context:
                entry += f" _({d.context})_"
            lines.append(entry)
        lines.append("")

    if notes.example_problems:
        lines += ["## Examples", ""]
        for i, p in enumerate(notes.example_problems, 1):
            lines.append(f"{i}. {p.problem}")
            if p.solution:
                lines.append(f"   - Solution: {p.solution}")
            if p.explanation:
                lines.append(f"   - Explanation: {p.explanation}")
        lines.append("")

    if notes.action_items:
        lines += ["## Action Items", ""]
        lines += [f"- [ ] {item}" for item in notes.action_items]
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def _save_results(notes: LectureNotes, output_dir: str, file_prefix: str) -> str:
    """保存 JSON / Markdown / 转录文本，返回 Markdown 文件的绝对路径"""
    log_step("💾", "Saving results...")

    json_path = os.path.join(output_dir, f"{file_prefix}_notes.json")
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(notes.to_dict(), f, ensure_ascii=False, indent=2)
    log_success(f"Notes (JSON) → {os.path.abspath(json_path)}")

    md_path = os.path.join(output_dir, f"{file_prefix}_notes.md")
    with open(md_path, "w", encoding="utf-8") as f:
        f.write(render_markdown(notes))
    log_success(f"Notes (Markdown) → {os.path.abspath(md_path)}")

    if notes.transcript:
        transcript_path = os.path.join(output_dir, f"{file_prefix}_transcript.txt")
        with open(transcript_path, "w", encoding="utf-8") as f:
            f.write(f"# Source: {notes.metadata.original_filename}\n")
            f.write(f"# Model: {notes.metadata.transcription_model}\n")
            if notes.metadata.duration:
                f.write(f"# Duration: {notes.metadata.duration:.0f}s\n")
            f.write("# " + "─" * 50 + "\n\n")
            f.write(notes.transcript)
        log_success(f"Transcript → {os.path.abspath(transcript_path)}")

    return os.path.abspath(md_path)


def _print_preview(notes: LectureNotes) -> None:
    log_step("📋", notes.title)
    preview = notes.summary[:500]
    if len(notes.summary) > 500:
        preview += f"\n... ({len(notes.summary) - 500} more characters)"
    print(f"\n{preview}")

    if notes.bullet_points:
        print()
        for point in notes.bullet_points[:5]:
            print(f"   {_C.DIM}• {point}{_C.RESET}")
        if len(notes.bullet_points) > 5:
            print(f"   {_C.DIM}... ({len(notes.bullet_points) - 5} more){_C.RESET}")


def _on_progress(step: ProcessingStep, message: str) -> None:
    emoji = _STEP_EMOJI.get(step)
    if emoji:
        log_info(f"{emoji} {message}")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="talk2notes",
        description="Talk2Notes - Lecture audio/video → Transcript → Structured notes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s lecture.mp4
  %(prog)s "https://www.youtube.com/watch?v=xxx" -l indonesian
  %(prog)s talk.mp3 -d comprehensive -f "fiqh" "aqidah"
  %(prog)s "https://example.com/kajian.mp3" -p groq --chunked -o ~/notes/
        """,
    )
    parser.add_argument("input", help="Local audio/video file, YouTube link or direct media URL")
    parser.add_argument(
        "-l", "--language",
        default=NotesLanguage.ENGLISH.value,
        choices=[lang.value for lang in NotesLanguage],
        help="Language of the generated notes (default: english)",
    )
    parser.add_argument(
        "-d", "--detail",
        default=DetailLevel.DETAILED.value,
        choices=[level.value for level in DetailLevel],
        help="Detail level of the notes (default: detailed)",
    )
    parser.add_argument(
        "-f", "--focus",
        nargs="+",
        default=None,
        metavar="TOPIC",
        help="Topics to focus on (default: all topics)",
    )
    parser.add_argument(
        "-p", "--provider",
        default=None,
        choices=[p.value for p in Provider],
        help="AI provider (default: AI_PROVIDER env var or openai)",
    )
    parser.add_argument(
        "-o", "--output",
        default="./talk2notes_output",
        help="Output directory (default: ./talk2notes_output/)",
    )
    parser.add_argument(
        "--chunked",
        action="store_true",
        help="Summarize long transcripts chunk by chunk instead of cropping",
    )
    parser.add_argument(
        "--keep-source",
        action="store_true",
        help="Keep downloaded media after processing",
    )
    parser.add_argument(
        "-c", "--cookies",
        default=None,
        help="Path to cookies.txt file for yt-dlp",
    )
    parser.add_argument(
        "-cb", "--cookies-from-browser",
        default=None,
        metavar="BROWSER",
        help="Read yt-dlp cookies from browser: chrome, edge, safari, firefox",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def _build_config_from_args(args: argparse.Namespace) -> Config:
    overrides = {}
    if args.provider:
        overrides["provider"] = args.provider
    if args.chunked:
        overrides["summary_overflow"] = SummaryOverflow.CHUNK
    if args.cookies:
        overrides["cookies"] = args.cookies
    if args.cookies_from_browser:
        overrides["cookies_from_browser"] = args.cookies_from_browser
    return Config.from_env(**overrides)


def _print_banner() -> None:
    print(f"""
{_C.MAGENTA}{_C.BOLD}  ✦ Talk2Notes ✦{_C.RESET}
{_C.DIM}  Lecture → Transcript → Notes{_C.RESET}
    """)


def main(argv: list[str] | None = None) -> None:
    from dotenv import load_dotenv
    load_dotenv()

    _print_banner()
    args = _parse_args(argv)

    try:
        config = _build_config_from_args(args)
    except ConfigError as e:
        log_error(str(e))
        sys.exit(1)

    _check_system_deps(config)

    options = SummarizationOptions(
        detail_level=DetailLevel(args.detail),
        focus_areas=tuple(args.focus or ()),
        language=NotesLanguage(args.language),
    )
    pipeline = Pipeline(config, on_progress=_on_progress)
    result = asyncio.run(pipeline.run_source(args.input, options, keep_source=args.keep_source))

    if not result.success or result.data is None:
        log_error(result.error or "Processing failed")
        sys.exit(1)

    notes = result.data
    output_dir, file_prefix = _build_output_dir(args.output, notes.title)
    _save_results(notes, output_dir, file_prefix)
    _print_preview(notes)

    print(f"\n{_C.GREEN}{_C.BOLD}  ✦ All done! Files saved to: {os.path.abspath(output_dir)}/ ✦{_C.RESET}\n")


if __name__ == "__main__":
    main()
