"""结构化笔记总结器（JSON 模式）"""

import time
from datetime import datetime, timezone

from talk2notes.config import ProviderConfig, SummaryOverflow
from talk2notes.errors import SummarizationError
from talk2notes.llm.base import AbstractChatBackend
from talk2notes.models import LectureNotes, NotesMetadata, SummarizationOptions
from talk2notes.prompts import build_summarization_prompt
from talk2notes.summarizer import parsing
from talk2notes.summarizer.base import AbstractSummarizer
from talk2notes.tokens import chunk_transcript, crop_to_token_budget, estimate_tokens
from talk2notes.utils import log_info, log_step, log_success, log_warn

SUMMARY_TEMPERATURE = 0.3
CHUNK_MAX_TOKENS = 10_000

CROPPED_METADATA_NOTE = "Transcript was cropped due to API token limits"


def cropped_summary_prefix(max_tokens: int) -> str:
    return (
        "⚠️ **Note**: Transcript was too long and was cropped to fit within API limits. "
        f"Only the first ~{max_tokens} tokens were processed.\n\n"
    )


class LectureNotesSummarizer(AbstractSummarizer):
    def __init__(
        self,
        backend: AbstractChatBackend | None,
        ai: ProviderConfig,
        overflow: SummaryOverflow = SummaryOverflow.CROP,
    ) -> None:
        self.backend = backend
        self.ai = ai
        self.overflow = overflow

    async def summarize(
        self,
        transcript: str,
        original_filename: str,
        options: SummarizationOptions | None = None,
    ) -> LectureNotes:
        if self.backend is None:
            raise SummarizationError(
                f"No API key configured for {self.ai.provider.value} summarization"
            )
        options = options or SummarizationOptions()
        max_tokens = self.ai.max_input_tokens

        if self.overflow is SummaryOverflow.CHUNK and estimate_tokens(transcript) > max_tokens:
            return await self._summarize_in_chunks(transcript, original_filename, options, max_tokens)

        crop = crop_to_token_budget(transcript, max_tokens)
        if crop.cropped:
            log_warn(
                f"Transcript too long ({estimate_tokens(transcript)} tokens), "
                f"cropped to ~{estimate_tokens(crop.text)} tokens"
            )

        log_step("🤖", f"Summarizing with {self.ai.summarization_model}...")
        t0 = time.time()
        payload = await self._request(crop.text, options)
        log_success(f"Notes generated in {time.time() - t0:.1f}s")

        summary = str(payload.get("summary") or "")
        if crop.cropped:
            summary = cropped_summary_prefix(max_tokens) + summary

        return LectureNotes(
            title=str(payload.get("title") or parsing.DEFAULT_TITLE),
            summary=summary,
            paragraphs=parsing.string_list(payload, "paragraphs"),
            bullet_points=parsing.string_list(payload, "bulletPoints"),
            key_concepts=parsing.key_concepts(payload),
            definitions=parsing.definitions(payload),
            example_problems=parsing.example_problems(payload),
            action_items=parsing.string_list(payload, "actionItems"),
            metadata=self._metadata(
                original_filename,
                word_count=len(crop.text.split()),
                cropped_note=CROPPED_METADATA_NOTE if crop.cropped else None,
            ),
        )

    async def _summarize_in_chunks(
        self,
        transcript: str,
        original_filename: str,
        options: SummarizationOptions,
        max_tokens: int,
    ) -> LectureNotes:
        """逐块总结后按顺序拼接，标题取第一块"""
        chunks = chunk_transcript(transcript, min(CHUNK_MAX_TOKENS, max_tokens))
        log_step("🧩", f"Summarizing transcript in {len(chunks)} chunks...")

        payloads = []
        for i, chunk in enumerate(chunks, 1):
            log_info(f"Chunk {i}/{len(chunks)}")
            payloads.append(await self._request(chunk, options))
        log_success(f"Merged {len(chunks)} chunk summaries")

        return LectureNotes(
            title=str(payloads[0].get("title") or "Part 1"),
            summary="\n\n".join(str(p.get("summary") or "") for p in payloads),
            paragraphs=sum((parsing.string_list(p, "paragraphs") for p in payloads), ()),
            bullet_points=sum((parsing.string_list(p, "bulletPoints") for p in payloads), ()),
            key_concepts=sum((parsing.key_concepts(p) for p in payloads), ()),
            definitions=sum((parsing.definitions(p) for p in payloads), ()),
            example_problems=sum((parsing.example_problems(p) for p in payloads), ()),
            action_items=sum((parsing.string_list(p, "actionItems") for p in payloads), ()),
            metadata=self._metadata(original_filename, word_count=len(transcript.split())),
        )

    async def _request(self, text: str, options: SummarizationOptions) -> dict:
        try:
            raw = await self.backend.complete(
                build_summarization_prompt(options),
                text,
                temperature=SUMMARY_TEMPERATURE,
                json_mode=True,
            )
        except Exception as e:
            raise SummarizationError(f"Summarization request failed: {e}") from e
        return parsing.parse_notes_payload(raw or "{}")

    def _metadata(
        self,
        original_filename: str,
        word_count: int,
        cropped_note: str | None = None,
    ) -> NotesMetadata:
        return NotesMetadata(
            generated_at=datetime.now(timezone.utc).isoformat(),
            transcription_model=self.ai.transcription_model,
            summarization_model=self.ai.summarization_model,
            original_filename=original_filename,
            word_count=word_count,
            cropped_note=cropped_note,
        )


