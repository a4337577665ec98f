"""翻译 - 把转录文本翻译成笔记语言，同时补全引文的阿拉伯原文"""

import time

from talk2notes.llm.base import AbstractChatBackend
from talk2notes.models import NotesLanguage
from talk2notes.prompts import build_translation_prompt
from talk2notes.utils import log_step, log_success, log_warn

TRANSLATION_TEMPERATURE = 0.3


class Translator:
    def __init__(self, backend: AbstractChatBackend | None) -> None:
        self.backend = backend

    async def translate(self, transcript: str, target_language: NotesLanguage) -> str:
        """
        英文直接原样返回。
        翻译失败不影响后续流程：记录警告后返回原文。
        """
        if target_language is NotesLanguage.ENGLISH:
            return transcript
        if self.backend is None:
            log_warn("No chat backend configured, skipping translation")
            return transcript

        log_step("🌐", f"Translating transcript to {target_language.value}...")
        try:
            t0 = time.time()
            translated = await self.backend.complete(
                build_translation_prompt(target_language),
                transcript,
                temperature=TRANSLATION_TEMPERATURE,
            )
        except Exception as e:
            log_warn(f"Translation failed, using original transcript: {e}")
            return transcript

        if not translated or not translated.strip():
            log_warn("Translation returned empty text, using original transcript")
            return transcript

        log_success(f"Translated in {time.time() - t0:.1f}s ({len(translated)} chars)")
        return translated
