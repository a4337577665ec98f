"""Dalil（经文/圣训引文）区块约定

翻译、排版、总结三个阶段的提示词都要求模型把引文写成如下结构，
前后用单独一行的 ``---`` 隔开，下游据此可靠地识别引文边界：

    ---

    <带 harakat 的阿拉伯原文>

    (<转写>)

    "<译文>"

    [<出处：QS. 章名: 节 或 HR. 传述人>]

    ---
"""

import re
from dataclasses import dataclass

QUOTE_SEPARATOR = "---"

_SEPARATOR_LINE_RE = re.compile(r"^[ \t]*-{3}[ \t]*$", re.MULTILINE)
_CITATION_RE = re.compile(r"^\*{0,2}\[(?:QS|HR)\.?[^\]]*\]\*{0,2}$")
_ARABIC_RE = re.compile(r"[؀-ۿ]")


@dataclass(frozen=True)
class QuoteBlock:
    raw: str
    arabic: str | None = None
    transliteration: str | None = None
    translation: str | None = None
    citation: str | None = None

    @property
    def is_complete(self) -> bool:
        return all((self.arabic, self.transliteration, self.translation, self.citation))


def quote_block_template(translation_label: str = "Translation") -> str:
    """提示词里展示给模型的区块格式"""
    return (
        f"{QUOTE_SEPARATOR}\n\n"
        "Arabic text with harakat\n\n"
        "(transliteration)\n\n"
        f'"{translation_label}"\n\n'
        "[Reference]\n\n"
        f"{QUOTE_SEPARATOR}"
    )


def format_quote_block(arabic: str, transliteration: str, translation: str, citation: str) -> str:
    return (
        f"{QUOTE_SEPARATOR}\n\n"
        f"{arabic}\n\n"
        f"({transliteration})\n\n"
        f'"{translation}"\n\n'
        f"[{citation}]\n\n"
        f"{QUOTE_SEPARATOR}"
    )


def find_quote_blocks(text: str) -> list[QuoteBlock]:
    """找出两条分隔线之间、且带出处或阿拉伯文的区块"""
    blocks: list[QuoteBlock] = []
    separators = list(_SEPARATOR_LINE_RE.finditer(text))

    i = 0
    while i + 1 < len(separators):
        inner = text[separators[i].end() : separators[i + 1].start()].strip()
        block = _parse_block(inner)
        if block is not None:
            blocks.append(block)
            # 这一对分隔线已被引文占用
            i += 2
        else:
            i += 1
    return blocks


def has_unwrapped_citation(text: str) -> bool:
    """正文里出现了没被分隔线包住的出处行"""
    wrapped = {b.citation for b in find_quote_blocks(text) if b.citation}
    for line in text.splitlines():
        line = line.strip()
        if _CITATION_RE.match(line) and line.strip("*") not in wrapped:
            return True
    return False


def _parse_block(inner: str) -> QuoteBlock | None:
    if not inner:
        return None
    parts = [p.strip() for p in re.split(r"\n\s*\n", inner) if p.strip()]

    arabic = transliteration = translation = citation = None
    for part in parts:
        if citation is None and _CITATION_RE.match(part):
            citation = part.strip("*")
        elif transliteration is None and part.startswith("(") and part.endswith(")"):
            transliteration = part[1:-1].strip()
        elif translation is None and part[:1] in ('"', "“") and part[-1:] in ('"', "”"):
            translation = part[1:-1].strip()
        elif arabic is None and _ARABIC_RE.search(part):
            arabic = part

    if citation is None and arabic is None:
        return None
    return QuoteBlock(
        raw=inner,
        arabic=arabic,
        transliteration=transliteration,
        translation=translation,
        citation=citation,
    )


def is_wrapped(text: str) -> bool:
    """所有出处行都在分隔线包住的区块里"""
    return not has_unwrapped_citation(text)
