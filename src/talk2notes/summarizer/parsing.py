"""模型输出 → LectureNotes 字段"""

import json
import re
from typing import Any

from talk2notes.errors import ParseError
from talk2notes.models import Definition, ExampleProblem, KeyConcept

DEFAULT_TITLE = "Untitled Lecture Notes"
IMPORTANCE_LEVELS = ("high", "medium", "low")

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def parse_notes_payload(text: str) -> dict[str, Any]:
    """解析 JSON 对象；模型偶尔会包一层 ```json 代码块"""
    cleaned = (text or "").strip()
    m = _FENCE_RE.match(cleaned)
    if m:
        cleaned = m.group(1)

    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ParseError(f"Model returned invalid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ParseError(f"Expected a JSON object, got {type(payload).__name__}")
    return payload


def string_list(payload: dict[str, Any], key: str) -> tuple[str, ...]:
    value = payload.get(key)
    if not isinstance(value, list):
        return ()
    return tuple(str(item) for item in value if item is not None and str(item).strip())


def key_concepts(payload: dict[str, Any]) -> tuple[KeyConcept, ...]:
    concepts = []
    for item in _dict_items(payload, "keyConcepts"):
        importance = str(item.get("importance") or "medium").lower()
        if importance not in IMPORTANCE_LEVELS:
            importance = "medium"
        concepts.append(KeyConcept(
            concept=str(item.get("concept") or ""),
            explanation=str(item.get("explanation") or ""),
            importance=importance,
        ))
    return tuple(concepts)


def definitions(payload: dict[str, Any]) -> tuple[Definition, ...]:
    return tuple(
        Definition(
            term=str(item.get("term") or ""),
            definition=str(item.get("definition") or ""),
            context=_optional_str(item.get("context")),
        )
        for item in _dict_items(payload, "definitions")
    )


def example_problems(payload: dict[str, Any]) -> tuple[ExampleProblem, ...]:
    return tuple(
        ExampleProblem(
            problem=str(item.get("problem") or ""),
            solution=_optional_str(item.get("solution")),
            explanation=_optional_str(item.get("explanation")),
        )
        for item in _dict_items(payload, "exampleProblems")
    )


def _dict_items(payload: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = payload.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
