"""
Serialization helpers for survey snapshots.

Converts loader payloads (plain dicts, JSON or YAML documents) into the
typed model and back. Option lists and settings may arrive either as
structured values or as the serialized text blobs the survey store keeps;
both are parsed here once so the pipeline only ever sees typed fields.
"""
from __future__ import annotations

import json
import re
import warnings
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import yaml

from survey_export.errors import SchemaError
from survey_export.model import (
    QuestionKind,
    QuestionSettings,
    QuestionSpec,
    ResponseRecord,
    SurveySnapshot,
)


def parse_options(raw: Any) -> Optional[List[str]]:
    """
    Parse a question's option list.

    None / empty string -> None (kind without options).
    A list, or a JSON text holding a list -> list of strings.
    Anything unparseable -> [] with a UserWarning.
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            warnings.warn(f"Unparseable option list: {raw[:80]!r}", UserWarning)
            return []
    if not isinstance(raw, list):
        warnings.warn(f"Option list is not a list: {type(raw).__name__}", UserWarning)
        return []
    return [str(option) for option in raw]


def parse_settings(raw: Any) -> QuestionSettings:
    """Parse question settings from a dict or a JSON text; unparseable -> defaults."""
    if raw is None or raw == "":
        return QuestionSettings()
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            warnings.warn(f"Unparseable question settings: {raw[:80]!r}", UserWarning)
            return QuestionSettings()
    if not isinstance(raw, dict):
        return QuestionSettings()
    ordinal = raw.get("ordinal_structure", raw.get("ordinalStructure", False))
    return QuestionSettings(ordinal_structure=bool(ordinal))


_FRACTION_RE = re.compile(r"\.(\d+)")


def parse_instant(raw: Any) -> datetime:
    """
    Parse an ISO 8601 response timestamp.

    Accepts a trailing "Z" and second fractions of any length, padded or
    cut to microseconds.
    """
    if isinstance(raw, datetime):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        raise SchemaError(f"Invalid response timestamp: {raw!r}")
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1).ljust(6, "0")[:6], text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise SchemaError(f"Invalid response timestamp: {raw!r}") from exc


def format_instant(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def question_to_dict(q: QuestionSpec) -> Dict[str, Any]:
    return {
        "id": q.id,
        "title": q.title,
        "type": q.kind.value,
        "options": q.options,
        "settings": {"ordinal_structure": q.settings.ordinal_structure},
        "order": q.order,
    }


def question_from_dict(d: Dict[str, Any]) -> QuestionSpec:
    if not isinstance(d, dict):
        raise SchemaError(f"Question must be a mapping, got {type(d).__name__}")
    if not d.get("id"):
        raise SchemaError("Question is missing an id")
    if d.get("title") is None:
        raise SchemaError(f"Question {d['id']!r} is missing a title")

    kind_value = d.get("type", d.get("kind"))
    try:
        kind = QuestionKind(str(kind_value).upper())
    except ValueError:
        raise SchemaError(f"Question {d['id']!r} has unknown type {kind_value!r}") from None

    try:
        order = int(d.get("order", 0) or 0)
    except (TypeError, ValueError) as exc:
        raise SchemaError(f"Question {d['id']!r} has a non-integer order") from exc

    return QuestionSpec(
        id=str(d["id"]),
        title=str(d["title"]),
        kind=kind,
        options=parse_options(d.get("options")),
        settings=parse_settings(d.get("settings")),
        order=order,
    )


def _answers_from_raw(raw: Any, response_id: str) -> Dict[str, str]:
    # Stored either as a mapping or as a list of {questionId, value} rows
    if raw is None:
        return {}
    if isinstance(raw, dict):
        return {str(k): "" if v is None else str(v) for k, v in raw.items()}
    if isinstance(raw, list):
        answers: Dict[str, str] = {}
        for item in raw:
            if not isinstance(item, dict):
                raise SchemaError(f"Response {response_id!r} has a malformed answer entry")
            question_id = item.get("question_id", item.get("questionId"))
            if question_id is None:
                raise SchemaError(f"Response {response_id!r} has an answer without a question id")
            value = item.get("value")
            answers[str(question_id)] = "" if value is None else str(value)
        return answers
    raise SchemaError(f"Response {response_id!r} answers must be a mapping or a list")


def response_to_dict(r: ResponseRecord) -> Dict[str, Any]:
    return {"id": r.id, "created_at": format_instant(r.created_at), "answers": dict(r.answers)}


def response_from_dict(d: Dict[str, Any]) -> ResponseRecord:
    if not isinstance(d, dict):
        raise SchemaError(f"Response must be a mapping, got {type(d).__name__}")
    if not d.get("id"):
        raise SchemaError("Response is missing an id")
    response_id = str(d["id"])
    return ResponseRecord(
        id=response_id,
        created_at=parse_instant(d.get("created_at", d.get("createdAt"))),
        answers=_answers_from_raw(d.get("answers"), response_id),
    )


def snapshot_to_dict(s: SurveySnapshot) -> Dict[str, Any]:
    return {
        "id": s.id,
        "title": s.title,
        "questions": [question_to_dict(q) for q in s.questions],
        "responses": [response_to_dict(r) for r in s.responses],
    }


def snapshot_from_dict(d: Dict[str, Any]) -> SurveySnapshot:
    """
    Build a SurveySnapshot from a loader payload.

    Questions are sorted by their order (stable for ties).

    Raises:
        SchemaError: If the payload does not have the snapshot shape
    """
    if not isinstance(d, dict):
        raise SchemaError(f"Survey snapshot must be a mapping, got {type(d).__name__}")
    questions = d.get("questions") or []
    responses = d.get("responses") or []
    if not isinstance(questions, list) or not isinstance(responses, list):
        raise SchemaError("Survey snapshot questions and responses must be lists")

    parsed = [question_from_dict(q) for q in questions]
    parsed.sort(key=lambda q: q.order)
    return SurveySnapshot(
        id=str(d.get("id", "")),
        title=str(d.get("title", "")),
        questions=parsed,
        responses=[response_from_dict(r) for r in responses],
    )


def snapshot_to_json(s: SurveySnapshot) -> str:
    return json.dumps(snapshot_to_dict(s), sort_keys=True, ensure_ascii=False)


def snapshot_from_json(s: str) -> SurveySnapshot:
    try:
        d = json.loads(s)
    except ValueError as exc:
        raise SchemaError(f"Invalid JSON snapshot: {exc}") from exc
    return snapshot_from_dict(d)


def snapshot_to_yaml(s: SurveySnapshot) -> str:
    return yaml.safe_dump(snapshot_to_dict(s), allow_unicode=True, sort_keys=False)


def snapshot_from_yaml(s: str) -> SurveySnapshot:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as exc:
        raise SchemaError(f"Invalid YAML snapshot: {exc}") from exc
    return snapshot_from_dict(d)


def load_snapshot_file(path: str) -> SurveySnapshot:
    """Read a snapshot from a .json, .yaml or .yml file."""
    with open(path, "r", encoding="utf-8") as fh:
        content = fh.read()
    if path.lower().endswith(".json"):
        return snapshot_from_json(content)
    return snapshot_from_yaml(content)
