"""
Parsing of AI responses into repair and enhancement results.

Responses must contain a JSON object, either in a fenced code block or bare.
The returned spec is validated against the onboarding schema; anything that
does not fit raises AIResponseError (never retried).
"""

from __future__ import annotations

import json
import re
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from onboardkit.domain.exceptions import AIResponseError
from onboardkit.domain.models import (
    EnhancementKind,
    EnhancementResult,
    RepairResult,
    SpecChange,
    SpecEnhancement,
)
from onboardkit.infrastructure.spec.loader import validate_document

CODE_BLOCK_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class ChangePayload(BaseModel):
    path: str
    before: Any = None
    after: Any = None
    reason: str = ""


class RepairPayload(BaseModel):
    repairedSpec: dict[str, Any] = Field(description="Complete fixed specification")
    changes: list[ChangePayload] = Field(default_factory=list)
    explanation: str = ""


class EnhancementPayload(BaseModel):
    path: str
    before: str = ""
    after: str = ""
    type: Literal["headline", "subtext", "cta", "feature", "general"] = "general"


class EnhancePayload(BaseModel):
    enhancedSpec: dict[str, Any] = Field(description="Complete enhanced specification")
    enhancements: list[EnhancementPayload] = Field(default_factory=list)
    explanation: str = ""


def extract_json(content: str) -> dict[str, Any]:
    """Extract the JSON object from a model response.

    Raises:
        AIResponseError: If no JSON object can be decoded
    """
    match = CODE_BLOCK_RE.search(content)
    if match:
        candidate = match.group(1).strip()
    else:
        obj = OBJECT_RE.search(content)
        candidate = obj.group(0) if obj else content.strip()

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise AIResponseError(f"AI response is not valid JSON: {e}", content) from e
    if not isinstance(data, dict):
        raise AIResponseError("AI response JSON is not an object", content)
    return data


def _validated_spec(spec: dict[str, Any], label: str, raw: str) -> dict[str, Any]:
    validation = validate_document(spec)
    if not validation.is_valid or validation.spec is None:
        details = "; ".join(f"{i.location}: {i.message}" for i in validation.issues[:5])
        raise AIResponseError(f"{label} does not match the spec schema: {details}", raw)
    return dict(validation.spec)


def parse_repair_response(content: str) -> RepairResult:
    try:
        payload = RepairPayload.model_validate(extract_json(content))
    except ValidationError as e:
        raise AIResponseError(f"Malformed repair response: {e}", content) from e

    return RepairResult(
        repaired_spec=_validated_spec(payload.repairedSpec, "Repaired spec", content),
        changes=tuple(
            SpecChange(path=c.path, before=c.before, after=c.after, reason=c.reason)
            for c in payload.changes
        ),
        explanation=payload.explanation,
    )


def parse_enhance_response(content: str) -> EnhancementResult:
    try:
        payload = EnhancePayload.model_validate(extract_json(content))
    except ValidationError as e:
        raise AIResponseError(f"Malformed enhancement response: {e}", content) from e

    return EnhancementResult(
        enhanced_spec=_validated_spec(payload.enhancedSpec, "Enhanced spec", content),
        enhancements=tuple(
            SpecEnhancement(
                path=e.path, before=e.before, after=e.after, kind=EnhancementKind(e.type)
            )
            for e in payload.enhancements
        ),
        explanation=payload.explanation,
    )
