"""
Prompt construction for AI spec repair and enhancement.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from onboardkit.domain.models import SpecDocument, ValidationIssue


@dataclass(frozen=True)
class PromptTemplate:
    """Structured system prompt."""

    role: str
    constraints: str
    response_format: str

    def render(self) -> str:
        return "\n\n".join(
            [
                f"# ROLE\n{self.role}",
                f"# CONSTRAINTS\n{self.constraints}",
                f"# RESPONSE FORMAT\nRespond with a single JSON object:\n{self.response_format}",
            ]
        )


REPAIR_TEMPLATE = PromptTemplate(
    role=(
        "You repair invalid onboarding screen specifications for React Native / "
        "Expo applications."
    ),
    constraints=(
        "- Fix every validation error listed.\n"
        "- Preserve the user's intent and wording wherever possible.\n"
        "- Only change what is necessary to make the spec valid.\n"
        "- Return the complete specification, not a fragment.\n"
        "- Colours must be hex values such as #FF5733 or #F57."
    ),
    response_format=(
        "{\n"
        '  "repairedSpec": { ...the complete fixed specification... },\n'
        '  "changes": [{"path": "theme.primary", "before": "...", "after": "...", '
        '"reason": "..."}],\n'
        '  "explanation": "Summary of all changes"\n'
        "}"
    ),
)

ENHANCE_TEMPLATE = PromptTemplate(
    role=(
        "You improve the copy of onboarding screen specifications for React Native / "
        "Expo applications."
    ),
    constraints=(
        "- Make headlines clear and compelling.\n"
        "- Make subtext engaging and benefit-focused.\n"
        "- Make calls to action action-oriented.\n"
        "- Describe features as benefits.\n"
        "- Keep the same meaning, structure, colours and configuration.\n"
        "- Use active voice and keep text concise."
    ),
    response_format=(
        "{\n"
        '  "enhancedSpec": { ...the complete enhanced specification... },\n'
        '  "enhancements": [{"path": "welcome.headline", "before": "...", '
        '"after": "...", "type": "headline|subtext|cta|feature|general"}],\n'
        '  "explanation": "Summary of enhancements"\n'
        "}"
    ),
)


def _spec_block(spec: Any) -> str:
    return f"```json\n{json.dumps(spec, indent=2, default=str)}\n```"


def build_repair_messages(
    spec: SpecDocument, errors: Sequence[ValidationIssue]
) -> list[dict[str, str]]:
    lines = [
        "Please repair this invalid specification:",
        "",
        _spec_block(dict(spec)),
        "",
        "Validation errors to fix:",
    ]
    lines.extend(f"- {error.location}: {error.message}" for error in errors)
    lines.append("")
    lines.append("Fix these errors while preserving the original intent.")
    return [
        {"role": "system", "content": REPAIR_TEMPLATE.render()},
        {"role": "user", "content": "\n".join(lines)},
    ]


def build_enhance_messages(spec: SpecDocument) -> list[dict[str, str]]:
    content = "\n".join(
        [
            "Please enhance this valid specification:",
            "",
            _spec_block(dict(spec)),
            "",
            f"Project: {spec.get('projectName', '')}",
            "Keep changes minimal but impactful. Preserve the core message.",
        ]
    )
    return [
        {"role": "system", "content": ENHANCE_TEMPLATE.render()},
        {"role": "user", "content": content},
    ]
