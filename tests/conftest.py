"""Shared pytest fixtures for onboardkit tests."""

import json
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from onboardkit.application.phases import PhaseContext
from onboardkit.domain.models import Credential
from onboardkit.infrastructure.auth import InMemoryCredentialStore
from onboardkit.infrastructure.clock import FixedClock
from onboardkit.infrastructure.llm import AISpecOperations, MockProvider, RetryPolicy
from onboardkit.infrastructure.output import FilesystemOutputWriter
from onboardkit.infrastructure.persistence import InMemoryCheckpointStore
from onboardkit.infrastructure.rendering import JinjaTemplateRenderer
from onboardkit.infrastructure.spec import MarkdownSpecLoader

VALID_SPEC = """\
# Habit Tracker

## Config
- Platform: expo
- Navigation: react-navigation
- Styling: stylesheet

## Theme
- Primary: #6366F1
- Secondary: #EC4899
- Background: #FFFFFF
- Surface: #F9FAFB
- Text: #111827
- Text Secondary: #6B7280
- Error: #EF4444
- Success: #10B981
- Font: Inter
- Border Radius: 12

## Welcome Screen
- Headline: Build better habits
- Subtext: Small steps every day
- Image: welcome.png
- CTA: Get Started
- Skip: Skip for now

## Onboarding Steps

### Step 1
- Title: Track
- Headline: Track your progress
- Subtext: See streaks at a glance
- Image: step1.png

### Step 2
- Title: Remind
- Headline: Never miss a day
- Subtext: Gentle reminders when you need them
- Image: step2.png

## Soft Paywall
- Headline: Go Premium
- Subtext: Unlock everything
- Features:
  - Unlimited habits
  - Cloud sync
- CTA: Start free trial
- Skip: Maybe later
- Price: $4.99/month

## Login
- Methods: [email, google, apple]
- Headline: Create your account

## Name Capture
- Headline: What should we call you?
- Fields: [first_name]
- CTA: Continue
"""

INVALID_COLOR_SPEC = VALID_SPEC.replace("- Primary: #6366F1", "- Primary: purple")

FIXED_NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at FIXED_NOW."""
    return FixedClock(FIXED_NOW)


@pytest.fixture
def spec_file(tmp_path: Path) -> Path:
    """A valid spec written to disk."""
    path = tmp_path / "spec.md"
    path.write_text(VALID_SPEC, encoding="utf-8")
    return path


@pytest.fixture
def invalid_spec_file(tmp_path: Path) -> Path:
    """A spec whose primary colour is not a hex value."""
    path = tmp_path / "spec.md"
    path.write_text(INVALID_COLOR_SPEC, encoding="utf-8")
    return path


@pytest.fixture
def valid_document() -> dict[str, Any]:
    """The validated document for VALID_SPEC."""
    validation = MarkdownSpecLoader().parse_and_validate(VALID_SPEC)
    assert validation.spec is not None
    return dict(validation.spec)


@pytest.fixture
def credentials() -> InMemoryCredentialStore:
    """Credential store holding one non-expiring token."""
    return InMemoryCredentialStore([Credential(provider="openai", access_token="sk-test")])


@pytest.fixture
def checkpoint_store() -> InMemoryCheckpointStore:
    return InMemoryCheckpointStore()


@pytest.fixture
def repair_reply(valid_document: dict[str, Any]) -> str:
    """A well-formed AI repair reply restoring the primary colour."""
    payload = {
        "repairedSpec": valid_document,
        "changes": [
            {
                "path": "theme.primary",
                "before": "purple",
                "after": "#6366F1",
                "reason": "Converted colour name to hex",
            }
        ],
        "explanation": "Fixed the primary colour.",
    }
    return f"Here is the fix:\n```json\n{json.dumps(payload)}\n```"


@pytest.fixture
def enhance_reply(valid_document: dict[str, Any]) -> str:
    """A well-formed AI enhancement reply rewriting the welcome headline."""
    enhanced = json.loads(json.dumps(valid_document))
    before = enhanced["welcome"]["headline"]
    enhanced["welcome"]["headline"] = "Build habits that stick"
    payload = {
        "enhancedSpec": enhanced,
        "enhancements": [
            {
                "path": "welcome.headline",
                "before": before,
                "after": "Build habits that stick",
                "type": "headline",
            }
        ],
        "explanation": "Punchier headline.",
    }
    return json.dumps(payload)


@pytest.fixture
def make_context(
    clock: FixedClock,
    credentials: InMemoryCredentialStore,
    checkpoint_store: InMemoryCheckpointStore,
) -> Callable[..., PhaseContext]:
    """Factory for a PhaseContext backed by in-memory stores and a MockProvider.

    Pass ``responses`` to script the AI provider, or override any field.
    """

    def factory(responses: list[str | Exception] | None = None, **overrides: Any) -> PhaseContext:
        provider = MockProvider(responses or [])
        fields: dict[str, Any] = {
            "credentials": credentials,
            "token_refresher": None,
            "spec_loader": MarkdownSpecLoader(),
            "spec_operations": AISpecOperations(provider, RetryPolicy.no_retry()),
            "renderer": JinjaTemplateRenderer(),
            "writer": FilesystemOutputWriter(),
            "checkpoint_store": checkpoint_store,
            "clock": clock,
        }
        fields.update(overrides)
        return PhaseContext(**fields)

    return factory
