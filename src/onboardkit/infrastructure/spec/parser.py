"""
Markdown spec parser.

Turns an onboarding spec written as markdown into an unvalidated document:

    # My App                  -> projectName
    ## Theme                  -> section (lowercased heading)
    - Primary: #6366F1        -> {"primary": "#6366F1"}
    ### Step 1                -> starts a new entry in onboardingSteps
    - Features:               -> nested items become a list
      - Offline mode

YAML front matter and HTML comments are stripped before parsing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import frontmatter

COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
HEADING_RE = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
LIST_ITEM_RE = re.compile(r"^(\s*)(?:[-*+]|\d+[.)])\s+(.*)$")
NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")
STEP_RE = re.compile(r"step\s+(\d+)", re.IGNORECASE)

SECTION_KEYS = {
    "config": "config",
    "theme": "theme",
    "welcome screen": "welcome",
    "welcome": "welcome",
    "soft paywall": "softPaywall",
    "login": "login",
    "name capture": "nameCapture",
    "hard paywall": "hardPaywall",
}
STEPS_SECTION = "onboarding steps"
STRING_LIST_KEYS = frozenset({"features", "methods", "fields"})
OBJECT_LIST_KEYS = frozenset({"plans"})


@dataclass
class ListItem:
    text: str
    indent: int
    children: list[ListItem] = field(default_factory=list)


def to_camel_case(key: str) -> str:
    """Convert "Text Secondary" / "border-radius" to "textSecondary"."""
    return re.sub(r"[^a-zA-Z0-9]+(.)", lambda m: m.group(1).upper(), key.strip().lower())


def _strip_inline(text: str) -> str:
    return text.replace("**", "").replace("`", "").strip()


def _strip_quotes(value: str) -> str:
    return re.sub(r"^[\"']|[\"']$", "", value)


def _coerce_scalar(value: str) -> Any:
    value = _strip_quotes(value.strip())
    if value.startswith("[") and value.endswith("]"):
        inner = value[1:-1].strip()
        return [_strip_quotes(v.strip()) for v in inner.split(",")] if inner else []
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if NUMBER_RE.match(value):
        return float(value) if "." in value else int(value)
    return value


def _split_key_value(text: str) -> tuple[str, str] | None:
    key, sep, value = text.partition(":")
    if not sep or not key.strip():
        return None
    return key.strip(), value.strip()


def _items_to_mapping(items: list[ListItem]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for item in items:
        pair = _split_key_value(item.text)
        if pair is None:
            continue
        key, raw_value = to_camel_case(pair[0]), pair[1]

        if item.children and key in STRING_LIST_KEYS:
            result[key] = [_strip_quotes(child.text) for child in item.children]
        elif item.children and key in OBJECT_LIST_KEYS:
            result[key] = [_item_to_object(child) for child in item.children]
        else:
            result[key] = _coerce_scalar(raw_value)
    return result


def _item_to_object(item: ListItem) -> dict[str, Any]:
    """A plan written as "- Monthly" or "- Name: Monthly" with nested fields."""
    obj = _items_to_mapping(item.children)
    pair = _split_key_value(item.text)
    if pair is not None and to_camel_case(pair[0]) == "name":
        obj.setdefault("name", _strip_quotes(pair[1]))
    elif item.text:
        obj.setdefault("name", _strip_quotes(item.text))
    return obj


def _build_tree(lines: list[tuple[int, str]]) -> list[ListItem]:
    roots: list[ListItem] = []
    stack: list[ListItem] = []
    for indent, text in lines:
        node = ListItem(text=text, indent=indent)
        while stack and stack[-1].indent >= indent:
            stack.pop()
        if stack:
            stack[-1].children.append(node)
        else:
            roots.append(node)
        stack.append(node)
    return roots


class MarkdownSpecParser:
    """Line-oriented parser for the onboarding spec markdown format."""

    def parse(self, content: str) -> dict[str, Any]:
        body = COMMENT_RE.sub("", frontmatter.loads(content).content)
        result: dict[str, Any] = {}
        steps: list[dict[str, Any]] = []

        section: str | None = None
        pending: list[tuple[int, str]] = []

        def flush() -> None:
            if not pending or section is None:
                pending.clear()
                return
            data = _items_to_mapping(_build_tree(pending))
            pending.clear()
            if section == STEPS_SECTION:
                if steps:
                    steps[-1].update(data)
            elif section in SECTION_KEYS:
                key = SECTION_KEYS[section]
                result.setdefault(key, {}).update(data)

        for line in body.splitlines():
            heading = HEADING_RE.match(line)
            if heading:
                flush()
                level, text = len(heading.group(1)), _strip_inline(heading.group(2))
                if level == 1:
                    result["projectName"] = text
                elif level == 2:
                    section = text.lower()
                elif level == 3 and section == STEPS_SECTION and STEP_RE.search(text):
                    steps.append({})
                continue

            item = LIST_ITEM_RE.match(line)
            if item:
                indent = len(item.group(1).expandtabs(4))
                pending.append((indent, _strip_inline(item.group(2))))
            elif line.strip():
                # Paragraph text ends the current list.
                flush()

        flush()
        if steps:
            result["onboardingSteps"] = steps
        return result
