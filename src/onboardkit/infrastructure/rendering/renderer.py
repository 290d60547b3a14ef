"""
Jinja2 template renderer producing an Expo onboarding project.

Screens are laid out as a linear flow:

    Welcome -> Step 1..N -> [Soft Paywall] -> Login -> Name Capture
            -> [Hard Paywall] -> Home

Each screen is a presentational component taking ``onNext`` (and where
relevant ``onSkip``) callbacks; the navigation files wire the flow for
either react-navigation or expo-router.

The same flow also yields one markdown design prompt per screen
(``stitch-prompts/<screen-id>.md``) for use with UI design tools.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import jinja2

from onboardkit.domain.interfaces import TemplateRendererInterface
from onboardkit.domain.models import RenderResult, SpecDocument

logger = logging.getLogger(__name__)

COMPONENTS = ("Button", "Input", "Card")
THEME_FILES = ("colors", "typography", "spacing", "index")
DESIGN_PROMPTS_DIR = "stitch-prompts"
DESIGN_TITLES = {
    "Welcome": "Welcome Screen",
    "SoftPaywall": "Soft Paywall",
    "Login": "Login Screen",
    "NameCapture": "Name Capture",
    "HardPaywall": "Hard Paywall",
    "Home": "Home Screen",
}


@dataclass(frozen=True)
class Screen:
    """One screen in the onboarding flow."""

    name: str  # route name, e.g. "OnboardingStep1"
    component: str  # e.g. "OnboardingStep1Screen"
    template: str
    route: str  # expo-router path segment, e.g. "onboarding-step-1"
    context: Mapping[str, Any]
    next: str | None = None

    @property
    def file(self) -> str:
        return f"src/screens/{self.component}.tsx"


def _number(value: Any) -> str:
    """Render 12.0 as 12 so generated TypeScript reads naturally."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _kebab(name: str) -> str:
    out = []
    for i, ch in enumerate(name):
        if ch.isupper() and i:
            out.append("-")
        if ch.isdigit() and i and not name[i - 1].isdigit():
            out.append("-")
        out.append(ch.lower())
    return "".join(out)


def build_flow(spec: SpecDocument) -> list[Screen]:
    """Order the screens the spec describes and link each to the next."""
    screens: list[tuple[str, str, Mapping[str, Any]]] = [
        ("Welcome", "screens/WelcomeScreen.tsx.j2", {"screen": spec["welcome"]})
    ]
    steps = spec["onboardingSteps"]
    for index, step in enumerate(steps, start=1):
        screens.append(
            (
                f"OnboardingStep{index}",
                "screens/OnboardingStepScreen.tsx.j2",
                {"screen": step, "step_number": index, "step_total": len(steps)},
            )
        )
    if spec.get("softPaywall"):
        screens.append(
            ("SoftPaywall", "screens/SoftPaywallScreen.tsx.j2", {"screen": spec["softPaywall"]})
        )
    screens.append(("Login", "screens/LoginScreen.tsx.j2", {"screen": spec["login"]}))
    screens.append(
        ("NameCapture", "screens/NameCaptureScreen.tsx.j2", {"screen": spec["nameCapture"]})
    )
    if spec.get("hardPaywall"):
        screens.append(
            ("HardPaywall", "screens/HardPaywallScreen.tsx.j2", {"screen": spec["hardPaywall"]})
        )
    screens.append(("Home", "screens/HomeScreen.tsx.j2", {"screen": {}}))

    flow = []
    for position, (name, template, context) in enumerate(screens):
        following = screens[position + 1][0] if position + 1 < len(screens) else None
        flow.append(
            Screen(
                name=name,
                component=f"{name}Screen",
                template=template,
                route="index" if position == 0 else _kebab(name),
                context=context,
                next=following,
            )
        )
    return flow


class JinjaTemplateRenderer(TemplateRendererInterface):
    """Renders the bundled templates against a validated spec."""

    def __init__(self, loader: jinja2.BaseLoader | None = None) -> None:
        self._env = jinja2.Environment(
            loader=loader or jinja2.PackageLoader("onboardkit.infrastructure.rendering"),
            autoescape=False,
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["num"] = _number

    def _render(self, template: str, **context: Any) -> str:
        return self._env.get_template(template).render(**context)

    def render(self, spec: SpecDocument) -> RenderResult:
        flow = build_flow(spec)
        navigation = spec["config"]["navigation"]
        base = {"spec": spec, "theme": spec["theme"], "flow": flow}
        files: dict[str, str] = {}
        counts = {"screens": 0, "components": 0, "theme": 0, "navigation": 0}

        for name in THEME_FILES:
            files[f"src/theme/{name}.ts"] = self._render(f"theme/{name}.ts.j2", **base)
            counts["theme"] += 1

        for component in COMPONENTS:
            files[f"src/components/{component}.tsx"] = self._render(
                f"components/{component}.tsx.j2", **base
            )
            counts["components"] += 1

        for screen in flow:
            files[screen.file] = self._render(
                screen.template, **base, current=screen, **screen.context
            )
            counts["screens"] += 1

        if navigation == "expo-router":
            files["app/_layout.tsx"] = self._render("expo_router/_layout.tsx.j2", **base)
            counts["navigation"] += 1
            for screen in flow:
                files[f"app/{screen.route}.tsx"] = self._render(
                    "expo_router/route.tsx.j2", **base, current=screen
                )
                counts["navigation"] += 1
        else:
            files["src/navigation/types.ts"] = self._render(
                "navigation/types.ts.j2", **base
            )
            files["src/navigation/stack.tsx"] = self._render(
                "navigation/stack.tsx.j2", **base
            )
            files["App.tsx"] = self._render("navigation/App.tsx.j2", **base)
            counts["navigation"] += 3

        counts["total"] = len(files)
        logger.debug("Rendered %d files for %s", len(files), spec.get("projectName"))
        return RenderResult(files=files, summary=counts)

    def render_design_prompts(self, spec: SpecDocument) -> dict[str, str]:
        """One markdown design prompt per screen, for UI design tools."""
        base = {"spec": spec, "theme": spec["theme"]}
        prompts: dict[str, str] = {}
        for screen in build_flow(spec):
            screen_id = _kebab(screen.name)
            title = DESIGN_TITLES.get(screen.name) or screen.context["screen"]["title"]
            template = screen.template.replace("screens/", "design/").replace(
                ".tsx.j2", ".md.j2"
            )
            prompts[f"{DESIGN_PROMPTS_DIR}/{screen_id}.md"] = self._render(
                template, **base, title=title, screen_id=screen_id, **screen.context
            )
        return prompts

    def render_starter_spec(
        self,
        project_name: str,
        *,
        primary: str = "#6366F1",
        secondary: str = "#8B5CF6",
        headline: str | None = None,
        subtext: str = "Get started with the best experience",
        navigation: str = "react-navigation",
    ) -> str:
        """Markdown for a new spec file, as written by ``onboardkit init``."""
        return self._render(
            "starter/spec.md.j2",
            project_name=project_name,
            primary=primary,
            secondary=secondary,
            headline=headline or f"Welcome to {project_name}",
            subtext=subtext,
            navigation=navigation,
        )
