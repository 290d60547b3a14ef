"""Tests for MarkdownSpecParser."""

from onboardkit.infrastructure.spec.parser import MarkdownSpecParser, to_camel_case


def parse(text: str) -> dict:
    return MarkdownSpecParser().parse(text)


class TestToCamelCase:
    def test_words(self) -> None:
        assert to_camel_case("Text Secondary") == "textSecondary"
        assert to_camel_case("border-radius") == "borderRadius"
        assert to_camel_case("CTA") == "cta"


class TestSections:
    def test_project_name_from_h1(self) -> None:
        assert parse("# My App\n")["projectName"] == "My App"

    def test_key_value_items(self) -> None:
        doc = parse("# A\n\n## Theme\n- Primary: #6366F1\n- Text Secondary: #6B7280\n")
        assert doc["theme"] == {"primary": "#6366F1", "textSecondary": "#6B7280"}

    def test_section_aliases(self) -> None:
        doc = parse("# A\n\n## Welcome Screen\n- Headline: Hi\n\n## Name Capture\n- CTA: Go\n")
        assert doc["welcome"] == {"headline": "Hi"}
        assert doc["nameCapture"] == {"cta": "Go"}

    def test_unknown_sections_ignored(self) -> None:
        doc = parse("# A\n\n## Notes\n- Something: else\n")
        assert set(doc) == {"projectName"}

    def test_front_matter_is_stripped(self) -> None:
        doc = parse("---\nauthor: me\n---\n# A\n\n## Login\n- Headline: Sign in\n")
        assert doc == {"projectName": "A", "login": {"headline": "Sign in"}}

    def test_html_comments_are_stripped(self) -> None:
        doc = parse(
            "# A\n\n## Login\n- Headline: Sign in\n"
            "<!-- Optional:\n## Soft Paywall\n- Headline: Go Pro\n-->\n"
        )
        assert doc == {"projectName": "A", "login": {"headline": "Sign in"}}

    def test_paragraph_does_not_break_section(self) -> None:
        doc = parse("# A\n\n## Theme\nSome notes.\n- Primary: #FFF\n")
        assert doc["theme"] == {"primary": "#FFF"}


class TestValues:
    def test_scalar_coercion(self) -> None:
        doc = parse(
            "# A\n\n## Theme\n- Border Radius: 12\n- Scale: 1.5\n"
            "- Dark: true\n- Font: \"Inter\"\n"
        )
        assert doc["theme"] == {"borderRadius": 12, "scale": 1.5, "dark": True, "font": "Inter"}

    def test_inline_list(self) -> None:
        doc = parse("# A\n\n## Login\n- Methods: [email, google]\n")
        assert doc["login"]["methods"] == ["email", "google"]

    def test_nested_string_list(self) -> None:
        doc = parse("# A\n\n## Soft Paywall\n- Features:\n  - Sync\n  - Export\n- CTA: Buy\n")
        assert doc["softPaywall"] == {"features": ["Sync", "Export"], "cta": "Buy"}

    def test_value_containing_colon(self) -> None:
        doc = parse("# A\n\n## Welcome\n- Image: https://example.com/a.png\n")
        assert doc["welcome"]["image"] == "https://example.com/a.png"

    def test_bold_markup_removed(self) -> None:
        doc = parse("# A\n\n## Login\n- **Headline**: Welcome back\n")
        assert doc["login"]["headline"] == "Welcome back"


class TestSteps:
    def test_steps_become_list(self) -> None:
        doc = parse(
            "# A\n\n## Onboarding Steps\n\n### Step 1\n- Title: One\n\n"
            "### Step 2\n- Title: Two\n"
        )
        assert doc["onboardingSteps"] == [{"title": "One"}, {"title": "Two"}]

    def test_hard_paywall_plans(self) -> None:
        doc = parse(
            "# A\n\n## Hard Paywall\n- Headline: Choose\n- Plans:\n"
            "  - Monthly\n    - Price: $9.99\n    - Period: month\n"
            "  - Name: Yearly\n    - Price: $59.99\n    - Highlighted: true\n"
        )
        plans = doc["hardPaywall"]["plans"]
        assert plans[0] == {"name": "Monthly", "price": "$9.99", "period": "month"}
        assert plans[1]["name"] == "Yearly"
        assert plans[1]["highlighted"] is True
