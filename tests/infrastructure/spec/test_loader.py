"""Tests for MarkdownSpecLoader and schema validation."""

import pytest

from onboardkit.domain.exceptions import SpecError
from onboardkit.infrastructure.spec import MarkdownSpecLoader
from onboardkit.infrastructure.spec.loader import COLOR_MESSAGE, validate_document


@pytest.fixture
def loader() -> MarkdownSpecLoader:
    return MarkdownSpecLoader()


class TestRead:
    def test_reads_file(self, loader, spec_file) -> None:
        assert loader.read(str(spec_file)).startswith("# Habit Tracker")

    def test_missing_file(self, loader, tmp_path) -> None:
        with pytest.raises(SpecError, match="Spec file not found") as exc_info:
            loader.read(str(tmp_path / "missing.md"))
        assert "--spec" in exc_info.value.hint

    def test_directory_is_not_a_spec(self, loader, tmp_path) -> None:
        with pytest.raises(SpecError):
            loader.read(str(tmp_path))

    def test_empty_source(self, loader) -> None:
        with pytest.raises(SpecError, match="empty"):
            loader.parse("   \n")


class TestParseAndValidate:
    def test_valid_spec(self, loader, spec_file) -> None:
        validation = loader.parse_and_validate(spec_file.read_text())

        assert validation.is_valid
        spec = validation.spec
        assert spec["projectName"] == "Habit Tracker"
        assert spec["config"]["navigation"] == "react-navigation"
        assert spec["theme"]["textSecondary"] == "#6B7280"
        assert spec["theme"]["borderRadius"] == 12
        assert len(spec["onboardingSteps"]) == 2
        assert spec["softPaywall"]["features"] == ["Unlimited habits", "Cloud sync"]
        assert spec["login"]["methods"] == ["email", "google", "apple"]
        assert "hardPaywall" not in spec

    def test_invalid_color(self, loader, invalid_spec_file) -> None:
        validation = loader.parse_and_validate(invalid_spec_file.read_text())

        assert not validation.is_valid
        assert validation.spec is None
        [issue] = validation.issues
        assert issue.path == ("theme", "primary")
        assert issue.message == COLOR_MESSAGE
        assert issue.code == "string_pattern_mismatch"


class TestValidateDocument:
    def test_missing_sections_reported(self, valid_document) -> None:
        document = dict(valid_document)
        del document["login"]

        validation = validate_document(document)

        assert [i.location for i in validation.issues] == ["login"]
        assert validation.issues[0].message == "This field is required."

    def test_empty_steps(self, valid_document) -> None:
        validation = validate_document({**valid_document, "onboardingSteps": []})

        [issue] = validation.issues
        assert issue.location == "onboardingSteps"
        assert "at least 1" in issue.message

    def test_invalid_login_method(self, valid_document) -> None:
        document = {**valid_document, "login": {"methods": ["fax"], "headline": "Hi"}}

        [issue] = validate_document(document).issues

        assert issue.location == "login.methods.0"
        assert "Valid options are" in issue.message

    def test_numeric_price_coerced_to_text(self, valid_document) -> None:
        paywall = {**valid_document["softPaywall"], "price": 4.99}

        validation = validate_document({**valid_document, "softPaywall": paywall})

        assert validation.is_valid
        assert validation.spec["softPaywall"]["price"] == "4.99"

    def test_revalidation_is_stable(self, valid_document) -> None:
        """A validated document validates to itself."""
        assert validate_document(valid_document).spec == valid_document
