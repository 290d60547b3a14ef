"""Pydantic schema for onboarding spec documents.

Field names are snake_case in Python and camelCase in the document
(``text_secondary`` <-> ``textSecondary``).
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

HEX_COLOR_PATTERN = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"

HexColor = Annotated[str, StringConstraints(pattern=HEX_COLOR_PATTERN)]
NonEmpty = Annotated[str, StringConstraints(min_length=1)]

LoginMethod = Literal["email", "google", "apple", "phone"]
NameField = Literal["first_name", "last_name", "full_name", "email", "username"]


class SpecModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


# =============================================================================
# Configuration / Theme
# =============================================================================


class AppConfig(SpecModel):
    platform: Literal["expo"] = Field(description="Target platform")
    navigation: Literal["react-navigation", "expo-router"] = Field(
        description="Navigation library for the generated app"
    )
    styling: Literal["stylesheet"] = Field(description="Styling approach")


class Theme(SpecModel):
    primary: HexColor
    secondary: HexColor
    background: HexColor
    surface: HexColor
    text: HexColor
    text_secondary: HexColor
    error: HexColor
    success: HexColor
    font: NonEmpty = Field(description="Font family name")
    border_radius: float = Field(ge=0, description="Default corner radius")


# =============================================================================
# Screens
# =============================================================================


class WelcomeScreen(SpecModel):
    headline: NonEmpty
    subtext: NonEmpty
    image: NonEmpty
    cta: NonEmpty
    skip: str | None = None


class OnboardingStep(SpecModel):
    title: NonEmpty
    headline: NonEmpty
    subtext: NonEmpty
    image: NonEmpty


class SoftPaywall(SpecModel):
    headline: NonEmpty
    subtext: NonEmpty
    features: list[str] = Field(min_length=1)
    cta: NonEmpty
    skip: str | None = None
    price: NonEmpty


class LoginScreen(SpecModel):
    methods: list[LoginMethod] = Field(min_length=1)
    headline: NonEmpty


class NameCapture(SpecModel):
    headline: NonEmpty
    fields: list[NameField] = Field(min_length=1)
    cta: NonEmpty


class Plan(SpecModel):
    name: NonEmpty
    price: NonEmpty
    period: NonEmpty
    features: list[str] = Field(min_length=1)
    highlighted: bool | None = None


class HardPaywall(SpecModel):
    headline: NonEmpty
    plans: list[Plan] = Field(min_length=1)
    cta: NonEmpty
    restore: NonEmpty


class OnboardingSpec(SpecModel):
    """A complete onboarding flow description."""

    project_name: NonEmpty = Field(description="App name, taken from the H1 heading")
    config: AppConfig
    theme: Theme
    welcome: WelcomeScreen
    onboarding_steps: list[OnboardingStep] = Field(min_length=1)
    soft_paywall: SoftPaywall | None = None
    login: LoginScreen
    name_capture: NameCapture
    hard_paywall: HardPaywall | None = None

    def to_document(self) -> dict:
        """Dump as a camelCase JSON-compatible document."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
