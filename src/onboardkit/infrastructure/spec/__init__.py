"""
Spec parsing and schema validation.
"""

from onboardkit.infrastructure.spec.loader import MarkdownSpecLoader, validate_document
from onboardkit.infrastructure.spec.parser import MarkdownSpecParser
from onboardkit.infrastructure.spec.schema import OnboardingSpec

__all__ = [
    "MarkdownSpecLoader",
    "MarkdownSpecParser",
    "OnboardingSpec",
    "validate_document",
]
