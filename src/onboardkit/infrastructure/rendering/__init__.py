"""
Template rendering for generated Expo projects.
"""

from onboardkit.infrastructure.rendering.renderer import JinjaTemplateRenderer, build_flow

__all__ = ["JinjaTemplateRenderer", "build_flow"]
