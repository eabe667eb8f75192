"""Shared compiled graphs keyed by template name."""

from .template_cache import TemplateCache

__all__ = ["TemplateCache"]
