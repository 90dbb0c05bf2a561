"""Bundled rule documents and their loader."""

from .template_loader import TemplateLoader

__all__ = ["TemplateLoader"]
