"""Translation catalogue workflows."""

from .service import TranslationsService  # noqa: F401

__all__ = ["TranslationsService"]
