"""Exceptions raised while building the site."""

from __future__ import annotations


class SiteError(Exception):
    """Base exception for mdxsite."""


class ConfigError(SiteError):
    """Raised when the site configuration is invalid."""


class ContentError(SiteError):
    """Raised when the content directory or a content file cannot be used."""


class MissingFieldError(ContentError):
    def __init__(self, source: str, field: str):
        super().__init__(f"{source}: missing required front matter field '{field}'")
        self.source = source
        self.field = field


class MissingSlugSourceError(ContentError):
    """Raised when no slug can be derived for a content file."""


class DuplicateRouteError(SiteError):
    def __init__(self, path: str, existing: str, new: str):
        super().__init__(f"Duplicate output path {path}: {existing} and {new}")
        self.path = path


class InvalidRouteError(SiteError):
    """Raised when a site path cannot be written inside the output directory."""


class EnhanceError(SiteError):
    """Raised when the text-generation call fails."""
