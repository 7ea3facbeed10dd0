"""
Content error hierarchy.

All content-specific errors inherit from ContentError so API handlers and
commands can catch them in one place. Missing required overrides raise the
built-in NotImplementedError instead.
"""


class ContentError(Exception):
    """Base error for all content operations."""


class InvalidContentKeyError(ContentError, ValueError):
    """A content group key is not of the form 'namespace.name'."""


class ContentDefinitionError(ContentError):
    """The declared content structure or config is invalid."""


class ContentNotFoundError(ContentError, LookupError):
    """A module, group or area is not declared in the content schema."""
