"""Exceptions raised by hogan_middleware."""


class HoganError(Exception):
    """Base class for errors raised by this package."""


class InvalidArgument(HoganError, TypeError):
    """Raised when a public entry point is called with malformed arguments."""


class TemplateNotFound(HoganError, KeyError):
    """Raised when a template name has no matching file in the views directory."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"Template not found: {self.name}"
