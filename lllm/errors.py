"""Error types raised inside the plugin and converted at its public boundaries."""

from __future__ import annotations


class LLLMError(Exception):
    """Base class for plugin errors."""


class ConfigurationError(LLLMError):
    """The plugin settings do not allow a request to be sent."""


class InputError(LLLMError):
    """The query text cannot be sent as is."""


class TransportError(LLLMError):
    """The HTTP exchange with the completion endpoint failed."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class MalformedResponse(LLLMError):
    """The response document does not have the expected shape."""


class CaptureError(LLLMError):
    """A step of the screenshot pipeline failed."""
