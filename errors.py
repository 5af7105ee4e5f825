"""
Exception types raised inside the chat pipeline.

Each carries a short human-readable ``title`` and a diagnostic ``detail`` so
the HTTP layer can turn it into a ProblemDetails body without guessing.
"""

from typing import Optional


class ChatPipelineError(Exception):
    title = "Error processing AI request"

    def __init__(self, detail: str = "", title: Optional[str] = None):
        super().__init__(detail or self.title)
        self.detail = detail
        if title:
            self.title = title


class ConfigurationError(ChatPipelineError):
    """Missing credential or endpoint list."""
    title = "LLM API key not configured"


class ResponseParseError(ChatPipelineError):
    title = "Error parsing LLM response"

    def __init__(self, detail: str = "", raw_body: Optional[str] = None):
        super().__init__(detail)
        self.raw_body = raw_body


class CatalogAccessError(ChatPipelineError):
    """The product catalog could not be read."""
    title = "Error reading product catalog"
