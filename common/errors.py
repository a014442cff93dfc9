"""
Errors raised by the scanning pipeline.
"""

from typing import Optional


class ScanError(Exception):
    """Base class for errors that fail a single image."""


class NoQuadFound(ScanError):
    """Neither the region detector nor the edge fallback found a page."""

    def __init__(self, reason: Optional[str] = None):
        message = "No page boundary found"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.reason = reason


class ProcessingFault(ScanError):
    """
    A pipeline stage failed unexpectedly.

    The original exception is kept as ``__cause__``.
    """

    def __init__(self, stage: str, message: str):
        super().__init__(f"{stage} failed: {message}")
        self.stage = stage


class ConfigError(ValueError):
    """Invalid scanner configuration."""
