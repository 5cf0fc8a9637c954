"""Command-line interface for quillsh."""

from .app import app

__all__ = ["app"]
