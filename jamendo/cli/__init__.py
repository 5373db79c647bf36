"""Command-line interface for the Jamendo client."""

from .main import main

__all__ = ["main"]
