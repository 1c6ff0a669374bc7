"""Command line interface for searchlite."""

from .main import cli, main

__all__ = ["cli", "main"]
