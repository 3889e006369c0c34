"""Command line interface for GPC Signal."""

from .main import app, cli_main

__all__ = ["app", "cli_main"]
