"""Command line interface."""

from evntboard_openai.cli.app import app

__all__ = ["app"]
