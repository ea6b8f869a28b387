"""Stripboard command line interface."""

from stripboard.cli.main import app, main

__all__ = ["app", "main"]
