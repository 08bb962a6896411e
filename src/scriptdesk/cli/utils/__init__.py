"""CLI utilities."""

from .cli_handler import CLIHandler

__all__ = ["CLIHandler"]
