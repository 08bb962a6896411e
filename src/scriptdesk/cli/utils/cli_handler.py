"""Unified CLI handler for standardized error handling and output."""

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from scriptdesk.config import get_logger
from scriptdesk.exceptions import ScriptDeskError, ScriptDeskFileNotFoundError

logger = get_logger(__name__)


class CLIHandler:
    """Unified handler for CLI commands."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize CLI handler.

        Args:
            console: Rich console for output
        """
        self.console = console or Console()

    def handle_error(
        self, error: Exception, json_output: bool = False, exit_code: int = 1
    ) -> None:
        """Handle and display errors consistently.

        Args:
            error: Exception to handle
            json_output: Whether to output JSON
            exit_code: Exit code to use
        """
        error_msg = error.message if isinstance(error, ScriptDeskError) else str(error)
        logger.error(f"Command failed: {error_msg}", exc_info=error)

        if json_output:
            response = {"success": False, "error": error_msg, "code": exit_code}
            print(json.dumps(response, indent=2))
        else:
            self.console.print(f"[red]Error: {error_msg}[/red]")
            hint = getattr(error, "hint", None)
            if hint:
                self.console.print(f"[yellow]Hint: {hint}[/yellow]")

        raise typer.Exit(exit_code)

    def handle_success(
        self, message: str, data: Any = None, json_output: bool = False
    ) -> None:
        """Handle success responses consistently.

        Args:
            message: Success message
            data: Optional data to include
            json_output: Whether to output JSON
        """
        if json_output:
            response: dict[str, Any] = {"success": True, "message": message}
            if data is not None:
                response["data"] = data
            print(json.dumps(response, default=str, indent=2))
        else:
            self.console.print(f"[green]{message}[/green]")

    def read_script(self, path: Path) -> str:
        """Read a Fountain file as UTF-8 text.

        Args:
            path: Path to the script

        Returns:
            File contents

        Raises:
            ScriptDeskFileNotFoundError: If the path is not an existing file
        """
        if not path.is_file():
            raise ScriptDeskFileNotFoundError(
                message=f"Script file not found: {path}",
                hint="Check the path or pass an existing .fountain file",
                details={"path": str(path)},
            )
        return path.read_text(encoding="utf-8")
