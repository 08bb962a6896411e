"""Main CLI entry point."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from scriptdesk import __version__
from scriptdesk.cli.utils.cli_handler import CLIHandler
from scriptdesk.config import (
    configure_logging,
    get_logger,
    get_settings_for_cli,
    set_settings,
)
from scriptdesk.parser import auto_format, parse_script, serialize_script
from scriptdesk.smarttype import SmartTypeCategory, SmartTypeIndex

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="scriptdesk",
    help="Screenplay document engine with Fountain round-tripping",
    pretty_exceptions_enable=False,
    add_completion=False,
    rich_markup_mode="rich",
)

CLI_PROJECT_ID = "cli"


@app.command(name="format")
def format_command(
    path: Annotated[Path, typer.Argument(help="Fountain file to format")],
    check: Annotated[
        bool,
        typer.Option("--check", help="Exit with status 1 if the file would change"),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output", "-o", help="Write the result here instead of in place"
        ),
    ] = None,
) -> None:
    """Normalize a Fountain file to canonical form."""
    handler = CLIHandler(console)

    try:
        original = handler.read_script(path)
        script = parse_script(original)
        document = auto_format(script.elements)
        formatted = serialize_script(document, script.title_page)
    except Exception as e:
        handler.handle_error(e)
        return

    if check:
        if formatted != original:
            console.print(f"[yellow]Would reformat {path}[/yellow]")
            raise typer.Exit(1)
        console.print(f"[green]{path} is already formatted[/green]")
        return

    target = output or path
    if target == path and formatted == original:
        console.print(f"[green]{path} is already formatted[/green]")
        return

    try:
        target.write_text(formatted, encoding="utf-8")
    except OSError as e:
        handler.handle_error(e)
        return
    logger.info("Formatted script", path=str(target), elements=len(document))
    handler.handle_success(f"Formatted {len(document)} elements into {target}")


@app.command()
def suggest(
    path: Annotated[Path, typer.Argument(help="Fountain file to learn from")],
    category: Annotated[
        SmartTypeCategory, typer.Argument(help="Suggestion category")
    ],
    query: Annotated[str, typer.Argument(help="Text typed so far")] = "",
    limit: Annotated[
        int, typer.Option("--limit", "-n", min=1, help="Maximum suggestions")
    ] = 10,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show SmartType suggestions learned from a script."""
    handler = CLIHandler(console)

    try:
        script = parse_script(handler.read_script(path))
        index = SmartTypeIndex()
        index.learn_from_document(CLI_PROJECT_ID, script.elements)
        suggestions = index.get_suggestions(CLI_PROJECT_ID, category, query, limit)
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    if json_output:
        print(
            json.dumps(
                {
                    "category": category.value,
                    "query": query,
                    "suggestions": suggestions,
                },
                indent=2,
            )
        )
        return

    if not suggestions:
        console.print("[yellow]No suggestions[/yellow]")
        return
    for suggestion in suggestions:
        console.print(suggestion, markup=False, highlight=False)


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show ScriptDesk version."""
    version_info = {
        "name": "ScriptDesk",
        "version": __version__,
        "description": "Screenplay document engine with Fountain round-tripping",
    }

    if json_output:
        print(json.dumps(version_info, indent=2))
    else:
        console.print(f"ScriptDesk v{version_info['version']}")


@app.callback()
def main_callback(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            envvar="SCRIPTDESK_CONFIG",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging (INFO level)"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging", envvar="SCRIPTDESK_DEBUG"),
    ] = False,
) -> None:
    """Configure global options."""
    overrides: dict[str, object] = {}
    if debug:
        overrides.update(log_level="DEBUG", debug=True)
    elif verbose:
        overrides["log_level"] = "INFO"

    if not overrides and config is None:
        return

    try:
        settings = get_settings_for_cli(config_file=config, cli_overrides=overrides)
    except Exception as e:
        CLIHandler(console).handle_error(e)
        return

    set_settings(settings)
    configure_logging(settings)
    logger.debug("Settings loaded", config=str(config) if config else None)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
