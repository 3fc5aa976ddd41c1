"""
Main CLI application for DataSonify.

Provides the ``datasonify`` command with melody and tone subcommands.
"""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import load_config_file
from ..logger import set_log_level
from .errors import EXIT_CODES, InputError, handle_cli_error, set_debug
from .melody import melody_app
from .tone import tone_app

console = Console()

app = typer.Typer(
    name="datasonify",
    help="Turn numeric datasets into melodies, tones and narration",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True
)

app.add_typer(melody_app, name="melody")
app.add_typer(tone_app, name="tone")


@app.command("version")
def show_version():
    """Show DataSonify version information."""
    from .. import __version__
    
    console.print(Panel.fit(
        f"[bold]DataSonify Version {__version__}[/bold]\n"
        f"Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        border_style="blue"
    ))


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    debug: bool = typer.Option(False, "--debug", help="Show tracebacks on errors"),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a JSON configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False
    )
):
    """
    DataSonify: hear your data.
    
    \b
    Quick Start:
    1. Preview notes:   datasonify melody notes <csv> <column>
    2. Render a melody: datasonify melody render <csv> <column> <out.wav>
    3. Play it live:    datasonify melody play <csv> <column>
    """
    set_debug(debug)
    
    if quiet:
        set_log_level('ERROR')
    elif verbose or debug:
        set_log_level('DEBUG')
    else:
        set_log_level('INFO')
    
    if config_file:
        try:
            load_config_file(str(config_file))
        except ValueError as e:
            handle_cli_error(InputError(str(e)), "config", debug)


def cli_main():
    """Entry point for the ``datasonify`` console script."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(EXIT_CODES["general_error"])


if __name__ == "__main__":
    cli_main()
