"""
Error handling for CLI commands.

Defines CLI exceptions and rich error rendering with suggestions.
"""

import traceback
from pathlib import Path
from typing import Optional
import logging

import typer
from rich.console import Console

from ..exceptions import DatasetError, MappingError, SynthesisError

console = Console(stderr=True)
logger = logging.getLogger(__name__)

EXIT_CODES = {
    "success": 0,
    "general_error": 1,
    "input_error": 2,
    "output_error": 3,
    "playback_error": 4
}


class DataSonifyCLIError(Exception):
    """Base exception for CLI-specific errors."""
    
    def __init__(self, message: str, exit_code: int = 1, suggestions: Optional[list] = None):
        self.message = message
        self.exit_code = exit_code
        self.suggestions = suggestions or []
        super().__init__(message)


class InputError(DataSonifyCLIError):
    """Unreadable datasets and invalid options."""
    
    def __init__(self, message: str, suggestions: Optional[list] = None):
        super().__init__(message, EXIT_CODES["input_error"], suggestions)


class OutputError(DataSonifyCLIError):
    """Audio that cannot be rendered, written or played."""
    
    def __init__(self, message: str, suggestions: Optional[list] = None):
        super().__init__(message, EXIT_CODES["output_error"], suggestions)


def from_library_error(error: Exception) -> DataSonifyCLIError:
    """Wrap a library exception with suggestions for the command line."""
    if isinstance(error, DatasetError):
        return InputError(str(error), suggestions=[
            "Check the column names in the CSV header (they are case-sensitive)",
            "Use --key together with --from/--to"
        ])
    if isinstance(error, MappingError):
        return InputError(str(error), suggestions=[
            "Pitch ranges need --low <= --high"
        ])
    if isinstance(error, SynthesisError):
        return OutputError(str(error), suggestions=[
            "Install live playback support: pip install 'datasonify[playback]'",
            "Render to a WAV file instead: datasonify melody render"
        ])
    return DataSonifyCLIError(str(error))


def format_error_message(error: Exception, operation: str, debug: bool = False) -> str:
    """Format error message with context and suggestions."""
    error_type = type(error).__name__
    
    message_parts = [
        f"[red]Error during {operation}:[/red]",
        f"[red]{error_type}: {error}[/red]"
    ]
    
    if getattr(error, 'suggestions', None):
        message_parts.append("")
        message_parts.append("[yellow]Suggestions:[/yellow]")
        for suggestion in error.suggestions:
            message_parts.append(f"  • {suggestion}")
    
    if debug:
        message_parts.append("")
        message_parts.append("[dim]Debug information:[/dim]")
        message_parts.append(f"[dim]{traceback.format_exc()}[/dim]")
    
    return "\n".join(message_parts)


_debug = False


def set_debug(enabled: bool) -> None:
    """Record the global --debug flag for the current invocation."""
    global _debug
    _debug = enabled


def debug_enabled() -> bool:
    """Whether the global --debug flag was given."""
    return _debug


def handle_cli_error(error: Exception, operation: str, debug: Optional[bool] = None) -> None:
    """Display an error with rich formatting and exit with its code."""
    if debug is None:
        debug = debug_enabled()
    if not isinstance(error, DataSonifyCLIError):
        error = from_library_error(error)
    
    console.print(format_error_message(error, operation, debug))
    console.print(f"\n[dim]For more help, run: datasonify {operation.split()[0]} --help[/dim]")
    
    logger.error(f"CLI error in {operation}: {error}", exc_info=debug)
    
    raise typer.Exit(error.exit_code)


def validate_csv_file(path: Path) -> Path:
    """Validate that a dataset path is an existing CSV file."""
    if not path.exists():
        suggestions = []
        if path.parent.exists():
            similar = [f.name for f in path.parent.iterdir()
                       if f.suffix.lower() == '.csv' and f.name.lower().startswith(path.stem.lower()[:3])]
            if similar:
                suggestions.append(f"Did you mean one of: {', '.join(similar[:3])}")
        raise InputError(f"Dataset file not found: {path}", suggestions=suggestions)
    
    if path.suffix.lower() != '.csv':
        raise InputError(
            f"Unsupported dataset format: {path.suffix or '(none)'}",
            suggestions=["Export the data as a .csv file with a header row"]
        )
    return path
