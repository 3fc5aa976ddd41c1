"""
Command-line interface for DataSonify.
"""

from .main import app, cli_main

__all__ = ["app", "cli_main"]
