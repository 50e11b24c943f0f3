"""toolenv CLI.

Command-line interface for workspace activation.
"""

__version__ = "0.1.0"

from cli.toolenv.cli import app, main

__all__ = ["__version__", "app", "main"]
