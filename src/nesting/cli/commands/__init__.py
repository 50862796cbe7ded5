"""CLI command implementations for the nesting application.

This package contains subcommands for the nesting CLI, including:
- pack: Pack a request file and report the layout
- validate: Validate a request file
- import-csv: Turn a SketchUp cutlist CSV into a request file
"""

from nesting.cli.commands.import_csv import import_csv_command
from nesting.cli.commands.pack import pack_command
from nesting.cli.commands.validate import validate_command

__all__ = ["import_csv_command", "pack_command", "validate_command"]
