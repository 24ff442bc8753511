"""Preferences-file importer.

Applies a key-value preferences file (color themes, full preference dumps) to
an application's settings store. The command surface is implemented with Typer
and Rich; command result payloads remain machine-friendly JSON.
"""

__all__ = ["__version__"]

__version__ = "1.0.2"
