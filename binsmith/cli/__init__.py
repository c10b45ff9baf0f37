"""Binsmith CLI: Typer-based command-line interface.

Provides the ``binsmith`` command with subcommands for inspecting and
cleaning the binary cache, resolving versions and listing GitHub releases.

All output uses Rich for formatted terminal display.
"""
