"""Typer sub-commands for the tubelink CLI."""
