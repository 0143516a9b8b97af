"""
CLI interface module for tubelink.

Provides the Typer-based command-line interface for resolving channel
handles and running the API server.
"""

from __future__ import annotations

__all__: list[str] = []
