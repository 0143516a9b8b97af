"""
Configuration management module for tubelink.

Handles application settings, environment variables, logging setup,
and the tunable timeouts of the resolution pipeline.
"""

from __future__ import annotations

__all__: list[str] = []
