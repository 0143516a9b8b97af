"""
Services module for tubelink.

Contains the channel handle resolution pipeline.
"""

from __future__ import annotations

from tubelink.services.resolution import ChannelResolver, resolve_channel

__all__: list[str] = ["ChannelResolver", "resolve_channel"]
