"""
tubelink - YouTube channel linking backend.

Resolves human-readable YouTube channel handles into stable channel IDs and
metadata records through a cascading feed, HTML and headless-browser pipeline.
"""

from __future__ import annotations

__version__ = "0.3.0"
__author__ = "tubelink"
__email__ = "noreply@tubelink.dev"
__license__ = "MIT"

__all__ = ["__version__", "__author__", "__email__", "__license__"]
