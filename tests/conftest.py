"""
Pytest configuration and fixtures for tubelink tests.
"""

from __future__ import annotations

import pytest

from tubelink.config.settings import Settings


@pytest.fixture
def test_settings() -> Settings:
    """Settings with short timeouts and no ``.env`` lookup."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        youtube_base_url="https://www.youtube.com",
        request_timeout=5.0,
        browser_navigation_timeout=5.0,
        browser_selector_timeout=1.0,
        development_mode=False,
    )
