"""
Tests for tubelink exception classes.
"""

from __future__ import annotations

import pytest

from tubelink.exceptions import (
    EXIT_CODE_INVALID_ARGS,
    EXIT_CODE_RESOLUTION_FAILED,
    EXIT_CODE_SUCCESS,
    BrowserLaunchError,
    ChannelResolutionError,
    InvalidHandleError,
    TubelinkError,
)


class TestExceptionHierarchy:
    """All domain errors share the TubelinkError base."""

    @pytest.mark.parametrize(
        "exc",
        [
            InvalidHandleError(),
            ChannelResolutionError("failed"),
            BrowserLaunchError("no browser"),
        ],
    )
    def test_subclasses_base(self, exc: TubelinkError) -> None:
        assert isinstance(exc, TubelinkError)
        assert str(exc) == exc.message


class TestInvalidHandleError:
    def test_default_message(self) -> None:
        error = InvalidHandleError(handle="@")

        assert error.message == "Channel name is required"
        assert error.handle == "@"


class TestChannelResolutionError:
    def test_attributes(self) -> None:
        error = ChannelResolutionError(
            "Failed to scrape channel info: timeout",
            handle="h",
            reason="timeout",
            attempted=["feed", "html", "browser"],
        )

        assert error.handle == "h"
        assert error.reason == "timeout"
        assert error.attempted == ["feed", "html", "browser"]

    def test_attempted_defaults_to_empty_list(self) -> None:
        assert ChannelResolutionError("x").attempted == []


class TestBrowserLaunchError:
    def test_keeps_original_error(self) -> None:
        cause = FileNotFoundError("/usr/bin/google-chrome")
        error = BrowserLaunchError("Failed to launch browser", original_error=cause)

        assert error.original_error is cause


def test_exit_codes() -> None:
    assert (EXIT_CODE_SUCCESS, EXIT_CODE_RESOLUTION_FAILED, EXIT_CODE_INVALID_ARGS) == (0, 1, 2)
