"""
Custom exceptions for the tubelink application.

This module defines domain-specific exceptions raised outside the
resolution pipeline. The pipeline itself reports failures as tagged
``StrategyFailure`` values; these exceptions are used at the edges
(CLI, API, configuration) where a raised error is the natural contract.
"""

from __future__ import annotations


class TubelinkError(Exception):
    """Base exception for all tubelink errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize TubelinkError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        """
        self.message = message
        super().__init__(message)


class InvalidHandleError(TubelinkError):
    """
    Exception raised when a channel handle is empty after normalization.

    Attributes
    ----------
    message : str
        Human-readable error message.
    handle : str
        The raw handle as supplied by the caller.

    Examples
    --------
    >>> try:
    ...     normalize_handle("@  ")
    ... except InvalidHandleError as e:
    ...     print(e.message)
    Channel name is required
    """

    def __init__(
        self,
        message: str = "Channel name is required",
        handle: str = "",
    ) -> None:
        """
        Initialize InvalidHandleError.

        Parameters
        ----------
        message : str, optional
            Human-readable error message (default: "Channel name is required").
        handle : str, optional
            The raw handle that failed validation (default: "").
        """
        self.handle = handle
        super().__init__(message)


class ChannelResolutionError(TubelinkError):
    """
    Exception raised when every resolution strategy has failed.

    Raised by ``ResolutionOutcome.unwrap()`` so that callers preferring
    exception flow (the CLI, scripts) get a single error carrying the
    terminal failure reason and the strategies that were attempted.

    Attributes
    ----------
    message : str
        Human-readable error message describing the terminal failure.
    handle : str
        The normalized handle that could not be resolved.
    reason : str
        The terminal ``FailureReason`` value (e.g. ``"not_found"``).
    attempted : list[str]
        Strategy names in the order they were attempted.

    Examples
    --------
    >>> try:
    ...     channel = outcome.unwrap()
    ... except ChannelResolutionError as e:
    ...     print(f"{e.handle}: {e.reason} after {', '.join(e.attempted)}")
    ...     raise typer.Exit(EXIT_CODE_RESOLUTION_FAILED)
    """

    def __init__(
        self,
        message: str,
        handle: str = "",
        reason: str = "",
        attempted: list[str] | None = None,
    ) -> None:
        """
        Initialize ChannelResolutionError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        handle : str, optional
            The normalized handle (default: "").
        reason : str, optional
            Terminal failure reason value (default: "").
        attempted : list[str] | None, optional
            Strategy names attempted, in order (default: None).
        """
        self.handle = handle
        self.reason = reason
        self.attempted = attempted or []
        super().__init__(message)


class BrowserLaunchError(TubelinkError):
    """
    Exception raised when the headless browser cannot be started.

    Raised inside the browser session before a page is handed out; the
    browser strategy converts it into a ``BROWSER_LAUNCH_ERROR`` failure.

    Attributes
    ----------
    message : str
        Human-readable error message.
    original_error : Exception | None
        The driver or launcher exception that caused the failure.
    """

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        self.original_error = original_error
        super().__init__(message)


# Exit codes for CLI integration
EXIT_CODE_SUCCESS = 0
EXIT_CODE_RESOLUTION_FAILED = 1
EXIT_CODE_INVALID_ARGS = 2
