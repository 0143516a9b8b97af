"""FastAPI dependencies for API endpoints."""

from fastapi import Depends

from tubelink.config.settings import Settings, get_settings
from tubelink.services.resolution.orchestrator import ChannelResolver, build_resolver


def get_app_settings() -> Settings:
    """
    Dependency for application settings.

    Returns
    -------
    Settings
        Freshly loaded settings, so environment changes apply per request.
    """
    return get_settings()


def get_resolver(settings: Settings = Depends(get_app_settings)) -> ChannelResolver:
    """
    Dependency for the channel resolver.

    Builds the default feed, HTML and browser strategy chain per request.
    Strategies hold no request-scoped state, and tests replace this
    dependency through ``app.dependency_overrides``.

    Parameters
    ----------
    settings : Settings
        Application settings.

    Returns
    -------
    ChannelResolver
        Resolver wired from the current settings.
    """
    return build_resolver(settings)
