"""Media library building blocks: release choosing, episode lookup, notifications, Plex caching and route handlers."""

__version__ = "0.1.0"