"""
Error types raised while relaying requests to Stash.
"""


class SnobsError(Exception):
    """Base class for every error the relay reports to its callers."""


class InvalidURL(SnobsError):
    """Pull request URL does not match the Stash pull request pattern."""

    def __init__(self, url: str):
        super().__init__(f"wrong url: {url}")
        self.url = url


class UpstreamUnavailable(SnobsError):
    """Stash call failed, answered with an error status or an undecodable body."""


class BadRequest(SnobsError):
    """Inbound request path has an unsupported shape."""


class ConfigError(SnobsError, ValueError):
    """Configuration file is missing a key or holds a value of the wrong type."""
