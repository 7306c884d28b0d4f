from __future__ import annotations


class NbBridgeError(Exception):
    """Base class for errors raised by nbbridge."""


class MalformedInputError(NbBridgeError, ValueError):
    """Notebook content is non-empty but is not a JSON document."""


class ConfigError(NbBridgeError):
    """Serializer configuration could not be loaded."""
