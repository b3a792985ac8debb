"""Exceptions raised by the resolution pipeline."""


class RustdocTextError(Exception):
    """Base class for errors surfaced to the caller."""


class MalformedInputError(RustdocTextError):
    """The input cannot be resolved at all (invalid JSON, missing or invalid root module)."""


class ConfigError(RustdocTextError):
    """A configuration file could not be read."""
