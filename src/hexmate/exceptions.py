"""
Exception types raised by HexMate.
"""


class HexMateError(Exception):
    """Base class for HexMate errors."""


class ConfigError(HexMateError):
    """The settings file could not be read or holds invalid values."""


class ApplyError(HexMateError):
    """An edit set could not be applied; the document was left unchanged."""


class RequestError(HexMateError):
    """A rewrite request is malformed."""
