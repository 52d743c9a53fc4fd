"""
Exception hierarchy for the conversion engine.

Fatal conditions raise a ConversionError subclass; the pipeline catches these
and reports them as a failed ConversionResult.  Non-fatal geometry problems
are reported as GeometryWarning records that accumulate alongside a
successful result.
"""


class ConversionError(Exception):
    pass


class ParseError(ConversionError):
    """The scene document is not well-formed or has no ``<roblox>`` root."""


class ConfigurationError(ConversionError):
    """Settings are invalid, or the scene cannot satisfy them."""

    def __init__(self, message: str, problems=None):
        self.problems = list(problems or [])
        super().__init__(message)


class GeometryError(ConversionError):
    """Emitted geometry failed the export gate."""


class GeometryWarning(UserWarning):
    pass
