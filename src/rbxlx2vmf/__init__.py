"""
rbxlx2vmf - Roblox XML place to Valve Map Format converter.

Usage:
    from rbxlx2vmf import ConversionSettings, convert

    result = convert(Path("place.rbxlx").read_text(), ConversionSettings(game="css"))
    if result.success:
        result.bundle.write_to("out")
"""

from .errors import (
    ConversionError,
    ParseError,
    ConfigurationError,
    GeometryError,
    GeometryWarning,
)
from .pipeline import (
    ConversionPipeline,
    ConversionResult,
    ConversionSettings,
    OutputBundle,
    convert,
)

__version__ = "0.1.0"

__all__ = [
    '__version__',
    'convert',
    'ConversionPipeline',
    'ConversionResult',
    'ConversionSettings',
    'OutputBundle',
    'ConversionError',
    'ParseError',
    'ConfigurationError',
    'GeometryError',
    'GeometryWarning',
]
