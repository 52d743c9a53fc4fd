"""
Conversion pipeline module.

Provides the end-to-end RBXLX → VMF conversion and its output bundle.
"""

from .settings import ConversionSettings, DEFAULT_OUTPUT_NAME, DEFAULT_MAP_SCALE
from .bundle import OutputBundle
from .converter import (
    ConversionPipeline,
    ConversionResult,
    ConversionStage,
    MAX_PART_COUNT,
    convert,
)

__all__ = [
    # Pipeline core
    'ConversionPipeline',
    'ConversionResult',
    'ConversionStage',
    'MAX_PART_COUNT',
    'convert',
    # Settings and output
    'ConversionSettings',
    'DEFAULT_OUTPUT_NAME',
    'DEFAULT_MAP_SCALE',
    'OutputBundle',
]
