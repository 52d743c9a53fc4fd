"""
Scene to brush conversion package.

Plane math, the VMF document model and its format writers.  Brush
generation lives in the ``geometry`` subpackage.
"""

from .plane_math import PlaneGeometry, solid_vertices
from .vmf_model import (
    Displacement,
    MapEntity,
    Side,
    Solid,
    TextureFace,
    VmfDocument,
)
from .format_writers import MapFormatWriter, VmfWriter, get_writer

__all__ = [
    'PlaneGeometry',
    'solid_vertices',
    'Displacement',
    'MapEntity',
    'Side',
    'Solid',
    'TextureFace',
    'VmfDocument',
    'MapFormatWriter',
    'VmfWriter',
    'get_writer',
]
