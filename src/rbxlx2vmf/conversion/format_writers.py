"""
Map format writers.

Each writer serialises a VmfDocument into the target format's text
representation.  Only the Valve Map Format is implemented; writers are picked
by the engine name of the target game profile.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Sequence, Tuple

from rbxlx2vmf.conversion.plane_math import Vec3
from rbxlx2vmf.conversion.vmf_model import Displacement, MapEntity, Side, Solid, VmfDocument

if TYPE_CHECKING:
    from rbxlx2vmf.materials.registry import MaterialRegistry

logger = logging.getLogger(__name__)

TAB = "\t"

FORMAT_VERSION = 100
LIGHTMAP_SCALE = 16
CORDON_EXTENT = 1024


class MapFormatWriter(ABC):
    """Abstract base for map format writers."""

    @abstractmethod
    def format_name(self) -> str: ...

    @abstractmethod
    def write_document(self, document: VmfDocument, registry: "MaterialRegistry") -> str:
        """Return the complete document text."""
        ...


class VmfWriter(MapFormatWriter):
    """Valve Map Format (Hammer 4.x) writer.

    Layout:
        versioninfo, visgroups, viewsettings, world (id 1) with its solids,
        one entity block per detail group, cameras, cordon.

    IDs are handed out in document order from three independent counters:
    entities (the world is 1), solids and sides.
    """

    def __init__(self):
        self._entity_id = 0
        self._solid_id = 0
        self._side_id = 0

    def format_name(self) -> str:
        return "source"

    def _next_entity(self) -> int:
        self._entity_id += 1
        return self._entity_id

    def _next_solid(self) -> int:
        self._solid_id += 1
        return self._solid_id

    def _next_side(self) -> int:
        self._side_id += 1
        return self._side_id

    # ---------------------------------------------------------------
    # Document
    # ---------------------------------------------------------------

    def write_document(self, document: VmfDocument, registry: "MaterialRegistry") -> str:
        self._entity_id = self._solid_id = self._side_id = 0

        lines: List[str] = []
        lines.extend(self._block(0, "versioninfo", [
            ("editorversion", document.editor_version),
            ("editorbuild", document.editor_build),
            ("mapversion", document.map_version),
            ("formatversion", FORMAT_VERSION),
            ("prefab", 0),
        ]))
        lines.extend(self._block(0, "visgroups", []))
        lines.extend(self._block(0, "viewsettings", [
            ("bSnapToGrid", 1),
            ("bShowGrid", 1),
            ("bShowLogicalGrid", 0),
            ("nGridSpacing", 64),
            ("bShow3DGrid", 0),
        ]))

        world = document.world
        lines.extend(self._entity(
            "world", world,
            [("mapversion", document.map_version),
             ("classname", world.classname),
             ("skyname", document.skyname)],
            registry,
        ))
        for entity in document.entities:
            lines.extend(self._entity(
                "entity", entity, [("classname", entity.classname)], registry))

        lines.extend(self._block(0, "cameras", [("activecamera", -1)]))
        lines.extend(self._block(0, "cordon", [
            ("mins", f"(-{CORDON_EXTENT} -{CORDON_EXTENT} -{CORDON_EXTENT})"),
            ("maxs", f"({CORDON_EXTENT} {CORDON_EXTENT} {CORDON_EXTENT})"),
            ("active", 0),
        ]))

        logger.debug("Wrote %d entities, %d solids, %d sides",
                     self._entity_id, self._solid_id, self._side_id)
        return "".join(lines)

    def _entity(self, header: str, entity: MapEntity, head: Sequence[Tuple[str, object]],
                registry: "MaterialRegistry") -> List[str]:
        lines = [f"{header}\n", "{\n"]
        lines.append(_kv(1, "id", self._next_entity()))
        for key, value in head:
            lines.append(_kv(1, key, value))
        for key, value in entity.properties:
            lines.append(_kv(1, key, value))
        for solid in entity.solids:
            lines.extend(self._solid(solid, registry))
        lines.append("}\n")
        return lines

    def _solid(self, solid: Solid, registry: "MaterialRegistry") -> List[str]:
        lines = [f"{TAB}solid\n", f"{TAB}{{\n"]
        lines.append(_kv(2, "id", self._next_solid()))
        for side in solid.sides:
            lines.extend(self._side(side, registry))
        lines.append(f"{TAB}}}\n")
        return lines

    def _side(self, side: Side, registry: "MaterialRegistry") -> List[str]:
        indent = TAB * 2
        material = registry.material_for(side)
        u, v = registry.texture_axes(side)
        plane = " ".join(f"({_fmt_vec(p)})" for p in side.plane.points)

        lines = [f"{indent}side\n", f"{indent}{{\n"]
        lines.append(_kv(3, "id", self._next_side()))
        lines.append(_kv(3, "plane", plane))
        lines.append(_kv(3, "material", material.name))
        lines.append(_kv(3, "uaxis", f"[{_fmt_vec(u.axis)} {_fmt(u.offset)}] {_fmt(u.scale)}"))
        lines.append(_kv(3, "vaxis", f"[{_fmt_vec(v.axis)} {_fmt(v.offset)}] {_fmt(v.scale)}"))
        lines.append(_kv(3, "rotation", 0))
        lines.append(_kv(3, "lightmapscale", LIGHTMAP_SCALE))
        lines.append(_kv(3, "smoothing_groups", 0))
        if side.displacement is not None:
            lines.extend(self._dispinfo(side.displacement))
        lines.append(f"{indent}}}\n")
        return lines

    def _dispinfo(self, disp: Displacement) -> List[str]:
        depth = 3
        n = disp.resolution
        quads = n - 1
        zero_vec = " ".join(["0 0 0"] * n)

        lines = [f"{TAB * depth}dispinfo\n", f"{TAB * depth}{{\n"]
        for key, value in (
            ("power", disp.power),
            ("startposition", f"[{_fmt_vec(disp.start_position)}]"),
            ("flags", 0),
            ("elevation", 0),
            ("subdiv", 0),
        ):
            lines.append(_kv(depth + 1, key, value))

        lines.extend(self._rows(depth + 1, "normals", (
            " ".join(_fmt_vec(nv) for nv in row) for row in disp.normals)))
        lines.extend(self._rows(depth + 1, "distances", (
            " ".join(_fmt(d) for d in row) for row in disp.distances)))
        lines.extend(self._rows(depth + 1, "offsets", (zero_vec for _ in range(n))))
        offset_normal = " ".join([_fmt_vec(disp.offset_normal)] * n)
        lines.extend(self._rows(depth + 1, "offset_normals", (offset_normal for _ in range(n))))
        lines.extend(self._rows(depth + 1, "alphas", (" ".join(["0"] * n) for _ in range(n))))
        lines.extend(self._rows(depth + 1, "triangle_tags", (
            " ".join(["0"] * (quads * 2)) for _ in range(quads))))
        lines.extend(self._block(depth + 1, "allowed_verts", [
            ("10", " ".join(["-1"] * 10)),
        ]))
        lines.append(f"{TAB * depth}}}\n")
        return lines

    # ---------------------------------------------------------------
    # Blocks
    # ---------------------------------------------------------------

    @staticmethod
    def _block(depth: int, name: str, pairs: Iterable[Tuple[str, object]]) -> List[str]:
        indent = TAB * depth
        lines = [f"{indent}{name}\n", f"{indent}{{\n"]
        for key, value in pairs:
            lines.append(_kv(depth + 1, key, value))
        lines.append(f"{indent}}}\n")
        return lines

    def _rows(self, depth: int, name: str, rows: Iterable[str]) -> List[str]:
        return self._block(depth, name, ((f"row{i}", row) for i, row in enumerate(rows)))


# ---------------------------------------------------------------
# Factory
# ---------------------------------------------------------------

_WRITERS = {
    "source": VmfWriter,
}


def get_writer(format_name: str) -> MapFormatWriter:
    """Return a writer instance for the given format name.

    Raises ValueError for unknown formats.
    """
    cls = _WRITERS.get(format_name.lower())
    if cls is None:
        raise ValueError(f"Unknown export format '{format_name}'. Available: {list(_WRITERS)}")
    return cls()


# ---------------------------------------------------------------
# Helper
# ---------------------------------------------------------------

def _kv(depth: int, key: str, value: object) -> str:
    return f'{TAB * depth}"{key}" "{value}"\n'


def _snap_float(v: float, epsilon: float = 1e-6) -> float:
    """Snap a floating-point value to the nearest integer if close enough.

    Eliminates floating-point artifacts like 7.83774e-15 → 0.
    """
    rounded = round(v)
    if abs(v - rounded) < epsilon:
        return float(rounded)
    return v


def _fmt(v: float) -> str:
    """Deterministic number text: snapped, at most 4 decimals, no negative zero."""
    v = _snap_float(float(v))
    text = f"{v:.4f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def _fmt_vec(v: Vec3) -> str:
    return " ".join(_fmt(c) for c in v)
