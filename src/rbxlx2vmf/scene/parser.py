"""
RBXLX scene document parser.

Decodes the ``<roblox>`` XML tree into SceneNode objects.  Input is expected
to be machine-generated; individual parts that are missing required
properties are skipped with a warning instead of failing the whole document.
"""

from __future__ import annotations
import logging
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Tuple, Union

from rbxlx2vmf.errors import ParseError
from rbxlx2vmf.scene.scene_types import (
    DETAIL_MARKER,
    NORMAL_IDS,
    Color3,
    FaceDir,
    Mat3,
    SceneNode,
    ShapeKind,
    Vec3,
    resolve_detail,
)

logger = logging.getLogger(__name__)


PART_CLASSES = {"Part", "SpawnLocation", "TrussPart"}
FACE_ITEM_CLASSES = {"Decal", "Texture"}

# Enum.Material token values
MATERIAL_TOKENS: Dict[int, str] = {
    256: "plastic",
    272: "smoothplastic",
    288: "smoothplastic",
    512: "wood",
    528: "woodplanks",
    784: "marble",
    800: "slate",
    816: "concrete",
    832: "granite",
    848: "brick",
    864: "pebble",
    880: "cobblestone",
    1040: "rust",
    1056: "diamondplate",
    1072: "aluminium",
    1088: "metal",
    1280: "grass",
    1296: "sand",
    1312: "fabric",
    1536: "ice",
    1568: "glass",
    1584: "forcefield",
}

SURFACE_PROPERTIES: Dict[str, FaceDir] = {
    "RightSurface": (0, 1),
    "TopSurface": (1, 1),
    "BackSurface": (2, 1),
    "LeftSurface": (0, -1),
    "BottomSurface": (1, -1),
    "FrontSurface": (2, -1),
}

SURFACE_TOKENS = {3: "studs", 4: "inlet"}

_ROTATION_KEYS = ("R00", "R01", "R02", "R10", "R11", "R12", "R20", "R21", "R22")


class _MalformedItem(ValueError):
    pass


class SceneParser:
    """Parses scene document text into a resolved SceneNode tree.

    Warnings for skipped or patched items are collected in ``warnings`` and
    also logged.
    """

    def __init__(self, detail_marker: str = DETAIL_MARKER):
        self.detail_marker = detail_marker
        self.warnings: List[str] = []
        self.part_count = 0
        self.skipped_count = 0
        self._anonymous = 0

    def parse(self, source: Union[str, bytes]) -> SceneNode:
        try:
            root = ET.fromstring(source)
        except ET.ParseError as e:
            raise ParseError(f"Scene document is not well-formed XML: {e}") from e

        if root.tag != "roblox":
            raise ParseError(f"Expected <roblox> root element, found <{root.tag}>")

        tree = SceneNode(
            kind=ShapeKind.GROUP,
            name="root",
            referent="root",
            children=self._parse_items(root),
        )
        logger.info("Parsed %d parts (%d skipped)", self.part_count, self.skipped_count)
        return resolve_detail(tree)

    # ---------------------------------------------------------------
    # Items
    # ---------------------------------------------------------------

    def _parse_items(self, element: ET.Element) -> Tuple[SceneNode, ...]:
        nodes = []
        for item in element.findall("Item"):
            node = self._parse_item(item)
            if node is not None:
                nodes.append(node)
        return tuple(nodes)

    def _parse_item(self, item: ET.Element) -> Optional[SceneNode]:
        class_name = item.get("class", "")
        referent = item.get("referent") or self._next_referent()
        props = item.find("Properties")
        name = _find_text(props, "string", "Name") or class_name
        marker = self._has_detail_marker(item, name)
        children = self._parse_items(item)

        if class_name in PART_CLASSES:
            try:
                node = self._parse_part(item, class_name, props, name, referent)
            except _MalformedItem as e:
                self._warn(f"Skipping malformed {class_name} '{name}' ({referent}): {e}")
                self.skipped_count += 1
            else:
                self.part_count += 1
                return SceneNode(
                    **node,
                    detail_marker=marker,
                    children=children,
                )

        # Containers without geometry below them are dropped
        if not children:
            return None
        return SceneNode(
            kind=ShapeKind.GROUP,
            name=name,
            referent=referent,
            detail_marker=marker,
            children=children,
        )

    def _parse_part(self, item: ET.Element, class_name: str,
                    props: Optional[ET.Element], name: str, referent: str) -> dict:
        if props is None:
            raise _MalformedItem("no Properties")

        size = _vector3(_find(props, "Vector3", "size") or _find(props, "Vector3", "Size"), "size")
        position, rotation = _cframe(_find(props, "CoordinateFrame", "CFrame"))

        color_el = props.find("Color3uint8")
        if color_el is None:
            raise _MalformedItem("missing Color3uint8")
        color = Color3.from_packed(_int(color_el.text, "Color3uint8"))

        transparency = _float(_find_text(props, "float", "Transparency"), "Transparency")
        reflectance = _float(_find_text(props, "float", "Reflectance"), "Reflectance")

        token = _int(_find_text(props, "token", "Material"), "Material")
        material = MATERIAL_TOKENS.get(token)
        if material is None:
            self._warn(f"Unknown material token {token} on '{name}' ({referent}), using plastic")
            material = "plastic"

        if class_name == "TrussPart":
            kind = ShapeKind.TRUSS
        else:
            shape = _find_text(props, "token", "shape") or _find_text(props, "token", "Shape")
            kind = {"0": ShapeKind.SPHERE, "2": ShapeKind.CYLINDER}.get(
                (shape or "").strip(), ShapeKind.BLOCK)

        surfaces = self._surfaces(item, props)
        if class_name == "SpawnLocation":
            surfaces[(1, 1)] = "spawnlocation"

        return dict(
            kind=kind,
            name=name,
            referent=referent,
            position=position,
            rotation=rotation,
            size=size,
            color=color,
            material=material,
            transparency=min(max(transparency, 0.0), 1.0),
            reflectance=min(max(reflectance, 0.0), 1.0),
            surfaces=tuple((face, surfaces[face]) for face in NORMAL_IDS if face in surfaces),
        )

    def _surfaces(self, item: ET.Element, props: ET.Element) -> Dict[FaceDir, str]:
        surfaces: Dict[FaceDir, str] = {}
        for prop_name, face in SURFACE_PROPERTIES.items():
            text = _find_text(props, "token", prop_name)
            if text is None:
                continue
            try:
                tag = SURFACE_TOKENS.get(int(text))
            except ValueError:
                continue
            if tag:
                surfaces[face] = tag

        for child in item.findall("Item"):
            if child.get("class") not in FACE_ITEM_CLASSES:
                continue
            face_text = _find_text(child.find("Properties"), "token", "Face")
            try:
                face_id = int(face_text)
            except (TypeError, ValueError):
                continue
            if 0 <= face_id < len(NORMAL_IDS):
                surfaces[NORMAL_IDS[face_id]] = "decal"
        return surfaces

    # ---------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------

    def _has_detail_marker(self, item: ET.Element, name: str) -> bool:
        if name == self.detail_marker:
            return True
        for child in item.findall("Item"):
            if child.get("class") != "StringValue":
                continue
            props = child.find("Properties")
            if self.detail_marker in (_find_text(props, "string", "Name"),
                                      _find_text(props, "string", "Value")):
                return True
        return False

    def _next_referent(self) -> str:
        self._anonymous += 1
        return f"anon{self._anonymous}"

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)


def parse_scene(source: Union[str, bytes],
                detail_marker: str = DETAIL_MARKER) -> Tuple[SceneNode, List[str]]:
    """Parse a scene document, returning the tree and any warnings."""
    parser = SceneParser(detail_marker)
    tree = parser.parse(source)
    return tree, parser.warnings


# ---------------------------------------------------------------
# Property decoding
# ---------------------------------------------------------------

def _find(props: Optional[ET.Element], tag: str, name: str) -> Optional[ET.Element]:
    if props is None:
        return None
    for el in props.findall(tag):
        if el.get("name") == name:
            return el
    return None


def _find_text(props: Optional[ET.Element], tag: str, name: str) -> Optional[str]:
    el = _find(props, tag, name)
    if el is None:
        return None
    return el.text or ""


def _float(text: Optional[str], what: str) -> float:
    if text is None:
        raise _MalformedItem(f"missing {what}")
    try:
        return float(text)
    except ValueError:
        raise _MalformedItem(f"bad {what} value {text!r}") from None


def _int(text: Optional[str], what: str) -> int:
    if text is None:
        raise _MalformedItem(f"missing {what}")
    try:
        return int(text.strip())
    except ValueError:
        raise _MalformedItem(f"bad {what} value {text!r}") from None


def _vector3(el: Optional[ET.Element], what: str) -> Vec3:
    if el is None:
        raise _MalformedItem(f"missing {what}")
    return tuple(_float(el.findtext(axis), f"{what}.{axis}") for axis in ("X", "Y", "Z"))


def _cframe(el: Optional[ET.Element]) -> Tuple[Vec3, Mat3]:
    if el is None:
        raise _MalformedItem("missing CFrame")
    position = tuple(_float(el.findtext(axis), f"CFrame.{axis}") for axis in ("X", "Y", "Z"))
    r = [_float(el.findtext(key), f"CFrame.{key}") for key in _ROTATION_KEYS]
    return position, ((r[0], r[1], r[2]), (r[3], r[4], r[5]), (r[6], r[7], r[8]))
