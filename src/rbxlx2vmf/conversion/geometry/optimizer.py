"""
Adjacency optimizer: merges congruent, face-adjacent box solids.

Two solids merge along local axis k when they have the same kind, entity,
rotation and per-face materials, the same cross-section across k, and one
ends where the other begins along k.  Candidates are found by bucketing on
that key and sweeping each bucket in order along k, so a pass costs
O(n log n) instead of comparing every pair.

Anything else (partial overlap, mismatched cross-sections, displacements)
is left alone.  Passes over all three axes repeat until one changes nothing.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Hashable, List, Sequence, Tuple

from rbxlx2vmf.conversion.geometry.oriented_box import OrientedBox
from rbxlx2vmf.conversion.geometry.shape_builder import box_sides
from rbxlx2vmf.conversion.plane_math import _add, _scale
from rbxlx2vmf.conversion.vmf_model import Solid

logger = logging.getLogger(__name__)

MERGE_TOLERANCE = 1e-3
ROTATION_TOLERANCE = 1e-4


@dataclass
class OptimizeResult:
    solids: List[Solid] = field(default_factory=list)
    merged: int = 0
    passes: int = 0


def _quantize(value: float, step: float) -> int:
    return int(round(value / step))


class AdjacencyOptimizer:
    def __init__(self, tolerance: float = MERGE_TOLERANCE,
                 rotation_tolerance: float = ROTATION_TOLERANCE):
        self.tolerance = tolerance
        self.rotation_tolerance = rotation_tolerance

    def optimize(self, solids: Sequence[Solid]) -> OptimizeResult:
        result = OptimizeResult()
        fixed = [s for s in solids if not self._mergeable(s)]
        work = [s for s in solids if self._mergeable(s)]

        while True:
            result.passes += 1
            merged_this_pass = 0
            for axis in range(3):
                work, merged = self._merge_along(work, axis)
                merged_this_pass += merged
            result.merged += merged_this_pass
            logger.debug("Optimizer pass %d: %d merges", result.passes, merged_this_pass)
            if merged_this_pass == 0:
                break

        result.solids = sorted(fixed + work, key=lambda s: s.source_index)
        logger.info("Optimizer merged %d solids in %d passes (%d -> %d)",
                    result.merged, result.passes, len(solids), len(result.solids))
        return result

    # ---------------------------------------------------------------

    @staticmethod
    def _mergeable(solid: Solid) -> bool:
        return solid.box is not None and not solid.has_displacement

    def _visual_key(self, solid: Solid) -> Tuple[Hashable, ...]:
        rotation = tuple(
            _quantize(c, self.rotation_tolerance)
            for axis in solid.box.axes
            for c in axis
        )
        materials = tuple(side.material for side in solid.sides)
        return (solid.kind, solid.entity_group, rotation, materials)

    def _cross_section(self, box: OrientedBox, axis: int) -> Tuple[int, ...]:
        key = []
        for other in range(3):
            if other == axis:
                continue
            lo, hi = box.span(other)
            key.append(_quantize(lo, self.tolerance))
            key.append(_quantize(hi, self.tolerance))
        return tuple(key)

    def _merge_along(self, solids: List[Solid], axis: int) -> Tuple[List[Solid], int]:
        buckets: Dict[Tuple[Hashable, ...], List[Solid]] = {}
        for solid in solids:
            key = self._visual_key(solid) + self._cross_section(solid.box, axis)
            buckets.setdefault(key, []).append(solid)

        out: List[Solid] = []
        merged = 0
        for bucket in buckets.values():
            if len(bucket) == 1:
                out.extend(bucket)
                continue
            bucket.sort(key=lambda s: (s.box.span(axis)[0], s.source_index))
            current = bucket[0]
            for nxt in bucket[1:]:
                gap = nxt.box.span(axis)[0] - current.box.span(axis)[1]
                if abs(gap) <= self.tolerance:
                    current = self._merge_pair(current, nxt, axis)
                    merged += 1
                else:
                    out.append(current)
                    current = nxt
            out.append(current)
        return out, merged

    @staticmethod
    def _merge_pair(first: Solid, second: Solid, axis: int) -> Solid:
        box = first.box
        lo, old_hi = box.span(axis)
        hi = second.box.span(axis)[1]
        shift = (lo + hi) / 2.0 - (lo + old_hi) / 2.0
        half = list(box.half)
        half[axis] = (hi - lo) / 2.0
        merged_box = OrientedBox(
            center=_add(box.center, _scale(box.axes[axis], shift)),
            axes=box.axes,
            half=tuple(half),
        )
        keep = first if first.source_index <= second.source_index else second
        return replace(
            keep,
            box=merged_box,
            sides=box_sides(merged_box, [side.material for side in first.sides]),
        )
