"""
Conversion pipeline: scene document text in, VMF bundle out.

Stages run strictly in order: configure, parse, transform, build, optimize
(optional), skybox (optional), assemble, validate, materials, serialize.  Any
ConversionError stops the run and is reported in the result; no partial
bundle is ever returned.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from rbxlx2vmf.conversion.format_writers import get_writer
from rbxlx2vmf.conversion.geometry import (
    AdjacencyOptimizer,
    GeometrySettings,
    ShapeBuilder,
    SkyboxSettings,
    build_skybox,
)
from rbxlx2vmf.conversion.vmf_model import MapEntity, Solid, VmfDocument
from rbxlx2vmf.errors import ConfigurationError, ConversionError
from rbxlx2vmf.generators.profiles import GameProfile
from rbxlx2vmf.materials.registry import MaterialRegistry
from rbxlx2vmf.pipeline.bundle import OutputBundle
from rbxlx2vmf.pipeline.settings import ConversionSettings
from rbxlx2vmf.scene import SceneNode, SceneParser, to_target_space
from rbxlx2vmf.validation import ValidationStage, run_gate

logger = logging.getLogger(__name__)

# VMF format limitations
MAX_PART_COUNT = 32768


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ConversionStage(Enum):
    CONFIGURE = "configure"
    PARSE = "parse"
    TRANSFORM = "transform"
    BUILD = "build"
    OPTIMIZE = "optimize"
    SKYBOX = "skybox"
    ASSEMBLE = "assemble"
    VALIDATE = "validate"
    MATERIALS = "materials"
    SERIALIZE = "serialize"
    COMPLETE = "complete"


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass
class ConversionResult:
    success: bool
    bundle: Optional[OutputBundle] = None
    stages_completed: List[ConversionStage] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_time(self) -> float:
        return self.metrics.get("total_time", 0.0)

    @property
    def document_text(self) -> Optional[str]:
        return self.bundle.document_text if self.bundle else None

    def add_error(self, error: str, stage: Optional[ConversionStage] = None):
        if stage:
            error = f"[{stage.value}] {error}"
        self.errors.append(error)

    def add_warning(self, warning: str, stage: Optional[ConversionStage] = None):
        if stage:
            warning = f"[{stage.value}] {warning}"
        self.warnings.append(warning)


# ---------------------------------------------------------------------------
# Main pipeline
# ---------------------------------------------------------------------------

class ConversionPipeline:
    """Converts one scene document per ``run()`` call."""

    def __init__(self, settings: Optional[ConversionSettings] = None):
        self.settings = settings or ConversionSettings()
        self.current_stage = ConversionStage.CONFIGURE
        self._result: Optional[ConversionResult] = None
        self._stage_start = 0.0

    # -- helpers --

    def _begin(self, stage: ConversionStage):
        self.current_stage = stage
        self._stage_start = time.perf_counter()
        logger.info("Stage: %s", stage.value)

    def _end(self):
        elapsed = time.perf_counter() - self._stage_start
        self._result.metrics[f"time_{self.current_stage.value}"] = elapsed
        self._result.stages_completed.append(self.current_stage)
        logger.debug("Stage %s took %.3fs", self.current_stage.value, elapsed)

    def _warn(self, message: str):
        self._result.add_warning(message, self.current_stage)

    # -- stages --

    def _configure(self) -> GameProfile:
        self._begin(ConversionStage.CONFIGURE)
        self.settings.validate()
        profile = self.settings.resolve_profile()
        logger.info("Converting for %s (%s), scale %.4g, textures: %s",
                    profile.name, profile.description, self.settings.map_scale,
                    self.settings.texture_mode)
        self._end()
        return profile

    def _parse(self, source: Union[str, bytes]) -> SceneNode:
        self._begin(ConversionStage.PARSE)
        parser = SceneParser(self.settings.detail_marker)
        root = parser.parse(source)
        for message in parser.warnings:
            self._warn(message)

        part_count = root.geometry_count()
        self._result.metrics["part_count"] = part_count
        self._result.metrics["skipped_parts"] = parser.skipped_count
        if part_count > MAX_PART_COUNT:
            raise ConfigurationError(
                f"Too many parts: found {part_count}, must be at most {MAX_PART_COUNT}")

        if self.settings.auto_skybox:
            world_parts = sum(1 for n in root.walk() if n.kind.is_geometry and not n.is_detail)
            if world_parts == 0:
                raise ConfigurationError(
                    "Auto-skybox needs at least one non-detail part, the scene has none")
        self._end()
        return root

    def _transform(self, root: SceneNode) -> SceneNode:
        self._begin(ConversionStage.TRANSFORM)
        root = to_target_space(root, self.settings.map_scale)
        self._end()
        return root

    def _build(self, root: SceneNode) -> List[Solid]:
        self._begin(ConversionStage.BUILD)
        builder = ShapeBuilder(GeometrySettings(
            sphere_power=self.settings.sphere_power,
            workers=self.settings.workers,
        ))
        built = builder.build(root)
        for warning in built.warnings:
            self._warn(str(warning))
        self._result.metrics["built_solids"] = len(built.solids)
        self._result.metrics["degenerate_parts"] = built.skipped
        self._end()
        return built.solids

    def _optimize(self, solids: List[Solid]) -> List[Solid]:
        self._begin(ConversionStage.OPTIMIZE)
        optimized = AdjacencyOptimizer().optimize(solids)
        self._result.metrics["merged_solids"] = optimized.merged
        self._result.metrics["optimizer_passes"] = optimized.passes
        self._end()
        return optimized.solids

    def _skybox(self, solids: List[Solid]) -> List[Solid]:
        self._begin(ConversionStage.SKYBOX)
        scale = self.settings.map_scale
        shell = build_skybox(solids, SkyboxSettings(
            clearance=self.settings.skybox_clearance * scale,
            margin=self.settings.skybox_margin * scale,
            thickness=scale,
        ))
        self._end()
        return list(solids) + shell

    def _assemble(self, solids: List[Solid], profile: GameProfile) -> VmfDocument:
        self._begin(ConversionStage.ASSEMBLE)
        world = [s for s in solids if not s.is_detail]
        groups: Dict[str, List[Solid]] = {}
        for solid in solids:
            if solid.is_detail:
                groups.setdefault(solid.entity_group, []).append(solid)

        document = VmfDocument(
            world=MapEntity(
                classname="worldspawn",
                solids=tuple(world),
                properties=tuple(sorted(profile.get_worldspawn_properties().items())),
            ),
            entities=tuple(
                MapEntity(classname=profile.detail_classname, solids=tuple(members), group=group)
                for group, members in groups.items()
            ),
            skyname=self.settings.resolve_skyname(),
            editor_version=profile.editor_version,
            editor_build=profile.editor_build,
        )
        metrics = self._result.metrics
        metrics["world_solids"] = len(world)
        metrics["detail_entities"] = len(groups)
        metrics["solid_count"] = document.solid_count
        self._end()
        return document

    def _validate(self, document: VmfDocument):
        self._begin(ConversionStage.VALIDATE)
        report = run_gate(ValidationStage.EXPORT, document, log_warnings=False)
        for issue in report.warnings:
            self._warn(issue.format())
        self._end()

    def _materials(self, document: VmfDocument) -> MaterialRegistry:
        self._begin(ConversionStage.MATERIALS)
        registry = MaterialRegistry(
            mode=self.settings.texture_mode,
            map_scale=self.settings.map_scale,
            texture_size=self.settings.texture_size,
        ).build(document)
        self._result.metrics["material_count"] = len(registry.names())
        self._end()
        return registry

    def _serialize(self, document: VmfDocument, registry: MaterialRegistry,
                   profile: GameProfile) -> OutputBundle:
        self._begin(ConversionStage.SERIALIZE)
        try:
            writer = get_writer(profile.engine)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        text = writer.write_document(document, registry)
        bundle = OutputBundle(
            document_name=self.settings.output_name,
            document_text=text,
            assets=dict(registry.assets()),
        )
        self._result.metrics["document_bytes"] = len(bundle.document_bytes)
        self._result.metrics["asset_count"] = len(bundle.assets)
        self._end()
        return bundle

    # -- main entry --

    def run(self, source: Union[str, bytes]) -> ConversionResult:
        result = ConversionResult(success=False)
        self._result = result
        start_time = time.perf_counter()

        try:
            profile = self._configure()
            root = self._parse(source)
            root = self._transform(root)
            solids = self._build(root)
            if self.settings.optimize:
                solids = self._optimize(solids)
            if self.settings.auto_skybox:
                solids = self._skybox(solids)
            document = self._assemble(solids, profile)
            if self.settings.validate_geometry:
                self._validate(document)
            registry = self._materials(document)
            bundle = self._serialize(document, registry, profile)

            result.bundle = bundle
            result.success = True
            result.stages_completed.append(ConversionStage.COMPLETE)
        except ConversionError as e:
            logger.error("Conversion failed at %s: %s", self.current_stage.value, e)
            result.add_error(str(e), self.current_stage)
        except Exception as e:
            logger.exception("Unexpected conversion error")
            result.add_error(f"Unexpected error: {e}", self.current_stage)
        finally:
            result.metrics["total_time"] = time.perf_counter() - start_time
            self._result = None

        if result.success:
            logger.info("Conversion complete in %.2fs: %d solids, %d warnings",
                        result.total_time, result.metrics.get("solid_count", 0),
                        len(result.warnings))
        return result


def convert(source: Union[str, bytes],
            settings: Optional[ConversionSettings] = None) -> ConversionResult:
    """Convert scene document text in one call."""
    return ConversionPipeline(settings).run(source)
