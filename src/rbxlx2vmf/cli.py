"""Command-line entry point for rbxlx2vmf."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rbxlx2vmf import __version__
from rbxlx2vmf.generators.profiles import (
    PROFILE_CATALOG,
    ProfileCatalog,
    catalog_with_custom_profiles,
    default_profiles_dir,
)
from rbxlx2vmf.pipeline import DEFAULT_MAP_SCALE, DEFAULT_OUTPUT_NAME, ConversionSettings, convert

logger = logging.getLogger(__name__)

DEFAULT_TEXTURE_OUTPUT = "./textures-out"


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", force=True)


def _profiles_dir_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--profiles-dir", type=Path, default=None, metavar="FOLDER",
                        help="Folder of custom game profile JSON files "
                             "(default: ~/.config/rbxlx2vmf/profiles).")


def _early_options(argv: Optional[List[str]]) -> argparse.Namespace:
    """Options needed before the full parser exists: the --game choices
    depend on which custom profiles are loaded."""
    pre = argparse.ArgumentParser(add_help=False)
    _profiles_dir_option(pre)
    pre.add_argument("-v", "--verbose", action="store_true")
    known, _ = pre.parse_known_args(argv)
    return known


def build_parser(catalog: ProfileCatalog = PROFILE_CATALOG) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rbxlx2vmf",
        description="Converts Roblox RBXLX files to Valve VMF files.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"rbxlx2vmf {__version__}")
    parser.add_argument("-i", "--input", type=Path, required=True, metavar="FILE",
                        help="Input RBXLX file.")
    parser.add_argument("-o", "--output", type=Path, default=Path(DEFAULT_OUTPUT_NAME),
                        metavar="FILE", help="Output VMF file.")
    parser.add_argument("--texture-output", type=Path, default=Path(DEFAULT_TEXTURE_OUTPUT),
                        metavar="FOLDER", help="Texture output folder.")
    parser.add_argument("--no-textures", action="store_true",
                        help="Disable texture generation.")
    parser.add_argument("--dev-textures", action="store_true",
                        help="Use developer textures instead of generated textures.")
    parser.add_argument("--auto-skybox", action="store_true",
                        help="Enclose the map in a skybox shell (results in an unoptimized map).")
    parser.add_argument("--skybox-height", type=float, default=0.0, metavar="STUDS",
                        help="Additional auto-skybox height clearance.")
    parser.add_argument("--optimize", action="store_true",
                        help="Reduce part count by joining adjacent parts.")
    parser.add_argument("--map-scale", type=float, default=DEFAULT_MAP_SCALE,
                        help="Source units per stud.")
    parser.add_argument("-g", "--game", required=True, type=str.lower,
                        choices=catalog.list_profiles(),
                        help="Target Source engine game.")
    _profiles_dir_option(parser)
    parser.add_argument("--zip", action="store_true",
                        help="Pack the map and its textures into one zip archive next to the output.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def settings_from_args(args: argparse.Namespace,
                       catalog: ProfileCatalog = PROFILE_CATALOG) -> ConversionSettings:
    return ConversionSettings(
        output_name=args.output.name,
        texture_output=not args.no_textures,
        dev_textures=args.dev_textures,
        map_scale=args.map_scale,
        auto_skybox=args.auto_skybox,
        skybox_clearance=args.skybox_height,
        optimize=args.optimize,
        game=args.game,
        profiles=catalog,
    )


def main(argv: Optional[List[str]] = None) -> int:
    early = _early_options(argv)
    _configure_logging(early.verbose)
    catalog = catalog_with_custom_profiles(early.profiles_dir or default_profiles_dir())
    args = build_parser(catalog).parse_args(argv)

    try:
        source = args.input.read_bytes()
    except OSError as e:
        logger.error("Could not open input file: %s", e)
        return 1

    result = convert(source, settings_from_args(args, catalog))
    for warning in result.warnings:
        logger.warning(warning)
    if not result.success:
        for error in result.errors:
            logger.error(error)
        return 1

    bundle = result.bundle
    try:
        if args.zip:
            archive = args.output.with_suffix(".zip")
            archive.parent.mkdir(parents=True, exist_ok=True)
            bundle.to_zip(archive)
            logger.info("Wrote %s", archive)
        else:
            bundle.write_to(args.output.parent, args.texture_output)
    except OSError as e:
        logger.error("Could not write output: %s", e)
        return 1

    logger.info("Done in %.2fs", result.total_time)
    return 0


if __name__ == "__main__":
    sys.exit(main())
