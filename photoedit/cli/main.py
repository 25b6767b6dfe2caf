#!/usr/bin/env python3
"""
photoedit command line.
Each sub-command maps onto one pipeline step or service call.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from tqdm import tqdm

from ..models.errors import PhotoEditError
from ..pipeline.apply_settings import apply_settings
from ..pipeline.panorama_builder import build_panorama
from ..repositories.image_repository import ImageRepository
from ..repositories.settings_repository import SettingsRepository
from ..services.depth_of_field_service import DepthOfFieldService
from ..services.inpaint_service import InpaintService
from ..services.selection_service import SelectionService, METRICS

logger = logging.getLogger(__name__)

OUTPUT_EXT = os.getenv("OUTPUT_IMG_EXT", ".png")


def _configure_logging(verbose: bool) -> None:
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


# ─── Sub-commands ─────────────────────────────────────────────────────
def cmd_apply(args, images: ImageRepository, settings_repo: SettingsRepository) -> None:
    settings = settings_repo.load(args.settings)
    result = apply_settings(images.load(args.image), settings)
    logger.info(f"Saved {images.save(result, args.output)}")


def cmd_batch(args, images: ImageRepository, settings_repo: SettingsRepository) -> None:
    settings = settings_repo.load(args.settings)
    out_dir = Path(args.output)
    out_dir.mkdir(parents=True, exist_ok=True)

    done = 0
    for path, buffer in tqdm(images.iter_dir(args.folder, recursive=args.recursive),
                             desc="batch", ncols=70):
        images.save(apply_settings(buffer, settings), out_dir / f"{path.stem}{OUTPUT_EXT}")
        done += 1
    logger.info(f"Processed {done} images into {out_dir}")


def cmd_panorama(args, images: ImageRepository, settings_repo: SettingsRepository) -> None:
    result = build_panorama(args.images, image_repository=images)
    logger.info(f"Saved {images.save(result, args.output)}")


def cmd_select(args, images: ImageRepository, settings_repo: SettingsRepository) -> None:
    mask = SelectionService().select(
        images.load(args.image),
        seed=tuple(args.seed),
        color_tolerance=args.tolerance,
        edge_threshold=args.edge_threshold,
        metric=args.metric,
    )
    logger.info(f"Selected {mask.count()} pixels")
    logger.info(f"Saved {images.save_mask(mask, args.output)}")


def cmd_remove(args, images: ImageRepository, settings_repo: SettingsRepository) -> None:
    buffer = images.load(args.image)
    mask = images.load_mask(args.mask)
    result = InpaintService().fill(buffer, mask, radius=args.radius)
    logger.info(f"Saved {images.save(result, args.output)}")


def cmd_portrait(args, images: ImageRepository, settings_repo: SettingsRepository) -> None:
    focal = tuple(args.focal) if args.focal else None
    result = DepthOfFieldService().apply(images.load(args.image), args.strength, focal)
    logger.info(f"Saved {images.save(result, args.output)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="photoedit", description="Photo editor processing core")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("apply", help="apply a saved settings JSON to one image")
    p.add_argument("image")
    p.add_argument("settings")
    p.add_argument("-o", "--output", required=True)
    p.set_defaults(func=cmd_apply)

    p = sub.add_parser("batch", help="apply a saved settings JSON to every image in a folder")
    p.add_argument("folder")
    p.add_argument("settings")
    p.add_argument("-o", "--output", required=True, help="output directory")
    p.add_argument("--recursive", action="store_true")
    p.set_defaults(func=cmd_batch)

    p = sub.add_parser("panorama", help="stitch two or more images")
    p.add_argument("images", nargs="+")
    p.add_argument("-o", "--output", required=True)
    p.set_defaults(func=cmd_panorama)

    p = sub.add_parser("select", help="magic-wand selection, written as a mask PNG")
    p.add_argument("image")
    p.add_argument("--seed", type=int, nargs=2, metavar=("X", "Y"), required=True)
    p.add_argument("--tolerance", type=float, default=32)
    p.add_argument("--edge-threshold", type=float, default=30)
    p.add_argument("--metric", choices=METRICS, default="channel")
    p.add_argument("-o", "--output", required=True)
    p.set_defaults(func=cmd_select)

    p = sub.add_parser("remove", help="remove the masked object")
    p.add_argument("image")
    p.add_argument("mask")
    p.add_argument("--radius", type=int, default=20)
    p.add_argument("-o", "--output", required=True)
    p.set_defaults(func=cmd_remove)

    p = sub.add_parser("portrait", help="depth-of-field blur around a focal point")
    p.add_argument("image")
    p.add_argument("--strength", type=float, required=True)
    p.add_argument("--focal", type=float, nargs=2, metavar=("X", "Y"))
    p.add_argument("-o", "--output", required=True)
    p.set_defaults(func=cmd_portrait)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    try:
        args.func(args, ImageRepository(), SettingsRepository())
    except (PhotoEditError, FileNotFoundError, NotADirectoryError, json.JSONDecodeError) as err:
        logger.error(f"{type(err).__name__}: {err}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
