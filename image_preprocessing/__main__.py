#!/usr/bin/env python3
"""
CLI interface for the page scanner.

Usage:
    python -m image_preprocessing -i photo.jpg
    python -m image_preprocessing -i photos/ -o scans/ --workers 4
"""

import argparse
import sys
from multiprocessing import Pool
from pathlib import Path
from typing import List, Tuple

import cv2
import numpy as np
from PIL import Image, ImageOps

from common.config import ScannerConfig
from common.errors import ConfigError
from .preprocessor import PagePreprocessor
from .scan_list import ScanList


IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.bmp', '.tif', '.tiff', '.webp'}


def parse_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description='Turn photos of documents into flat, upright page scans',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:

  # Scan one photo (creates temp/photo_scan.png)
  python -m image_preprocessing -i photo.jpg

  # Scan a folder into scans/, with thumbnails
  python -m image_preprocessing -i photos/ -o scans/ --thumbnails

Processing:
  - Page detection (bright/low-saturation region, edge fallback)
  - Perspective correction to the canonical page size
  - CLAHE + bilateral denoising
  - Automatic 0/90/180/270 orientation
        """
    )

    parser.add_argument(
        '-i', '--input',
        required=True,
        nargs='+',
        help='Input images or folders'
    )

    parser.add_argument(
        '-o', '--output',
        help='Output folder (default: SCANNER_OUTPUT_DIR or temp/)'
    )

    parser.add_argument(
        '--workers',
        type=int,
        default=1,
        help='Number of worker processes (default: 1)'
    )

    parser.add_argument(
        '--thumbnails',
        action='store_true',
        help='Also write 160x200 thumbnails'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Print debug information'
    )

    return parser.parse_args(argv)


def collect_images(inputs: List[str]) -> List[Path]:
    """Expand folders (recursively) into image files."""
    paths = []
    for item in inputs:
        path = Path(item)
        if path.is_dir():
            paths.extend(sorted(p for p in path.rglob('*')
                                if p.suffix.lower() in IMAGE_EXTENSIONS and not p.name.startswith('.')))
        else:
            paths.append(path)
    return paths


def load_image(path: Path) -> np.ndarray:
    """
    Load an image as BGR, respecting EXIF orientation.

    Raises:
        ValueError: if the file cannot be read as an image
    """
    try:
        with Image.open(path) as pil_image:
            pil_image = ImageOps.exif_transpose(pil_image)
            rgb = np.array(pil_image.convert("RGB"))
    except (OSError, ValueError) as e:
        raise ValueError(f"Failed to load image: {path}") from e

    return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)


def _scan_file(args: Tuple[Path, Path, ScannerConfig, bool]) -> dict:
    path, output_dir, config, thumbnails = args
    meta = {"file": str(path), "ok": False, "reason": ""}

    try:
        image = load_image(path)
    except ValueError as e:
        meta["reason"] = str(e)
        return meta

    preprocessor = PagePreprocessor(config.page_width, config.page_height, debug=config.debug)
    scans = ScanList()
    result = preprocessor.process_many([(path.stem, image)], scans=scans)[0]

    meta["ok"] = result.ok
    meta["reason"] = result.reason
    meta.update(result.meta)
    if not result.ok:
        return meta

    output_path = output_dir / f"{path.stem}_scan.png"
    cv2.imwrite(str(output_path), result.image)
    meta["output"] = str(output_path)

    if thumbnails:
        thumb_path = output_dir / f"{path.stem}_thumb.png"
        cv2.imwrite(str(thumb_path), scans.thumbnail(result.meta["index"]))

    return meta


def main(argv=None):
    """Main CLI function"""
    args = parse_args(argv)

    try:
        config = ScannerConfig.from_env()
    except ConfigError as e:
        print(f"❌ Error: invalid configuration: {e}")
        sys.exit(1)

    if args.debug:
        config.debug = True

    paths = collect_images(args.input)
    missing = [p for p in paths if not p.exists()]
    if missing:
        for p in missing:
            print(f"❌ Error: input file not found: {p}")
        sys.exit(1)

    if not paths:
        print("❌ Error: no images found")
        sys.exit(1)

    output_dir = Path(args.output or config.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    jobs = [(p, output_dir, config, args.thumbnails) for p in paths]

    if args.workers > 1:
        with Pool(processes=args.workers) as pool:
            results = pool.map(_scan_file, jobs)
    else:
        results = []
        for job in jobs:
            print(f"📄 Processing: {job[0].name}")
            results.append(_scan_file(job))

    failed = 0
    for meta in results:
        if meta["ok"]:
            print(f"✅ {Path(meta['file']).name} -> {meta['output']} "
                  f"(detector={meta['detector']}, angle={meta['angle']}, flipped={meta['flipped']})")
        else:
            failed += 1
            print(f"❌ {Path(meta['file']).name}: {meta['reason']}")

    print(f"\nDone: {len(results) - failed}/{len(results)} pages scanned")
    if failed:
        sys.exit(1)


if __name__ == '__main__':
    main()
