"""
Command line entry point.

Usage:
    imghasher hash photo.jpg other.png [--rgb] [--json]
    imghasher compare a.jpg b.jpg [--threshold 8]
    imghasher compare a.jpg 9114861776524122264
    imghasher dupes ./photos/*.jpg [--threshold 5]

Global options (before the subcommand):
    --resample NAME   Pillow filter for the 9x8 shrink (default: config)
    -v, --verbose     DEBUG logging
"""

import sys
import logging
import argparse
from itertools import combinations
from pathlib import Path
from typing import List, Optional, Tuple

from imghasher.errors import ImgHasherError
from imghasher.hashed_image import HashedImage
from imghasher.image.pil_image import resolve_resample
from imghasher.schema import CompareResult, HashRecord
from imghasher.utils.config import get_config
from imghasher.utils.hamming import (
    duplicate_threshold,
    hamming_distance,
    hash_to_hex,
    parse_hash,
    similarity,
)

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool):
    cfg = get_config()
    level_name = "DEBUG" if verbose else str(cfg.get("logging.level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=cfg.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        stream=sys.stderr,
    )


def _load_operand(text: str, resample: Optional[str]) -> Tuple[str, int]:
    """A compare operand is an existing file, otherwise a numeric hash."""
    if Path(text).exists():
        return text, HashedImage(text, resample=resample).dhash()
    try:
        return text, parse_hash(text)
    except ValueError:
        raise ImgHasherError(f"Not an image file or hash: {text}") from None


# ── Subcommand handlers ─────────────────────────────────────────────

def cmd_hash(args) -> int:
    """Print the dHash (and optionally RGB dHashes) of each file."""
    failed = 0
    for path in args.paths:
        try:
            hashed = HashedImage(path, resample=args.resample)
            value = hashed.dhash()
            rgb = hashed.dhash_rgb() if args.rgb else None
        except ImgHasherError as e:
            logger.error(f"✗ {path}: {e}")
            failed += 1
            continue

        if args.json:
            record = HashRecord(
                file_path=path,
                width=hashed.image.width(),
                height=hashed.image.height(),
                dhash=value,
                dhash_hex=hash_to_hex(value),
                rgb=rgb,
            )
            print(record.model_dump_json())
        else:
            line = f"{hash_to_hex(value)}  {value:>20}  {path}"
            if rgb is not None:
                line += f"  r={hash_to_hex(rgb.r)} g={hash_to_hex(rgb.g)} b={hash_to_hex(rgb.b)}"
            print(line)

    return 1 if failed else 0


def cmd_compare(args) -> int:
    """Distance between two images and/or hashes."""
    threshold = args.threshold
    try:
        left, left_hash = _load_operand(args.left, args.resample)
        right, right_hash = _load_operand(args.right, args.resample)
    except ImgHasherError as e:
        logger.error(str(e))
        return 1

    distance = hamming_distance(left_hash, right_hash)
    result = CompareResult(
        left=left,
        right=right,
        distance=distance,
        similarity=similarity(distance),
        is_duplicate=distance <= threshold,
        threshold=threshold,
    )
    if args.json:
        print(result.model_dump_json())
    else:
        verdict = "duplicate" if result.is_duplicate else "different"
        print(f"distance={result.distance} similarity={result.similarity:.1f}% {verdict}")
    return 0


def cmd_dupes(args) -> int:
    """List every pair of files within the duplicate threshold."""
    threshold = args.threshold

    hashes: List[Tuple[str, int]] = []
    failed = 0
    for path in args.paths:
        try:
            hashes.append((path, HashedImage(path, resample=args.resample).dhash()))
        except ImgHasherError as e:
            logger.warning(f"Skip {path}: {e}")
            failed += 1

    logger.info(f"Hashed {len(hashes)} files ({failed} skipped), threshold={threshold}")

    pairs = 0
    for (path_a, hash_a), (path_b, hash_b) in combinations(hashes, 2):
        distance = hamming_distance(hash_a, hash_b)
        if distance <= threshold:
            print(f"{distance:>2}  {path_a}  {path_b}")
            pairs += 1

    logger.info(f"{pairs} duplicate pair(s)")
    return 1 if failed else 0


# ── Main ────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='imghasher',
        description='dHash perceptual hashing and comparison'
    )
    parser.add_argument('--resample', help='Resample filter (box, bilinear, bicubic, hamming, lanczos, nearest)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('hash', help='Print dHash of image files')
    p.add_argument('paths', nargs='+', help='Image files')
    p.add_argument('--rgb', action='store_true', help='Also print per-channel hashes')
    p.add_argument('--json', action='store_true', help='One JSON record per line')

    p = sub.add_parser('compare', help='Hamming distance between two images or hashes')
    p.add_argument('left', help='Image file or hash')
    p.add_argument('right', help='Image file or hash')
    p.add_argument('--threshold', type=int, help='Duplicate threshold in bits')
    p.add_argument('--json', action='store_true', help='JSON output')

    p = sub.add_parser('dupes', help='Find near-duplicate pairs among files')
    p.add_argument('paths', nargs='+', help='Image files')
    p.add_argument('--threshold', type=int, help='Duplicate threshold in bits')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.resample:
        try:
            resolve_resample(args.resample)
        except ValueError as e:
            parser.error(str(e))
    _setup_logging(args.verbose)

    # Config and env values, reported through logging
    try:
        resolve_resample(args.resample)
        if args.command in ("compare", "dupes") and args.threshold is None:
            args.threshold = duplicate_threshold()
    except ValueError as e:
        logger.error(f"Bad configuration: {e}")
        return 1

    handlers = {
        'hash': cmd_hash,
        'compare': cmd_compare,
        'dupes': cmd_dupes,
    }
    return handlers[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
