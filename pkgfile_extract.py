#!/usr/bin/env python3
"""
pkgfile_extract.py
------------------
Batch extractor for Wallpaper Engine scene packages: reads the PKG index,
decodes every .tex entry and exports it as an image file. Entries that are
not static textures are skipped; entries that fail to decode are reported
and the run continues.
"""
import argparse
import logging
import sys
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path

from binary_reader import BinaryReader
from extract_settings import ExtractSettings, load_settings
from pkg_reader import read_package
from record_types import ENTRY_TYPE_TEX
from tex_errors import PackageError, TexError
from tex_export import save_texture
from tex_reader import read_texture

logger = logging.getLogger(__name__)

SAVED = "saved"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass
class ExtractionStats:
    """Statistics for extraction process"""
    total: int = 0
    saved: int = 0
    skipped: int = 0
    failed: int = 0

    def add(self, outcome):
        self.total += 1
        setattr(self, outcome, getattr(self, outcome) + 1)

    def log_summary(self):
        logger.info("Entries: %d, saved: %d, skipped: %d, failed: %d",
                    self.total, self.saved, self.skipped, self.failed)


def output_path_for(settings, relative_path):
    """Join relative_path onto the output directory, refusing paths that leave it."""
    root = Path(settings.output_dir).resolve()
    target = (root / relative_path).resolve()
    try:
        target.relative_to(root)
    except ValueError:
        raise PackageError(f"path {relative_path!r} escapes the output directory", "path") from None
    return target


def write_binary_entry(reader, package, entry, settings):
    full_path = output_path_for(settings, entry.full_path)
    if full_path.exists() and not settings.overwrite:
        return SKIPPED
    data = package.read_entry_bytes(reader, entry)
    full_path.parent.mkdir(parents=True, exist_ok=True)
    full_path.write_bytes(data)
    logger.debug("Wrote %s (%d bytes)", full_path, len(data))
    return SAVED


def extract_entry(reader, package, entry, settings):
    """Extract one entry and return SAVED, SKIPPED or FAILED."""
    try:
        if entry.entry_type != ENTRY_TYPE_TEX:
            if settings.extract_binary:
                return write_binary_entry(reader, package, entry, settings)
            return SKIPPED
        output_dir = output_path_for(settings, Path(entry.full_path).parent)
        package.open_entry(reader, entry)
        texture = read_texture(reader, entry.name, decode_blocks=settings.decode_blocks)
        if texture is None:
            logger.info("Skipping %s: not a static TEXV0005 texture", entry.full_path)
            return SKIPPED
        save_texture(texture, output_dir, settings.image_index, settings.mipmap_index,
                     overwrite=settings.overwrite)
        return SAVED
    except PackageError as e:
        logger.error("Refusing %s: %s", entry.full_path, e)
    except TexError as e:
        logger.error("Failed to decode %s: %s", entry.full_path, e)
    except (OSError, IndexError) as e:
        logger.error("Failed to export %s: %s", entry.full_path, e)
    return FAILED


def _extract_entry_worker(args):
    """Process-pool worker: every call opens its own handle on the package."""
    pkg_path, package, entry, settings_dict = args
    settings = ExtractSettings(**settings_dict)
    with open(pkg_path, 'rb') as f:
        return extract_entry(BinaryReader(f), package, entry, settings)


def extract_package(pkg_path, settings):
    stats = ExtractionStats()
    with open(pkg_path, 'rb') as f:
        reader = BinaryReader(f)
        package = read_package(reader)
        logger.info("%s: %s, %d entries (%d textures)", pkg_path, package.magic,
                    len(package.entries), len(package.textures))

        if not settings.enable_parallel or settings.max_workers <= 1:
            for entry in package.entries:
                stats.add(extract_entry(reader, package, entry, settings))
            stats.log_summary()
            return stats

    settings_dict = settings.to_dict()
    with ProcessPoolExecutor(max_workers=settings.max_workers) as executor:
        futures = {}
        for entry in package.entries:
            future = executor.submit(_extract_entry_worker, (str(pkg_path), package, entry, settings_dict))
            futures[future] = entry
        for future in as_completed(futures):
            try:
                stats.add(future.result())
            except Exception as e:
                logger.error("Worker failed on %s: %s", futures[future].full_path, e)
                stats.add(FAILED)
    stats.log_summary()
    return stats


def build_parser():
    parser = argparse.ArgumentParser(
        description="Extract textures from a Wallpaper Engine scene package (.pkg)")
    parser.add_argument("input", help="path to the .pkg file")
    parser.add_argument("output_dir", nargs="?", help="output directory (default: settings or .)")
    parser.add_argument("--settings", help="JSON file with extraction settings")
    parser.add_argument("--raw-blocks", action="store_true",
                        help="keep DXT payloads block-compressed instead of decoding them")
    parser.add_argument("--binary", action="store_true", help="also write non-texture entries")
    parser.add_argument("--overwrite", action="store_true", help="replace existing output files")
    parser.add_argument("--workers", type=int, help="extract with N worker processes")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def settings_from_args(args):
    settings = load_settings(args.settings) if args.settings else ExtractSettings()
    if args.output_dir:
        settings.output_dir = args.output_dir
    if args.raw_blocks:
        settings.decode_blocks = False
    if args.binary:
        settings.extract_binary = True
    if args.overwrite:
        settings.overwrite = True
    if args.workers is not None:
        settings.enable_parallel = args.workers > 1
        settings.max_workers = max(1, args.workers)
    if args.verbose:
        settings.log_level = "DEBUG"
    return settings


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO),
                        format='%(levelname)s: %(message)s')

    input_path = Path(args.input)
    if not input_path.is_file():
        logger.error("Input is not a file: %s", input_path)
        return 2
    output_dir = Path(settings.output_dir)
    if output_dir.exists() and not output_dir.is_dir():
        logger.error("Output path is not a directory: %s", output_dir)
        return 2

    try:
        stats = extract_package(input_path, settings)
    except TexError as e:
        logger.error("Cannot read package index of %s: %s", input_path, e)
        return 1
    return 0 if stats.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
