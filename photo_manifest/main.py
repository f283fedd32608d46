import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import BuildSettings, BuildPaths
from .core import ManifestBuilder
from .exceptions import PhotoManifestError


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Logs to stderr, and additionally to log_file when given."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )

    # Silence chatty libraries
    logging.getLogger("PIL").setLevel(logging.WARNING)


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(description="Build the photo gallery manifest")

    p.add_argument("--root", type=Path, default=Path.cwd(), help="Project root (default: current directory)")
    p.add_argument("--photos-dir", type=Path, default=None, help="Source photos (default: ROOT/photos)")
    p.add_argument("--output", type=Path, default=None, help="Manifest path (default: ROOT/site/src/generated/manifest.json)")
    p.add_argument("--public-dir", type=Path, default=None, help="Served assets (default: ROOT/site/public/photos)")

    p.add_argument("--disable-optimizer", action="store_true", help="Copy original JPEGs instead of re-encoding")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")

    return p.parse_args(argv)


def resolve_paths(args) -> BuildPaths:
    paths = BuildPaths.for_root(args.root.resolve())
    if args.photos_dir:
        paths.photos_dir = args.photos_dir.resolve()
    if args.output:
        paths.output_file = args.output.resolve()
    if args.public_dir:
        paths.public_dir = args.public_dir.resolve()
    return paths


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    try:
        settings = BuildSettings.from_env()
        if args.disable_optimizer:
            settings = dataclasses.replace(settings, disable_optimizer=True)
        paths = resolve_paths(args)

        logging.info(f"Photos: {paths.photos_dir}")
        logging.info(f"Output: {paths.output_file}")

        ManifestBuilder(settings, paths).run()
    except KeyboardInterrupt:
        logging.warning("Build cancelled by user.")
        return 1
    except (PhotoManifestError, OSError) as e:
        if args.verbose:
            logging.exception("Manifest build failed.")
        logging.error(str(e))
        return 1
    except Exception as e:
        logging.exception(f"Fatal error during manifest build: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
