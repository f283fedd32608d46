"""
Image output strategies.

CopyingBackend serves the original JPEG as-is. OptimizingBackend re-encodes
it with Pillow into a resized JPEG plus a WebP sibling.
"""
import shutil
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path, PurePosixPath
from typing import Any

from .. import config
from ..config import BuildSettings
from ..exceptions import OptimizationFailedError, OptimizerUnavailableError
from ..models import OptimizedImage
from ..scanning.jpeg import read_jpeg_file_dimensions

# Optional import: without Pillow the build falls back to copying originals
Image: Any = None
ImageOps: Any = None
features: Any = None
try:
    from PIL import Image, ImageOps, features
except ImportError:
    Image = None


class CopyingBackend:
    """Degraded mode: copy the source verbatim, measure it with the JPEG reader."""
    name = "copy"

    def __init__(self, settings: BuildSettings, public_dir: Path):
        self.settings = settings
        self.public_dir = public_dir

    def produce(self, relative_path: str, source_path: Path) -> OptimizedImage:
        target = self.public_dir / relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source_path, target)

        dims = read_jpeg_file_dimensions(target)
        return OptimizedImage(
            image_url=self.settings.asset_url(relative_path),
            webp_url=None,
            width=dims.width,
            height=dims.height,
        )


class OptimizingBackend:
    """
    Re-encodes each source into ``<name>.jpg`` and ``<name>.webp``.

    Outputs that are at least as new as their source are reused. Freshness is
    judged by modification time only, so an edit that keeps the source mtime
    unchanged is not picked up.
    """
    name = "pillow"

    def __init__(self, settings: BuildSettings, public_dir: Path):
        self.settings = settings
        self.public_dir = public_dir

    @classmethod
    def load(cls, settings: BuildSettings, public_dir: Path) -> "OptimizingBackend":
        if Image is None:
            raise OptimizerUnavailableError("Pillow is not installed")
        if not features.check("webp"):
            raise OptimizerUnavailableError("Pillow was built without WebP support")
        return cls(settings, public_dir)

    def produce(self, relative_path: str, source_path: Path) -> OptimizedImage:
        rel = PurePosixPath(relative_path)
        rel_jpeg = rel.with_suffix(config.PRIMARY_EXT).as_posix()
        rel_webp = rel.with_suffix(config.SECONDARY_EXT).as_posix()
        target_jpeg = self.public_dir / rel_jpeg
        target_webp = self.public_dir / rel_webp

        target_jpeg.parent.mkdir(parents=True, exist_ok=True)

        if self._needs_rebuild(source_path, target_jpeg, target_webp):
            logging.debug(f"Encoding {relative_path}")
            self._encode(source_path, target_jpeg, target_webp)
        else:
            logging.debug(f"Reusing fresh outputs for {relative_path}")

        width, height = self._output_size(target_jpeg)
        return OptimizedImage(
            image_url=self.settings.asset_url(rel_jpeg),
            webp_url=self.settings.asset_url(rel_webp),
            width=width,
            height=height,
        )

    def _needs_rebuild(self, source: Path, *targets: Path) -> bool:
        source_mtime = source.stat().st_mtime
        for target in targets:
            try:
                if source_mtime > target.stat().st_mtime:
                    return True
            except FileNotFoundError:
                return True
        return False

    def _encode(self, source: Path, target_jpeg: Path, target_webp: Path):
        with Image.open(source) as im:
            prepared = self._prepare(im)

        # Both encoders read from their own copy of the prepared pixels
        with ThreadPoolExecutor(max_workers=2) as executor:
            jobs = [
                executor.submit(
                    prepared.copy().save, target_jpeg, "JPEG",
                    quality=self.settings.jpeg_quality,
                    optimize=True,
                    progressive=True,
                    subsampling=config.JPEG_SUBSAMPLING,
                ),
                executor.submit(
                    prepared.copy().save, target_webp, "WEBP",
                    quality=self.settings.webp_quality,
                ),
            ]
            for job in jobs:
                job.result()

    def _prepare(self, im):
        """Applies EXIF orientation and caps the width without upscaling."""
        im = ImageOps.exif_transpose(im)
        if im.mode not in ("RGB", "L"):
            im = im.convert("RGB")

        max_width = self.settings.max_width
        if im.width > max_width:
            height = max(1, round(im.height * max_width / im.width))
            im = im.resize((max_width, height), Image.LANCZOS)
        return im

    def _output_size(self, target_jpeg: Path):
        try:
            with Image.open(target_jpeg) as out:
                width, height = out.size
        except OSError as e:
            raise OptimizationFailedError(f"Could not read output image dimensions: {target_jpeg}") from e
        if not width or not height:
            raise OptimizationFailedError(f"Could not read output image dimensions: {target_jpeg}")
        return width, height
