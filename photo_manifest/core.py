import json
import logging
from pathlib import Path
from typing import List, Optional, Set

from tqdm import tqdm

from .config import BuildSettings, BuildPaths
from .models import ManifestEntry, SourceImage
from .scanning.filesystem import SourceScanner
from .metadata.sidecar import MetadataResolver
from .metadata.slugs import derive_slug
from .optimization.optimizer import ImageOptimizer


class ManifestBuilder:
    def __init__(self,
                 settings: BuildSettings,
                 paths: BuildPaths,
                 optimizer: Optional[ImageOptimizer] = None):
        self.settings = settings
        self.paths = paths
        self.scanner = SourceScanner()
        self.resolver = MetadataResolver()
        self.optimizer = optimizer or ImageOptimizer(settings, paths.public_dir)

    def run(self) -> List[ManifestEntry]:
        """Builds the manifest and writes it. Nothing is written if the build fails."""
        entries = self.build()
        self.write(entries)
        return entries

    def build(self) -> List[ManifestEntry]:
        """
        Executes the manifest pipeline.
        1. Scan (sorted JPEG list)
        2. Per image: Metadata -> Slug -> Optimize -> Entry
        3. Order (dated newest first, then undated by slug)
        """
        # --- Step 1: Scanning ---
        logging.info(f"Scanning {self.paths.photos_dir}...")
        images = self.scanner.scan(self.paths.photos_dir)
        if not images:
            logging.info("No photos found.")
            return []

        # --- Step 2: Entries ---
        # Slug registration order decides collision suffixes, so this stays sequential
        used_slugs: Set[str] = set()
        entries = []
        for image in tqdm(images, desc="Building manifest", unit="photo", disable=None):
            entries.append(self._build_entry(image, used_slugs))

        # --- Step 3: Ordering ---
        return sort_entries(entries)

    def write(self, entries: List[ManifestEntry]) -> Path:
        output = self.paths.output_file
        output.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False)
        output.write_text(payload + "\n", encoding="utf-8")
        logging.info(f"Manifest written: {output} ({len(entries)} items)")
        return output

    def _build_entry(self, image: SourceImage, used_slugs: Set[str]) -> ManifestEntry:
        meta = self.resolver.resolve(image)
        slug = derive_slug(meta.slug, image.stem, used_slugs)

        optimized = self.optimizer.optimize(image.relative_path, image.absolute_path)
        width, height = optimized.width, optimized.height

        return ManifestEntry(
            slug=slug,
            title=meta.title if meta.title is not None else image.stem,
            date=meta.date,
            categories=meta.categories,
            tags=meta.tags,
            location=meta.location,
            description=meta.description,
            asset_path=image.relative_path,
            image_url=optimized.image_url,
            webp_url=optimized.webp_url,
            width=width,
            height=height,
            aspect_ratio=round(width / height, 6),
        )


def sort_entries(entries: List[ManifestEntry]) -> List[ManifestEntry]:
    """
    Dated entries first, newest (lexicographically largest) date first;
    undated entries after them in ascending slug order. Ties keep input order.
    """
    dated = sorted((e for e in entries if e.date), key=lambda e: e.date, reverse=True)
    undated = sorted((e for e in entries if not e.date), key=lambda e: e.slug)
    return dated + undated
