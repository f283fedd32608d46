"""
Read side of the manifest, as consumed by the site generator.
"""
import json
from pathlib import Path
from typing import Iterable, List

from .models import ManifestEntry


def get_photos(manifest_path: Path) -> List[ManifestEntry]:
    """Entries in manifest order."""
    with manifest_path.open("r", encoding="utf-8") as f:
        return [ManifestEntry.from_dict(item) for item in json.load(f)]


def get_category_list(entries: Iterable[ManifestEntry]) -> List[str]:
    """Distinct, trimmed, non-empty categories across all entries, sorted."""
    categories = {c.strip() for entry in entries for c in entry.categories}
    categories.discard("")
    return sorted(categories)
