import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional

import yaml

from .. import config
from ..exceptions import MetadataError
from ..models import Metadata, SourceImage


class MetadataResolver:
    """
    Locates and parses the optional YAML sidecar of an image.

    ``photos/a/sunset.jpg`` is described by ``photos/a/sunset.yml`` or, failing
    that, ``photos/a/sunset.yaml``. Unknown keys are ignored.
    """

    def resolve(self, image: SourceImage) -> Metadata:
        sidecar = self.find(image.base_path_no_ext)
        if sidecar is None:
            return Metadata()

        logging.debug(f"Reading sidecar {sidecar}")
        try:
            parsed = yaml.safe_load(sidecar.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise MetadataError(f"Invalid YAML in {sidecar}: {e}") from e
        except UnicodeDecodeError as e:
            raise MetadataError(f"Sidecar {sidecar} is not valid UTF-8: {e}") from e

        if not parsed:
            return Metadata()
        if not isinstance(parsed, Mapping):
            raise MetadataError(f"Sidecar {sidecar} must contain a mapping, got {type(parsed).__name__}")
        return parse_metadata(parsed)

    def find(self, base_path_no_ext: Path) -> Optional[Path]:
        for ext in config.SIDECAR_EXTS:
            candidate = base_path_no_ext.with_name(base_path_no_ext.name + ext)
            if candidate.is_file():
                return candidate
        return None


def parse_metadata(parsed: Mapping[str, Any]) -> Metadata:
    return Metadata(
        title=normalize_text(parsed.get("title")),
        date=normalize_text(parsed.get("date")),
        slug=normalize_text(parsed.get("slug")),
        categories=normalize_list(parsed.get("categories")),
        tags=normalize_list(parsed.get("tags")),
        location=normalize_text(parsed.get("location")) or "",
        description=normalize_text(parsed.get("description")) or "",
    )


def normalize_text(value: Any) -> Optional[str]:
    """String-coerces and trims; None and blank values become None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_list(value: Any) -> List[str]:
    """Accepts a scalar or a list; returns trimmed, non-empty strings."""
    if value is None:
        return []
    items = value if isinstance(value, list) else [value]
    return [text for text in (str(item).strip() for item in items if item is not None) if text]
