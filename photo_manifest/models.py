from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class SourceImage:
    """
    One JPEG found under the photo root. Never mutated after the scan.
    """
    absolute_path: Path
    relative_path: str      # forward slashes, relative to the photo root

    @property
    def stem(self) -> str:
        return PurePosixPath(self.relative_path).stem

    @property
    def base_path_no_ext(self) -> Path:
        """Absolute path with the image extension stripped (sidecar lookup key)."""
        return self.absolute_path.with_name(self.absolute_path.stem)


@dataclass
class Metadata:
    """
    Normalized sidecar contents. An image without a sidecar gets Metadata().
    """
    title: Optional[str] = None
    date: Optional[str] = None
    slug: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    location: str = ""
    description: str = ""


@dataclass(frozen=True)
class ImageDimensions:
    width: int
    height: int


@dataclass
class OptimizedImage:
    image_url: str
    webp_url: Optional[str]
    width: int
    height: int


@dataclass
class ManifestEntry:
    slug: str
    title: str
    date: Optional[str]
    categories: List[str]
    tags: List[str]
    location: str
    description: str
    asset_path: str
    image_url: str
    webp_url: Optional[str]
    width: int
    height: int
    aspect_ratio: float

    def to_dict(self) -> Dict[str, Any]:
        # Key order is the published JSON shape
        return {
            "slug": self.slug,
            "title": self.title,
            "date": self.date,
            "categories": list(self.categories),
            "tags": list(self.tags),
            "location": self.location,
            "description": self.description,
            "assetPath": self.asset_path,
            "imageUrl": self.image_url,
            "webpUrl": self.webp_url,
            "width": self.width,
            "height": self.height,
            "aspectRatio": self.aspect_ratio,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManifestEntry":
        return cls(
            slug=data["slug"],
            title=data["title"],
            date=data.get("date"),
            categories=list(data.get("categories") or []),
            tags=list(data.get("tags") or []),
            location=data.get("location", ""),
            description=data.get("description", ""),
            asset_path=data["assetPath"],
            image_url=data["imageUrl"],
            webp_url=data.get("webpUrl"),
            width=data["width"],
            height=data["height"],
            aspect_ratio=data["aspectRatio"],
        )
