"""
Configuration constants and build settings for the manifest builder.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .exceptions import ConfigurationError

# --- File Type Definitions ---
# Case-sensitive on purpose: ".Jpg" and friends are not picked up.
IMAGE_EXTS = ('.jpg', '.jpeg', '.JPG', '.JPEG')

# Probe order matters, the first existing sidecar wins
SIDECAR_EXTS = ('.yml', '.yaml')

PRIMARY_EXT = '.jpg'
SECONDARY_EXT = '.webp'

# --- Project Layout (relative to the project root) ---
PHOTOS_DIRNAME = "photos"
OUTPUT_FILE = Path("site") / "src" / "generated" / "manifest.json"
PUBLIC_PHOTOS_DIR = Path("site") / "public" / "photos"

# --- Defaults ---
DEFAULT_BASE_URL = "/photos"
DEFAULT_MAX_WIDTH = 2560
DEFAULT_JPEG_QUALITY = 78
DEFAULT_WEBP_QUALITY = 72

# JPEG encoder knobs that are not user configurable
JPEG_SUBSAMPLING = "4:2:0"

# --- Environment ---
ENV_BASE_URL = "PHOTOS_CDN_BASE_URL"
ENV_MAX_WIDTH = "PHOTOS_MAX_WIDTH"
ENV_JPEG_QUALITY = "PHOTOS_JPEG_QUALITY"
ENV_WEBP_QUALITY = "PHOTOS_WEBP_QUALITY"
ENV_DISABLE_OPTIMIZER = "PHOTOS_DISABLE_OPTIMIZER"


@dataclass
class BuildSettings:
    """
    Tunables for one manifest build. Read from the environment by default.
    """
    base_url: str = DEFAULT_BASE_URL
    max_width: int = DEFAULT_MAX_WIDTH
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    webp_quality: int = DEFAULT_WEBP_QUALITY
    disable_optimizer: bool = False

    def __post_init__(self):
        if self.max_width <= 0:
            raise ConfigurationError(f"Max width must be positive, got {self.max_width}")
        for name in ("jpeg_quality", "webp_quality"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ConfigurationError(f"{name} must be between 0 and 100, got {value}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BuildSettings":
        env = os.environ if environ is None else environ
        return cls(
            base_url=env.get(ENV_BASE_URL) or DEFAULT_BASE_URL,
            max_width=_env_int(env, ENV_MAX_WIDTH, DEFAULT_MAX_WIDTH),
            jpeg_quality=_env_int(env, ENV_JPEG_QUALITY, DEFAULT_JPEG_QUALITY),
            webp_quality=_env_int(env, ENV_WEBP_QUALITY, DEFAULT_WEBP_QUALITY),
            disable_optimizer=env.get(ENV_DISABLE_OPTIMIZER) == "1",
        )

    def asset_url(self, relative_path: str) -> str:
        """Joins the served-assets base URL and a forward-slash relative path."""
        return f"{self.base_url.rstrip('/')}/{relative_path}"


@dataclass
class BuildPaths:
    photos_dir: Path
    output_file: Path
    public_dir: Path

    @classmethod
    def for_root(cls, root: Path) -> "BuildPaths":
        return cls(
            photos_dir=root / PHOTOS_DIRNAME,
            output_file=root / OUTPUT_FILE,
            public_dir=root / PUBLIC_PHOTOS_DIR,
        )


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if not raw:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from None
