import re
from typing import Optional, Set

from ..exceptions import CannotDeriveSlugError

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Lowercase, collapse every non-[a-z0-9] run to one hyphen, trim hyphens."""
    return _NON_ALNUM.sub("-", value.lower().strip()).strip("-")


def unique_slug(base_slug: str, used_slugs: Set[str]) -> str:
    """
    Registers and returns base_slug, or the first free base_slug-N (N >= 2).
    Mutates used_slugs.
    """
    candidate = base_slug
    n = 2
    while candidate in used_slugs:
        candidate = f"{base_slug}-{n}"
        n += 1

    used_slugs.add(candidate)
    return candidate


def derive_slug(hint: Optional[str], base_name: str, used_slugs: Set[str]) -> str:
    """Slug from the sidecar hint, falling back to the file base name."""
    raw = slugify(hint or base_name) or slugify(base_name)
    if not raw:
        raise CannotDeriveSlugError(f"Cannot create slug for image: {base_name}")
    return unique_slug(raw, used_slugs)
