"""URL slug helpers for category names."""

import re
from collections.abc import Iterator

FALLBACK_SLUG = "category"


def slugify(name: str) -> str:
    """Lowercase, collapse runs of non-alphanumerics into '-', trim dashes."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-")
    return slug or FALLBACK_SLUG


def slug_candidates(base: str) -> Iterator[str]:
    """Yield base, base-1, base-2, ... for collision resolution."""
    yield base
    suffix = 1
    while True:
        yield f"{base}-{suffix}"
        suffix += 1


def category_name_key(name: str) -> str:
    """Unicode case-insensitive lookup key for a category name."""
    return name.casefold()
