"""
Identifier slug generation for query artifacts.

The same slug names the query, explain and guide documents of one
package, so it must be a deterministic function of the purpose text.
"""

import re
import unicodedata
from typing import Optional

MAX_SLUG_LENGTH = 50
FALLBACK_SLUG = "unnamed-query"

_SEPARATORS = re.compile(r"[\s\W_]+")
_DISALLOWED = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUN = re.compile(r"-{2,}")


def slugify(
    purpose: Optional[str],
    max_length: int = MAX_SLUG_LENGTH,
    fallback: str = FALLBACK_SLUG,
) -> str:
    """
    Derive a filesystem-safe slug from a free-text purpose.

    Args:
        purpose: Free-text purpose description
        max_length: Maximum slug length
        fallback: Slug returned when nothing usable remains

    Returns:
        Lowercase slug made of a-z, 0-9 and single hyphens
    """
    if not purpose:
        return fallback

    text = unicodedata.normalize("NFKD", purpose.lower())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))

    slug = _SEPARATORS.sub("-", text)
    slug = _DISALLOWED.sub("", slug)
    slug = _HYPHEN_RUN.sub("-", slug).strip("-")

    slug = slug[:max_length].strip("-")
    return slug or fallback
