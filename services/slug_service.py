"""Slug Service - URL-safe slugs and bounded collision candidates"""

import re
import time
from typing import Iterator, Optional

from unidecode import unidecode

from core.exceptions import SlugCollisionError

NON_SLUG_CHARACTERS = re.compile(r'[^a-z0-9]+')


def slugify(text: str) -> str:
    text = unidecode(str(text)).lower()
    return NON_SLUG_CHARACTERS.sub('-', text).strip('-')


def fallback_slug() -> str:
    return f"entry-{int(time.time())}"


class SlugGenerator:
    """
    Produces ``base``, ``base-1``, ``base-2``, ... up to ``max_attempts``
    candidates. Callers raise SlugCollisionError via ``exhausted`` once the
    candidates run out.
    """

    def __init__(self, max_attempts: int = 100):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts

    def base_slug(self, title: Optional[str]) -> str:
        slug = slugify(title) if title else ""
        return slug or fallback_slug()

    def candidates(self, base_slug: str) -> Iterator[str]:
        yield base_slug
        for counter in range(1, self.max_attempts):
            yield f"{base_slug}-{counter}"

    def exhausted(self, base_slug: str) -> SlugCollisionError:
        return SlugCollisionError(base_slug, self.max_attempts)
