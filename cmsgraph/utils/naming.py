from __future__ import annotations

import re

_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")


def pascal_case(*parts: str) -> str:
    """Join name parts into a PascalCase type name.

    >>> pascal_case("Prismic", "blog_post")
    'PrismicBlogPost'
    """

    words = []
    for part in parts:
        words.extend(w for w in _WORD_SPLIT.split(str(part)) if w)
    return "".join(w[:1].upper() + w[1:] for w in words)
