"""
URL slug generation for resource and organization names.
"""

import re

_TRANSLITERATIONS = {
    "ë": "e",
    "ç": "c",
    "á": "a",
    "é": "e",
    "í": "i",
    "ó": "o",
    "ú": "u",
    "ñ": "n",
    "ä": "a",
    "ö": "o",
    "ü": "u",
    "ß": "ss",
    " ": "-",
}

_INVALID = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUNS = re.compile(r"-+")


def generate_slug(text: str) -> str:
    """Lowercase ``text``, transliterate common accents and keep only ``[a-z0-9-]``."""
    normalized = text.strip().lower()
    for source, target in _TRANSLITERATIONS.items():
        normalized = normalized.replace(source, target)

    slug = _HYPHEN_RUNS.sub("-", _INVALID.sub("", normalized))
    if slug.startswith("-"):
        slug = slug[1:]
    return slug
