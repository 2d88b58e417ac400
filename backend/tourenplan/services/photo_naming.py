"""
Tourenplan Backend — Photo Filename Policy
============================================

What:  Derives the storage filename for a stop photo.
Why:   The name depends only on (customer, tour date, content type), so a
       second upload for the same stop lands on the same file and replaces
       it. The latest photo wins; nothing accumulates per stop.
How:   Pure functions, no I/O.

Naming Rules:
    1. Blank customer name → placeholder "kunde"
    2. ä→ae, ö→oe, ü→ue, ß→ss (uppercase umlauts map the same way)
    3. Lowercase
    4. Every run of characters outside [a-z0-9] becomes one "_"
    5. Leading/trailing "_" removed (placeholder again if nothing is left)
    6. "_DD_MM_YYYY" from the tour date
    7. Extension from the declared content type (default ".jpg")

    Example: ("Müller", 2024-03-05, "image/png") → "mueller_05_03_2024.png"

Known Limitation:
    A later upload with a different content type produces a different
    extension; the earlier file stays on disk. Callers do not sweep it.
"""

import re
from datetime import date
from typing import Optional

PLACEHOLDER_CUSTOMER = "kunde"
SEPARATOR = "_"
DEFAULT_EXTENSION = ".jpg"

# Keyed by content-type subtype ("image/png" → "png")
EXTENSION_BY_SUBTYPE = {
    "jpeg": ".jpg",
    "jpg": ".jpg",
    "png": ".png",
    "webp": ".webp",
    "heic": ".heic",
    "heif": ".heif",
}

_TRANSLITERATION = str.maketrans({
    "ä": "ae",
    "ö": "oe",
    "ü": "ue",
    "ß": "ss",
    "Ä": "ae",
    "Ö": "oe",
    "Ü": "ue",
    "ẞ": "ss",
})

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def slugify_customer(name: Optional[str]) -> str:
    """
    Turn a customer display name into a filesystem-safe base name.

    The result only contains lowercase ASCII letters, digits and single
    separators, and never starts or ends with a separator.
    """
    if name is None or not name.strip():
        name = PLACEHOLDER_CUSTOMER

    slug = name.translate(_TRANSLITERATION).lower()
    slug = _NON_ALNUM_RUN.sub(SEPARATOR, slug).strip(SEPARATOR)
    return slug or PLACEHOLDER_CUSTOMER


def extension_for_content_type(content_type: Optional[str]) -> str:
    """
    Map a declared content type to a file extension.

    Matching is case-insensitive on the subtype and ignores parameters
    ("image/PNG; charset=binary" → ".png"). Unknown or missing types fall
    back to ".jpg".
    """
    if not content_type:
        return DEFAULT_EXTENSION
    media_type = content_type.split(";", 1)[0].strip().lower()
    subtype = media_type.rsplit("/", 1)[-1]
    return EXTENSION_BY_SUBTYPE.get(subtype, DEFAULT_EXTENSION)


def date_suffix(tour_date: date) -> str:
    return f"{tour_date.day:02d}{SEPARATOR}{tour_date.month:02d}{SEPARATOR}{tour_date.year:04d}"


def photo_filename(customer: Optional[str], tour_date: date, content_type: Optional[str]) -> str:
    """Filename for a stop photo: '<customer-slug>_<DD>_<MM>_<YYYY><ext>'."""
    return (
        f"{slugify_customer(customer)}{SEPARATOR}{date_suffix(tour_date)}"
        f"{extension_for_content_type(content_type)}"
    )
