"""Slug derivation for manufacturer and model names."""
import re
import unicodedata

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Lower-case, ASCII-fold and hyphen-join a display name.

    >>> slugify("Mercedes-Benz  GLE Coupé")
    'mercedes-benz-gle-coupe'
    """
    normalized = unicodedata.normalize("NFKD", value or "").encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", normalized.lower()).strip("-")
