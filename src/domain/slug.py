import re
import unicodedata

_SYMBOL_WORDS = {"&": " and ", "%": " percent "}


def slugify(text: str) -> str:
    """
    Create a URL-safe slug from text.

    Lowercases, strips diacritics ("São Paulo" -> "sao-paulo"), spells out
    a few symbols ("Paris & Rome" -> "paris-and-rome") and collapses every
    other run of non-alphanumeric characters into a single hyphen.
    """
    for symbol, word in _SYMBOL_WORDS.items():
        text = text.replace(symbol, word)
    normalized = unicodedata.normalize("NFKD", text)
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
    slug = ascii_text.lower().strip()
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    return slug.strip("-")
