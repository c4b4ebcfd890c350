import re

_TAG_RE = re.compile(r"<[^>]*>")


def clean_text(v):
    """Strip HTML tags and surrounding whitespace; non-strings pass through."""
    if not isinstance(v, str):
        return v
    return _TAG_RE.sub("", v).strip()


def normalize_email(v):
    if not isinstance(v, str):
        return v
    return v.strip().lower()


def is_blank(v) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())
