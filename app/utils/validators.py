import re

# Simple, pragmatic pattern
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

def clean_text(val) -> str | None:
    """
    Trim surrounding whitespace. Returns None if empty after trimming or not a string.
    Inner whitespace and newlines are kept (descriptions are free text).
    """
    if not isinstance(val, str):
        return None
    s = val.strip()
    return s or None

def clean_str(val: str | None, max_len: int = 255) -> str | None:
    """
    Collapse whitespace, trim, enforce max length. Returns None if empty after cleaning.
    """
    if not isinstance(val, str):
        return None
    s = re.sub(r"\s+", " ", val).strip()
    if not s:
        return None
    return s[:max_len]

def normalize_email(val) -> str | None:
    if not isinstance(val, str):
        return None
    s = val.strip().lower()
    return s or None

def is_valid_email(val: str | None) -> bool:
    if not val:
        return False
    return bool(_EMAIL_RE.match(val))
