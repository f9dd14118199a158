import re

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_RE = re.compile(r"\+7[0-9]{10}")


def is_valid_email(v: str) -> bool:
    return EMAIL_RE.fullmatch(v) is not None


def is_valid_phone(v: str) -> bool:
    return PHONE_RE.fullmatch(v) is not None


def is_filled(v: str) -> bool:
    return len(v.strip()) > 0
