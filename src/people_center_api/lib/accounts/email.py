"""Email address validation used at registration and profile updates."""

import re

_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

# Misspellings of popular providers; mail sent there bounces.
COMMON_DOMAIN_TYPOS: frozenset[str] = frozenset(
    {
        "gmai.com",
        "gmial.com",
        "gamil.com",
        "gmil.com",
        "gma.com",
        "yahooo.com",
        "yaho.com",
        "yhoo.com",
        "outlok.com",
        "outloo.com",
        "hotmial.com",
        "iclou.com",
        "icloud.co",
    }
)


def normalize_email(email: str) -> str:
    """Return the canonical stored form of an email (trimmed, lower-cased)."""
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    """Check an email address for syntax and known domain typos.

    Args:
        email: The address to check (normalized or not).

    Returns:
        True if the address is acceptable.
    """
    candidate = email.strip()
    if not _EMAIL_PATTERN.match(candidate):
        return False
    domain = candidate.rsplit("@", 1)[1].lower()
    return domain not in COMMON_DOMAIN_TYPOS
