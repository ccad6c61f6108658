"""Account helpers: email normalization and validation.

Public API:
    - ``normalize_email``: Trim and lower-case an email address
    - ``is_valid_email``: Syntax check plus common domain-typo rejection
    - ``COMMON_DOMAIN_TYPOS``: Domains rejected as likely typos
"""

from people_center_api.lib.accounts.email import COMMON_DOMAIN_TYPOS, is_valid_email, normalize_email

__all__ = [
    "COMMON_DOMAIN_TYPOS",
    "is_valid_email",
    "normalize_email",
]
