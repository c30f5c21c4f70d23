"""
Phone number normalization for messaging sends.

This is a heuristic, not an E.164 parser: digits are kept, numbers longer
than ten digits are assumed to carry their own country code, anything else
gets the configured default country code.
"""

import re

NON_DIGITS = re.compile(r"\D")
NATIONAL_NUMBER_LENGTH = 10


def normalize_phone(phone: str | int | None, default_country_code: str = "+1") -> str:
    """Normalize a phone number to '+<digits>'.

    Args:
        phone: Raw phone value (spreadsheet cells may arrive as numbers).
        default_country_code: Prefix for numbers of ten digits or fewer.

    Returns:
        Normalized number, or "" when the input holds no digits.
    """
    if phone is None:
        return ""
    digits = NON_DIGITS.sub("", str(phone))
    if not digits:
        return ""
    if len(digits) > NATIONAL_NUMBER_LENGTH:
        return f"+{digits}"
    return f"{default_country_code}{digits}"
