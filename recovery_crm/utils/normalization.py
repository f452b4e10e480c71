"""Data normalization utilities for consistent data quality."""

import re
from typing import Optional


PHONE_DIGITS = 10
AADHAAR_PATTERN = re.compile(r"^\d{12}$")
PAN_PATTERN = re.compile(r"^[A-Z]{5}\d{4}[A-Z]$")
ACCOUNT_NUMBER_PATTERN = re.compile(r"^\d{9,18}$")


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize an Indian mobile number to exactly 10 digits.

    Accepts separators and a leading +91 / 91 / 0 prefix:
    - 98765 43210 → 9876543210
    - +91-9876543210 → 9876543210

    Raises:
        ValueError: If the result is not 10 digits
    """
    if not phone:
        return None

    digits = re.sub(r"\D", "", phone)
    if len(digits) == 12 and digits.startswith("91"):
        digits = digits[2:]
    elif len(digits) == 11 and digits.startswith("0"):
        digits = digits[1:]

    if len(digits) != PHONE_DIGITS:
        raise ValueError("Phone number must be exactly 10 digits")
    return digits


def normalize_email(email: Optional[str]) -> Optional[str]:
    """
    Normalize email to lowercase.

    Returns:
        Lowercased email or None if empty
    """
    if not email:
        return None
    cleaned = email.strip().lower()
    return cleaned or None


def normalize_pan(pan: Optional[str]) -> Optional[str]:
    """Upper-case a PAN and check the AAAAA9999A shape."""
    if not pan:
        return None
    cleaned = pan.strip().upper()
    if not cleaned:
        return None
    if not PAN_PATTERN.match(cleaned):
        raise ValueError("PAN must look like ABCDE1234F")
    return cleaned


def normalize_aadhaar(aadhaar: Optional[str]) -> Optional[str]:
    if not aadhaar:
        return None
    cleaned = re.sub(r"\s+", "", aadhaar)
    if not cleaned:
        return None
    if not AADHAAR_PATTERN.match(cleaned):
        raise ValueError("Aadhaar number must be exactly 12 digits")
    return cleaned


def normalize_account_number(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    cleaned = value.strip()
    if not cleaned:
        return None
    if not ACCOUNT_NUMBER_PATTERN.match(cleaned):
        raise ValueError("Account number must be 9 to 18 digits")
    return cleaned


def normalize_name(name: Optional[str]) -> Optional[str]:
    """
    Normalize name by stripping whitespace and collapsing multiple spaces.

    Returns:
        Cleaned name or None if empty
    """
    if not name:
        return None
    collapsed = " ".join(name.split())
    return collapsed or None


def normalize_search_text(value: Optional[str]) -> Optional[str]:
    """Lowercase and collapse whitespace for ILIKE matching."""
    if not value:
        return None
    collapsed = " ".join(value.split())
    if not collapsed:
        return None
    return collapsed.lower()


def escape_like_string(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally (escape char is \\)."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
