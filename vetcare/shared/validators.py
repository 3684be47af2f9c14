"""Shared validation utilities"""

import re
from datetime import date
from typing import Iterable, Optional


def validate_cage_number(value: Optional[str], max_length: int = 50) -> Optional[str]:
    """
    Normalize a cage number label.

    Args:
        value: Raw cage number as typed by staff

    Returns:
        Trimmed cage number with inner whitespace collapsed

    Raises:
        ValueError: If the label is empty after trimming or longer than max_length
    """
    if value is None:
        return value

    cleaned = re.sub(r"\s+", " ", value).strip()
    if not cleaned:
        raise ValueError("Cage number is required")
    if len(cleaned) > max_length:
        raise ValueError(f"Cage number must be at most {max_length} characters")
    return cleaned


def validate_amenities(values: Optional[Iterable[str]]) -> Optional[list[str]]:
    """Trim amenity names and drop blanks and duplicates, keeping first-seen order"""
    if values is None:
        return values

    seen = set()
    amenities = []
    for raw in values:
        name = raw.strip() if isinstance(raw, str) else ""
        key = name.lower()
        if name and key not in seen:
            seen.add(key)
            amenities.append(name)
    return amenities


def validate_date_range(check_in: date, check_out: date) -> None:
    """
    Validate a boarding stay.

    Raises:
        ValueError: If check-out is not strictly after check-in
    """
    if check_out <= check_in:
        raise ValueError("Check-out date must be after check-in date")


def validate_receipt_url(url: Optional[str], max_length: int = 500) -> Optional[str]:
    """Accept absolute http(s) URLs or server-relative upload paths"""
    if not url:
        return url

    url = url.strip()
    if not (url.startswith("/") or re.match(r"^https?://", url)):
        raise ValueError("Receipt URL must be an http(s) URL or an upload path")
    if len(url) > max_length:
        raise ValueError(f"Receipt URL must be at most {max_length} characters")
    return url
