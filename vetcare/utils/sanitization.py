import html
from typing import Optional


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string by escaping HTML special characters to prevent XSS.
    Returns None if input is None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    return html.escape(str(value), quote=True)


def sanitize_optional_text(value: Optional[str], max_length: int = 2000) -> Optional[str]:
    """
    Trim, cap and escape free-text fields; blank input becomes None.
    The escaped result never exceeds max_length; characters are dropped from
    the end of the raw text until it fits, so no entity is cut in half.
    """
    if value is None:
        return None
    value = value.strip()[:max_length]
    if not value:
        return None

    escaped = sanitize_string(value)
    while len(escaped) > max_length:
        value = value[: -max(1, (len(escaped) - max_length) // 6)]
        escaped = sanitize_string(value)
    return escaped
