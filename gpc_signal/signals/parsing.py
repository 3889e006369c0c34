"""String and cookie parsing helpers for privacy signals.

User agents expose opt-out preferences as loosely formatted strings
(``"1"``, ``"true"``, ``" On "``) and proxies relay them through cookies.
These helpers turn both into booleans without ever raising.
"""

import re
from typing import Optional

_TRUTHY_PATTERN = re.compile(r"\s*(true|1|on)\s*", re.IGNORECASE)


def string_to_boolean(value: Optional[str]) -> bool:
    """Return True for "true", "1" or "on" (any case, surrounding spaces allowed)."""
    if value is None:
        return False
    return _TRUTHY_PATTERN.fullmatch(str(value)) is not None


def cookie_value(cookie_jar: Optional[str], name: str) -> Optional[str]:
    """Get a cookie's value from a ``name=value; name2=value2`` string.

    Args:
        cookie_jar: Raw cookie string as found in ``document.cookie`` or a
            ``Cookie`` request header
        name: Cookie name to look up

    Returns:
        The trimmed value of the first matching cookie, or None if absent.
        Pairs without ``=`` never match.
    """
    if not cookie_jar:
        return None

    for pair in cookie_jar.split(";"):
        if "=" not in pair:
            continue
        key, value = pair.split("=", 1)
        if key.strip() == name:
            return value.strip()

    return None


def cookie_boolean(cookie_jar: Optional[str], name: str) -> bool:
    """Get a cookie's value as a boolean. Missing cookies are False."""
    return string_to_boolean(cookie_value(cookie_jar, name))
