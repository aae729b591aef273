"""
URL Utilities

Validation and normalization of the website address typed into the funnel.
Bare domains ("exempel.se") are accepted and analyzed over https.
"""

import re
import logging
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)


# Hostname labels, IPv4 addresses and bracketed IPv6 literals
HOST_PATTERN = re.compile(r"^(\[[0-9a-fA-F:.]+\]|[A-Za-z0-9\-_.~%]+)$")


def format_url(url: str) -> str:
    """Prefix https:// unless the input already starts with http."""
    if not url.startswith("http"):
        return f"https://{url}"
    return url


def is_valid_url(url: str) -> bool:
    """
    Check whether the input can be analyzed.

    The check runs on the normalized form, so "exempel.se" is valid while
    anything with whitespace or characters that cannot appear in a host
    ("not a url!!") is rejected.
    """
    if not url or any(ch.isspace() for ch in url):
        return False

    try:
        parts = urlsplit(format_url(url))
        # Accessing .port validates the port number
        parts.port
    except ValueError as e:
        logger.debug(f"URL rejected ({url!r}): {e}")
        return False

    if parts.scheme not in ("http", "https"):
        return False

    host = parts.netloc.rsplit("@", 1)[-1]
    if parts.port is not None:
        host = host[: host.rfind(":")]
    if not host or not HOST_PATTERN.match(host):
        return False

    return True
