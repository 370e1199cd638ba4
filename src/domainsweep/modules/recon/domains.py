"""Root-domain normalization and subdomain exclusion rules."""

import re
from urllib.parse import urlparse

COMMON_SLDS = frozenset({"co", "com", "org", "net", "gov", "edu", "io"})

EXCLUDED_PREFIXES = ("www", "mail", "webmail", "cpanel", "autodiscover", "shop", "blog")

_EXCLUDED_PATTERN = re.compile(
    r"^(?:" + "|".join(re.escape(prefix) for prefix in EXCLUDED_PREFIXES) + r")\.",
    re.IGNORECASE,
)


def _collapse(hostname: str) -> str:
    parts = hostname.split(".")
    if len(parts) > 2:
        if parts[-2] in COMMON_SLDS:
            return ".".join(parts[-3:])
        return ".".join(parts[-2:])
    return hostname


def extract_hostname(value: str) -> str:
    """Return the lower-cased hostname of a URL or bare host, or ``""``."""
    value = (value or "").strip()
    if not value:
        return ""
    try:
        url = value if "://" in value else f"https://{value}"
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None
    if not hostname:
        # Naive fallback for input urlparse rejects (e.g. bad ports or brackets).
        hostname = value.split("://", 1)[-1].split("/", 1)[0]
    return hostname.strip(".").lower()


def get_root_domain(value: str) -> str:
    """Collapse a URL or hostname to its registrable root.

    ``https://a.b.example.co.uk`` keeps three labels because ``co`` is a
    recognised second-level token; ``sub.example.com`` becomes
    ``example.com``. Idempotent.
    """
    hostname = extract_hostname(value)
    if not hostname:
        return ""
    return _collapse(hostname)


def is_excluded_subdomain(name: str) -> bool:
    """True for uninteresting infrastructure hosts like ``www.`` or ``mail.``."""
    return bool(_EXCLUDED_PATTERN.match(name or ""))
