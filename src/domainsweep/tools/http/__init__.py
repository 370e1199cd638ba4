"""HTTP probing for domainsweep."""

from .client import ProbeError, ProbeExecutor, ProbeOutcome
from .headers import BROWSER_HEADERS, JSON_HEADERS

__all__ = [
    "BROWSER_HEADERS",
    "JSON_HEADERS",
    "ProbeError",
    "ProbeExecutor",
    "ProbeOutcome",
]
