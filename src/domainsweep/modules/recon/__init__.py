"""Reconnaissance pipeline: subdomains, liveness and sensitive-path checks."""

from .domains import extract_hostname, get_root_domain, is_excluded_subdomain
from .engine import ReconEngine, match_entry
from .liveness import filter_live
from .models import (
    EntryType,
    Finding,
    ScanOutput,
    ScanResult,
    ScanStatus,
    Severity,
    Wordlist,
    WordlistEntry,
    derive_status,
)
from .pipeline import ScanPipeline, perform_scan
from .subdomains import SubdomainLookup, SubdomainResolver
from .wordlist import default_wordlist, load_wordlist, parse_wordlist

__all__ = [
    "EntryType",
    "Finding",
    "ReconEngine",
    "ScanOutput",
    "ScanPipeline",
    "ScanResult",
    "ScanStatus",
    "Severity",
    "SubdomainLookup",
    "SubdomainResolver",
    "Wordlist",
    "WordlistEntry",
    "default_wordlist",
    "derive_status",
    "extract_hostname",
    "filter_live",
    "get_root_domain",
    "is_excluded_subdomain",
    "load_wordlist",
    "match_entry",
    "parse_wordlist",
    "perform_scan",
]
