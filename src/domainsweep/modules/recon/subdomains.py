"""Subdomain discovery through the ViewDNS subdomain API."""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any
from urllib.parse import urlencode

from domainsweep.errors import ProviderError, ScanCancelled
from domainsweep.tools.http import JSON_HEADERS, ProbeError, ProbeExecutor
from domainsweep.utils.cancellation import CancellationToken

from .domains import is_excluded_subdomain

logger = logging.getLogger(__name__)

VIEWDNS_SUBDOMAINS_URL = "https://api.viewdns.info/subdomains/"
SUBDOMAIN_THRESHOLD = 50
RECENT_RESOLUTION_DAYS = 365

_DIGITS = re.compile(r"\d")


@dataclass
class SubdomainLookup:
    """Filtered subdomains plus the provider's raw payload."""

    subdomains: list[str] = field(default_factory=list)
    raw: Any = None


@dataclass
class _Candidate:
    name: str
    last_resolved: datetime | None = None


def _parse_timestamp(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _candidates(domains: list[Any]) -> list[_Candidate]:
    candidates: list[_Candidate] = []
    for item in domains:
        if isinstance(item, str):
            name = item
            resolved = None
        elif isinstance(item, dict):
            name = str(item.get("name") or "")
            resolved = _parse_timestamp(item.get("last_resolved"))
        else:
            continue
        name = name.strip().strip(".")
        if name:
            candidates.append(_Candidate(name=name, last_resolved=resolved))
    return candidates


def _prefer(
    candidates: list[_Candidate], keep: list[_Candidate], threshold: int
) -> list[_Candidate]:
    """Put *keep* first, topping up with the rest until *threshold* is reached."""
    if len(keep) >= threshold:
        return keep
    kept = {id(c) for c in keep}
    rest = [c for c in candidates if id(c) not in kept]
    return keep + rest[: threshold - len(keep)]


def cap_candidates(
    candidates: list[_Candidate],
    root_domain: str,
    threshold: int = SUBDOMAIN_THRESHOLD,
    recent_days: int = RECENT_RESOLUTION_DAYS,
    now: datetime | None = None,
) -> list[_Candidate]:
    """Shrink an oversized provider result to *threshold* entries.

    Steps run in order and each one only while the set is still too big:
    recently resolved names move to the front, names with digits are
    dropped, then the rest is truncated.
    """
    if len(candidates) > threshold and any(c.last_resolved for c in candidates):
        cutoff = (now or datetime.now(UTC)) - timedelta(days=recent_days)
        recent = [c for c in candidates if c.last_resolved and c.last_resolved >= cutoff]
        candidates = _prefer(candidates, recent, threshold)

    if len(candidates) > threshold:
        suffix = f".{root_domain}"
        clean = [
            c
            for c in candidates
            if not _DIGITS.search(c.name[: -len(suffix)] if c.name.endswith(suffix) else c.name)
        ]
        candidates = clean

    return candidates[:threshold]


class SubdomainResolver:
    """Look up subdomains for a root domain; fail open on provider errors."""

    def __init__(
        self,
        executor: ProbeExecutor,
        endpoint: str = VIEWDNS_SUBDOMAINS_URL,
        threshold: int = SUBDOMAIN_THRESHOLD,
    ):
        self.executor = executor
        self.endpoint = endpoint
        self.threshold = threshold

    async def resolve(
        self,
        root_domain: str,
        api_key: str,
        token: CancellationToken | None = None,
    ) -> SubdomainLookup:
        """Return filtered subdomains of *root_domain*.

        Without an API key nothing is requested. Provider failures degrade
        to an empty lookup; only cancellation propagates.
        """
        if not api_key:
            return SubdomainLookup()

        raw: Any = None
        try:
            raw = await self._fetch(root_domain, api_key, token)
            domains = _extract_domains(raw)
        except ProviderError as exc:
            logger.warning(
                "Subdomain lookup failed for %s, scanning root domain only: %s",
                root_domain,
                exc,
            )
            return SubdomainLookup(raw=raw)

        candidates = cap_candidates(_candidates(domains), root_domain, self.threshold)

        seen: set[str] = set()
        names: list[str] = []
        for candidate in candidates:
            name = candidate.name.lower()
            if is_excluded_subdomain(name) or name in seen:
                continue
            seen.add(name)
            names.append(name)

        logger.info(
            "Subdomain lookup for %s: %d reported, %d kept", root_domain, len(domains), len(names)
        )
        return SubdomainLookup(subdomains=names, raw=raw)

    async def _fetch(
        self, root_domain: str, api_key: str, token: CancellationToken | None
    ) -> Any:
        query = urlencode({"domain": root_domain, "apikey": api_key, "output": "json"})
        outcome = await self.executor.probe(
            f"{self.endpoint}?{query}",
            token,
            headers=JSON_HEADERS,
        )
        if outcome.error is ProbeError.CANCELLED:
            raise ScanCancelled(root_domain)
        if not outcome.ok:
            raise ProviderError(f"request failed ({outcome.error.value})")
        if not 200 <= outcome.status < 300:
            raise ProviderError(f"provider returned HTTP {outcome.status}")
        try:
            return json.loads(outcome.body or "")
        except json.JSONDecodeError as exc:
            raise ProviderError(f"malformed JSON payload: {exc}") from exc


def _extract_domains(raw: Any) -> list[Any]:
    response = raw.get("response") if isinstance(raw, dict) else None
    if not isinstance(response, dict):
        raise ProviderError("payload has no 'response' object")
    domains = response.get("domains")
    if domains is None:
        if response.get("error"):
            raise ProviderError(str(response["error"]))
        return []
    if not isinstance(domains, list):
        raise ProviderError("'response.domains' is not a list")
    return domains
