"""End-to-end scan of one root domain: resolve, filter, recon."""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from domainsweep.errors import ScanCancelled, ScanFailed
from domainsweep.tools.http import ProbeExecutor
from domainsweep.utils.cancellation import CancellationToken

from .domains import extract_hostname, get_root_domain
from .engine import DEFAULT_BATCH_SIZE, ReconEngine
from .liveness import filter_live
from .models import ScanOutput, ScanResult, WordlistEntry
from .subdomains import SubdomainResolver

logger = logging.getLogger(__name__)


class ScanPipeline:
    """Run the full reconnaissance pipeline for a domain."""

    def __init__(
        self,
        executor: ProbeExecutor,
        resolver: SubdomainResolver | None = None,
        engine: ReconEngine | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        shuffle: bool = False,
    ):
        self.executor = executor
        self.resolver = resolver or SubdomainResolver(executor)
        self.engine = engine or ReconEngine(executor, batch_size=batch_size, shuffle=shuffle)

    async def candidates(
        self,
        domain: str,
        api_key: str = "",
        token: CancellationToken | None = None,
    ) -> tuple[list[str], Any]:
        """Return root domain, discovered subdomains and the literal host, deduplicated."""
        root = get_root_domain(domain)
        if not root:
            raise ScanFailed(domain, f"Cannot derive a root domain from {domain!r}")

        lookup = await self.resolver.resolve(root, api_key, token)

        ordered = [root, *lookup.subdomains]
        host = extract_hostname(domain)
        if host and host != root:
            ordered.append(host)
        return list(dict.fromkeys(ordered)), lookup.raw

    async def run(
        self,
        domain: str,
        wordlist: Sequence[WordlistEntry],
        api_key: str = "",
        token: CancellationToken | None = None,
    ) -> ScanOutput:
        """Scan *domain* and its subdomains.

        An output without results means no host was live; that is a normal
        outcome. Raises :class:`ScanCancelled` when the token fires.
        """
        token = token or CancellationToken(get_root_domain(domain))
        candidates, raw = await self.candidates(domain, api_key, token)
        token.raise_if_cancelled()

        live = await filter_live(self.executor, candidates, token)
        token.raise_if_cancelled()
        if not live:
            logger.info("No live hosts for %s (%d candidates)", domain, len(candidates))
            return ScanOutput(results=[], raw_subdomain_data=raw)

        outcomes = await asyncio.gather(
            *(self.engine.scan_domain(host, wordlist, token) for host in live),
            return_exceptions=True,
        )
        if token.cancelled:
            raise ScanCancelled(token.name or domain, token.reason or "cancelled")

        results: list[ScanResult] = []
        for host, outcome in zip(live, outcomes, strict=True):
            if isinstance(outcome, ScanCancelled):
                raise outcome
            if isinstance(outcome, BaseException):
                logger.warning("Recon failed for %s: %s", host, outcome)
                continue
            results.append(outcome)

        if not results:
            raise ScanFailed(domain, f"Recon failed on all {len(live)} live hosts of {domain}")
        return ScanOutput(results=results, raw_subdomain_data=raw)


async def perform_scan(
    domain: str,
    wordlist: Sequence[WordlistEntry],
    api_key: str = "",
    token: CancellationToken | None = None,
    *,
    timeout: float = 8.0,
    batch_size: int = DEFAULT_BATCH_SIZE,
    shuffle: bool = False,
) -> ScanOutput:
    """Convenience wrapper running one pipeline with its own HTTP pool."""
    async with ProbeExecutor(timeout=timeout) as executor:
        pipeline = ScanPipeline(executor, batch_size=batch_size, shuffle=shuffle)
        return await pipeline.run(domain, wordlist, api_key, token)
