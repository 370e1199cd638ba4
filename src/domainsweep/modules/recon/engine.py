"""Path probing and finding classification for one live host."""

import asyncio
import logging
import random
from collections.abc import Sequence

from domainsweep.errors import ScanCancelled
from domainsweep.tools.http import ProbeExecutor, ProbeOutcome
from domainsweep.utils.cancellation import CancellationToken

from .models import Finding, ScanResult, WordlistEntry

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10


def _contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword.lower() in text for keyword in keywords if keyword)


def match_entry(entry: WordlistEntry, outcome: ProbeOutcome) -> Finding | None:
    """Classify one probe outcome against its wordlist entry."""
    if not outcome.found or outcome.body is None:
        return None
    body = outcome.body.lower()
    if not _contains_any(body, entry.positive_match):
        return None
    if _contains_any(body, entry.false_positive_indicators):
        return None
    return Finding.from_entry(entry)


class ReconEngine:
    """Probe every wordlist path on a domain in fixed-size concurrent batches."""

    def __init__(
        self,
        executor: ProbeExecutor,
        batch_size: int = DEFAULT_BATCH_SIZE,
        shuffle: bool = False,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.executor = executor
        self.batch_size = batch_size
        self.shuffle = shuffle

    async def scan(
        self,
        domain: str,
        wordlist: Sequence[WordlistEntry],
        token: CancellationToken | None = None,
    ) -> list[Finding]:
        """Return the deduplicated findings for *domain*.

        Raises :class:`ScanCancelled` as soon as the token fires; a single
        path failing to connect is skipped.
        """
        token = token or CancellationToken(domain)
        checks = list(wordlist)
        if self.shuffle:
            random.shuffle(checks)

        findings: list[Finding] = []
        seen: set[tuple[str, str]] = set()
        failures = 0

        for start in range(0, len(checks), self.batch_size):
            token.raise_if_cancelled()
            batch = checks[start : start + self.batch_size]
            outcomes = await asyncio.gather(
                *(self.executor.probe(f"https://{domain}{entry.path}", token) for entry in batch)
            )
            if token.cancelled or any(outcome.cancelled for outcome in outcomes):
                raise ScanCancelled(domain, token.reason or "cancelled")

            for entry, outcome in zip(batch, outcomes, strict=True):
                if not outcome.ok:
                    failures += 1
                    continue
                finding = match_entry(entry, outcome)
                if finding is None or finding.key in seen:
                    continue
                seen.add(finding.key)
                findings.append(finding)

        if failures:
            logger.debug("%s: %d of %d path probes failed", domain, failures, len(checks))
        logger.info("%s: %d findings from %d checks", domain, len(findings), len(checks))
        return findings

    async def scan_domain(
        self,
        domain: str,
        wordlist: Sequence[WordlistEntry],
        token: CancellationToken | None = None,
    ) -> ScanResult:
        """Scan *domain* and wrap the findings in a :class:`ScanResult`."""
        findings = await self.scan(domain, wordlist, token)
        return ScanResult(domain=domain, findings=findings)
