"""Liveness filtering of candidate hosts."""

import asyncio
import logging
from collections.abc import Iterable

from domainsweep.tools.http import ProbeExecutor, ProbeOutcome
from domainsweep.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)


async def filter_live(
    executor: ProbeExecutor,
    domains: Iterable[str],
    token: CancellationToken | None = None,
) -> list[str]:
    """Return the domains whose ``https://`` root answers HTTP 200.

    All candidates are probed concurrently. A failed, non-200 or cancelled
    probe only drops that domain; the batch itself never raises.
    """
    candidates = list(dict.fromkeys(d for d in domains if d))
    if not candidates:
        return []

    async def check(domain: str) -> ProbeOutcome | None:
        try:
            return await executor.probe(f"https://{domain}", token)
        except Exception:
            logger.debug("Liveness probe crashed for %s", domain, exc_info=True)
            return None

    outcomes = await asyncio.gather(*(check(domain) for domain in candidates))

    live = [
        domain
        for domain, outcome in zip(candidates, outcomes, strict=True)
        if outcome is not None and outcome.found
    ]
    logger.info("Liveness check: %d of %d hosts responded", len(live), len(candidates))
    return live
