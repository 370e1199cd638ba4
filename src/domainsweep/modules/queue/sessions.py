"""Per-domain cancellation sessions."""

import logging

from domainsweep.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class ScanSessionRegistry:
    """Map each domain name to the token of its current scan session.

    Starting a session for a name aborts the previous token for that name,
    so a stale run can never be mistaken for the current one.
    """

    def __init__(self) -> None:
        self._tokens: dict[str, CancellationToken] = {}
        self._generation = 0

    def __contains__(self, domain: str) -> bool:
        return domain in self._tokens

    def get(self, domain: str) -> CancellationToken | None:
        return self._tokens.get(domain)

    def start(self, domain: str) -> CancellationToken:
        previous = self._tokens.get(domain)
        if previous is not None:
            logger.debug("Superseding session %s for %s", previous.generation, domain)
            previous.cancel("superseded")
        self._generation += 1
        token = CancellationToken(domain, self._generation)
        self._tokens[domain] = token
        return token

    def cancel(self, domain: str, reason: str = "cancelled") -> bool:
        token = self._tokens.get(domain)
        if token is None:
            return False
        token.cancel(reason)
        return True

    def cancel_all(self, reason: str = "cancelled") -> None:
        for token in self._tokens.values():
            token.cancel(reason)

    def is_current(self, token: CancellationToken) -> bool:
        return self._tokens.get(token.name) is token and not token.cancelled

    def end(self, token: CancellationToken) -> None:
        if self._tokens.get(token.name) is token:
            del self._tokens[token.name]
