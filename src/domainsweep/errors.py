"""Exception types shared across domainsweep."""


class DomainSweepError(Exception):
    """Base class for domainsweep errors."""


class ScanCancelled(DomainSweepError):
    """A scan was cancelled cooperatively through its token."""

    def __init__(self, domain: str = "", reason: str = "cancelled"):
        self.domain = domain
        self.reason = reason
        label = f" for {domain}" if domain else ""
        super().__init__(f"Scan {reason}{label}")


class ProviderError(DomainSweepError):
    """The subdomain-intelligence provider returned an unusable response."""


class ScanFailed(DomainSweepError):
    """A queued scan could not produce any result."""

    def __init__(self, domain: str, message: str):
        self.domain = domain
        super().__init__(message)


class WordlistError(DomainSweepError, ValueError):
    """A wordlist definition is malformed."""
