"""Single-request HTTP probe executor."""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlparse

import httpx

from domainsweep.errors import ScanCancelled
from domainsweep.utils.cancellation import CancellationToken
from domainsweep.utils.debug import debug_probe

from .headers import BROWSER_HEADERS

logger = logging.getLogger(__name__)

# Bodies are truncated to this many bytes before keyword matching
MAX_BODY_BYTES = 1024 * 1024


class ProbeError(str, Enum):
    """Why a probe produced no HTTP response."""

    CANCELLED = "cancelled"
    CONNECTION_FAILED = "connection-failed"
    TIMEOUT = "timeout"


@dataclass
class ProbeOutcome:
    """Normalized result of one probe."""

    url: str
    ok: bool
    status: int = 0
    body: str | None = None
    headers: dict[str, str] | None = None
    error: ProbeError | None = None
    response_time: float = 0.0

    @property
    def cancelled(self) -> bool:
        return self.error is ProbeError.CANCELLED

    @property
    def found(self) -> bool:
        """True for the canonical positive signal (HTTP 200)."""
        return self.ok and self.status == 200


def _require_absolute(url: str) -> None:
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"Probe URL must be absolute: {url!r}")


class ProbeExecutor:
    """Async GET prober sharing one connection pool across a scan.

    Holds no per-domain state; cancellation arrives with each call.
    """

    def __init__(
        self,
        timeout: float = 8.0,
        follow_redirects: bool = True,
        verify_ssl: bool = False,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
        max_body_bytes: int = MAX_BODY_BYTES,
    ):
        self.timeout = timeout
        self.max_body_bytes = max_body_bytes
        self.follow_redirects = follow_redirects
        self.verify_ssl = verify_ssl
        self.headers = dict(headers or BROWSER_HEADERS)
        self.client = client
        self._owns_client = client is None

    async def __aenter__(self):
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=self.follow_redirects,
                verify=self.verify_ssl,
            )
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        if self.client is not None and self._owns_client:
            await self.client.aclose()
            self.client = None

    async def probe(
        self,
        url: str,
        token: CancellationToken | None = None,
        *,
        headers: dict[str, str] | None = None,
        follow_redirects: bool | None = None,
    ) -> ProbeOutcome:
        """Issue one GET and return its outcome. Never retries."""
        _require_absolute(url)
        if not self.client:
            raise RuntimeError("Executor not initialized. Use async context manager.")

        token = token or CancellationToken()
        if token.cancelled:
            return ProbeOutcome(url=url, ok=False, error=ProbeError.CANCELLED)

        redirects = self.follow_redirects if follow_redirects is None else follow_redirects
        start = time.time()
        try:
            response, content = await token.guard(
                self._get(url, headers or self.headers, redirects)
            )
        except ScanCancelled:
            return ProbeOutcome(url=url, ok=False, error=ProbeError.CANCELLED)
        except httpx.TimeoutException as exc:
            logger.debug("Probe timed out for %s: %s", url.split("?", 1)[0], exc)
            debug_probe(url, elapsed=time.time() - start, error=ProbeError.TIMEOUT.value)
            return ProbeOutcome(
                url=url, ok=False, error=ProbeError.TIMEOUT, response_time=time.time() - start
            )
        except httpx.HTTPError as exc:
            logger.debug("Probe failed for %s: %s", url.split("?", 1)[0], exc)
            debug_probe(url, elapsed=time.time() - start, error=ProbeError.CONNECTION_FAILED.value)
            return ProbeOutcome(
                url=url,
                ok=False,
                error=ProbeError.CONNECTION_FAILED,
                response_time=time.time() - start,
            )

        if token.cancelled:
            return ProbeOutcome(url=url, ok=False, error=ProbeError.CANCELLED)

        elapsed = time.time() - start
        debug_probe(url, status=response.status_code, elapsed=elapsed)
        return ProbeOutcome(
            url=url,
            ok=True,
            status=response.status_code,
            body=content.decode(response.encoding or "utf-8", errors="replace"),
            headers=dict(response.headers),
            response_time=elapsed,
        )

    async def _get(
        self, url: str, headers: dict[str, str], follow_redirects: bool
    ) -> tuple[httpx.Response, bytes]:
        """GET *url*, reading at most ``max_body_bytes`` of the body."""
        content = bytearray()
        async with self.client.stream(
            "GET", url, headers=headers, follow_redirects=follow_redirects
        ) as response:
            async for chunk in response.aiter_bytes():
                content.extend(chunk)
                if len(content) >= self.max_body_bytes:
                    break
        return response, bytes(content[: self.max_body_bytes])
