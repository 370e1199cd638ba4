"""Tests for subdomain discovery and capping."""

from datetime import UTC, datetime, timedelta

import pytest
import respx
from httpx import Response

from domainsweep.errors import ScanCancelled
from domainsweep.modules.recon.subdomains import (
    SUBDOMAIN_THRESHOLD,
    VIEWDNS_SUBDOMAINS_URL,
    SubdomainResolver,
    _Candidate,
    cap_candidates,
)
from domainsweep.tools.http import ProbeExecutor
from domainsweep.utils.cancellation import CancellationToken


def _letters(index: int) -> str:
    return chr(97 + index // 26) + chr(97 + index % 26)


def _payload(domains: list) -> dict:
    return {"query": {"domain": "example.com"}, "response": {"domains": domains}}


class TestCapCandidates:
    """Test oversized result reduction."""

    def test_large_result_truncated(self):
        candidates = [_Candidate(f"{_letters(i)}.example.com") for i in range(120)]
        capped = cap_candidates(candidates, "example.com")
        assert len(capped) == SUBDOMAIN_THRESHOLD
        assert capped[0].name == "aa.example.com"

    def test_small_result_untouched(self):
        candidates = [_Candidate(f"host{i}.example.com") for i in range(10)]
        assert cap_candidates(candidates, "example.com") == candidates

    def test_drops_names_with_digits(self):
        noisy = [_Candidate(f"node{i}.example.com") for i in range(90)]
        clean = [_Candidate(f"{_letters(i)}.example.com") for i in range(30)]
        capped = cap_candidates(noisy + clean, "example.com")
        assert capped == clean

    def test_truncates_after_dropping_digits(self):
        noisy = [_Candidate(f"node{i}.example.com") for i in range(60)]
        clean = [_Candidate(f"{_letters(i)}.example.com") for i in range(60)]
        capped = cap_candidates(noisy + clean, "example.com")
        assert len(capped) == SUBDOMAIN_THRESHOLD
        assert not any(c.name.startswith("node") for c in capped)

    def test_digits_in_root_do_not_count(self):
        candidates = [_Candidate(f"n{i}.web2.com") for i in range(60)]
        candidates.append(_Candidate("api.web2.com"))
        capped = cap_candidates(candidates, "web2.com")
        assert [c.name for c in capped] == ["api.web2.com"]

    def test_prefers_recently_resolved(self):
        now = datetime(2025, 1, 1, tzinfo=UTC)
        stale = [
            _Candidate(f"old{i}.example.com", now - timedelta(days=800)) for i in range(60)
        ]
        fresh = [_Candidate("fresh.example.com", now - timedelta(days=3))]
        capped = cap_candidates(stale + fresh, "example.com", now=now)
        assert len(capped) == SUBDOMAIN_THRESHOLD
        assert capped[0].name == "fresh.example.com"


class TestSubdomainResolver:
    """Test the provider client."""

    @respx.mock
    async def test_filters_and_dedupes(self):
        route = respx.get(url__startswith=VIEWDNS_SUBDOMAINS_URL).mock(
            return_value=Response(
                200,
                json=_payload(
                    [
                        "www.example.com",
                        "API.example.com",
                        "api.example.com",
                        {"name": "dev.example.com", "last_resolved": "2024-05-01"},
                        "mail.example.com",
                    ]
                ),
            )
        )

        async with ProbeExecutor() as executor:
            lookup = await SubdomainResolver(executor).resolve("example.com", "secret")

        assert lookup.subdomains == ["api.example.com", "dev.example.com"]
        assert lookup.raw["response"]["domains"]
        request = route.calls.last.request
        assert request.url.params["domain"] == "example.com"
        assert request.url.params["apikey"] == "secret"
        assert request.url.params["output"] == "json"

    @respx.mock
    async def test_large_response_capped(self):
        respx.get(url__startswith=VIEWDNS_SUBDOMAINS_URL).mock(
            return_value=Response(
                200,
                json=_payload(
                    [f"host{i}.example.com" for i in range(60)]
                    + [f"{_letters(i)}.example.com" for i in range(60)]
                ),
            )
        )

        async with ProbeExecutor() as executor:
            lookup = await SubdomainResolver(executor).resolve("example.com", "secret")

        assert len(lookup.subdomains) == SUBDOMAIN_THRESHOLD
        assert not any(name.startswith("host") for name in lookup.subdomains)

    @respx.mock(assert_all_called=False)
    async def test_no_api_key_skips_lookup(self, respx_mock):
        route = respx_mock.get(url__startswith=VIEWDNS_SUBDOMAINS_URL).mock(
            return_value=Response(200, json=_payload(["api.example.com"]))
        )

        async with ProbeExecutor() as executor:
            lookup = await SubdomainResolver(executor).resolve("example.com", "")

        assert lookup.subdomains == []
        assert not route.called

    @pytest.mark.parametrize(
        "response",
        [
            Response(500, text="boom"),
            Response(200, text="not json"),
            Response(200, json={"response": {"error": "Invalid API key"}}),
            Response(200, json={"unexpected": True}),
            Response(200, json={"response": {"domains": "nope"}}),
        ],
    )
    @respx.mock
    async def test_provider_errors_fail_open(self, response: Response):
        respx.get(url__startswith=VIEWDNS_SUBDOMAINS_URL).mock(return_value=response)

        async with ProbeExecutor() as executor:
            lookup = await SubdomainResolver(executor).resolve("example.com", "secret")

        assert lookup.subdomains == []

    @respx.mock
    async def test_missing_domains_is_empty(self):
        respx.get(url__startswith=VIEWDNS_SUBDOMAINS_URL).mock(
            return_value=Response(200, json={"response": {}})
        )

        async with ProbeExecutor() as executor:
            lookup = await SubdomainResolver(executor).resolve("example.com", "secret")

        assert lookup.subdomains == []
        assert lookup.raw == {"response": {}}

    async def test_cancellation_propagates(self):
        token = CancellationToken("example.com")
        token.cancel()

        async with ProbeExecutor() as executor:
            with pytest.raises(ScanCancelled):
                await SubdomainResolver(executor).resolve("example.com", "secret", token)
