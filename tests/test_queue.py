"""Tests for the scan queue, session registry and auto-scan trigger."""

import asyncio

import pytest

from domainsweep.config.settings import AUTO_SCAN_SETTING, save_setting
from domainsweep.modules.queue import (
    AutoScanTrigger,
    QueueEventType,
    ScanQueue,
    ScanSessionRegistry,
)
from domainsweep.modules.recon.models import Finding, ScanOutput, ScanResult


def _output(domain: str, *findings: Finding) -> ScanOutput:
    return ScanOutput(results=[ScanResult(domain=domain, findings=list(findings))])


async def _quick_runner(domain, token):
    await asyncio.sleep(0)
    return _output(domain)


def _types(events) -> list[QueueEventType]:
    return [event.type for event in events]


class TestAdmission:
    """Test which domains the queue accepts."""

    def test_normalizes_to_root(self, history):
        queue = ScanQueue(history, _quick_runner)
        assert queue.enqueue("https://shop.example.co.uk/cart")
        assert queue.state.queued == ["example.co.uk"]

    def test_rejects_duplicates(self, history):
        queue = ScanQueue(history, _quick_runner)
        assert queue.enqueue("example.com")
        assert not queue.enqueue("api.example.com")
        assert queue.state.queued == ["example.com"]

    def test_rejects_ignored(self, history):
        history.ignore("example.com")
        queue = ScanQueue(history, _quick_runner)
        assert not queue.enqueue("www.example.com")

    def test_rejects_scanned_unless_disabled(self, history):
        history.record([ScanResult(domain="example.com")], "example.com")
        assert not ScanQueue(history, _quick_runner).enqueue("example.com")
        assert ScanQueue(history, _quick_runner, dedupe_history=False).enqueue("example.com")

    def test_rejects_empty(self, history):
        assert not ScanQueue(history, _quick_runner).enqueue("")


class TestDraining:
    """Test serial processing and persistence."""

    async def test_scans_one_at_a_time(self, history):
        running = 0
        peak = 0
        order = []

        async def runner(domain, token):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            order.append(domain)
            await asyncio.sleep(0.01)
            running -= 1
            return _output(domain)

        async with ScanQueue(history, runner) as queue:
            for domain in ("a.com", "b.com", "c.com"):
                queue.enqueue(domain)
            await asyncio.wait_for(queue.join(), 2)

        assert order == ["a.com", "b.com", "c.com"]
        assert peak == 1
        assert [item.root_domain for item in history.items()] == ["c.com", "b.com", "a.com"]
        assert history.session_domains == ["a.com", "b.com", "c.com"]

    async def test_event_sequence(self, history):
        events = []
        async with ScanQueue(history, _quick_runner) as queue:
            queue.subscribe(events.append)
            queue.enqueue("example.com")
            await asyncio.wait_for(queue.join(), 1)

        assert _types(events) == [
            QueueEventType.QUEUED,
            QueueEventType.STARTED,
            QueueEventType.COMPLETED,
            QueueEventType.IDLE,
        ]
        started = events[1]
        assert started.state.current == "example.com"
        assert started.state.position == 1
        assert started.state.initial_length == 1
        assert events[2].results[0].domain == "example.com"
        assert not events[-1].state.processing

    async def test_empty_output_not_persisted(self, history):
        async def runner(domain, token):
            return ScanOutput(results=[])

        events = []
        async with ScanQueue(history, runner) as queue:
            queue.subscribe(events.append)
            queue.enqueue("example.com")
            await asyncio.wait_for(queue.join(), 1)

        completed = [e for e in events if e.type is QueueEventType.COMPLETED]
        assert completed[0].message == "no live hosts"
        assert not history.has("example.com")
        assert "example.com" in history.session_domains

    async def test_failure_advances_queue(self, history):
        async def runner(domain, token):
            if domain == "bad.com":
                raise RuntimeError("boom")
            return _output(domain)

        events = []
        async with ScanQueue(history, runner) as queue:
            queue.subscribe(events.append)
            queue.enqueue("bad.com")
            queue.enqueue("good.com")
            await asyncio.wait_for(queue.join(), 1)

        failed = [e for e in events if e.type is QueueEventType.FAILED]
        assert failed[0].domain == "bad.com"
        assert "boom" in failed[0].message
        assert not history.has("bad.com")
        assert history.has("good.com")

    async def test_rescan_replaces_history(self, history):
        finding = Finding(path="/.env", type="Sensitive File", severity="Critical", details="")
        outputs = iter([_output("example.com", finding), _output("example.com")])

        async def runner(domain, token):
            return next(outputs)

        async with ScanQueue(history, runner, dedupe_history=False) as queue:
            queue.enqueue("example.com")
            await asyncio.wait_for(queue.join(), 1)
            queue.enqueue("example.com")
            await asyncio.wait_for(queue.join(), 1)

        items = history.items()
        assert len(items) == 1
        assert items[0].results[0].findings == []

    async def test_listener_errors_do_not_stop_queue(self, history):
        def broken(event):
            raise ValueError("listener bug")

        async with ScanQueue(history, _quick_runner) as queue:
            queue.subscribe(broken)
            queue.enqueue("example.com")
            await asyncio.wait_for(queue.join(), 1)

        assert history.has("example.com")


class TestCancellation:
    """Test skip and cancel-all."""

    async def test_skip_current(self, history):
        started = asyncio.Event()
        tokens = {}

        async def runner(domain, token):
            tokens[domain] = token
            if domain == "slow.com":
                started.set()
                await asyncio.sleep(30)
            return _output(domain)

        events = []
        async with ScanQueue(history, runner) as queue:
            queue.subscribe(events.append)
            queue.enqueue("slow.com")
            queue.enqueue("fast.com")
            await asyncio.wait_for(started.wait(), 1)
            assert queue.skip_current()
            await asyncio.wait_for(queue.join(), 1)

        assert tokens["slow.com"].cancelled
        assert tokens["slow.com"].reason == "skipped"
        assert not history.has("slow.com")
        assert history.has("fast.com")
        assert QueueEventType.SKIPPED in _types(events)

    async def test_skip_when_idle(self, history):
        assert not ScanQueue(history, _quick_runner).skip_current()

    async def test_results_from_skipped_scan_discarded(self, history):
        """Even a runner that ignores cancellation cannot persist late results."""
        started = asyncio.Event()

        async def stubborn(domain, token):
            started.set()
            try:
                await asyncio.sleep(30)
            except asyncio.CancelledError:
                pass
            return _output(domain)

        async with ScanQueue(history, stubborn) as queue:
            queue.enqueue("example.com")
            await asyncio.wait_for(started.wait(), 1)
            queue.skip_current()
            await asyncio.wait_for(queue.join(), 1)

        assert not history.has("example.com")

    async def test_cancel_all(self, history):
        started = asyncio.Event()
        calls = []

        async def runner(domain, token):
            calls.append(domain)
            started.set()
            await asyncio.sleep(30)
            return _output(domain)

        events = []
        async with ScanQueue(history, runner) as queue:
            queue.subscribe(events.append)
            for domain in ("a.com", "b.com", "c.com"):
                queue.enqueue(domain)
            await asyncio.wait_for(started.wait(), 1)
            assert queue.cancel_all() == 2
            await asyncio.wait_for(queue.join(), 1)
            assert queue.state.queued == []
            assert queue.state.current is None

        assert calls == ["a.com"]
        assert history.items() == []
        assert _types(events)[-3:] == [
            QueueEventType.CLEARED,
            QueueEventType.CANCELLED,
            QueueEventType.IDLE,
        ]

    async def test_enqueue_after_skip_starts_new_session(self, history):
        started = asyncio.Event()
        tokens = []

        async def runner(domain, token):
            tokens.append(token)
            if len(tokens) == 1:
                started.set()
                await asyncio.sleep(30)
            return _output(domain)

        async with ScanQueue(history, runner) as queue:
            queue.enqueue("example.com")
            await asyncio.wait_for(started.wait(), 1)
            queue.skip_current()
            await asyncio.wait_for(queue.join(), 1)
            assert queue.enqueue("example.com")
            await asyncio.wait_for(queue.join(), 1)

        assert len(tokens) == 2
        assert tokens[1].generation > tokens[0].generation
        assert history.has("example.com")

    async def test_requeue_right_after_skip(self, history):
        """A skipped domain is released at once and can be queued again."""
        started = asyncio.Event()
        tokens = []

        async def runner(domain, token):
            tokens.append(token)
            if len(tokens) == 1:
                started.set()
                await asyncio.sleep(30)
            return _output(domain)

        async with ScanQueue(history, runner) as queue:
            queue.enqueue("example.com")
            await asyncio.wait_for(started.wait(), 1)
            assert queue.skip_current()
            assert queue.state.current is None
            assert queue.enqueue("example.com")
            assert queue.state.queued == ["example.com"]
            await asyncio.wait_for(queue.join(), 1)

        assert len(tokens) == 2
        assert tokens[0].reason == "skipped"
        assert not tokens[1].cancelled
        assert history.has("example.com")

    async def test_cancel_all_releases_current(self, history):
        started = asyncio.Event()

        async def runner(domain, token):
            started.set()
            await asyncio.sleep(30)
            return _output(domain)

        async with ScanQueue(history, runner) as queue:
            queue.enqueue("example.com")
            await asyncio.wait_for(started.wait(), 1)
            queue.cancel_all()
            assert queue.state.current is None
            assert not queue.state.processing

    async def test_closed_queue_rejects(self, history):
        queue = ScanQueue(history, _quick_runner)
        queue.start()
        await queue.close()
        assert not queue.enqueue("example.com")
        with pytest.raises(RuntimeError):
            queue.start()


class TestScanSessionRegistry:
    """Test per-domain token bookkeeping."""

    def test_start_supersedes_previous(self):
        registry = ScanSessionRegistry()
        first = registry.start("example.com")
        second = registry.start("example.com")
        assert first.cancelled
        assert first.reason == "superseded"
        assert not registry.is_current(first)
        assert registry.is_current(second)
        assert second.generation > first.generation

    def test_cancel_and_end(self):
        registry = ScanSessionRegistry()
        token = registry.start("example.com")
        assert registry.cancel("example.com", "skipped")
        assert token.reason == "skipped"
        assert not registry.is_current(token)
        registry.end(token)
        assert "example.com" not in registry
        assert not registry.cancel("example.com")

    def test_end_ignores_stale_token(self):
        registry = ScanSessionRegistry()
        old = registry.start("example.com")
        new = registry.start("example.com")
        registry.end(old)
        assert registry.get("example.com") is new


class TestAutoScanTrigger:
    """Test navigation-driven enqueueing."""

    def test_disabled_by_default(self, history):
        queue = ScanQueue(history, _quick_runner)
        trigger = AutoScanTrigger(queue)
        assert not trigger.enabled
        assert not trigger.on_navigate("https://example.com/page")
        assert queue.state.queued == []

    def test_enqueues_root_when_enabled(self, history):
        save_setting(history.store, AUTO_SCAN_SETTING, True)
        queue = ScanQueue(history, _quick_runner)
        trigger = AutoScanTrigger(queue)
        assert trigger.on_navigate("https://app.example.com/login")
        assert queue.state.queued == ["example.com"]

    def test_follows_settings_changes(self, history):
        queue = ScanQueue(history, _quick_runner)
        trigger = AutoScanTrigger(queue)
        save_setting(history.store, AUTO_SCAN_SETTING, True)
        assert trigger.enabled
        save_setting(history.store, AUTO_SCAN_SETTING, False)
        assert not trigger.enabled
        trigger.close()
        save_setting(history.store, AUTO_SCAN_SETTING, True)
        assert not trigger.enabled

    def test_env_override(self, history, monkeypatch):
        monkeypatch.setenv("DOMAINSWEEP_AUTO_SCAN", "true")
        trigger = AutoScanTrigger(ScanQueue(history, _quick_runner))
        assert trigger.enabled

    def test_ignored_domains_skipped(self, history):
        save_setting(history.store, AUTO_SCAN_SETTING, True)
        history.ignore("example.com")
        queue = ScanQueue(history, _quick_runner)
        trigger = AutoScanTrigger(queue)
        assert not trigger.on_navigate("https://example.com")
        assert queue.state.queued == []
