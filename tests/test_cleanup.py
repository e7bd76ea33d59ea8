"""Tests for the background expiry sweep."""

import asyncio

from shortener.cleanup import ExpiryCleanupTask


class TestExpiryCleanupTask:

    async def test_run_once(self, service, sample_urls, clock):
        await service.create_short_url(sample_urls[0], validity_minutes=1)
        await service.create_short_url(sample_urls[1], validity_minutes=60)
        clock.advance(minutes=2)

        task = ExpiryCleanupTask(service)

        assert await task.run_once() == 1
        assert await task.run_once() == 0
        assert len(service.registry) == 1

    async def test_loop_sweeps_on_interval(self, service, sample_urls, clock):
        await service.create_short_url(sample_urls[0], validity_minutes=1)
        clock.advance(minutes=2)

        task = ExpiryCleanupTask(service, interval_seconds=0.01)
        task.start()
        assert task.running

        for _ in range(100):
            if len(service.registry) == 0:
                break
            await asyncio.sleep(0.01)

        await task.stop()
        assert not task.running
        assert len(service.registry) == 0

    async def test_failing_sweep_keeps_loop_alive(self, service, monkeypatch):
        calls = []

        async def flaky():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("sweep failed")
            return 0

        monkeypatch.setattr(service, "cleanup_expired", flaky)
        task = ExpiryCleanupTask(service, interval_seconds=0.01)
        task.start()

        for _ in range(100):
            if len(calls) >= 2:
                break
            await asyncio.sleep(0.01)

        await task.stop()
        assert len(calls) >= 2

    async def test_stop_without_start(self, service):
        await ExpiryCleanupTask(service).stop()
