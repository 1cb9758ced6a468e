"""Tests for concurrent all-or-nothing relay fan-out (pipeline.fanout)."""

from __future__ import annotations

import asyncio

import pytest

from return_claim_bot.errors import MetadataError, RelayError, UploadError
from return_claim_bot.pipeline.fanout import relay_all


class FakeRelay:
    """Relay stand-in with per-file delays and failures."""

    def __init__(self, delays=None, failures=None, hang=()):
        self.delays = delays or {}
        self.failures = failures or {}
        self.hang = set(hang)
        self.started = []
        self.finished = []
        self.cancelled = []
        self.active = 0
        self.max_active = 0

    async def __call__(self, file_id):
        self.started.append(file_id)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if file_id in self.hang:
                await asyncio.sleep(3600)
            await asyncio.sleep(self.delays.get(file_id, 0))
            if file_id in self.failures:
                raise self.failures[file_id]
            self.finished.append(file_id)
            return "https://drive.example/{}".format(file_id)
        except asyncio.CancelledError:
            self.cancelled.append(file_id)
            raise
        finally:
            self.active -= 1


class TestRelayAll:
    def test_empty_input(self):
        relay = FakeRelay()
        assert asyncio.run(relay_all(relay, [])) == []
        assert relay.started == []

    def test_results_in_input_order(self):
        relay = FakeRelay(delays={"a": 0.03, "b": 0.0, "c": 0.01})
        urls = asyncio.run(relay_all(relay, ["a", "b", "c"]))
        assert urls == [
            "https://drive.example/a",
            "https://drive.example/b",
            "https://drive.example/c",
        ]
        assert relay.finished == ["b", "c", "a"]

    def test_runs_in_parallel(self):
        relay = FakeRelay(delays={fid: 0.02 for fid in "abcde"})
        asyncio.run(relay_all(relay, list("abcde"), concurrency=5))
        assert relay.max_active == 5

    def test_concurrency_cap(self):
        relay = FakeRelay(delays={fid: 0.01 for fid in "abcde"})
        asyncio.run(relay_all(relay, list("abcde"), concurrency=2))
        assert relay.max_active == 2

    def test_middle_failure_fails_batch(self):
        relay = FakeRelay(failures={"b": UploadError("b", "no id")})
        with pytest.raises(UploadError) as exc_info:
            asyncio.run(relay_all(relay, ["a", "b", "c"]))
        assert exc_info.value.file_id == "b"

    def test_failure_cancels_pending(self):
        relay = FakeRelay(hang=["a", "c"], failures={"b": MetadataError("b", "gone")})
        with pytest.raises(MetadataError):
            asyncio.run(relay_all(relay, ["a", "b", "c"], timeout_s=10))
        assert sorted(relay.cancelled) == ["a", "c"]

    def test_earliest_failure_reported(self):
        relay = FakeRelay(failures={
            "a": MetadataError("a", "first"),
            "c": MetadataError("c", "second"),
        })
        with pytest.raises(MetadataError) as exc_info:
            asyncio.run(relay_all(relay, ["a", "b", "c"]))
        assert exc_info.value.file_id == "a"

    def test_timeout_becomes_relay_error(self):
        relay = FakeRelay(hang=["slow"])
        with pytest.raises(RelayError) as exc_info:
            asyncio.run(relay_all(relay, ["fast", "slow"], timeout_s=0.05))
        assert exc_info.value.file_id == "slow"
        assert "timed out" in exc_info.value.message
        assert relay.cancelled == ["slow"]

    def test_single_attachment(self):
        assert asyncio.run(relay_all(FakeRelay(), ["x"])) == ["https://drive.example/x"]
