from __future__ import annotations

import threading

from core.config_models import FilterConfig, StreamFilterConfig
from filters.filter_result import DecisionReason
from filters.filter_state import UNSET
from filters.stream_registry import StreamRegistry
from tests.unit._filter_fixtures import TraceRecorder, make_filter, msg


def _registry(config: FilterConfig | None = None, recorder: TraceRecorder | None = None) -> StreamRegistry:
    return StreamRegistry(make_filter(recorder), config)


def test_streams_are_independent() -> None:
    registry = _registry()

    assert registry.process("a", msg(1)).forwarded
    assert registry.process("b", msg(1)).forwarded
    assert not registry.process("a", msg(1)).forwarded

    assert registry.state_for("a").counter == 1
    assert registry.state_for("b").counter == 0


def test_state_is_created_once() -> None:
    registry = _registry()
    assert registry.state_for("a") is registry.state_for("a")
    assert "a" in registry
    assert len(registry) == 1


def test_new_state_uses_stream_config_then_defaults() -> None:
    config = FilterConfig(
        default_interval=20,
        default_deadband=0.5,
        streams={"pump": StreamFilterConfig(interval=3), "valve": StreamFilterConfig(deadband=0)},
    )
    registry = _registry(config)

    pump = registry.state_for("pump")
    valve = registry.state_for("valve")
    other = registry.state_for("other")

    assert (pump.interval, pump.deadband) == (3, 0.5)
    assert (valve.interval, valve.deadband) == (20, 0)
    assert (other.interval, other.deadband) == (20, 0.5)


def test_reset_clears_only_that_stream() -> None:
    registry = _registry()
    registry.process("a", msg(1))
    registry.process("b", msg(1))

    decision = registry.reset("a")

    assert decision.reason == DecisionReason.RESET
    assert registry.state_for("a").last_payload is UNSET
    assert registry.state_for("b").last_payload == 1


def test_discard_drops_state() -> None:
    registry = _registry()
    registry.process("a", msg(1))

    assert registry.discard("a")
    assert not registry.discard("a")
    assert "a" not in registry
    assert registry.process("a", msg(1)).forwarded


def test_traces_carry_stream_id() -> None:
    recorder = TraceRecorder()
    registry = _registry(recorder=recorder)
    registry.process("line-1", msg(5))
    registry.reset("line-2")

    assert [trace.stream_id for trace in recorder.traces] == ["line-1", "line-2"]


def test_stream_ids_are_sorted() -> None:
    registry = _registry()
    for stream_id in ("c", "a", "b"):
        registry.process(stream_id, msg(0))
    assert registry.stream_ids() == ["a", "b", "c"]
    assert list(registry) == ["a", "b", "c"]


def test_membership_and_size_while_streams_are_added_concurrently() -> None:
    registry = _registry()
    stream_ids = [f"s{index}" for index in range(50)]

    def _open(chunk: list[str]) -> None:
        for stream_id in chunk:
            registry.process(stream_id, msg(0))
            assert stream_id in registry

    threads = [threading.Thread(target=_open, args=(stream_ids[start::5],)) for start in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(registry) == len(stream_ids)
    assert all(stream_id in registry for stream_id in stream_ids)
    assert 42 not in registry
