# tests/test_events.py

from __future__ import annotations

import pytest

from task_trigger.core.events import EventEmitter


def test_listeners_receive_payload_in_order_and_can_unsubscribe() -> None:
    emitter: EventEmitter[int] = EventEmitter("test")
    seen: list[tuple[str, int]] = []

    emitter.event(lambda p: seen.append(("a", p)))
    sub_b = emitter.event(lambda p: seen.append(("b", p)))

    emitter.fire(1)
    sub_b.dispose()
    sub_b.dispose()
    emitter.fire(2)

    assert seen == [("a", 1), ("b", 1), ("a", 2)]


def test_failing_listener_does_not_stop_others() -> None:
    emitter: EventEmitter[str] = EventEmitter("test")
    seen: list[str] = []

    def broken(_payload: str) -> None:
        raise RuntimeError("listener bug")

    emitter.event(broken)
    emitter.event(seen.append)

    emitter.fire("x")

    assert seen == ["x"]


@pytest.mark.asyncio
async def test_async_listeners_are_scheduled_and_drained() -> None:
    emitter: EventEmitter[str] = EventEmitter("test")
    seen: list[str] = []

    async def listener(payload: str) -> None:
        seen.append(payload)

    async def failing(_payload: str) -> None:
        raise RuntimeError("async listener bug")

    emitter.event(listener)
    emitter.event(failing)

    emitter.fire("y")
    assert seen == []

    await emitter.drain()
    assert seen == ["y"]


def test_async_listener_outside_loop_is_skipped() -> None:
    emitter: EventEmitter[str] = EventEmitter("test")
    seen: list[str] = []

    async def listener(payload: str) -> None:
        seen.append(payload)

    emitter.event(listener)
    emitter.fire("z")

    assert seen == []


def test_dispose_removes_all_listeners() -> None:
    emitter: EventEmitter[int] = EventEmitter("test")
    emitter.event(lambda _p: None)
    emitter.event(lambda _p: None)

    emitter.dispose()

    assert emitter.listener_count == 0
