import dataclasses

import pytest

from sockbuf.buffer import DEFAULT_PRIORITY, Operation, OperationKind, PendingBuffer


def test_drain_on_empty_buffer_is_noop():
    buffer = PendingBuffer()
    seen = []
    assert buffer.drain(seen.append) is False
    assert seen == []
    assert len(buffer) == 0


def test_enqueue_defaults_priority_and_freezes_payload():
    buffer = PendingBuffer()
    op = buffer.enqueue(OperationKind.EMIT, {"event": "msg", "data": 1})
    assert op.priority == DEFAULT_PRIORITY == 2
    assert op.event == "msg"
    with pytest.raises(TypeError):
        op.payload["event"] = "other"  # type: ignore[index]
    with pytest.raises(dataclasses.FrozenInstanceError):
        op.priority = 0  # type: ignore[misc]


def test_drain_orders_by_priority_and_keeps_ties_stable():
    buffer = PendingBuffer()
    buffer.enqueue(OperationKind.EMIT, {"event": "c"}, 3)
    buffer.enqueue(OperationKind.EMIT, {"event": "a1"}, 1)
    buffer.enqueue(OperationKind.EMIT, {"event": "b1"}, 2)
    buffer.enqueue(OperationKind.EMIT, {"event": "a2"}, 1)
    buffer.enqueue(OperationKind.EMIT, {"event": "b2"}, 2)
    order = []
    assert buffer.drain(lambda op: order.append(op.event)) is True
    assert order == ["a1", "a2", "b1", "b2", "c"]
    assert len(buffer) == 0


def test_entries_leave_buffer_before_visitor_runs():
    buffer = PendingBuffer()
    buffer.enqueue(OperationKind.UNBIND, {"event": "x"})
    sizes = []
    buffer.drain(lambda op: sizes.append(len(buffer)))
    assert sizes == [0]


def test_failed_visit_is_not_requeued_and_rest_still_run():
    buffer = PendingBuffer()
    buffer.enqueue(OperationKind.EMIT, {"event": "boom"}, 1)
    buffer.enqueue(OperationKind.EMIT, {"event": "ok"}, 2)
    seen = []

    def visitor(op: Operation) -> None:
        if op.event == "boom":
            raise RuntimeError("replay failed")
        seen.append(op.event)

    assert buffer.drain(visitor) is True
    assert seen == ["ok"]
    assert len(buffer) == 0


def test_operations_queued_during_drain_wait_for_next_drain():
    buffer = PendingBuffer()
    buffer.enqueue(OperationKind.BIND, {"event": "a", "handler": print})

    def visitor(op: Operation) -> None:
        buffer.enqueue(OperationKind.BIND, {"event": "late", "handler": print})

    buffer.drain(visitor)
    assert [op.event for op in buffer.snapshot()] == ["late"]


def test_flush_discards_everything():
    buffer = PendingBuffer()
    buffer.enqueue(OperationKind.CLEAR_ALL)
    buffer.enqueue(OperationKind.CLEAR_ALL)
    assert buffer.flush() == 2
    assert not buffer
    assert buffer.drain(lambda op: None) is False


def test_snapshot_does_not_remove():
    buffer = PendingBuffer()
    buffer.enqueue(OperationKind.EMIT, {"event": "b"}, 5)
    buffer.enqueue(OperationKind.EMIT, {"event": "a"}, 0)
    assert [op.event for op in buffer.snapshot()] == ["a", "b"]
    assert len(buffer) == 2
