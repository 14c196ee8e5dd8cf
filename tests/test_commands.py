"""Tests for the command queue."""

import threading

import pytest

from minions.commands import CommandQueue, DeselectAll, NewMinion, TogglePause


def test_drain_preserves_order_and_empties():
    q = CommandQueue()
    q.submit(TogglePause())
    q.submit(NewMinion((1.0, 2.0)))
    q.submit(DeselectAll())
    assert len(q) == 3
    assert [type(c) for c in q.drain()] == [TogglePause, NewMinion, DeselectAll]
    assert q.drain() == []


def test_only_commands_are_accepted():
    with pytest.raises(TypeError):
        CommandQueue().submit("pause")


def test_submission_from_threads():
    q = CommandQueue()
    threads = [threading.Thread(target=lambda: [q.submit(TogglePause()) for _ in range(50)])
               for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(q.drain()) == 200
