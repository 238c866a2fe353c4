"""Pointer motion queue."""

from __future__ import annotations

import threading

from stablefluids.input import Mouse, Motion, Button


def test_moves_without_button_are_not_queued():
    mouse = Mouse()
    mouse.move(10.0, 10.0)
    mouse.move(20.0, 15.0)
    assert mouse.pending == 0
    assert mouse.position == (20.0, 15.0)


def test_drag_is_relative_to_previous_position():
    mouse = Mouse()
    mouse.move(10.0, 10.0)
    mouse.button(Button.LEFT_DOWN)
    mouse.move(13.0, 6.0)

    motions = mouse.drain()
    assert motions == [Motion((13.0, 6.0), (3.0, -4.0), left=True, right=False)]


def test_button_state_is_recorded_per_motion():
    mouse = Mouse()
    mouse.button(Button.RIGHT_DOWN)
    mouse.move(1.0, 1.0)
    mouse.button(Button.LEFT_DOWN)
    mouse.move(2.0, 1.0)
    mouse.button(Button.RIGHT_UP)
    mouse.move(3.0, 1.0)
    mouse.button(Button.LEFT_UP)
    mouse.move(4.0, 1.0)

    flags = [(m.left, m.right) for m in mouse.drain()]
    assert flags == [(False, True), (True, True), (True, False)]


def test_middle_button_does_not_queue():
    mouse = Mouse()
    mouse.button(Button.MIDDLE_DOWN)
    mouse.move(5.0, 5.0)
    assert mouse.pending == 0


def test_drain_returns_arrival_order_and_empties():
    mouse = Mouse()
    first = Motion((1.0, 1.0), (0.0, 0.0), left=True)
    second = Motion((2.0, 2.0), (1.0, 1.0), right=True)
    mouse.add_motion(first)
    mouse.add_motion(second)

    assert mouse.drain() == [first, second]
    assert mouse.drain() == []


def test_concurrent_producers_lose_nothing():
    mouse = Mouse()
    producers, per_producer = 4, 500
    drained: list[Motion] = []
    done = threading.Event()

    def produce(index: int) -> None:
        for n in range(per_producer):
            mouse.add_motion(Motion((float(index), float(n)), (0.0, 0.0), left=True))

    def consume() -> None:
        while not done.is_set():
            drained.extend(mouse.drain())
        drained.extend(mouse.drain())

    consumer = threading.Thread(target=consume)
    consumer.start()
    threads = [threading.Thread(target=produce, args=(i,)) for i in range(producers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    done.set()
    consumer.join()

    assert len(drained) == producers * per_producer
    assert len(set(drained)) == producers * per_producer
    for index in range(producers):
        sequence = [m.position[1] for m in drained if m.position[0] == index]
        assert sequence == sorted(sequence)
