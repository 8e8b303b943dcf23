from service.debounce import Debouncer, debounce


def test_burst_of_calls_runs_callback_once(clock):
    calls = []
    debounced = debounce(lambda *args: calls.append(args), 50, clock)

    for i in range(5):
        debounced(i)
        clock.advance(10)

    assert calls == []
    clock.advance(49)
    assert calls == [(4,)]
    assert not debounced.pending


def test_waits_for_the_full_delay(clock):
    calls = []
    debounced = debounce(lambda: calls.append(True), 50, clock)

    debounced()
    clock.advance(49)
    assert calls == []
    clock.advance(1)
    assert calls == [True]


def test_cancel_drops_pending_call(clock):
    calls = []
    debounced = debounce(lambda: calls.append(True), 50, clock)

    debounced()
    assert debounced.pending
    debounced.cancel()
    clock.advance(100)

    assert calls == []
    assert clock.pending == 0


def test_cancel_without_pending_call_is_harmless(clock):
    debouncer = Debouncer(50, clock)
    debouncer.cancel()
    debouncer.cancel()
    assert not debouncer.pending


def test_can_be_scheduled_again_after_firing(clock):
    calls = []
    debouncer = Debouncer(20, clock)

    debouncer.schedule(calls.append, "first")
    clock.advance(20)
    debouncer.schedule(calls.append, "second")
    clock.advance(20)

    assert calls == ["first", "second"]
