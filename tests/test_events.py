from game.events import EventEmitter, GameEvent


def test_handlers_run_in_subscription_order():
    emitter = EventEmitter()
    calls = []
    emitter.subscribe(GameEvent.SCORE_CHANGED, lambda p: calls.append(('a', p)))
    emitter.subscribe(GameEvent.SCORE_CHANGED, lambda p: calls.append(('b', p)))

    emitter.emit(GameEvent.SCORE_CHANGED, 10)
    emitter.emit(GameEvent.ROUND_CHANGED, 'ignored')

    assert calls == [('a', 10), ('b', 10)]


def test_unsubscribe():
    emitter = EventEmitter()
    calls = []
    unsubscribe = emitter.subscribe(GameEvent.TIME_TICK, calls.append)

    emitter.emit(GameEvent.TIME_TICK, 1)
    unsubscribe()
    unsubscribe()
    emitter.emit(GameEvent.TIME_TICK, 2)

    assert calls == [1]


def test_failing_handler_does_not_stop_the_others():
    emitter = EventEmitter()
    calls = []

    def broken(payload):
        raise ValueError(payload)

    emitter.subscribe(GameEvent.GAME_ENDED, broken)
    emitter.subscribe(GameEvent.GAME_ENDED, calls.append)
    emitter.emit(GameEvent.GAME_ENDED, 'done')

    assert calls == ['done']


def test_clear():
    emitter = EventEmitter()
    calls = []
    emitter.subscribe(GameEvent.LIVES_CHANGED, calls.append)
    emitter.clear()
    emitter.emit(GameEvent.LIVES_CHANGED, 0)
    assert calls == []
