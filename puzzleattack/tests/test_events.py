import logging

from puzzleattack.scoring.events import Signal


class TestSignal:
    def test_callbacks_run_in_connection_order(self):
        signal = Signal("test")
        calls = []
        signal.connect(lambda x: calls.append(("first", x)))
        signal.connect(lambda x: calls.append(("second", x)))

        signal.emit(5)

        assert calls == [("first", 5), ("second", 5)]

    def test_disconnect(self):
        signal = Signal()
        calls = []
        callback = signal.connect(lambda: calls.append(1))

        signal.disconnect(callback)
        signal.disconnect(callback)
        signal.emit()

        assert calls == []
        assert len(signal) == 0

    def test_callback_may_disconnect_itself(self):
        signal = Signal()
        calls = []

        def once():
            calls.append(1)
            signal.disconnect(once)

        signal.connect(once)
        signal.emit()
        signal.emit()

        assert calls == [1]

    def test_emit_without_observers(self):
        Signal("lonely").emit(1, 2, 3)

    def test_disconnect_all(self):
        signal = Signal()
        signal.connect(lambda: None)
        signal.connect(lambda: None)

        signal.disconnect_all()

        assert len(signal) == 0

    def test_failing_observer_is_logged_and_skipped(self, caplog):
        signal = Signal("player_eliminated")
        calls = []

        def broken(value):
            raise RuntimeError("observer crashed")

        signal.connect(broken)
        signal.connect(lambda value: calls.append(value))

        with caplog.at_level(logging.ERROR, logger="puzzleattack.scoring.events"):
            signal.emit(3)

        assert calls == [3]
        assert "player_eliminated" in caplog.text
