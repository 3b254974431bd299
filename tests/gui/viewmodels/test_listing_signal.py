"""Tests for the pure Python Signal and ObservableProperty classes."""

import pytest

from adminlist.gui.viewmodels.signal import ObservableProperty, Signal


class TestSignal:
    def test_connect_and_emit(self):
        sig = Signal()
        received = []
        sig.connect(received.append)

        sig.emit(42)

        assert received == [42]

    def test_duplicate_connect_ignored(self):
        sig = Signal()
        received = []
        sig.connect(received.append)
        sig.connect(received.append)

        sig.emit(1)

        assert received == [1]
        assert sig.handler_count == 1

    def test_disconnect_missing_raises(self):
        with pytest.raises(ValueError):
            Signal().disconnect(lambda: None)

    def test_failing_handler_does_not_stop_others(self, caplog):
        sig = Signal("demo")
        received = []

        def boom(value):
            raise RuntimeError("bad")

        sig.connect(boom)
        sig.connect(received.append)
        sig.emit("x")

        assert received == ["x"]
        assert "demo" in caplog.text


class TestObservableProperty:
    def test_emits_new_and_old(self):
        prop = ObservableProperty(1)
        changes = []
        prop.changed.connect(lambda new, old: changes.append((new, old)))

        prop.value = 2

        assert changes == [(2, 1)]

    def test_equal_value_is_silent(self):
        prop = ObservableProperty({"a": True})
        changes = []
        prop.changed.connect(lambda new, old: changes.append(new))

        assert prop.set({"a": True}) is False
        assert changes == []
