"""Test delivery log sequencing, views and observers."""

import pytest

from servicebus.dispatch.log import DeliveryLog
from servicebus.events import Envelope


class TestDeliveryLog:
    """Test delivery log."""

    def test_record_assigns_increasing_sequence(self):
        log = DeliveryLog()
        first = log.record("a", 1)
        second = log.record("b", 2)
        assert (first.sequence, second.sequence) == (1, 2)
        assert log.last_sequence == 2

    def test_record_uses_clock(self):
        log = DeliveryLog(clock=lambda: 42.0)
        assert log.record("a", None).created_at == 42.0

    def test_entries_is_read_only_snapshot(self):
        log = DeliveryLog()
        log.record("a", None)
        snapshot = log.entries()
        log.record("b", None)
        assert isinstance(snapshot, tuple)
        assert len(snapshot) == 1
        assert len(log.entries()) == 2

    def test_envelope_is_immutable(self):
        log = DeliveryLog()
        envelope = log.record("a", None)
        with pytest.raises(AttributeError):
            envelope.sequence = 99  # type: ignore[misc]

    def test_tail_returns_most_recent_oldest_first(self):
        log = DeliveryLog()
        for i in range(5):
            log.record("a", i)
        assert [e.payload for e in log.tail(2)] == [3, 4]
        assert log.tail(0) == ()
        assert len(log.tail(10)) == 5

    def test_retention_does_not_reset_sequence(self):
        # Arrange
        log = DeliveryLog(retention=3)

        # Act
        for i in range(10):
            log.record("a", i)

        # Assert
        assert len(log) == 3
        assert [e.sequence for e in log.entries()] == [8, 9, 10]
        assert log.record("a", None).sequence == 11
        assert log.retention == 3

    def test_invalid_retention(self):
        with pytest.raises(ValueError):
            DeliveryLog(retention=0)

    def test_append_requires_following_sequence(self):
        log = DeliveryLog()
        log.append(Envelope("a", None, 1, 0.0))
        with pytest.raises(ValueError):
            log.append(Envelope("b", None, 1, 0.0))
        log.append(Envelope("c", None, 2, 0.0))
        assert log.last_sequence == 2
        assert log.record("d", None).sequence == 3

    def test_append_rejects_gap_after_record(self):
        # Arrange
        log = DeliveryLog()
        log.record("a", None)

        # Act & Assert
        with pytest.raises(ValueError):
            log.append(Envelope("b", None, 7, 0.0))
        assert [e.sequence for e in log.entries()] == [1]
        assert log.last_sequence == 1
        assert log.record("c", None).sequence == 2

    def test_observer_called_on_record(self):
        log = DeliveryLog()
        seen = []
        log.add_observer(seen.append)
        envelope = log.record("a", None)
        assert seen == [envelope]

    def test_removed_observer_not_called(self):
        log = DeliveryLog()
        seen = []
        log.add_observer(seen.append)
        log.remove_observer(seen.append)
        log.record("a", None)
        assert seen == []

    def test_failing_observer_does_not_block_others(self):
        # Arrange
        log = DeliveryLog()
        seen = []

        def explode(envelope):
            raise RuntimeError("display broke")

        log.add_observer(explode)
        log.add_observer(seen.append)

        # Act
        envelope = log.record("a", None)

        # Assert
        assert seen == [envelope]
        assert log.entries() == (envelope,)
