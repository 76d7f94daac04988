"""Test log line rendering and service panels."""

from __future__ import annotations

from unittest.mock import patch

from servicebus.events import Envelope, OrderPlaced
from servicebus.formatting import LogDisplay, format_envelope, render_loyalty, render_stock
from servicebus.services.loyalty import Account


def _envelope(topic: str, payload: object, sequence: int = 1) -> Envelope:
    return Envelope(topic=topic, payload=payload, sequence=sequence, created_at=0.0)


class TestFormatEnvelope:
    def test_known_topic_with_service(self):
        with patch("servicebus.formatting.log_line.format_time", return_value="12:00:00"):
            line = format_envelope(
                _envelope("order.placed", OrderPlaced("ORD-1", "Ada", [], 0.0), 3)
            )
        assert line == "12:00:00 #3 🛒 order.placed [OrderService]"

    def test_dict_payload_service(self):
        line = format_envelope(_envelope("inventory.updated", {"service": "Inv"}))
        assert line.endswith("📦 inventory.updated [Inv]")

    def test_unknown_topic_and_no_service(self):
        line = format_envelope(_envelope("custom", None))
        assert line.endswith("📡 custom [—]")


class TestLogDisplay:
    def test_keeps_newest_lines_first(self):
        # Arrange
        display = LogDisplay(limit=2)

        # Act
        for seq in range(1, 4):
            display(_envelope("t", None, seq))

        # Assert
        assert [line.split()[1] for line in display.lines] == ["#3", "#2"]

    def test_sink_receives_each_line(self):
        received = []
        display = LogDisplay(sink=received.append)
        display(_envelope("t", None))
        assert received == display.lines

    def test_clear(self):
        display = LogDisplay()
        display(_envelope("t", None))
        display.clear()
        assert display.lines == []


class TestPanels:
    def test_render_loyalty(self):
        assert render_loyalty("Ada", Account(points=160, tier="Silver")) == "Ada: 160 pts (Silver)"
        assert render_loyalty("Bob", None) == "Bob: no loyalty account"

    def test_render_stock_flags_low(self):
        rows = render_stock({"Oat Milk": 18, "Matcha Powder": 6})
        assert rows[0].endswith("18")
        assert rows[1].endswith("LOW")
        assert render_stock({}) == []
