"""Rendering delivery-log entries and service panels for the console."""

from servicebus.formatting.log_line import LogDisplay, format_envelope, format_time
from servicebus.formatting.panels import render_loyalty, render_stock

__all__ = ["LogDisplay", "format_envelope", "format_time", "render_loyalty", "render_stock"]
