"""Text panels summarising service state after a cascade."""

from __future__ import annotations

from servicebus.core.constants import LOW_STOCK_THRESHOLD
from servicebus.services.loyalty import Account


def render_loyalty(customer_name: str, account: Account | None) -> str:
    if account is None:
        return f"{customer_name}: no loyalty account"
    return f"{customer_name}: {account.points} pts ({account.tier})"


def render_stock(stock: dict[str, int], threshold: int = LOW_STOCK_THRESHOLD) -> list[str]:
    """One row per ingredient; rows below threshold are flagged LOW."""
    if not stock:
        return []
    width = max(len(name) for name in stock)
    rows = []
    for name, qty in stock.items():
        flag = "  LOW" if qty < threshold else ""
        rows.append(f"{name:<{width}}  {qty:>4}{flag}")
    return rows
