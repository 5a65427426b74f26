"""P&L and ranking per position"""
import math
from dataclasses import dataclass, asdict
from typing import Dict, Any, List

from .ledger import Position


SECONDS_PER_DAY = 86400

# Positions worth less than this (spent or held) are dust
SIGNIFICANT_VALUE_USD = 1.0

# Smallest non-zero percentage reported for a token that traded
MIN_DISPLAY_PERCENT = 0.1


@dataclass(frozen=True)
class TokenAnalysis:
    """Derived metrics for one symbol, rebuilt on every run"""
    symbol: str
    token_identifier: str
    trade_count: int
    total_bought: float
    total_sold: float
    holding_balance: float
    total_spent_usd: float
    total_received_usd: float
    current_price: float
    current_value_usd: float
    avg_buy_price: float
    realized_pnl: float
    realized_pnl_percent: float
    unrealized_pnl: float
    total_pnl: float
    pnl_percent: float
    concentration_percent: float
    hold_time_days: int
    held_significant_value: bool
    ranking_score: float

    @property
    def volume_usd(self) -> float:
        return self.total_spent_usd + self.total_received_usd

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['volume_usd'] = self.volume_usd
        return data


def clamp_display_percent(value: float, total_pnl: float, trade_count: int) -> float:
    """Never report a flat 0% for a token that actually traded"""
    if trade_count > 0 and round(value, 1) == 0:
        return MIN_DISPLAY_PERCENT if total_pnl >= 0 else -MIN_DISPLAY_PERCENT
    return value


def hold_time_days(position: Position, now: int) -> int:
    """Whole days from first acquisition to now (still held) or last disposal"""
    if not position.trades:
        return 0

    timestamps = [trade.timestamp for trade in position.trades]
    start = position.first_acquisition_time
    if start is None:
        start = min(timestamps)

    if position.holding_balance > 0:
        end = now
    else:
        end = position.last_disposal_time
        if end is None:
            end = max(timestamps)

    return max(0, math.floor((end - start) / SECONDS_PER_DAY))


def analyze_position(position: Position, total_portfolio_spent: float, now: int) -> TokenAnalysis:
    """
    Compute P&L, concentration, hold time and ranking score for a position

    Args:
        position: Position built by the trade ledger
        total_portfolio_spent: Sum of total_spent_usd over all positions
        now: Reference timestamp (seconds) for positions still held

    Returns:
        TokenAnalysis
    """
    bought = position.total_bought
    sold = position.total_sold
    spent = position.total_spent_usd
    received = position.total_received_usd
    balance = position.holding_balance

    avg_buy_price = spent / bought if bought > 0 else 0.0
    # Tokens sold beyond what was bought came from outside swaps (airdrops,
    # transfers): no cost basis and nothing left to mark to market.
    current_value = max(balance, 0.0) * position.current_price

    realized_pnl = 0.0
    realized_pnl_percent = 0.0
    # A zero-value buy leaves avg_buy_price at 0: its proceeds count as gain
    if sold > 0 and bought > 0:
        cost_of_sold = min(sold, bought) * avg_buy_price
        realized_pnl = received - cost_of_sold
        if cost_of_sold > 0:
            realized_pnl_percent = realized_pnl / cost_of_sold * 100

    unrealized_pnl = 0.0
    if balance > 0 and bought > 0:
        unrealized_pnl = current_value - balance * avg_buy_price

    total_pnl = (received + current_value) - spent
    pnl_percent = total_pnl / spent * 100 if spent > 0 else 0.0
    pnl_percent = clamp_display_percent(pnl_percent, total_pnl, position.trade_count)

    concentration = spent / total_portfolio_spent * 100 if total_portfolio_spent > 0 else 0.0
    days = hold_time_days(position, now)

    ranking_score = (
        days * 5
        + (realized_pnl_percent * 2 if realized_pnl_percent > 0 else 0)
        + concentration * 3
    )

    return TokenAnalysis(
        symbol=position.symbol,
        token_identifier=position.reference_identifier,
        trade_count=position.trade_count,
        total_bought=bought,
        total_sold=sold,
        holding_balance=balance,
        total_spent_usd=spent,
        total_received_usd=received,
        current_price=position.current_price,
        current_value_usd=current_value,
        avg_buy_price=avg_buy_price,
        realized_pnl=realized_pnl,
        realized_pnl_percent=realized_pnl_percent,
        unrealized_pnl=unrealized_pnl,
        total_pnl=total_pnl,
        pnl_percent=pnl_percent,
        concentration_percent=concentration,
        hold_time_days=days,
        held_significant_value=max(spent, current_value) >= SIGNIFICANT_VALUE_USD,
        ranking_score=ranking_score,
    )


def analyze_positions(positions: Dict[str, Position], now: int) -> List[TokenAnalysis]:
    """Analyze every position against the combined portfolio spend"""
    total_portfolio_spent = sum(p.total_spent_usd for p in positions.values())
    return [
        analyze_position(position, total_portfolio_spent, now)
        for position in positions.values()
    ]
