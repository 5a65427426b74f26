"""Trade ledger: fold trade events into one position per symbol"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .swap_matcher import TradeEvent, BUY, SELL


@dataclass
class Position:
    """Running position for one token symbol"""
    symbol: str
    reference_identifier: str
    trades: List[TradeEvent] = field(default_factory=list)
    total_bought: float = 0.0
    total_sold: float = 0.0
    total_spent_usd: float = 0.0
    total_received_usd: float = 0.0
    first_acquisition_time: Optional[int] = None
    last_disposal_time: Optional[int] = None
    current_price: float = 0.0

    @property
    def holding_balance(self) -> float:
        return self.total_bought - self.total_sold

    @property
    def trade_count(self) -> int:
        return len(self.trades)

    def apply(self, event: TradeEvent):
        """Accumulate one trade event (events must arrive in timestamp order)"""
        if event.direction == BUY:
            self.total_bought += event.token_amount
            self.total_spent_usd += event.usd_value
            if self.first_acquisition_time is None:
                self.first_acquisition_time = event.timestamp
        elif event.direction == SELL:
            self.total_sold += event.token_amount
            self.total_received_usd += event.usd_value
            if self.last_disposal_time is None or event.timestamp >= self.last_disposal_time:
                self.last_disposal_time = event.timestamp
        else:
            return

        if event.current_price > 0:
            self.current_price = event.current_price
        self.trades.append(event)


def build_positions(events: Sequence[TradeEvent]) -> Dict[str, Position]:
    """
    Build positions from an ordered trade event stream

    Args:
        events: Trade events sorted ascending by timestamp

    Returns:
        Dict mapping symbol -> Position, in first-seen order
    """
    positions: Dict[str, Position] = {}

    for event in events:
        position = positions.get(event.symbol)
        if position is None:
            position = Position(
                symbol=event.symbol,
                reference_identifier=event.token_identifier,
            )
            positions[event.symbol] = position
        position.apply(event)

    return positions
