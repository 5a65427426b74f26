"""Swap matching: swap transactions -> buy/sell trade events"""
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .chains.base import CanonicalTransaction, TransferLeg, TxKind
from .token_registry import TokenResolver


BUY = 'buy'
SELL = 'sell'


@dataclass(frozen=True)
class TradeEvent:
    """One side of a swap, priced in USD"""
    direction: str  # 'buy' or 'sell'
    symbol: str
    token_identifier: str
    token_amount: float
    usd_value: float
    timestamp: int
    current_price: float = 0.0  # Latest resolvable price of the token


@dataclass
class SwapMatchResult:
    """Trade events plus swap bookkeeping"""
    events: List[TradeEvent] = field(default_factory=list)
    swap_count: int = 0
    skipped_swaps: int = 0  # Swaps that produced no trade event
    unpriced_legs: int = 0


def split_legs(tx: CanonicalTransaction) -> Tuple[List[TransferLeg], List[TransferLeg]]:
    """Inbound and outbound wallet legs (token legs plus non-dust native legs)"""
    inbound, outbound = [], []
    for leg in tx.wallet_legs():
        if leg.direction(tx.wallet) == 'in':
            inbound.append(leg)
        else:
            outbound.append(leg)
    return inbound, outbound


def anchor_value(legs: Sequence[TransferLeg], resolver: TokenResolver) -> float:
    """
    USD value of a swap taken from its reference legs

    Stable legs count at face value, native legs at amount x native price.
    The largest single reference leg wins, so small fee/tip legs never
    set the price.
    """
    anchor = 0.0
    for leg in legs:
        identifier = leg.token_identifier
        if resolver.is_stable(identifier):
            value = leg.amount
        elif resolver.is_native(identifier):
            value = leg.amount * resolver.get_price(identifier)
        else:
            continue
        anchor = max(anchor, value)
    return anchor


def match_transaction(tx: CanonicalTransaction, resolver: TokenResolver) -> Tuple[List[TradeEvent], int]:
    """Trade events for one swap, and how many of its legs had no USD value"""
    inbound, outbound = split_legs(tx)
    anchor = anchor_value(inbound + outbound, resolver)

    events = []
    unpriced = 0
    for direction, legs in ((BUY, inbound), (SELL, outbound)):
        for leg in legs:
            identifier = leg.token_identifier
            if resolver.is_reference(identifier):
                continue

            price = resolver.get_price(identifier)
            usd_value = anchor if anchor > 0 else leg.amount * price
            if usd_value <= 0:
                # Still moves the position; only its cost basis is unknown
                unpriced += 1
                usd_value = 0.0

            events.append(TradeEvent(
                direction=direction,
                symbol=resolver.get_symbol(identifier, leg.symbol),
                token_identifier=identifier,
                token_amount=leg.amount,
                usd_value=usd_value,
                timestamp=tx.timestamp,
                current_price=price,
            ))

    return events, unpriced


def match_swaps(
    transactions: Sequence[CanonicalTransaction],
    resolver: TokenResolver
) -> SwapMatchResult:
    """
    Turn every swap into buy/sell trade events

    Args:
        transactions: Canonical transactions sorted ascending by timestamp
        resolver: Symbol/price lookups

    Returns:
        SwapMatchResult with events in timestamp order
    """
    result = SwapMatchResult()

    for tx in transactions:
        if tx.kind != TxKind.SWAP:
            continue

        result.swap_count += 1
        events, unpriced = match_transaction(tx, resolver)
        result.unpriced_legs += unpriced
        if not events:
            result.skipped_swaps += 1
            continue
        result.events.extend(events)

    return result
