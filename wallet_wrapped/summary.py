"""Summary aggregation: canonical transactions -> wrapped summary"""
import calendar
import math
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional, Sequence, Tuple, Union

from .chains.base import CanonicalTransaction
from .token_registry import TokenResolver
from .swap_matcher import match_swaps
from .ledger import build_positions
from .pnl import TokenAnalysis, analyze_positions, SIGNIFICANT_VALUE_USD


DAY_NAMES = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']
MONTH_NAMES = list(calendar.month_abbr)[1:]

NO_TOKEN = 'N/A'
TOP_TOKEN_COUNT = 5
NIGHT_OWL_BONUS = 15


@dataclass(frozen=True)
class TokenRanking:
    symbol: str
    volume_usd: float
    pnl_usd: float
    pnl_percent: float
    concentration_percent: float
    trade_count: int
    hold_days: int
    ranking_score: float


@dataclass(frozen=True)
class TradeHighlight:
    symbol: str
    pnl_usd: float
    pnl_percent: float
    total_spent_usd: float
    total_received_usd: float
    avg_buy_price: float
    current_price: float


@dataclass(frozen=True)
class HoldHighlight:
    symbol: str
    days: int
    trade_count: int


@dataclass(frozen=True)
class Archetype:
    key: str
    name: str
    description: str


@dataclass(frozen=True)
class Summary:
    """Terminal output of one aggregation run"""
    generated_at: int
    chains: Tuple[str, ...]
    total_transactions: int
    swap_count: int
    skipped_swaps: int
    total_volume_usd: float
    total_fees_usd: float
    unique_symbol_count: int
    hourly_activity: Tuple[int, ...]
    daily_activity: Tuple[int, ...]
    monthly_activity: Tuple[int, ...]
    peak_hour: Optional[int]
    peak_day: Optional[int]
    peak_month: Optional[int]
    top_tokens: Tuple[TokenRanking, ...]
    best_trade: Optional[TradeHighlight]
    worst_trade: Optional[TradeHighlight]
    comfort_coin: HoldHighlight
    longest_hold: Optional[HoldHighlight]
    shortest_hold: Optional[HoldHighlight]
    average_hold_days: float
    archetype: Archetype
    activity_score: int
    tokens: Tuple[TokenAnalysis, ...] = field(default=(), repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict/list/number/str structure, safe for json.dumps"""
        data = asdict(self)
        data['tokens'] = [token.to_dict() for token in self.tokens]
        return _lists(data)


def _lists(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _lists(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_lists(v) for v in value]
    return value


def to_timestamp(now: Union[datetime, int, float]) -> int:
    """Seconds since epoch for a datetime or a number"""
    if isinstance(now, datetime):
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return int(now.timestamp())
    return int(now)


def peak_index(counts: Sequence[int]) -> Optional[int]:
    """Bucket with the highest count, lowest index on ties; None if all empty"""
    if not counts or max(counts) <= 0:
        return None
    return list(counts).index(max(counts))


def is_night_hour(hour: Optional[int]) -> bool:
    return hour is not None and (22 <= hour < 24 or 0 <= hour <= 5)


def activity_score(swap_count: int, unique_symbols: int, total_transactions: int,
                   peak_hour: Optional[int]) -> int:
    """Composite 0-100 activity score"""
    raw = (
        swap_count * 2
        + unique_symbols * 3
        + total_transactions / 5
        + (NIGHT_OWL_BONUS if is_night_hour(peak_hour) else 0)
    )
    score = int(math.floor(raw + 0.5))
    return max(0, min(100, score))


def build_histograms(transactions: Sequence[CanonicalTransaction]):
    """Hour-of-day, day-of-week (Sunday first) and month-of-year counts in UTC"""
    hourly = [0] * 24
    daily = [0] * 7
    monthly = [0] * 12

    for tx in transactions:
        try:
            dt = datetime.fromtimestamp(tx.timestamp, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            # Not representable as a calendar date
            continue
        hourly[dt.hour] += 1
        daily[(dt.weekday() + 1) % 7] += 1
        monthly[dt.month - 1] += 1

    return hourly, daily, monthly


def transaction_totals(transactions: Sequence[CanonicalTransaction], resolver: TokenResolver):
    """Fee USD, volume USD and the set of symbols the wallet touched"""
    fees_usd = 0.0
    volume_usd = 0.0
    symbols = set()

    for tx in transactions:
        fees_usd += tx.fee_in_native_units * resolver.get_price(tx.native_identifier)

        for leg in tx.wallet_legs():
            symbols.add(resolver.get_symbol(leg.token_identifier, leg.symbol))
            if resolver.is_stable(leg.token_identifier):
                volume_usd += leg.amount
            else:
                price = resolver.get_price(leg.token_identifier)
                if price > 0:
                    volume_usd += leg.amount * price

    return fees_usd, volume_usd, symbols


def _ranking(a: TokenAnalysis) -> TokenRanking:
    return TokenRanking(
        symbol=a.symbol,
        volume_usd=a.volume_usd,
        pnl_usd=a.total_pnl,
        pnl_percent=a.pnl_percent,
        concentration_percent=a.concentration_percent,
        trade_count=a.trade_count,
        hold_days=a.hold_time_days,
        ranking_score=a.ranking_score,
    )


def _highlight(a: TokenAnalysis) -> TradeHighlight:
    return TradeHighlight(
        symbol=a.symbol,
        pnl_usd=a.total_pnl,
        pnl_percent=a.pnl_percent,
        total_spent_usd=a.total_spent_usd,
        total_received_usd=a.total_received_usd,
        avg_buy_price=a.avg_buy_price,
        current_price=a.current_price,
    )


def _hold(a: TokenAnalysis) -> HoldHighlight:
    return HoldHighlight(symbol=a.symbol, days=a.hold_time_days, trade_count=a.trade_count)


def best_and_worst(candidates: List[TokenAnalysis]):
    """Best by P&L percent, worst by most negative P&L (dust excluded)"""
    material = [a for a in candidates if a.total_spent_usd >= SIGNIFICANT_VALUE_USD]

    winners = sorted(
        (a for a in material if a.pnl_percent > 0),
        key=lambda a: (-a.pnl_percent, a.symbol)
    )
    best = _highlight(winners[0]) if winners else None

    losers = sorted(
        (a for a in candidates if a.total_pnl < 0),
        key=lambda a: (a.total_pnl, a.symbol)
    )
    if losers:
        worst = _highlight(losers[0])
    elif material:
        worst = _highlight(min(material, key=lambda a: (a.pnl_percent, a.symbol)))
    else:
        worst = None

    return best, worst


def classify(average_hold: float, swap_count: int) -> Archetype:
    """Ordered decision list, first match wins"""
    if average_hold >= 30:
        return Archetype(
            'long_conviction_holder', 'Diamond Hands',
            f"Average hold of {average_hold:.0f} days. Few trades, maximum conviction."
        )
    if swap_count > 200:
        return Archetype(
            'hyperactive', 'Hyperactive Degen',
            f"{swap_count} swaps this year! You live for the pump."
        )
    if swap_count > 100:
        return Archetype(
            'active_trader', 'Active Trader',
            f"{swap_count} swaps. Regular swapper with a taste for alpha."
        )
    if swap_count > 50:
        return Archetype(
            'selective', 'Selective Sniper',
            f"{swap_count} swaps. You pick your shots carefully. Quality over quantity."
        )
    if average_hold >= 14:
        return Archetype(
            'patient_holder', 'Patient Holder',
            f"Average hold of {average_hold:.0f} days. You give your picks time to work."
        )
    return Archetype(
        'new_low_activity', 'Fresh Wallet',
        f"Only {swap_count} swaps so far. Your on-chain story is just getting started."
    )


def build_summary(
    transactions: Sequence[CanonicalTransaction],
    analyses: Sequence[TokenAnalysis],
    resolver: TokenResolver,
    now: int,
    swap_count: int,
    skipped_swaps: int = 0,
    chains: Optional[Sequence[str]] = None
) -> Summary:
    """
    Combine per-token analysis with transaction statistics

    Args:
        transactions: All canonical transactions of the run
        analyses: TokenAnalysis for every position
        resolver: Symbol/price lookups
        now: Reference timestamp of the run
        swap_count: Number of swap transactions
        skipped_swaps: Swaps that produced no priced trade
        chains: Ledger names to report (defaults to those present)
    """
    hourly, daily, monthly = build_histograms(transactions)
    fees_usd, volume_usd, symbols = transaction_totals(transactions, resolver)
    peak_hour = peak_index(hourly)

    tokens = [a for a in analyses if not resolver.is_reference(a.token_identifier)]
    tokens.sort(key=lambda a: a.symbol)
    candidates = [a for a in tokens if a.volume_usd > 0]

    top = sorted(candidates, key=lambda a: (-a.ranking_score, a.symbol))[:TOP_TOKEN_COUNT]
    best, worst = best_and_worst(candidates)

    significant = [a for a in tokens if a.held_significant_value]
    if significant:
        comfort = _hold(min(significant, key=lambda a: (-a.hold_time_days, a.symbol)))
    elif top:
        comfort = _hold(top[0])
    else:
        comfort = HoldHighlight(symbol=NO_TOKEN, days=0, trade_count=0)

    holds = [a for a in significant if not resolver.is_stable(a.token_identifier)]
    longest = _hold(min(holds, key=lambda a: (-a.hold_time_days, a.symbol))) if holds else None
    shortest = _hold(min(holds, key=lambda a: (a.hold_time_days, a.symbol))) if holds else None

    qualifying = [a for a in significant if not resolver.is_native(a.token_identifier)]
    average_hold = (
        sum(a.hold_time_days for a in qualifying) / len(qualifying) if qualifying else 0.0
    )

    if chains is None:
        chains = sorted({tx.chain.value for tx in transactions})

    return Summary(
        generated_at=now,
        chains=tuple(chains),
        total_transactions=len(transactions),
        swap_count=swap_count,
        skipped_swaps=skipped_swaps,
        total_volume_usd=volume_usd,
        total_fees_usd=fees_usd,
        unique_symbol_count=len(symbols),
        hourly_activity=tuple(hourly),
        daily_activity=tuple(daily),
        monthly_activity=tuple(monthly),
        peak_hour=peak_hour,
        peak_day=peak_index(daily),
        peak_month=peak_index(monthly),
        top_tokens=tuple(_ranking(a) for a in top),
        best_trade=best,
        worst_trade=worst,
        comfort_coin=comfort,
        longest_hold=longest,
        shortest_hold=shortest,
        average_hold_days=average_hold,
        archetype=classify(average_hold, swap_count),
        activity_score=activity_score(swap_count, len(symbols), len(transactions), peak_hour),
        tokens=tuple(tokens),
    )


def aggregate(
    transactions: Sequence[CanonicalTransaction],
    resolver: TokenResolver,
    now: Union[datetime, int, float],
    chains: Optional[Sequence[str]] = None
) -> Summary:
    """
    Run the whole engine: swap matching, ledger, P&L, summary

    Args:
        transactions: Canonical transactions sorted ascending by timestamp
        resolver: Symbol/price snapshot for the run
        now: Fixed reference instant (never read from the clock here)
        chains: Ledger names to report

    Returns:
        Summary
    """
    now_ts = to_timestamp(now)
    matched = match_swaps(transactions, resolver)
    positions = build_positions(matched.events)
    analyses = analyze_positions(positions, now_ts)

    return build_summary(
        transactions,
        analyses,
        resolver,
        now_ts,
        swap_count=matched.swap_count,
        skipped_swaps=matched.skipped_swaps,
        chains=chains,
    )
