"""Two-ledger wallet wrapped analyzer"""
import argparse
import asyncio
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional, Tuple

from . import config
from .chains.base import Chain, CanonicalTransaction, RecordSource, RecordSourceError
from .chains.evm import EtherscanClient, is_valid_evm_address
from .chains.solana import HeliusClient
from .chains.mock import MockRecordSource
from .normalizer import normalize_records, merge_transactions
from .price_service import PriceService
from .summary import Summary, aggregate, to_timestamp
from .token_registry import TokenResolver


def shorten_address(address: str, chain: Chain) -> str:
    """0x1234...abcd for Ethereum, AbCd...wxyz for Solana"""
    head = 6 if chain == Chain.ETHEREUM else 4
    if len(address) <= head + 4:
        return address
    return f"{address[:head]}...{address[-4:]}"


def format_timeframe(start_date: str, now: datetime) -> str:
    """e.g. 'Jan 1 - Oct 18, 2025'"""
    start = datetime.strptime(start_date, "%Y-%m-%d")
    return f"{start.strftime('%b')} {start.day} - {now.strftime('%b')} {now.day}, {now.year}"


@dataclass
class WrappedReport:
    """Summary plus the run context shown alongside it"""
    summary: Summary
    wallets: Dict[str, str] = field(default_factory=dict)
    sources: Dict[str, str] = field(default_factory=dict)
    timeframe: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'wallets': dict(self.wallets),
            'sources': dict(self.sources),
            'timeframe': self.timeframe,
            'summary': self.summary.to_dict(),
        }


class WrappedAnalyzer:
    """Fetch both ledgers, normalize, price and aggregate"""

    def __init__(
        self,
        etherscan_api_key: str = None,
        helius_api_key: str = None,
        use_mock: bool = True,
        fetch_prices: bool = True,
        start_date: str = None,
        limit: int = 100,
        resolver: TokenResolver = None
    ):
        """
        Initialize analyzer

        Args:
            etherscan_api_key: Etherscan API key for Ethereum
            helius_api_key: Helius API key for Solana
            use_mock: Fall back to synthetic records when a provider is unavailable
            fetch_prices: Fetch current prices from CoinGecko
            start_date: First day analyzed (YYYY-MM-DD)
            limit: Max records per ledger
            resolver: Base symbol/price resolver
        """
        self.etherscan_api_key = etherscan_api_key
        self.helius_api_key = helius_api_key
        self.use_mock = use_mock
        self.fetch_prices = fetch_prices
        self.start_date = start_date or config.START_DATE
        self.limit = limit
        self.resolver = resolver or TokenResolver()

    def get_source(self, chain: Chain) -> RecordSource:
        """Create the record source for a chain"""
        if chain == Chain.SOLANA:
            if self.helius_api_key:
                return HeliusClient(api_key=self.helius_api_key)
        elif self.etherscan_api_key:
            return EtherscanClient(api_key=self.etherscan_api_key)

        if self.use_mock:
            print(f"  No API key for {chain.value}, using mock data")
            return MockRecordSource(chain)
        raise ValueError(f"No API key configured for {chain.value}")

    async def _fetch(self, source: RecordSource, address: str) -> Tuple[Any, Dict[str, str]]:
        async with source:
            records = await source.fetch_records(
                address,
                start_timestamp=config.start_timestamp(self.start_date),
                limit=self.limit
            )
            hints = await source.fetch_symbol_hints(records)
        return records, hints

    async def load_ledger(
        self,
        chain: Chain,
        address: str,
        now: int
    ) -> Tuple[List[CanonicalTransaction], Dict[str, str], str]:
        """
        Fetch and normalize one ledger

        Returns:
            (transactions, symbol hints, source name)
        """
        print(f"\nFetching {chain.value}: {shorten_address(address, chain)}")

        try:
            source = self.get_source(chain)
            records, hints = await self._fetch(source, address)
        except (RecordSourceError, ValueError) as e:
            print(f"  Error: {e}")
            if not self.use_mock:
                return [], {}, "error"
            print("  Falling back to mock data")
            source = MockRecordSource(chain)
            records, hints = await self._fetch(source, address)

        transactions = normalize_records(records, chain, address, now)
        print(f"  Normalized {len(transactions)} {chain.value} transactions")
        return transactions, hints, type(source).__name__

    async def run(
        self,
        eth_address: Optional[str] = None,
        sol_address: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> WrappedReport:
        """
        Build the wrapped report for up to two wallets

        Args:
            eth_address: Ethereum wallet (optional)
            sol_address: Solana wallet (optional)
            now: Reference instant (defaults to the current UTC time)

        Raises:
            ValueError: If eth_address is not a 0x-prefixed 40-hex-digit address
        """
        if eth_address and not is_valid_evm_address(eth_address):
            raise ValueError(f"Invalid Ethereum address: {eth_address}")
        if now is None:
            now = datetime.now(timezone.utc)
        now_ts = to_timestamp(now)

        wallets = [
            (chain, address)
            for chain, address in ((Chain.ETHEREUM, eth_address), (Chain.SOLANA, sol_address))
            if address
        ]

        # Ledgers are independent, fetch them concurrently
        results = await asyncio.gather(*[
            self.load_ledger(chain, address, now_ts) for chain, address in wallets
        ])

        transactions = merge_transactions(*[txs for txs, _, _ in results])
        hints: Dict[str, str] = {}
        for _, ledger_hints, _ in results:
            hints.update(ledger_hints)

        if self.fetch_prices:
            print("\nFetching prices...")
            async with PriceService() as price_service:
                resolver = await price_service.build_resolver(transactions, hints, base=self.resolver)
        else:
            resolver = self.resolver.with_symbols(hints)

        chains = [chain.value for chain, _ in wallets]
        summary = aggregate(transactions, resolver, now_ts, chains=chains)

        return WrappedReport(
            summary=summary,
            wallets={chain.value: shorten_address(address, chain) for chain, address in wallets},
            sources={chain.value: source for (chain, _), (_, _, source) in zip(wallets, results)},
            timeframe=format_timeframe(self.start_date, now),
        )


def print_report(report: WrappedReport):
    """Print the wrapped summary to stdout"""
    summary = report.summary

    print(f"\n{'='*60}")
    print(f"  WALLET WRAPPED  ({report.timeframe})")
    print(f"{'='*60}")
    for chain, label in report.wallets.items():
        print(f"  {chain:<10} {label}  [{report.sources.get(chain, '')}]")

    print(f"\nTransactions:   {summary.total_transactions:,}")
    print(f"Swaps:          {summary.swap_count:,}")
    print(f"Volume:         ${summary.total_volume_usd:,.2f}")
    print(f"Fees:           ${summary.total_fees_usd:,.2f}")
    print(f"Unique tokens:  {summary.unique_symbol_count}")
    print(f"Activity score: {summary.activity_score}/100")
    print(f"Personality:    {summary.archetype.name} - {summary.archetype.description}")

    if summary.top_tokens:
        print(f"\nTop Tokens:")
        print(f"{'Token':<12} {'Volume':>14} {'P&L':>12} {'P&L %':>9} {'Days':>6} {'Trades':>7}")
        print("-" * 64)
        for token in summary.top_tokens:
            print(f"{token.symbol:<12} {token.volume_usd:>14,.2f} {token.pnl_usd:>12,.2f} "
                  f"{token.pnl_percent:>8.1f}% {token.hold_days:>6} {token.trade_count:>7}")

    if summary.best_trade:
        print(f"\nBest trade:  {summary.best_trade.symbol} ({summary.best_trade.pnl_percent:+.1f}%)")
    if summary.worst_trade:
        print(f"Worst trade: {summary.worst_trade.symbol} ({summary.worst_trade.pnl_percent:+.1f}%)")
    print(f"Comfort coin: {summary.comfort_coin.symbol} ({summary.comfort_coin.days} days)")


async def main():
    """Command line entry point"""
    parser = argparse.ArgumentParser(description='Wallet wrapped analytics for Ethereum and Solana')
    parser.add_argument('--eth', help='Ethereum wallet address')
    parser.add_argument('--sol', help='Solana wallet address')
    parser.add_argument('--start-date', default=config.START_DATE, help='First day analyzed (YYYY-MM-DD)')
    parser.add_argument('--limit', type=int, default=config.TX_LIMIT, help='Max records per ledger')
    parser.add_argument('--no-prices', action='store_true', help='Skip CoinGecko price lookups')
    parser.add_argument('--no-mock', action='store_true', help='Do not fall back to mock data')
    parser.add_argument('--json', dest='json_file', help='Write the report as JSON to this file')
    parser.add_argument('--charts', dest='chart_dir', help='Write charts to this directory')

    args = parser.parse_args()

    if not args.eth and not args.sol:
        parser.error("at least one of --eth / --sol is required")
    if args.eth and not is_valid_evm_address(args.eth):
        parser.error(f"invalid Ethereum address: {args.eth}")

    analyzer = WrappedAnalyzer(
        etherscan_api_key=config.ETHERSCAN_API_KEY,
        helius_api_key=config.HELIUS_API_KEY,
        use_mock=config.USE_MOCK_DATA and not args.no_mock,
        fetch_prices=config.FETCH_PRICES and not args.no_prices,
        start_date=args.start_date,
        limit=args.limit,
    )

    report = await analyzer.run(eth_address=args.eth, sol_address=args.sol)
    print_report(report)

    if args.json_file:
        with open(args.json_file, 'w') as f:
            json.dump(report.to_dict(), f, indent=2)
        print(f"\nSaved report: {args.json_file}")

    if args.chart_dir:
        from .visualization.charts import WrappedVisualizer
        WrappedVisualizer().plot_summary(summary=report.summary, output_dir=args.chart_dir, show=False)


def cli():
    asyncio.run(main())


if __name__ == '__main__':
    cli()
