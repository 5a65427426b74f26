#!/usr/bin/env python3
"""
Offline wrapped report from saved provider responses

Reads raw Etherscan ({"transactions": [...], "tokenTransfers": [...]})
and/or Helius (list of enhanced transactions) JSON files, runs the
aggregation with a fixed price map and writes the summary JSON plus charts.
"""
import argparse
import json
import sys
import os
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from wallet_wrapped.chains.base import Chain
from wallet_wrapped.normalizer import normalize_records, merge_transactions
from wallet_wrapped.summary import aggregate
from wallet_wrapped.token_registry import TokenResolver
from wallet_wrapped.visualization.charts import WrappedVisualizer


def load_json(path: str):
    with open(path, 'r') as f:
        return json.load(f)


def main():
    parser = argparse.ArgumentParser(description='Build a wrapped report from saved records')
    parser.add_argument('--eth-file', help='Saved Etherscan records (JSON)')
    parser.add_argument('--eth-address', help='Ethereum wallet the file belongs to')
    parser.add_argument('--sol-file', help='Saved Helius records (JSON)')
    parser.add_argument('--sol-address', help='Solana wallet the file belongs to')
    parser.add_argument('--prices', help='JSON map of identifier -> USD price')
    parser.add_argument('--now', help='Reference instant, ISO format (default: now, UTC)')
    parser.add_argument('--output-dir', default='output/wrapped', help='Output directory')

    args = parser.parse_args()

    now = datetime.fromisoformat(args.now) if args.now else datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now_ts = int(now.timestamp())

    ledgers = []
    chains = []
    if args.eth_file and args.eth_address:
        ledgers.append(normalize_records(load_json(args.eth_file), Chain.ETHEREUM, args.eth_address, now_ts))
        chains.append(Chain.ETHEREUM.value)
    if args.sol_file and args.sol_address:
        ledgers.append(normalize_records(load_json(args.sol_file), Chain.SOLANA, args.sol_address, now_ts))
        chains.append(Chain.SOLANA.value)

    if not ledgers:
        parser.error("provide --eth-file/--eth-address and/or --sol-file/--sol-address")

    transactions = merge_transactions(*ledgers)
    print(f"Loaded {len(transactions)} transactions")

    prices = load_json(args.prices) if args.prices else {}
    resolver = TokenResolver(prices=prices)
    summary = aggregate(transactions, resolver, now_ts, chains=chains)

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    summary_path = output_dir / "summary.json"
    with open(summary_path, 'w') as f:
        json.dump(summary.to_dict(), f, indent=2, sort_keys=True)
    print(f"  Created: {summary_path}")

    WrappedVisualizer().plot_summary(summary, output_dir=str(output_dir), show=False)

    print(f"\n{summary.archetype.name}: {summary.archetype.description}")
    print(f"Activity score: {summary.activity_score}/100")


if __name__ == '__main__':
    main()
