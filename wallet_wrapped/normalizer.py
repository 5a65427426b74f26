"""Record normalization: provider records -> sorted canonical transactions"""
import time
from typing import Any, List, Optional, Sequence

from .chains.base import Chain, CanonicalTransaction
from .chains.evm import normalize_etherscan
from .chains.solana import normalize_helius


ADAPTERS = {
    Chain.ETHEREUM: normalize_etherscan,
    Chain.SOLANA: normalize_helius,
}


def sort_transactions(transactions: Sequence[CanonicalTransaction]) -> List[CanonicalTransaction]:
    """Ascending by timestamp; stable, so same-second records keep source order"""
    return sorted(transactions, key=lambda tx: tx.timestamp)


def normalize_records(
    records: Any,
    chain: Chain,
    wallet: str,
    now: Optional[int] = None
) -> List[CanonicalTransaction]:
    """
    Normalize one ledger's raw records

    Args:
        records: Provider payload (None is treated as no records)
        chain: Ledger tag selecting the adapter
        wallet: Subject wallet on that ledger
        now: Timestamp assigned to records without one (defaults to current time)

    Returns:
        Canonical transactions sorted ascending by timestamp
    """
    if now is None:
        now = int(time.time())
    if not records:
        return []

    adapter = ADAPTERS[chain]
    return sort_transactions(adapter(records, wallet, now))


def merge_transactions(*sequences: Sequence[CanonicalTransaction]) -> List[CanonicalTransaction]:
    """Concatenate per-ledger sequences and re-sort across ledgers"""
    merged: List[CanonicalTransaction] = []
    for sequence in sequences:
        merged.extend(sequence or [])
    return sort_transactions(merged)
