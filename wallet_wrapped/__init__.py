"""Wallet wrapped: yearly trading analytics for Ethereum and Solana wallets"""
from .chains.base import Chain, CanonicalTransaction, TransferLeg, NativeLeg, TxKind
from .normalizer import normalize_records, merge_transactions
from .token_registry import TokenResolver
from .swap_matcher import TradeEvent, match_swaps
from .ledger import Position, build_positions
from .pnl import TokenAnalysis, analyze_positions
from .summary import Summary, aggregate

__version__ = "0.1.0"
