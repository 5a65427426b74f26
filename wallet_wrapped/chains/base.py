"""Canonical transaction model shared by every ledger adapter"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from enum import Enum


class Chain(Enum):
    """Supported ledgers"""
    ETHEREUM = "ethereum"
    SOLANA = "solana"


class TxKind(Enum):
    """Canonical transaction kinds"""
    TRANSFER = "transfer"
    SWAP = "swap"
    OTHER = "other"


# Native asset identifier and decimals per chain
NATIVE_TOKENS = {
    Chain.ETHEREUM: ("ETH", 18),
    Chain.SOLANA: ("SOL", 9),
}

# Native legs below this amount (native units) are fee noise
DUST_THRESHOLD = 0.001

# Last second representable as a UTC datetime (9999-12-31T23:59:59Z)
MAX_TIMESTAMP = 253402300799


class RecordSourceError(Exception):
    """Raised when a ledger data provider returns an error"""


def to_float(value: Any, default: float = 0.0) -> float:
    """Parse a numeric field, falling back to default on anything malformed"""
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if result != result or result in (float("inf"), float("-inf")):
        return default
    return result


def to_int(value: Any, default: int = 0) -> int:
    """Parse an integer field (accepts numeric strings such as '1700000000')"""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        parsed = to_float(value, float(default))
        return int(parsed)


def parse_timestamp(value: Any, default: int) -> int:
    """Parse a unix timestamp in seconds; missing or out-of-range values become default"""
    if value in (None, ""):
        return default
    timestamp = to_int(value, default)
    if timestamp < 0 or timestamp > MAX_TIMESTAMP:
        return default
    return timestamp


def same_wallet(a: Optional[str], b: Optional[str]) -> bool:
    """Wallet identifiers match (adapters store them already normalized)"""
    return bool(a) and bool(b) and a == b


@dataclass(frozen=True)
class TransferLeg:
    """One token movement inside a transaction"""
    token_identifier: str  # Contract address (or mint for Solana)
    amount: float  # Human-readable amount
    from_wallet: Optional[str] = None
    to_wallet: Optional[str] = None
    symbol: Optional[str] = None  # Provider-supplied symbol hint

    def direction(self, wallet: str) -> Optional[str]:
        """'in' / 'out' relative to wallet, None for third-party legs"""
        inbound = same_wallet(self.to_wallet, wallet)
        outbound = same_wallet(self.from_wallet, wallet)
        if inbound and not outbound:
            return 'in'
        if outbound and not inbound:
            return 'out'
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'token_identifier': self.token_identifier,
            'amount': self.amount,
            'from_wallet': self.from_wallet,
            'to_wallet': self.to_wallet,
            'symbol': self.symbol,
        }


@dataclass(frozen=True)
class NativeLeg(TransferLeg):
    """Movement of the chain's native asset"""

    @property
    def is_dust(self) -> bool:
        return self.amount < DUST_THRESHOLD


@dataclass(frozen=True)
class CanonicalTransaction:
    """Normalized transaction across ledgers"""
    chain: Chain
    wallet: str  # Subject wallet of the ledger this record came from
    signature: str
    timestamp: int
    fee_native: int  # Smallest native unit (wei, lamports)
    kind: TxKind
    token_transfers: List[TransferLeg] = field(default_factory=list)
    native_transfers: List[NativeLeg] = field(default_factory=list)

    @property
    def native_identifier(self) -> str:
        return NATIVE_TOKENS[self.chain][0]

    @property
    def fee_in_native_units(self) -> float:
        return self.fee_native / (10 ** NATIVE_TOKENS[self.chain][1])

    def wallet_legs(self, include_dust: bool = False) -> List[TransferLeg]:
        """Token and native legs that touch the subject wallet"""
        legs: List[TransferLeg] = []
        for leg in self.token_transfers:
            if leg.direction(self.wallet):
                legs.append(leg)
        for leg in self.native_transfers:
            if not include_dust and leg.is_dust:
                continue
            if leg.direction(self.wallet):
                legs.append(leg)
        return legs

    def to_dict(self) -> Dict[str, Any]:
        return {
            'chain': self.chain.value,
            'wallet': self.wallet,
            'signature': self.signature,
            'timestamp': self.timestamp,
            'fee_native': self.fee_native,
            'kind': self.kind.value,
            'token_transfers': [t.to_dict() for t in self.token_transfers],
            'native_transfers': [t.to_dict() for t in self.native_transfers],
        }


class RecordSource(ABC):
    """Abstract base class for ledger record providers"""

    chain: Chain

    @abstractmethod
    async def fetch_records(
        self,
        address: str,
        start_timestamp: int = 0,
        limit: int = 100
    ) -> Any:
        """Fetch raw provider records for an address (newest first is fine)"""
        pass

    async def fetch_symbol_hints(self, records: Any) -> Dict[str, str]:
        """Identifier -> symbol map the provider can supply for the records"""
        return {}

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass
