# Ledger adapters
from .base import (
    Chain, TxKind, CanonicalTransaction, TransferLeg, NativeLeg,
    RecordSource, RecordSourceError, NATIVE_TOKENS, DUST_THRESHOLD
)
from .evm import EtherscanClient, normalize_etherscan
from .solana import HeliusClient, normalize_helius
from .mock import MockRecordSource
