"""Solana ledger: Helius enhanced-transactions client and record adapter"""
import aiohttp
import asyncio
from typing import List, Dict, Any, Optional

from .base import (
    RecordSource, RecordSourceError, Chain, TxKind, CanonicalTransaction,
    TransferLeg, NativeLeg, to_float, to_int, parse_timestamp
)


HELIUS_API_URL = "https://api.helius.xyz/v0"

LAMPORTS_PER_SOL = 10 ** 9

KIND_MAP = {
    'SWAP': TxKind.SWAP,
    'TRANSFER': TxKind.TRANSFER,
}


def _account(value: Any) -> Optional[str]:
    if not value or not isinstance(value, str):
        return None
    return value


def normalize_helius(
    records: Optional[List[Dict[str, Any]]],
    wallet: str,
    now: int
) -> List[CanonicalTransaction]:
    """
    Convert Helius enhanced transactions into canonical transactions

    Args:
        records: Helius /addresses/{address}/transactions payload
        wallet: Subject wallet address
        now: Timestamp used for records without one

    Returns:
        Canonical transactions (unsorted)
    """
    transactions = []

    for index, tx in enumerate(records or []):
        if not isinstance(tx, dict):
            continue

        token_legs = []
        for transfer in tx.get('tokenTransfers') or []:
            if not isinstance(transfer, dict):
                continue
            from_wallet = _account(transfer.get('fromUserAccount'))
            to_wallet = _account(transfer.get('toUserAccount'))
            amount = to_float(transfer.get('tokenAmount'))
            if amount <= 0 or from_wallet == to_wallet:
                continue
            token_legs.append(TransferLeg(
                token_identifier=_account(transfer.get('mint')) or "",
                amount=amount,
                from_wallet=from_wallet,
                to_wallet=to_wallet,
                symbol=_account(transfer.get('tokenSymbol')),
            ))

        native_legs = []
        for transfer in tx.get('nativeTransfers') or []:
            if not isinstance(transfer, dict):
                continue
            from_wallet = _account(transfer.get('fromUserAccount'))
            to_wallet = _account(transfer.get('toUserAccount'))
            amount = to_float(transfer.get('amount')) / LAMPORTS_PER_SOL
            if amount <= 0 or from_wallet == to_wallet:
                continue
            native_legs.append(NativeLeg(
                token_identifier='SOL',
                amount=amount,
                from_wallet=from_wallet,
                to_wallet=to_wallet,
                symbol='SOL',
            ))

        transactions.append(CanonicalTransaction(
            chain=Chain.SOLANA,
            wallet=wallet or "",
            signature=str(tx.get('signature') or f"tx-{index}"),
            timestamp=parse_timestamp(tx.get('timestamp'), now),
            fee_native=to_int(tx.get('fee')),
            kind=KIND_MAP.get(str(tx.get('type', '')).upper(), TxKind.OTHER),
            token_transfers=token_legs,
            native_transfers=native_legs,
        ))

    return transactions


class HeliusClient(RecordSource):
    """Solana record source using the Helius enhanced API"""

    chain = Chain.SOLANA

    def __init__(self, api_key: str, base_url: str = HELIUS_API_URL):
        """
        Initialize Helius client

        Args:
            api_key: Helius API key
            base_url: Helius REST base URL
        """
        if not api_key:
            raise ValueError("Helius API key required")

        self.api_key = api_key
        self.base_url = base_url
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()

    async def fetch_records(
        self,
        address: str,
        start_timestamp: int = 0,
        limit: int = 100
    ) -> List[Dict[str, Any]]:
        """Get parsed transaction history since start_timestamp"""
        url = f"{self.base_url}/addresses/{address}/transactions"
        params = {'api-key': self.api_key, 'limit': min(limit, 100)}

        try:
            async with self.session.get(
                url,
                params=params,
                timeout=aiohttp.ClientTimeout(total=30)
            ) as resp:
                data = await resp.json(content_type=None)
        except asyncio.TimeoutError:
            raise RecordSourceError("Timeout calling Helius transactions")
        except aiohttp.ClientError as e:
            raise RecordSourceError(f"Network error calling Helius: {e}")

        if isinstance(data, dict) and data.get('error'):
            raise RecordSourceError(f"Helius API error: {data['error']}")

        transactions = data if isinstance(data, list) else []
        filtered = [
            tx for tx in transactions
            if isinstance(tx, dict) and to_int(tx.get('timestamp')) >= start_timestamp
        ]

        print(f"  Helius: {len(filtered)} of {len(transactions)} transactions in range")
        return filtered

    async def fetch_symbol_hints(self, records: Any) -> Dict[str, str]:
        """Resolve mint symbols through the Helius token-metadata endpoint"""
        mints = []
        for tx in records or []:
            if not isinstance(tx, dict):
                continue
            for transfer in tx.get('tokenTransfers') or []:
                if not isinstance(transfer, dict):
                    continue
                mint = _account(transfer.get('mint'))
                if mint and mint not in mints:
                    mints.append(mint)

        if not mints:
            return {}

        url = f"{self.base_url}/token-metadata"
        try:
            async with self.session.post(
                url,
                params={'api-key': self.api_key},
                json={'mintAccounts': mints[:100]},
                timeout=aiohttp.ClientTimeout(total=30)
            ) as resp:
                metadata = await resp.json(content_type=None)
        except (asyncio.TimeoutError, aiohttp.ClientError) as e:
            print(f"⚠ Failed to fetch token metadata: {e}")
            return {}

        return parse_token_metadata(metadata)


def parse_token_metadata(metadata: Any) -> Dict[str, str]:
    """Extract mint -> symbol from a Helius token-metadata response"""
    symbols = {}
    if not isinstance(metadata, list):
        return symbols

    for item in metadata:
        if not isinstance(item, dict) or not item.get('account'):
            continue
        on_chain = ((item.get('onChainMetadata') or {}).get('metadata') or {}).get('data') or {}
        legacy = item.get('legacyMetadata') or {}
        symbol = (on_chain.get('symbol') or '').replace('\0', '').strip()
        if not symbol:
            symbol = (legacy.get('symbol') or '').strip()
        if symbol:
            symbols[item['account']] = symbol

    return symbols
