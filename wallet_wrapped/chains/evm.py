"""Ethereum ledger: Etherscan v2 client and record adapter"""
import aiohttp
import asyncio
import re
from collections import OrderedDict
from typing import List, Dict, Any, Optional

from .base import (
    RecordSource, RecordSourceError, Chain, TxKind, CanonicalTransaction,
    TransferLeg, NativeLeg, to_float, to_int, parse_timestamp
)


ETHERSCAN_URL = "https://api.etherscan.io/v2/api"

WEI_PER_ETH = 10 ** 18

# ERC-20 decimals beyond this are treated as malformed
MAX_DECIMALS = 36


def is_valid_evm_address(address: str) -> bool:
    """Check if address is a valid EVM address (0x + 40 hex chars)"""
    return bool(re.match(r'^0x[a-fA-F0-9]{40}$', address or ""))


def _lower(value: Any) -> Optional[str]:
    if not value or not isinstance(value, str):
        return None
    return value.lower()


def _text(value: Any) -> Optional[str]:
    if not value or not isinstance(value, str):
        return None
    return value


def _classify(legs: List[TransferLeg], wallet: str) -> TxKind:
    directions = set()
    for leg in legs:
        if isinstance(leg, NativeLeg) and leg.is_dust:
            continue
        direction = leg.direction(wallet)
        if direction:
            directions.add(direction)
    if directions == {'in', 'out'}:
        return TxKind.SWAP
    if directions:
        return TxKind.TRANSFER
    return TxKind.OTHER


def normalize_etherscan(
    records: Optional[Dict[str, Any]],
    wallet: str,
    now: int
) -> List[CanonicalTransaction]:
    """
    Convert Etherscan txlist/tokentx rows into canonical transactions

    Args:
        records: {"transactions": [...], "tokenTransfers": [...]}
        wallet: Subject wallet address
        now: Timestamp used for rows without one

    Returns:
        Canonical transactions (unsorted)
    """
    records = records or {}
    wallet = _lower(wallet) or ""
    txlist = records.get("transactions") or []
    tokentx = records.get("tokenTransfers") or []

    # Group rows by transaction hash, keeping first-seen order
    grouped: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()

    def group_for(row: Dict[str, Any]) -> Dict[str, Any]:
        tx_hash = str(row.get("hash") or f"row-{len(grouped)}")
        if tx_hash not in grouped:
            grouped[tx_hash] = {
                "timestamp": None,
                "fee": 0,
                "native": [],
                "tokens": [],
            }
        group = grouped[tx_hash]
        if group["timestamp"] is None and row.get("timeStamp") not in (None, ""):
            group["timestamp"] = parse_timestamp(row.get("timeStamp"), now)
        return group

    for row in txlist:
        if not isinstance(row, dict):
            continue
        group = group_for(row)
        group["fee"] += to_int(row.get("gasUsed")) * to_int(row.get("gasPrice"))
        if str(row.get("isError", "0")) == "1":
            continue

        amount = to_float(row.get("value")) / WEI_PER_ETH
        from_wallet = _lower(row.get("from"))
        to_wallet = _lower(row.get("to"))
        if amount > 0 and from_wallet != to_wallet:
            group["native"].append(NativeLeg(
                token_identifier="ETH",
                amount=amount,
                from_wallet=from_wallet,
                to_wallet=to_wallet,
                symbol="ETH",
            ))

    for row in tokentx:
        if not isinstance(row, dict):
            continue
        group = group_for(row)
        decimals = min(max(to_int(row.get("tokenDecimal"), 18), 0), MAX_DECIMALS)
        amount = to_float(row.get("value")) / (10 ** decimals)
        from_wallet = _lower(row.get("from"))
        to_wallet = _lower(row.get("to"))
        if amount <= 0 or from_wallet == to_wallet:
            continue
        group["tokens"].append(TransferLeg(
            token_identifier=_lower(row.get("contractAddress")) or "",
            amount=amount,
            from_wallet=from_wallet,
            to_wallet=to_wallet,
            symbol=_text(row.get("tokenSymbol")),
        ))

    transactions = []
    for tx_hash, group in grouped.items():
        legs = group["tokens"] + group["native"]
        transactions.append(CanonicalTransaction(
            chain=Chain.ETHEREUM,
            wallet=wallet,
            signature=tx_hash,
            timestamp=group["timestamp"] if group["timestamp"] is not None else now,
            fee_native=group["fee"],
            kind=_classify(legs, wallet),
            token_transfers=group["tokens"],
            native_transfers=group["native"],
        ))

    return transactions


class EtherscanClient(RecordSource):
    """Ethereum record source using the Etherscan v2 API"""

    chain = Chain.ETHEREUM

    def __init__(self, api_key: str, chain_id: int = 1):
        """
        Initialize Etherscan client

        Args:
            api_key: Etherscan API key
            chain_id: EVM chain id for the v2 multichain endpoint
        """
        if not api_key:
            raise ValueError("Etherscan API key required")

        self.api_key = api_key
        self.chain_id = chain_id
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()

    async def _account_call(self, action: str, address: str) -> List[Dict[str, Any]]:
        """Call an account module action and return its result rows"""
        params = {
            "chainid": self.chain_id,
            "module": "account",
            "action": action,
            "address": address,
            "startblock": 0,
            "endblock": 99999999,
            "sort": "desc",
            "apikey": self.api_key,
        }

        try:
            async with self.session.get(
                ETHERSCAN_URL,
                params=params,
                timeout=aiohttp.ClientTimeout(total=30)
            ) as resp:
                data = await resp.json(content_type=None)
        except asyncio.TimeoutError:
            raise RecordSourceError(f"Timeout calling Etherscan {action}")
        except aiohttp.ClientError as e:
            raise RecordSourceError(f"Network error calling Etherscan {action}: {e}")

        result = data.get("result") if isinstance(data, dict) else None
        if isinstance(result, list):
            return result

        # "No transactions found" comes back with status 0 and an empty list
        message = data.get("message", "") if isinstance(data, dict) else ""
        raise RecordSourceError(f"Etherscan {action} error: {message} {result}")

    async def fetch_records(
        self,
        address: str,
        start_timestamp: int = 0,
        limit: int = 100
    ) -> Dict[str, Any]:
        """
        Get normal transactions and ERC-20 transfers since start_timestamp

        Args:
            address: Wallet address
            start_timestamp: Drop rows older than this
            limit: Maximum rows kept per list
        """
        if not is_valid_evm_address(address):
            raise ValueError(f"Invalid EVM address: {address}")

        transactions, token_transfers = await asyncio.gather(
            self._account_call("txlist", address),
            self._account_call("tokentx", address),
        )

        transactions = [
            tx for tx in transactions
            if to_int(tx.get("timeStamp")) >= start_timestamp
        ][:limit]
        token_transfers = [
            tx for tx in token_transfers
            if to_int(tx.get("timeStamp")) >= start_timestamp
        ][:limit]

        print(f"  Etherscan: {len(transactions)} transactions, {len(token_transfers)} token transfers")

        return {"transactions": transactions, "tokenTransfers": token_transfers}

    async def fetch_symbol_hints(self, records: Any) -> Dict[str, str]:
        """tokentx rows already carry symbols"""
        hints = {}
        for row in (records or {}).get("tokenTransfers", []):
            if not isinstance(row, dict):
                continue
            contract = _lower(row.get("contractAddress"))
            symbol = _text(row.get("tokenSymbol"))
            if contract and symbol:
                hints[contract] = symbol
        return hints
