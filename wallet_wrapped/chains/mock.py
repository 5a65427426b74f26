"""Deterministic synthetic records used when a provider is unavailable"""
import random
import zlib
from typing import List, Dict, Any

from .base import RecordSource, Chain


POOL_ADDRESS = "MockPoo1111111111111111111111111111111111111"
EVM_POOL_ADDRESS = "0x000000000000000000000000000000000000dead"

MOCK_SOLANA_MINTS = [
    ("DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263", "BONK"),
    ("EKpQGSJtjMFqKZ9KQanSqYXRcF8fBopzLHYxdM65zcjm", "WIF"),
    ("JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN", "JUP"),
    ("4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R", "RAY"),
]

MOCK_EVM_TOKENS = [
    ("0x6982508145454ce325ddbe47a25d4ec3d2311933", "PEPE", 18),
    ("0x514910771af9ca656af840dff83e8264ecf986ca", "LINK", 18),
    ("0x1f9840a85d5af5bf1d1762f8d98c4c4fa0e1c4b9", "UNI", 18),
    ("0xb50721bcf8d664c30412cfbc6cf7a15145234ad1", "ARB", 18),
]

USDC_MAINNET = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"

SECONDS_PER_DAY = 86400


class MockRecordSource(RecordSource):
    """
    Synthetic record source emitting provider-shaped records

    Records are seeded from the address so repeated runs produce the same
    data for the same wallet.
    """

    def __init__(self, chain: Chain, count: int = 120, seed: int = 2025):
        """
        Args:
            chain: Ledger whose provider schema is imitated
            count: Number of transactions to generate
            seed: Base random seed
        """
        self.chain = chain
        self.count = count
        self.seed = seed

    def _rng(self, address: str) -> random.Random:
        return random.Random(self.seed + zlib.crc32(address.encode()))

    async def fetch_records(
        self,
        address: str,
        start_timestamp: int = 0,
        limit: int = 100
    ) -> Any:
        count = min(self.count, limit) if limit else self.count
        if self.chain == Chain.SOLANA:
            return self.solana_records(address, start_timestamp, count)
        return self.ethereum_records(address, start_timestamp, count)

    async def fetch_symbol_hints(self, records: Any) -> Dict[str, str]:
        if self.chain == Chain.SOLANA:
            return {mint: symbol for mint, symbol in MOCK_SOLANA_MINTS}
        return {address: symbol for address, symbol, _ in MOCK_EVM_TOKENS}

    def solana_records(self, address: str, start_timestamp: int, count: int) -> List[Dict[str, Any]]:
        """Helius-shaped swaps and transfers, newest first like the real API"""
        rng = self._rng(address)
        records = []
        holdings: Dict[str, float] = {}

        for i in range(count):
            timestamp = start_timestamp + i * 2 * SECONDS_PER_DAY + rng.randint(0, SECONDS_PER_DAY - 1)
            mint, _ = MOCK_SOLANA_MINTS[i % len(MOCK_SOLANA_MINTS)]
            sol_lamports = rng.randint(1, 40) * 50_000_000
            held = holdings.get(mint, 0.0)

            if i % 7 == 6:
                records.append({
                    'signature': f"mock-sol-{i}",
                    'timestamp': timestamp,
                    'type': 'TRANSFER',
                    'fee': 5000,
                    'tokenTransfers': [],
                    'nativeTransfers': [{
                        'fromUserAccount': address,
                        'toUserAccount': POOL_ADDRESS,
                        'amount': sol_lamports,
                    }],
                })
                continue

            selling = held > 0 and rng.random() < 0.4
            if selling:
                amount = round(held * rng.choice([0.5, 1.0]), 6)
                holdings[mint] = held - amount
                token_transfer = {'mint': mint, 'tokenAmount': amount,
                                  'fromUserAccount': address, 'toUserAccount': POOL_ADDRESS}
                native_transfer = {'fromUserAccount': POOL_ADDRESS, 'toUserAccount': address,
                                   'amount': sol_lamports}
            else:
                amount = float(rng.randint(100, 100_000))
                holdings[mint] = held + amount
                token_transfer = {'mint': mint, 'tokenAmount': amount,
                                  'fromUserAccount': POOL_ADDRESS, 'toUserAccount': address}
                native_transfer = {'fromUserAccount': address, 'toUserAccount': POOL_ADDRESS,
                                   'amount': sol_lamports}

            records.append({
                'signature': f"mock-sol-{i}",
                'timestamp': timestamp,
                'type': 'SWAP',
                'fee': 5000 + rng.randint(0, 20000),
                'tokenTransfers': [token_transfer],
                'nativeTransfers': [native_transfer],
            })

        records.reverse()
        return records

    def ethereum_records(self, address: str, start_timestamp: int, count: int) -> Dict[str, Any]:
        """Etherscan-shaped txlist and tokentx rows (USDC <-> token swaps)"""
        rng = self._rng(address)
        wallet = address.lower()
        transactions = []
        token_transfers = []

        for i in range(count):
            timestamp = str(start_timestamp + i * 3 * SECONDS_PER_DAY + rng.randint(0, SECONDS_PER_DAY - 1))
            tx_hash = f"0xmock{i:060x}"
            transactions.append({
                'hash': tx_hash,
                'timeStamp': timestamp,
                'from': wallet,
                'to': EVM_POOL_ADDRESS,
                'value': '0',
                'gasUsed': str(rng.randint(21000, 180000)),
                'gasPrice': str(rng.randint(5, 40) * 10 ** 9),
                'isError': '0',
            })

            contract, symbol, decimals = MOCK_EVM_TOKENS[i % len(MOCK_EVM_TOKENS)]
            usdc = rng.randint(20, 2000)
            tokens = rng.randint(1, 5000)
            buying = i % 3 != 2
            token_from, token_to = (EVM_POOL_ADDRESS, wallet) if buying else (wallet, EVM_POOL_ADDRESS)

            token_transfers.append({
                'hash': tx_hash, 'timeStamp': timestamp,
                'from': token_to, 'to': token_from,
                'contractAddress': USDC_MAINNET, 'tokenSymbol': 'USDC',
                'tokenDecimal': '6', 'value': str(usdc * 10 ** 6),
            })
            token_transfers.append({
                'hash': tx_hash, 'timeStamp': timestamp,
                'from': token_from, 'to': token_to,
                'contractAddress': contract, 'tokenSymbol': symbol,
                'tokenDecimal': str(decimals), 'value': str(tokens * 10 ** decimals),
            })

        transactions.reverse()
        token_transfers.reverse()
        return {'transactions': transactions, 'tokenTransfers': token_transfers}
