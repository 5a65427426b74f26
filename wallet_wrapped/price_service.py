"""Token Price Service using CoinGecko API"""
import aiohttp
import asyncio
from typing import Dict, List, Optional, Iterable

from .chains.base import Chain, CanonicalTransaction
from .token_registry import TokenResolver


# CoinGecko platform IDs for each chain
COINGECKO_PLATFORMS = {
    Chain.ETHEREUM: "ethereum",
    Chain.SOLANA: "solana",
}

# Native token CoinGecko IDs
NATIVE_TOKEN_IDS = {
    "ETH": "ethereum",
    "SOL": "solana",
}


class PriceService:
    """Fetch current token prices from CoinGecko"""

    BASE_URL = "https://api.coingecko.com/api/v3"

    def __init__(self, batch_size: int = 50):
        self.session: Optional[aiohttp.ClientSession] = None
        self.batch_size = batch_size

    async def __aenter__(self):
        self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()

    async def get_native_prices(self) -> Dict[str, float]:
        """Get native asset prices keyed by native identifier (ETH, SOL)"""
        try:
            url = f"{self.BASE_URL}/simple/price"
            params = {
                "ids": ",".join(sorted(set(NATIVE_TOKEN_IDS.values()))),
                "vs_currencies": "usd"
            }

            async with self.session.get(url, params=params, timeout=aiohttp.ClientTimeout(total=10)) as resp:
                if resp.status == 200:
                    data = await resp.json()
                    return {
                        native: float(data.get(coingecko_id, {}).get("usd", 0) or 0)
                        for native, coingecko_id in NATIVE_TOKEN_IDS.items()
                        if data.get(coingecko_id, {}).get("usd")
                    }
                print(f"CoinGecko native price request failed: HTTP {resp.status}")
        except (asyncio.TimeoutError, aiohttp.ClientError) as e:
            print(f"Error fetching native price: {e}")

        return {}

    async def get_token_prices(
        self,
        chain: Chain,
        token_addresses: List[str]
    ) -> Dict[str, float]:
        """Get prices for multiple tokens by contract address / mint"""
        platform = COINGECKO_PLATFORMS.get(chain)
        if not platform or not token_addresses:
            return {}

        prices = {}

        for i in range(0, len(token_addresses), self.batch_size):
            batch = token_addresses[i:i + self.batch_size]
            batch_prices = await self._fetch_batch_prices(platform, batch)
            prices.update(batch_prices)

            # Rate limit: CoinGecko free tier is 10-30 calls/min
            if i + self.batch_size < len(token_addresses):
                await asyncio.sleep(1)

        return prices

    async def _fetch_batch_prices(
        self,
        platform: str,
        addresses: List[str]
    ) -> Dict[str, float]:
        """Fetch prices for a batch of addresses"""
        try:
            url = f"{self.BASE_URL}/simple/token_price/{platform}"
            params = {
                "contract_addresses": ",".join(addresses),
                "vs_currencies": "usd"
            }

            async with self.session.get(url, params=params, timeout=aiohttp.ClientTimeout(total=15)) as resp:
                if resp.status == 200:
                    data = await resp.json()
                    return match_addresses(addresses, data)
                elif resp.status == 429:
                    print("CoinGecko rate limit hit, skipping batch")
                    return {}
        except (asyncio.TimeoutError, aiohttp.ClientError) as e:
            print(f"Error fetching token prices: {e}")

        return {}

    async def build_resolver(
        self,
        transactions: Iterable[CanonicalTransaction],
        symbols: Optional[Dict[str, str]] = None,
        base: Optional[TokenResolver] = None
    ) -> TokenResolver:
        """
        Price every identifier seen in the transactions

        Args:
            transactions: Canonical transactions of the run
            symbols: Extra identifier -> symbol hints
            base: Resolver whose maps are extended

        Returns:
            TokenResolver holding the price snapshot
        """
        resolver = base or TokenResolver()

        by_chain: Dict[Chain, List[str]] = {}
        for tx in transactions:
            for leg in tx.token_transfers:
                identifier = leg.token_identifier
                if not identifier or resolver.is_reference(identifier):
                    continue
                addresses = by_chain.setdefault(tx.chain, [])
                if identifier not in addresses:
                    addresses.append(identifier)

        prices = dict(resolver.prices)
        prices.update(await self.get_native_prices())
        for chain, addresses in by_chain.items():
            chain_prices = await self.get_token_prices(chain, addresses)
            print(f"  Priced {len(chain_prices)}/{len(addresses)} {chain.value} tokens")
            prices.update(chain_prices)

        merged_symbols = dict(symbols or {})
        merged_symbols.update(resolver.symbols)
        return TokenResolver(symbols=merged_symbols, prices=prices, use_defaults=False)


def match_addresses(addresses: List[str], data: Dict) -> Dict[str, float]:
    """
    Map CoinGecko's response back onto the requested identifiers

    CoinGecko lowercases keys; Solana mints are case-sensitive, so the
    requested spelling is restored.
    """
    by_lower = {addr.lower(): addr for addr in addresses}
    prices = {}
    for key, info in (data or {}).items():
        requested = by_lower.get(key.lower())
        price = (info or {}).get("usd") if isinstance(info, dict) else None
        if requested and price:
            prices[requested] = float(price)
    return prices
