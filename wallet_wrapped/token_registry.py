"""Token symbol and price resolution"""
import requests
import json
from pathlib import Path
from typing import Dict, Optional
from datetime import datetime, timedelta


SOL_MINT = "So11111111111111111111111111111111111111112"
WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"

# Native assets (and their wrapped forms)
NATIVE_IDENTIFIERS = {
    "SOL": "SOL",
    SOL_MINT: "SOL",
    "ETH": "ETH",
    WETH: "ETH",
}

# USD-pegged stable tokens
STABLE_IDENTIFIERS = {
    "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",  # USDC (Solana)
    "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",  # USDT (Solana)
    "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",  # USDC
    "0xdac17f958d2ee523a2206206994597c13d831ec7",  # USDT
    "0x6b175474e89094c44da98b954eedeac495271d0f",  # DAI
}

DEFAULT_SYMBOLS = {
    "SOL": "SOL",
    SOL_MINT: "SOL",
    "ETH": "ETH",
    WETH: "WETH",
    "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v": "USDC",
    "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB": "USDT",
    "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48": "USDC",
    "0xdac17f958d2ee523a2206206994597c13d831ec7": "USDT",
    "0x6b175474e89094c44da98b954eedeac495271d0f": "DAI",
    "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263": "BONK",
    "EKpQGSJtjMFqKZ9KQanSqYXRcF8fBopzLHYxdM65zcjm": "WIF",
    "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN": "JUP",
}

# Rough fallbacks when no live price snapshot is supplied
DEFAULT_PRICES = {
    "SOL": 200.0,
    "ETH": 2000.0,
}


class TokenResolver:
    """
    Identifier -> symbol / USD price lookups

    Both maps are explicit and overridable; the module-level tables are
    only defaults. Unknown prices resolve to 0.
    """

    def __init__(
        self,
        symbols: Optional[Dict[str, str]] = None,
        prices: Optional[Dict[str, float]] = None,
        use_defaults: bool = True
    ):
        """
        Args:
            symbols: Identifier -> symbol overrides
            prices: Identifier -> USD price overrides
            use_defaults: Start from DEFAULT_SYMBOLS / DEFAULT_PRICES
        """
        self.symbols: Dict[str, str] = dict(DEFAULT_SYMBOLS) if use_defaults else {}
        self.prices: Dict[str, float] = dict(DEFAULT_PRICES) if use_defaults else {}
        self.symbols.update(symbols or {})
        self.prices.update(prices or {})

    @classmethod
    def from_token_list(
        cls,
        cache_file: str = "data/token_list.json",
        cache_ttl_hours: int = 24,
        url: str = "https://tokens.jup.ag/tokens?tags=verified",
        prices: Optional[Dict[str, float]] = None
    ) -> "TokenResolver":
        """
        Build a resolver from the Jupiter token list (cached on disk)

        Args:
            cache_file: Path to cache file
            cache_ttl_hours: Cache time-to-live in hours
            url: Token list endpoint
            prices: Optional price map
        """
        cache_path = Path(cache_file)
        tokens = None

        if cache_path.exists():
            cache_age = datetime.now() - datetime.fromtimestamp(cache_path.stat().st_mtime)
            if cache_age < timedelta(hours=cache_ttl_hours):
                try:
                    with open(cache_path, 'r') as f:
                        tokens = json.load(f)
                    print(f"✓ Loaded {len(tokens)} tokens from cache ({cache_path})")
                except (OSError, ValueError) as e:
                    print(f"Warning: Could not load cache: {e}")

        if tokens is None:
            try:
                response = requests.get(url, timeout=10)
                response.raise_for_status()
                data = response.json()
                tokens = data['tokens'] if isinstance(data, dict) and 'tokens' in data else data

                cache_path.parent.mkdir(parents=True, exist_ok=True)
                with open(cache_path, 'w') as f:
                    json.dump(tokens, f, indent=2)
                print(f"✓ Fetched {len(tokens)} tokens from {url}")
            except (requests.RequestException, ValueError, OSError) as e:
                print(f"⚠ Could not fetch token list: {e}")
                tokens = []

        symbols = {
            token['address']: token['symbol']
            for token in tokens
            if isinstance(token, dict) and token.get('address') and token.get('symbol')
        }
        return cls(symbols=symbols, prices=prices)

    def with_symbols(self, symbols: Dict[str, str]) -> "TokenResolver":
        """Copy with extra symbols; existing entries win over provider hints"""
        merged = dict(symbols)
        merged.update(self.symbols)
        return TokenResolver(symbols=merged, prices=self.prices, use_defaults=False)

    def get_symbol(self, identifier: str, hint: Optional[str] = None) -> str:
        """
        Get token symbol

        Args:
            identifier: Mint / contract address or native id
            hint: Symbol supplied by the provider for this leg

        Returns:
            Symbol, or a placeholder derived from the identifier
        """
        if not identifier:
            return hint or "UNKNOWN"
        if identifier in self.symbols:
            return self.symbols[identifier]
        if hint:
            return hint
        if identifier.endswith("pump"):
            return "PUMP"
        return identifier[:4] + "..."

    def get_price(self, identifier: str) -> float:
        """USD price, 0.0 when unknown"""
        if identifier in self.prices:
            price = self.prices[identifier]
            return price if price and price > 0 else 0.0
        native = NATIVE_IDENTIFIERS.get(identifier)
        if native and native != identifier:
            return self.get_price(native)
        if identifier in STABLE_IDENTIFIERS:
            return 1.0
        return 0.0

    def is_native(self, identifier: str) -> bool:
        return identifier in NATIVE_IDENTIFIERS

    def is_stable(self, identifier: str) -> bool:
        return identifier in STABLE_IDENTIFIERS

    def is_reference(self, identifier: str) -> bool:
        return self.is_native(identifier) or self.is_stable(identifier)
