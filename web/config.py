"""Configuration and Constants for the Web API"""
import os

from wallet_wrapped import config

# API keys from environment
ETHERSCAN_API_KEY = config.ETHERSCAN_API_KEY
HELIUS_API_KEY = config.HELIUS_API_KEY

HOST = os.environ.get("WRAPPED_HOST", "0.0.0.0")
PORT = int(os.environ.get("WRAPPED_PORT", "8000"))

CHAIN_NAMES = {
    "ethereum": "Ethereum",
    "solana": "Solana",
}

# Score bands shown next to the activity score
SCORE_LABELS = [
    (80, "Certified Degen"),
    (50, "Respectable Player"),
    (0, "Casual Explorer"),
]
