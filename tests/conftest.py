"""Shared fixtures and record builders"""
import pytest

from wallet_wrapped.chains.base import Chain, CanonicalTransaction, TransferLeg, NativeLeg, TxKind
from wallet_wrapped.token_registry import TokenResolver


WALLET = "WaLLet1111111111111111111111111111111111111"
POOL = "Poo11111111111111111111111111111111111111111"
TOKEN_X = "XtokenMint111111111111111111111111111111111"
TOKEN_Y = "YtokenMint111111111111111111111111111111111"
USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

# 2025-01-01 00:00:00 UTC, a Wednesday
JAN_1 = 1735689600
DAY = 86400


def swap(timestamp, token_in=None, token_out=None, sol_in=0.0, sol_out=0.0,
         usdc_in=0.0, usdc_out=0.0, fee=5000, wallet=WALLET):
    """
    Canonical Solana swap

    token_in / token_out are (identifier, amount) tuples for the wallet side.
    """
    token_legs = []
    if token_in:
        token_legs.append(TransferLeg(token_in[0], token_in[1], POOL, wallet))
    if token_out:
        token_legs.append(TransferLeg(token_out[0], token_out[1], wallet, POOL))
    if usdc_in:
        token_legs.append(TransferLeg(USDC, usdc_in, POOL, wallet))
    if usdc_out:
        token_legs.append(TransferLeg(USDC, usdc_out, wallet, POOL))

    native_legs = []
    if sol_in:
        native_legs.append(NativeLeg('SOL', sol_in, POOL, wallet))
    if sol_out:
        native_legs.append(NativeLeg('SOL', sol_out, wallet, POOL))

    return CanonicalTransaction(
        chain=Chain.SOLANA,
        wallet=wallet,
        signature=f"sig-{timestamp}",
        timestamp=timestamp,
        fee_native=fee,
        kind=TxKind.SWAP,
        token_transfers=token_legs,
        native_transfers=native_legs,
    )


def transfer(timestamp, sol_out=0.5, fee=5000, wallet=WALLET):
    return CanonicalTransaction(
        chain=Chain.SOLANA,
        wallet=wallet,
        signature=f"transfer-{timestamp}",
        timestamp=timestamp,
        fee_native=fee,
        kind=TxKind.TRANSFER,
        native_transfers=[NativeLeg('SOL', sol_out, wallet, POOL)],
    )


def helius_swap(timestamp, mint, token_amount, lamports, buying=True, wallet=WALLET, fee=5000):
    """Helius enhanced transaction for a SOL <-> token swap"""
    if buying:
        token = {'mint': mint, 'tokenAmount': token_amount, 'fromUserAccount': POOL, 'toUserAccount': wallet}
        native = {'amount': lamports, 'fromUserAccount': wallet, 'toUserAccount': POOL}
    else:
        token = {'mint': mint, 'tokenAmount': token_amount, 'fromUserAccount': wallet, 'toUserAccount': POOL}
        native = {'amount': lamports, 'fromUserAccount': POOL, 'toUserAccount': wallet}
    return {
        'signature': f"helius-{timestamp}",
        'timestamp': timestamp,
        'type': 'SWAP',
        'fee': fee,
        'tokenTransfers': [token],
        'nativeTransfers': [native],
    }


@pytest.fixture
def resolver():
    """SOL at $200, X unpriced, Y at $2"""
    return TokenResolver(
        symbols={TOKEN_X: 'XTK', TOKEN_Y: 'YTK'},
        prices={'SOL': 200.0, 'ETH': 2000.0, TOKEN_Y: 2.0},
    )
