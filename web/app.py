"""Web API for Wallet Wrapped"""
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
import uvicorn

from wallet_wrapped.analyzer import WrappedAnalyzer
from wallet_wrapped.chains.evm import is_valid_evm_address
from wallet_wrapped import config as wrapped_config

from web.config import ETHERSCAN_API_KEY, HELIUS_API_KEY, HOST, PORT
from web.services import process_analysis_result

app = FastAPI(title="Wallet Wrapped", description="Yearly trading recap for Ethereum and Solana wallets")


def get_analyzer() -> WrappedAnalyzer:
    return WrappedAnalyzer(
        etherscan_api_key=ETHERSCAN_API_KEY,
        helius_api_key=HELIUS_API_KEY,
        use_mock=wrapped_config.USE_MOCK_DATA,
        fetch_prices=wrapped_config.FETCH_PRICES,
        limit=wrapped_config.TX_LIMIT,
    )


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "ethereum_enabled": bool(ETHERSCAN_API_KEY),
        "solana_enabled": bool(HELIUS_API_KEY),
        "mock_fallback": wrapped_config.USE_MOCK_DATA,
    }


@app.get("/api/wrapped")
async def api_wrapped(
    eth: Optional[str] = Query(None, description="Ethereum address"),
    sol: Optional[str] = Query(None, description="Solana address"),
):
    """Wrapped summary for up to one Ethereum and one Solana wallet"""
    eth = (eth or "").strip() or None
    sol = (sol or "").strip() or None

    if not eth and not sol:
        raise HTTPException(status_code=400, detail="Provide an Ethereum and/or Solana address")
    if eth and not is_valid_evm_address(eth):
        raise HTTPException(status_code=400, detail=f"Invalid Ethereum address: {eth}")

    report = await get_analyzer().run(eth_address=eth, sol_address=sol)
    return process_analysis_result(report)


if __name__ == "__main__":
    uvicorn.run(app, host=HOST, port=PORT)
