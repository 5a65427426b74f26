"""Tests for provider record normalization"""
from wallet_wrapped.chains.base import Chain, TxKind, to_float, to_int, parse_timestamp, MAX_TIMESTAMP
from wallet_wrapped.normalizer import normalize_records, merge_transactions
from wallet_wrapped.summary import aggregate

from conftest import WALLET, POOL, TOKEN_X, JAN_1, DAY, helius_swap


ETH_WALLET = "0xAbC0000000000000000000000000000000000001"
ETH_POOL = "0x000000000000000000000000000000000000dEaD"
PEPE = "0x6982508145454Ce325dDbE47a25d4ec3d2311933"
USDC_ETH = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"


def test_numeric_parsing_defaults_to_zero():
    assert to_float("1.5") == 1.5
    assert to_float("abc") == 0.0
    assert to_float(None) == 0.0
    assert to_float("nan") == 0.0
    assert to_int("1700000000") == 1700000000
    assert to_int("12.7") == 12
    assert to_int({}) == 0


def test_helius_records_sorted_ascending():
    records = [
        helius_swap(JAN_1 + 2 * DAY, TOKEN_X, 10, 2 * 10 ** 9, buying=False),
        helius_swap(JAN_1, TOKEN_X, 10, 10 ** 9),
    ]

    txs = normalize_records(records, Chain.SOLANA, WALLET, now=JAN_1 + 10 * DAY)

    assert [tx.timestamp for tx in txs] == [JAN_1, JAN_1 + 2 * DAY]
    first = txs[0]
    assert first.kind == TxKind.SWAP
    assert first.native_transfers[0].amount == 1.0
    assert first.token_transfers[0].direction(WALLET) == 'in'
    assert first.native_transfers[0].direction(WALLET) == 'out'
    assert first.fee_native == 5000


def test_helius_kinds_and_malformed_fields():
    now = JAN_1 + 100
    records = [
        {'type': 'TRANSFER', 'timestamp': JAN_1, 'fee': 'oops',
         'nativeTransfers': [{'amount': 'bad', 'fromUserAccount': WALLET, 'toUserAccount': POOL}]},
        {'type': 'NFT_MINT', 'fee': 5000},
        "not a record",
    ]

    txs = normalize_records(records, Chain.SOLANA, WALLET, now=now)

    assert len(txs) == 2
    assert txs[0].kind == TxKind.TRANSFER
    assert txs[0].fee_native == 0
    assert txs[0].native_transfers == []
    # Missing timestamp is treated as normalization time
    assert txs[1].timestamp == now
    assert txs[1].kind == TxKind.OTHER


def test_self_transfer_legs_are_dropped():
    records = [{
        'type': 'TRANSFER', 'timestamp': JAN_1,
        'tokenTransfers': [{'mint': TOKEN_X, 'tokenAmount': 5, 'fromUserAccount': WALLET, 'toUserAccount': WALLET}],
    }]

    txs = normalize_records(records, Chain.SOLANA, WALLET, now=JAN_1)

    assert txs[0].token_transfers == []


def test_empty_input_is_empty_ledger():
    assert normalize_records(None, Chain.SOLANA, WALLET, now=JAN_1) == []
    assert normalize_records([], Chain.ETHEREUM, ETH_WALLET, now=JAN_1) == []


def test_etherscan_rows_grouped_by_hash():
    records = {
        "transactions": [{
            "hash": "0x1", "timeStamp": str(JAN_1 + 50), "from": ETH_WALLET, "to": ETH_POOL,
            "value": "0", "gasUsed": "100000", "gasPrice": "20000000000", "isError": "0",
        }],
        "tokenTransfers": [
            {"hash": "0x1", "timeStamp": str(JAN_1 + 50), "from": ETH_WALLET, "to": ETH_POOL,
             "contractAddress": USDC_ETH, "tokenSymbol": "USDC", "tokenDecimal": "6", "value": "500000000"},
            {"hash": "0x1", "timeStamp": str(JAN_1 + 50), "from": ETH_POOL, "to": ETH_WALLET,
             "contractAddress": PEPE, "tokenSymbol": "PEPE", "tokenDecimal": "18", "value": str(3 * 10 ** 18)},
            {"hash": "0x2", "timeStamp": str(JAN_1), "from": ETH_POOL, "to": ETH_WALLET,
             "contractAddress": PEPE, "tokenSymbol": "PEPE", "tokenDecimal": "18", "value": str(10 ** 18)},
        ],
    }

    txs = normalize_records(records, Chain.ETHEREUM, ETH_WALLET, now=JAN_1 + DAY)

    assert [tx.signature for tx in txs] == ["0x2", "0x1"]
    airdrop, trade = txs
    assert airdrop.kind == TxKind.TRANSFER
    assert trade.kind == TxKind.SWAP
    assert trade.fee_native == 100000 * 20000000000
    assert trade.fee_in_native_units == 0.002
    assert trade.wallet == ETH_WALLET.lower()

    usdc_leg, pepe_leg = trade.token_transfers
    assert usdc_leg.amount == 500.0
    assert usdc_leg.direction(trade.wallet) == 'out'
    assert pepe_leg.token_identifier == PEPE.lower()
    assert pepe_leg.symbol == "PEPE"
    assert pepe_leg.amount == 3.0


def test_etherscan_failed_transaction_keeps_fee_only():
    records = {"transactions": [{
        "hash": "0x9", "timeStamp": str(JAN_1), "from": ETH_WALLET, "to": ETH_POOL,
        "value": str(10 ** 18), "gasUsed": "21000", "gasPrice": "1000000000", "isError": "1",
    }]}

    txs = normalize_records(records, Chain.ETHEREUM, ETH_WALLET, now=JAN_1)

    assert txs[0].fee_native == 21000 * 1000000000
    assert txs[0].native_transfers == []
    assert txs[0].kind == TxKind.OTHER


def test_merge_resorts_across_ledgers():
    sol = normalize_records([helius_swap(JAN_1 + 30, TOKEN_X, 1, 10 ** 9)], Chain.SOLANA, WALLET, now=JAN_1)
    eth = normalize_records({"transactions": [{
        "hash": "0x1", "timeStamp": str(JAN_1 + 10), "from": ETH_WALLET, "to": ETH_POOL,
        "value": "0", "gasUsed": "1", "gasPrice": "1",
    }]}, Chain.ETHEREUM, ETH_WALLET, now=JAN_1)

    merged = merge_transactions(sol, eth, None)

    assert [tx.chain for tx in merged] == [Chain.ETHEREUM, Chain.SOLANA]


def test_overflowing_numbers_fall_back_to_default():
    assert to_int(float("inf")) == 0
    assert to_int("Infinity", 7) == 7
    assert to_float(10 ** 400) == 0.0
    assert parse_timestamp(JAN_1 * 1000, 42) == 42
    assert parse_timestamp(-1, 42) == 42
    assert parse_timestamp(str(MAX_TIMESTAMP), 42) == MAX_TIMESTAMP


def test_millisecond_timestamps_become_normalization_time(resolver):
    now = JAN_1 + DAY
    records = [helius_swap(JAN_1 * 1000, TOKEN_X, 10, 10 ** 9)]
    eth_records = {"transactions": [{
        "hash": "0x1", "timeStamp": str(JAN_1 * 1000), "from": ETH_WALLET, "to": ETH_POOL,
        "value": "0", "gasUsed": "1", "gasPrice": "1",
    }]}

    sol = normalize_records(records, Chain.SOLANA, WALLET, now=now)
    eth = normalize_records(eth_records, Chain.ETHEREUM, ETH_WALLET, now=now)

    assert sol[0].timestamp == now
    assert eth[0].timestamp == now
    summary = aggregate(merge_transactions(sol, eth), resolver, now=now)
    assert summary.total_transactions == 2
    assert sum(summary.hourly_activity) == 2


def test_infinite_fee_is_malformed(resolver):
    record = helius_swap(JAN_1, TOKEN_X, 10, 10 ** 9)
    record['fee'] = float("inf")
    other = helius_swap(JAN_1 + 1, TOKEN_X, 10, 10 ** 9)
    other['fee'] = "Infinity"

    txs = normalize_records([record, other], Chain.SOLANA, WALLET, now=JAN_1 + DAY)

    assert [tx.fee_native for tx in txs] == [0, 0]
    assert aggregate(txs, resolver, now=JAN_1 + DAY).swap_count == 2


def test_oversized_token_decimals_are_clamped(resolver):
    rows = [
        {"hash": f"0x{i}", "timeStamp": str(JAN_1 + i), "from": ETH_POOL, "to": ETH_WALLET,
         "contractAddress": PEPE, "tokenSymbol": "PEPE", "tokenDecimal": decimals, "value": "5"}
        for i, decimals in enumerate(["400", "1e9", "-3"])
    ]

    txs = normalize_records({"tokenTransfers": rows}, Chain.ETHEREUM, ETH_WALLET, now=JAN_1 + DAY)

    amounts = [tx.token_transfers[0].amount for tx in txs]
    assert 0 < amounts[0] == amounts[1] < 1e-30
    assert amounts[2] == 5.0
    assert aggregate(txs, resolver, now=JAN_1 + DAY).total_transactions == 3


def test_non_string_mint_and_symbol_are_ignored(resolver):
    record = helius_swap(JAN_1, TOKEN_X, 10, 10 ** 9)
    record['tokenTransfers'][0]['mint'] = 12345
    record['tokenTransfers'][0]['tokenSymbol'] = ["X"]

    txs = normalize_records([record], Chain.SOLANA, WALLET, now=JAN_1 + DAY)

    leg = txs[0].token_transfers[0]
    assert leg.token_identifier == ""
    assert leg.symbol is None
    summary = aggregate(txs, resolver, now=JAN_1 + DAY)
    assert summary.swap_count == 1
    assert [t.symbol for t in summary.tokens] == ["UNKNOWN"]
