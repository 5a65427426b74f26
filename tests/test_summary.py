"""Tests for summary aggregation"""
import json

import pytest

from wallet_wrapped.summary import (
    aggregate, activity_score, build_histograms, classify, peak_index, NO_TOKEN, TOP_TOKEN_COUNT
)
from wallet_wrapped.token_registry import TokenResolver

from conftest import TOKEN_X, TOKEN_Y, JAN_1, DAY, swap, transfer


HOUR = 3600


def portfolio():
    """X: closed for a 10% gain; Y: still held at a loss"""
    return [
        swap(JAN_1, token_in=(TOKEN_X, 1000), sol_out=1.0),
        swap(JAN_1 + DAY, token_in=(TOKEN_Y, 100), usdc_out=300.0),
        swap(JAN_1 + 10 * DAY, token_out=(TOKEN_X, 1000), sol_in=1.1),
    ]


def test_empty_ledger():
    summary = aggregate([], TokenResolver(), now=JAN_1)

    assert summary.total_transactions == 0
    assert summary.swap_count == 0
    assert summary.activity_score == 0
    assert summary.archetype.key == 'new_low_activity'
    assert summary.top_tokens == ()
    assert summary.best_trade is None
    assert summary.worst_trade is None
    assert summary.comfort_coin.symbol == NO_TOKEN
    assert summary.comfort_coin.days == 0
    assert summary.peak_hour is None
    assert summary.peak_day is None
    assert summary.peak_month is None
    assert sum(summary.hourly_activity) == 0
    assert len(summary.hourly_activity) == 24
    assert len(summary.daily_activity) == 7
    assert len(summary.monthly_activity) == 12
    assert summary.total_volume_usd == 0
    assert summary.average_hold_days == 0


def test_activity_score_is_clamped():
    assert activity_score(1000, 0, 1000, None) == 100
    assert activity_score(0, 0, 0, None) == 0
    assert activity_score(1, 1, 2, None) == 5  # 2 + 3 + 0.4
    assert activity_score(0, 0, 2, 23) == 15  # 0.4 + night bonus


def test_activity_score_rounds_to_nearest():
    assert activity_score(1, 0, 12, None) == 4  # 4.4
    assert activity_score(0, 0, 5 * 7 + 2, 12) == 7  # 7.4
    assert activity_score(0, 0, 5 * 7 + 3, 12) == 8  # 7.6


def test_peak_ties_go_to_lowest_bucket():
    counts = [2] + [0] * 22 + [2]

    assert peak_index(counts) == 0
    assert peak_index([0] * 24) is None


def test_histograms_use_utc_with_sunday_first():
    # JAN_1 is a Wednesday; JAN_1 + 4 days is a Sunday
    txs = [transfer(JAN_1 + 13 * HOUR), transfer(JAN_1 + 4 * DAY), transfer(JAN_1 + 40 * DAY)]

    hourly, daily, monthly = build_histograms(txs)

    assert hourly[13] == 1
    assert hourly[0] == 2
    assert daily[3] == 1
    assert daily[0] == 1
    assert monthly[0] == 2
    assert monthly[1] == 1


def test_histograms_skip_dates_past_the_calendar(resolver):
    txs = [transfer(JAN_1), transfer(JAN_1 * 10 ** 6)]

    hourly, daily, monthly = build_histograms(txs)

    assert sum(hourly) == sum(daily) == sum(monthly) == 1
    assert aggregate(txs, resolver, now=JAN_1).total_transactions == 2


def test_night_owl_peak_adds_bonus(resolver):
    txs = [transfer(JAN_1), transfer(JAN_1 + 1), transfer(JAN_1 + 23 * HOUR), transfer(JAN_1 + 23 * HOUR + 1)]

    summary = aggregate(txs, resolver, now=JAN_1 + DAY)

    assert summary.peak_hour == 0
    assert summary.unique_symbol_count == 1
    # 0 swaps, 1 symbol, 4 transactions, night peak
    assert summary.activity_score == round(3 + 0.8 + 15)
    assert summary.total_fees_usd == pytest.approx(4 * 5000 / 1e9 * 200)


def test_portfolio_highlights(resolver):
    summary = aggregate(portfolio(), resolver, now=JAN_1 + 40 * DAY)

    assert summary.swap_count == 3
    assert summary.total_transactions == 3
    assert summary.chains == ('solana',)
    assert {t.symbol for t in summary.top_tokens} == {'XTK', 'YTK'}
    scores = [t.ranking_score for t in summary.top_tokens]
    assert scores == sorted(scores, reverse=True)

    assert summary.best_trade.symbol == 'XTK'
    assert summary.best_trade.pnl_percent == pytest.approx(10)
    assert summary.worst_trade.symbol == 'YTK'
    assert summary.worst_trade.pnl_usd == pytest.approx(-100)

    assert summary.comfort_coin.symbol == 'YTK'
    assert summary.comfort_coin.days == 39
    assert summary.longest_hold.symbol == 'YTK'
    assert summary.shortest_hold.symbol == 'XTK'
    assert summary.shortest_hold.days == 10
    assert summary.average_hold_days == pytest.approx(24.5)
    assert summary.archetype.key == 'patient_holder'

    # X, SOL, Y, USDC
    assert summary.unique_symbol_count == 4
    assert summary.total_volume_usd == pytest.approx(200 + 220 + 200 + 300)


def test_reference_assets_never_ranked(resolver):
    summary = aggregate(portfolio(), resolver, now=JAN_1 + 40 * DAY)

    ranked = {t.symbol for t in summary.tokens}
    assert ranked.isdisjoint({'SOL', 'USDC', 'ETH', 'WETH'})


def test_top_tokens_are_capped(resolver):
    txs = [
        swap(JAN_1 + i * DAY, token_in=(f"T{i}xxMint", 10), usdc_out=10.0 + i)
        for i in range(TOP_TOKEN_COUNT + 2)
    ]

    summary = aggregate(txs, resolver, now=JAN_1 + 60 * DAY)

    assert len(summary.tokens) == TOP_TOKEN_COUNT + 2
    assert len(summary.top_tokens) == TOP_TOKEN_COUNT
    # Earliest buys have the longest holds
    assert [t.symbol for t in summary.top_tokens] == [f"T{i}xx..." for i in range(TOP_TOKEN_COUNT)]
    assert summary.top_tokens[0].hold_days == 60


def test_no_winners_means_no_best_trade(resolver):
    txs = [swap(JAN_1, token_in=(TOKEN_Y, 100), usdc_out=300.0)]

    summary = aggregate(txs, resolver, now=JAN_1 + DAY)

    assert summary.best_trade is None
    assert summary.worst_trade.symbol == 'YTK'


def test_archetype_decision_order():
    assert classify(45, 500).key == 'long_conviction_holder'
    assert classify(2, 201).key == 'hyperactive'
    assert classify(2, 200).key == 'active_trader'
    assert classify(2, 101).key == 'active_trader'
    assert classify(2, 51).key == 'selective'
    assert classify(14, 50).key == 'patient_holder'
    assert classify(13.9, 50).key == 'new_low_activity'
    assert classify(0, 0).name == 'Fresh Wallet'


def test_aggregation_is_deterministic(resolver):
    txs = portfolio() + [transfer(JAN_1 + 5 * DAY)]

    first = json.dumps(aggregate(txs, resolver, now=JAN_1 + 40 * DAY).to_dict(), sort_keys=True)
    second = json.dumps(aggregate(txs, resolver, now=JAN_1 + 40 * DAY).to_dict(), sort_keys=True)

    assert first == second
    assert json.loads(first)['archetype']['key'] == 'patient_holder'
