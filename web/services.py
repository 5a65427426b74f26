"""Presentation helpers for the Web API"""
from typing import Dict, Any, List, Optional

from wallet_wrapped.analyzer import WrappedReport
from wallet_wrapped.summary import DAY_NAMES, MONTH_NAMES
from web.config import CHAIN_NAMES, SCORE_LABELS


def format_hour(hour: Optional[int]) -> Optional[str]:
    """24h bucket -> '9:00 PM' style label"""
    if hour is None:
        return None
    display = 12 if hour % 12 == 0 else hour % 12
    return f"{display}:00 {'PM' if hour >= 12 else 'AM'}"


def score_label(score: int) -> str:
    for threshold, label in SCORE_LABELS:
        if score >= threshold:
            return label
    return SCORE_LABELS[-1][1]


def monthly_rows(counts: List[int]) -> List[Dict[str, Any]]:
    return [{"month": name, "txs": count} for name, count in zip(MONTH_NAMES, counts)]


def process_analysis_result(report: WrappedReport) -> Dict[str, Any]:
    """Serialize a report and add the display labels the slides need"""
    data = report.to_dict()
    summary = data["summary"]

    summary["peak_hour_label"] = format_hour(summary["peak_hour"])
    summary["peak_day_label"] = DAY_NAMES[summary["peak_day"]] if summary["peak_day"] is not None else None
    summary["peak_month_label"] = MONTH_NAMES[summary["peak_month"]] if summary["peak_month"] is not None else None
    summary["monthly_rows"] = monthly_rows(summary["monthly_activity"])
    summary["score_label"] = score_label(summary["activity_score"])
    summary["total_volume_usd"] = round(summary["total_volume_usd"])
    summary["total_fees_usd"] = round(summary["total_fees_usd"], 2)

    data["chain_names"] = [CHAIN_NAMES.get(chain, chain) for chain in summary["chains"]]
    return data
