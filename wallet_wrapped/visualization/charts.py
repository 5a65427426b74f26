"""Charts for the wrapped summary"""
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
from pathlib import Path
from typing import List, Optional

from ..summary import Summary, MONTH_NAMES, DAY_NAMES


class WrappedVisualizer:
    """Render the activity histograms and top tokens of a Summary"""

    def __init__(self, style: str = 'seaborn-v0_8-darkgrid'):
        """
        Initialize visualizer

        Args:
            style: Matplotlib style to use
        """
        try:
            plt.style.use(style)
        except (OSError, ValueError):
            plt.style.use('default')

    def _finish(self, fig, output_dir: Optional[str], filename: str, show: bool) -> Optional[Path]:
        filepath = None
        if output_dir:
            output_path = Path(output_dir)
            output_path.mkdir(parents=True, exist_ok=True)
            filepath = output_path / filename
            fig.savefig(filepath, dpi=150, bbox_inches='tight', facecolor='white')
            print(f"Saved plot: {filepath}")

        if show:
            plt.show()
        plt.close(fig)
        return filepath

    def plot_monthly_activity(self, summary: Summary, output_dir: Optional[str] = None,
                              show: bool = False) -> Optional[Path]:
        """Monthly transaction counts, peak month highlighted"""
        counts = list(summary.monthly_activity)
        x = np.arange(len(MONTH_NAMES))
        colors = ['#00D4AA' if c > 0 else '#cccccc' for c in counts]
        if summary.peak_month is not None:
            colors[summary.peak_month] = '#9945FF'

        fig, ax = plt.subplots(figsize=(14, 6))
        ax.bar(x, counts, color=colors, alpha=0.85)
        ax.set_xticks(x)
        ax.set_xticklabels(MONTH_NAMES, fontsize=11)
        ax.set_ylabel('Transaction Count', fontsize=12, fontweight='bold')
        ax.set_title('Monthly Activity', fontsize=16, fontweight='bold', pad=15)
        ax.grid(True, alpha=0.3, axis='y', linestyle='--')

        for i, count in enumerate(counts):
            if count > 0:
                ax.text(i, count, str(count), ha='center', va='bottom', fontsize=9, fontweight='bold')

        plt.tight_layout()
        return self._finish(fig, output_dir, 'monthly_activity.png', show)

    def plot_hourly_activity(self, summary: Summary, output_dir: Optional[str] = None,
                             show: bool = False) -> Optional[Path]:
        """Hour-of-day and day-of-week histograms (UTC)"""
        fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(16, 5), gridspec_kw={'width_ratios': [3, 1]})

        hours = np.arange(24)
        hour_colors = ['#14F195'] * 24
        if summary.peak_hour is not None:
            hour_colors[summary.peak_hour] = '#FF6B6B'
        ax1.bar(hours, summary.hourly_activity, color=hour_colors, alpha=0.85)
        ax1.set_xticks(hours)
        ax1.set_xlabel('Hour (UTC)', fontsize=12)
        ax1.set_ylabel('Transactions', fontsize=12)
        ax1.set_title('Peak Hours', fontsize=14, fontweight='bold')

        days = np.arange(7)
        ax2.bar(days, summary.daily_activity, color='#9945FF', alpha=0.8)
        ax2.set_xticks(days)
        ax2.set_xticklabels([d[:3] for d in DAY_NAMES], fontsize=10)
        ax2.set_title('Days', fontsize=14, fontweight='bold')

        plt.tight_layout()
        return self._finish(fig, output_dir, 'hourly_activity.png', show)

    def plot_top_tokens(self, summary: Summary, output_dir: Optional[str] = None,
                        show: bool = False) -> Optional[Path]:
        """Horizontal bars of USD volume and P&L for the ranked tokens"""
        if not summary.top_tokens:
            print("  No ranked tokens to plot")
            return None

        tokens = list(reversed(summary.top_tokens))
        y = np.arange(len(tokens))
        height = 0.38

        fig, ax = plt.subplots(figsize=(12, 1.2 * len(tokens) + 2))
        ax.barh(y + height / 2, [t.volume_usd for t in tokens], height, label='Volume (USD)', color='#00D4AA')
        pnl_colors = ['#14F195' if t.pnl_usd >= 0 else '#FF6B6B' for t in tokens]
        ax.barh(y - height / 2, [t.pnl_usd for t in tokens], height, label='P&L (USD)', color=pnl_colors)
        ax.axvline(x=0, color='black', linewidth=0.8)
        ax.set_yticks(y)
        ax.set_yticklabels([t.symbol for t in tokens], fontsize=12)
        ax.set_title('Top Tokens', fontsize=16, fontweight='bold', pad=15)
        ax.legend(loc='lower right')
        ax.grid(True, alpha=0.3, axis='x', linestyle='--')

        plt.tight_layout()
        return self._finish(fig, output_dir, 'top_tokens.png', show)

    def plot_summary(self, summary: Summary, output_dir: Optional[str] = None,
                     show: bool = False) -> List[Path]:
        """Render every chart; returns the saved file paths"""
        paths = [
            self.plot_monthly_activity(summary, output_dir, show),
            self.plot_hourly_activity(summary, output_dir, show),
            self.plot_top_tokens(summary, output_dir, show),
        ]
        return [p for p in paths if p is not None]
