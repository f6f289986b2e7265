# luckyfive/visualization.py
import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns

from .backtest import BacktestResult


def plot_backtest_hits(result: BacktestResult, save_path="outputs/backtest_hits.png"):
    """
    Two-panel backtest report: distribution of the best hit count per contest,
    and the best hit count over the contest range.
    """
    fig, axes = plt.subplots(1, 2, figsize=(14, 5))
    fig.suptitle('Backtest Hit Analysis', fontsize=14, fontweight='bold')

    pick_count = result.params.pick_count if result.params else 5
    best_hits = [r.best_hits for r in result.contest_results]
    counts = [best_hits.count(k) for k in range(pick_count + 1)]

    sns.barplot(x=list(range(pick_count + 1)), y=counts, color='steelblue', ax=axes[0])
    axes[0].set_title('Best Hits per Contest', fontweight='bold')
    axes[0].set_xlabel('Hits')
    axes[0].set_ylabel('Contests')
    axes[0].grid(True, alpha=0.3)

    if result.contest_results:
        contests = [r.contest for r in result.contest_results]
        axes[1].plot(contests, best_hits, marker='o', alpha=0.8, linewidth=1.5)
        axes[1].axhline(result.summary.average_hits, color='red', linestyle='--',
                        label=f"Average ({result.summary.average_hits:.2f})")
        axes[1].legend()
    else:
        axes[1].text(0.5, 0.5, 'No contests\nevaluated',
                     ha='center', va='center', transform=axes[1].transAxes)
    axes[1].set_title('Best Hits by Contest', fontweight='bold')
    axes[1].set_xlabel('Contest')
    axes[1].set_ylabel('Hits')
    axes[1].set_ylim(-0.2, pick_count + 0.2)
    axes[1].grid(True, alpha=0.3)

    plt.tight_layout()
    directory = os.path.dirname(save_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    plt.savefig(save_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return save_path
