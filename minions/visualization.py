"""
Population Plots

matplotlib figures built from a PopulationHistory, for inspecting a
headless run after the fact.

Usage:
    from minions.visualization import plot_population

    eco.run(20000)
    plot_population(eco.history, save_path="population.png")
"""

from typing import List, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import structlog

from .lineage import LineageStats
from .stats import PopulationHistory

logger = structlog.get_logger(__name__)


def plot_population(history: PopulationHistory, figsize: tuple = (12, 8),
                    save_path: Optional[str] = None):
    """
    Plot population, reproduction and food supply over time.

    Args:
        history: Recorded per-tick census
        figsize: Figure size (width, height)
        save_path: Optional path to save figure

    Returns:
        The figure, or None if nothing was recorded
    """
    if not len(history):
        logger.warning("plot_skipped", reason="empty history")
        return None

    ticks = np.array(history.series('tick'))

    fig, axes = plt.subplots(2, 2, figsize=figsize)
    fig.suptitle('Ecosystem Dynamics', fontsize=14, fontweight='bold')

    ax1 = axes[0, 0]
    ax1.plot(ticks, history.series('minions'), label='Minions', color='#2196F3', linewidth=1, alpha=0.5)
    ax1.plot(ticks, history.series('smoothed_minions'), label='Smoothed', color='#0D47A1', linewidth=2)
    ax1.plot(ticks, history.series('trend_minions'), label='Trend', color='#00BCD4', linewidth=1.5, linestyle='--')
    ax1.plot(ticks, history.series('mature'), label='Mature', color='#4CAF50', linewidth=1.5)
    ax1.set_ylabel('Count')
    ax1.set_xlabel('Tick')
    ax1.set_title('Population')
    ax1.legend(loc='upper right', fontsize=8)
    ax1.grid(True, alpha=0.3)

    ax2 = axes[0, 1]
    ax2.plot(ticks, history.series('spores'), label='Spores', color='#FF9800', linewidth=1.5)
    ax2.set_ylabel('Count')
    ax2.set_xlabel('Tick')
    ax2.set_title('Pending Spores')
    ax2.grid(True, alpha=0.3)

    ax3 = axes[1, 0]
    ax3.plot(ticks, history.series('resources'), label='Resources', color='#795548', linewidth=1.5)
    ax3.plot(ticks, history.series('mean_energy'), label='Mean energy', color='#F44336', linewidth=1.5)
    ax3.set_xlabel('Tick')
    ax3.set_title('Food & Energy')
    ax3.legend(loc='upper right', fontsize=8)
    ax3.grid(True, alpha=0.3)

    ax4 = axes[1, 1]
    ax4.plot(ticks, history.series('lineages'), color='#9C27B0', linewidth=2)
    ax4.set_ylabel('Live lineages')
    ax4.set_xlabel('Tick')
    ax4.set_title('Lineages')
    ax4.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info("plot_saved", path=str(save_path))

    return fig


def plot_lineages(lineages: List[LineageStats], figsize: tuple = (10, 5),
                  save_path: Optional[str] = None):
    """Bar chart of total births per lineage, extinct ones greyed out."""
    if not lineages:
        return None

    ranked = sorted(lineages, key=lambda s: s.total_born, reverse=True)
    fig, ax = plt.subplots(figsize=figsize)
    colors = ['#BDBDBD' if s.extinct else '#3F51B5' for s in ranked]
    ax.bar(range(len(ranked)), [s.total_born for s in ranked], color=colors)
    ax.set_xticks(range(len(ranked)))
    ax.set_xticklabels([s.id for s in ranked], rotation=90, fontsize=7)
    ax.set_ylabel('Total born')
    ax.set_title('Lineage Success')

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info("plot_saved", path=str(save_path))

    return fig
