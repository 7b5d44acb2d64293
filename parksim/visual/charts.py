"""Matplotlib renderings of simulation statistics and chi-square results.

Figures are built with ``matplotlib.figure.Figure`` rather than pyplot, so
nothing here touches global pyplot state or needs an interactive backend.
Each function returns the figure and, when ``path`` is given, also saves
it there.
"""

from __future__ import annotations

from pathlib import Path

from matplotlib.figure import Figure

from parksim.analysis.chi_square import ChiSquareResult
from parksim.instrumentation.statistics import SimulationStatistics


def _save(fig: Figure, path: str | Path | None) -> Figure:
    if path is not None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(path, dpi=120, bbox_inches="tight")
    return fig


def plot_duration_histogram(
    stats: SimulationStatistics,
    bins: int = 20,
    path: str | Path | None = None,
) -> Figure:
    """Histogram of the stay of every departed vehicle."""
    fig = Figure(figsize=(8, 4))
    ax = fig.add_subplot()
    durations = stats.parking_durations
    if durations:
        ax.hist(durations, bins=bins, color="steelblue", edgecolor="white")
        ax.axvline(stats.avg_parking_time, color="darkred", linestyle="--",
                   label=f"mean {stats.avg_parking_time:.1f} min")
        ax.legend()
    else:
        ax.text(0.5, 0.5, "No departures yet", ha="center", va="center", transform=ax.transAxes)
    ax.set_xlabel("Parking duration (min)")
    ax.set_ylabel("Vehicles")
    ax.set_title("Parking duration distribution")
    return _save(fig, path)


def plot_arrivals_timeline(
    stats: SimulationStatistics,
    path: str | Path | None = None,
) -> Figure:
    """Hourly arrivals and rejections as two lines."""
    frame = stats.timeline_frame()
    fig = Figure(figsize=(10, 4))
    ax = fig.add_subplot()
    x = range(len(frame))
    ax.plot(x, frame["arrivals"], marker="o", label="Arrivals")
    ax.plot(x, frame["rejections"], marker="x", color="crimson", label="Rejections")
    ax.set_xticks(list(x))
    ax.set_xticklabels(frame.index, rotation=45, ha="right")
    ax.set_ylabel("Vehicles per hour")
    ax.set_title("Arrivals and rejections by hour")
    ax.legend()
    ax.grid(True, alpha=0.3)
    return _save(fig, path)


def plot_occupancy(
    stats: SimulationStatistics,
    path: str | Path | None = None,
) -> Figure:
    """Pie of occupied spaces per active zone plus the remaining free spaces."""
    active = [z for z in stats.zones.values() if z.active]
    labels = [z.name for z in active]
    sizes = [z.occupied for z in active]
    free = sum(z.capacity for z in active) - sum(sizes)
    labels.append("Free")
    sizes.append(free)

    fig = Figure(figsize=(6, 6))
    ax = fig.add_subplot()
    if sum(sizes) > 0:
        ax.pie(sizes, labels=labels, autopct="%1.0f%%", startangle=90)
    ax.set_title(f"Occupancy ({stats.overall_occupancy_rate:.1f}% overall)")
    return _save(fig, path)


def plot_chi_square(
    result: ChiSquareResult,
    path: str | Path | None = None,
) -> Figure:
    """Observed vs expected frequency per bin."""
    fig = Figure(figsize=(8, 4))
    ax = fig.add_subplot()
    if result.computable:
        x = range(result.k)
        ax.bar(x, result.observed, color="steelblue", label="Observed")
        ax.plot(x, result.expected, color="darkorange", marker="_", markersize=20,
                linestyle="none", label="Expected")
        ax.set_xticks(list(x))
        ax.set_xlabel("Bin")
        ax.set_ylabel("Frequency")
        ax.legend()
    else:
        ax.text(0.5, 0.5, result.interpretation, ha="center", va="center",
                wrap=True, transform=ax.transAxes)
    ax.set_title(
        f"Chi-square test: {result.method.value}, N={result.n}, K={result.k}, "
        f"statistic={result.statistic:.3f}"
    )
    return _save(fig, path)
