"""Charts for the statistics a simulation run produces."""

from parksim.visual.charts import (
    plot_arrivals_timeline,
    plot_chi_square,
    plot_duration_histogram,
    plot_occupancy,
)

__all__ = [
    "plot_arrivals_timeline",
    "plot_chi_square",
    "plot_duration_histogram",
    "plot_occupancy",
]
