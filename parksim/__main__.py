"""Run a simulated day from the command line.

Usage:
    python -m parksim --method lcg --seed 42 --projected
    python -m parksim --method mcg --seed 7 --mcg-a 69069 --mcg-c 1 --chi-square
    python -m parksim --output output/day1   # also writes CSVs and charts
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from parksim.core.engine import ParkingSimulation
from parksim.core.parameters import SimulationParameters
from parksim.errors import ConfigurationError
from parksim.logging_config import (
    configure_from_env,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
)
from parksim.prng.provider import PrngMethod

logger = logging.getLogger(__name__)


def _clock_arg(value: str) -> int:
    """Accept ``HH:MM`` or plain minutes from midnight."""
    if ":" in value:
        hours, minutes = value.split(":", 1)
        return int(hours) * 60 + int(minutes)
    return int(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="parksim", description="Multi-zone parking facility simulation")
    parser.add_argument("--method", default="system", help="PRNG: system, lcg, mcg, mersenne-twister")
    parser.add_argument("--seed", type=int, default=1)
    parser.add_argument("--mcg-a", type=int, default=1664525)
    parser.add_argument("--mcg-c", type=int, default=1013904223)
    parser.add_argument("--mcg-m", type=int, default=2**32)
    parser.add_argument("--start", type=_clock_arg, default=6 * 60, help="Start time, HH:MM")
    parser.add_argument("--end", type=_clock_arg, default=22 * 60, help="End time, HH:MM")
    parser.add_argument("--duration-mean", type=float, default=300.0)
    parser.add_argument("--duration-std", type=float, default=60.0)
    parser.add_argument("--evening-peak-mean", type=float, default=None,
                        help="Mean inter-arrival during 17:00-18:00; enables the evening peak")
    parser.add_argument("--projected", action="store_true", help="Enable the projected zone")
    parser.add_argument("--chi-square", action="store_true", help="Also run the chi-square test")
    parser.add_argument("--samples", type=int, default=1000, help="Chi-square sample size N")
    parser.add_argument("--bins", type=int, default=10, help="Chi-square bin count K")
    parser.add_argument("--realtime", action="store_true", help="Pace ticks at --tick-rate per second")
    parser.add_argument("--tick-rate", type=int, default=10)
    parser.add_argument("--output", type=Path, default=None, help="Directory for CSVs and charts")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every vehicle (DEBUG)")
    parser.add_argument("--log-file", type=Path, default=None, help="Log to a rotating file instead of stderr")
    parser.add_argument("--log-json", action="store_true", help="Log one JSON object per line")
    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    """Flags take precedence over the PARKSIM_* environment variables."""
    level = "DEBUG" if args.verbose else "INFO"
    if args.log_json:
        enable_json_logging(level, path=args.log_file)
    elif args.log_file is not None:
        enable_file_logging(args.log_file, level=level)
    elif args.verbose:
        enable_console_logging(level=level)
    else:
        configure_from_env()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    _configure_logging(args)

    try:
        method = PrngMethod.parse(args.method)
        params = SimulationParameters(
            prng_method=method,
            prng_seed=args.seed,
            mcg_seed=args.seed,
            mcg_a=args.mcg_a,
            mcg_c=args.mcg_c,
            mcg_m=args.mcg_m,
            simulation_start_time=args.start,
            simulation_end_time=args.end,
            parking_duration_mean=args.duration_mean,
            parking_duration_std_dev=args.duration_std,
            evening_peak_arrival_mean=args.evening_peak_mean,
            enable_projected_zone=args.projected,
            chi_square_sample_size=args.samples,
            chi_square_num_bins=args.bins,
            tick_rate=args.tick_rate,
        )
        sim = ParkingSimulation(params)
    except (ConfigurationError, ValueError) as exc:
        print(f"Configuration error: {exc}")
        return 2

    stats = sim.run(realtime=args.realtime)
    print(stats)

    result = None
    if args.chi_square:
        result = sim.run_chi_square_test()
        print()
        print(result.interpretation)

    if args.output is not None:
        from parksim.visual import charts

        out = args.output
        out.mkdir(parents=True, exist_ok=True)
        stats.timeline_frame().to_csv(out / "timeline.csv")
        stats.durations_series().to_csv(out / "durations.csv", index=False)
        sim.event_log.to_frame().to_csv(out / "events.csv", index=False)
        charts.plot_duration_histogram(stats, path=out / "durations.png")
        charts.plot_arrivals_timeline(stats, path=out / "timeline.png")
        charts.plot_occupancy(stats, path=out / "occupancy.png")
        if result is not None:
            result.to_frame().to_csv(out / "chi_square.csv", index=False)
            charts.plot_chi_square(result, path=out / "chi_square.png")
        logger.info("Wrote results to %s", out)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
