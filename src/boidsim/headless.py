from __future__ import annotations

import argparse
import csv
import json
import logging
import math
from pathlib import Path
from typing import Optional

from .config import SimulationConfig
from .sim.core.world import World
from .sim.types.metrics import TickMetrics

logger = logging.getLogger(__name__)

_BASIC_HEADER = [
    "tick",
    "boids",
    "predators",
    "avg_speed",
    "polarization",
    "tick_ms",
]

_DETAILED_HEADER = [
    "tick",
    "boids",
    "predators",
    "hazards",
    "avg_speed",
    "max_speed",
    "polarization",
    "neighbor_checks",
    "tick_ms",
    "centroid_x",
    "centroid_y",
    "spread",
    "nearest_predator_distance",
    "boids_in_hazards",
    "neighbor_checks_per_boid",
]


def _format_basic_row(metrics: TickMetrics, tick_ms: float) -> list[object]:
    return [
        metrics.tick,
        metrics.boids,
        metrics.predators,
        f"{metrics.average_speed:.4f}",
        f"{metrics.polarization:.4f}",
        f"{tick_ms:.3f}",
    ]


def _format_detailed_row(world: World, metrics: TickMetrics, tick_ms: float) -> list[object]:
    boids = world.boids
    population = len(boids)
    if population <= 0:
        centroid_x = 0.0
        centroid_y = 0.0
        spread = 0.0
        nearest_predator = 0.0
        in_hazards = 0
        checks_per_boid = 0.0
    else:
        centroid_x = sum(boids.x) / population
        centroid_y = sum(boids.y) / population
        spread = math.sqrt(
            sum((x - centroid_x) ** 2 + (y - centroid_y) ** 2 for x, y in zip(boids.x, boids.y)) / population
        )
        checks_per_boid = metrics.neighbor_checks / population

        predators = world.predators
        nearest_predator = 0.0
        if len(predators):
            nearest_predator = min(
                math.hypot(bx - px, by - py)
                for px, py in zip(predators.x, predators.y)
                for bx, by in zip(boids.x, boids.y)
            )

        hazards = world.hazards
        in_hazards = 0
        for bx, by in zip(boids.x, boids.y):
            for hx, hy, radius in zip(hazards.x, hazards.y, hazards.radius):
                if math.hypot(bx - hx, by - hy) < radius:
                    in_hazards += 1
                    break

    return [
        metrics.tick,
        population,
        metrics.predators,
        metrics.hazards,
        f"{metrics.average_speed:.4f}",
        f"{metrics.max_speed:.4f}",
        f"{metrics.polarization:.4f}",
        metrics.neighbor_checks,
        f"{tick_ms:.3f}",
        f"{centroid_x:.4f}",
        f"{centroid_y:.4f}",
        f"{spread:.4f}",
        f"{nearest_predator:.4f}",
        in_hazards,
        f"{checks_per_boid:.4f}",
    ]


def _percentile(sorted_values: list[float], percentile: float) -> float:
    if not sorted_values:
        return 0.0
    if len(sorted_values) == 1:
        return float(sorted_values[0])
    pos = (len(sorted_values) - 1) * percentile
    low = int(math.floor(pos))
    high = int(math.ceil(pos))
    if low == high:
        return float(sorted_values[low])
    weight = pos - low
    return float(sorted_values[low] + (sorted_values[high] - sorted_values[low]) * weight)


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "avg": 0.0, "p50": 0.0, "p90": 0.0, "p95": 0.0, "p99": 0.0}
    sorted_values = sorted(values)
    count = len(values)
    return {
        "min": float(sorted_values[0]),
        "max": float(sorted_values[-1]),
        "avg": float(sum(values) / count),
        "p50": _percentile(sorted_values, 0.50),
        "p90": _percentile(sorted_values, 0.90),
        "p95": _percentile(sorted_values, 0.95),
        "p99": _percentile(sorted_values, 0.99),
    }


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    deterministic_log: bool = False,
    log_format: str = "detailed",
    summary_path: Optional[Path] = None,
    summary_window: int = 500,
    config: Optional[SimulationConfig] = None,
) -> World:
    config = config if config is not None else SimulationConfig()
    if seed is not None:
        config.seed = seed

    log_mode = log_format.lower().strip()
    if log_mode not in {"basic", "detailed"}:
        raise ValueError(f"Unknown log format: {log_format}")

    world = World(config)

    tick_ms_series: list[float] = []
    speed_series: list[float] = []
    polarization_series: list[float] = []

    csv_file = Path(log_path).open("w", newline="") if log_path else None
    try:
        writer = None
        if csv_file is not None:
            writer = csv.writer(csv_file)
            writer.writerow(_DETAILED_HEADER if log_mode == "detailed" else _BASIC_HEADER)

        for tick in range(steps):
            metrics = world.step(tick)
            tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms
            tick_ms_series.append(tick_ms)
            speed_series.append(metrics.average_speed)
            polarization_series.append(metrics.polarization)

            if writer:
                if log_mode == "detailed":
                    writer.writerow(_format_detailed_row(world, metrics, tick_ms))
                else:
                    writer.writerow(_format_basic_row(metrics, tick_ms))
    finally:
        if csv_file is not None:
            csv_file.close()
    if log_path:
        logger.info("Wrote %d ticks of metrics to %s", steps, log_path)

    if summary_path:
        window = max(1, int(summary_window))
        tail_slice = slice(max(0, len(tick_ms_series) - window), len(tick_ms_series))
        summary = {
            "steps": steps,
            "seed": config.seed,
            "variant": config.variant,
            "log_format": log_mode,
            "deterministic_log": deterministic_log,
            "boids": len(world.boids),
            "predators": len(world.predators),
            "hazards": len(world.hazards),
            "tick_ms": _summary_stats(tick_ms_series),
            "average_speed": _summary_stats(speed_series),
            "polarization": _summary_stats(polarization_series),
            "tail_window": {
                "window": window,
                "tick_ms": _summary_stats(tick_ms_series[tail_slice]),
                "average_speed": _summary_stats(speed_series[tail_slice]),
                "polarization": _summary_stats(polarization_series[tail_slice]),
            },
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))
        logger.info("Wrote run summary to %s", summary_path)
    return world


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless boids simulation")
    parser.add_argument("--steps", type=int, default=300)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument(
        "--log-format",
        choices=["basic", "detailed"],
        default="detailed",
        help="CSV format to write when --log is provided.",
    )
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Optional JSON file to write summary stats for the run.",
    )
    parser.add_argument(
        "--summary-window",
        type=int,
        default=500,
        help="Tail window size (ticks) for summary stats.",
    )
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical seeds match).",
    )
    parser.add_argument("--log-level", default="INFO", help="Python logging level")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = SimulationConfig.from_yaml(args.config) if args.config else None
    run_headless(
        args.steps,
        args.seed,
        args.log,
        deterministic_log=args.deterministic_log,
        log_format=args.log_format,
        summary_path=args.summary,
        summary_window=args.summary_window,
        config=config,
    )


if __name__ == "__main__":
    main()
