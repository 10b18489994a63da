from __future__ import annotations

import argparse
import csv
import json
import logging
import math
import random
from pathlib import Path
from typing import Optional

from ..sim.core.config import SimulationConfig
from ..sim.core.room import Room
from ..sim.types.metrics import TickMetrics

_HEADER = [
    "tick",
    "clock",
    "agents",
    "humans",
    "bots",
    "blobs",
    "total_mass",
    "pellets_eaten",
    "blobs_engulfed",
    "viruses_popped",
    "splits",
    "deaths",
    "bots_respawned",
    "humans_removed",
    "tick_ms",
]

# Scripted players pick a new heading this often (in ticks).
_HUMAN_STEER_INTERVAL = 20


def _format_row(metrics: TickMetrics, tick_ms: float) -> list[object]:
    return [
        metrics.tick,
        f"{metrics.clock:.3f}",
        metrics.agents,
        metrics.humans,
        metrics.bots,
        metrics.blobs,
        f"{metrics.total_mass:.4f}",
        metrics.pellets_eaten,
        metrics.blobs_engulfed,
        metrics.viruses_popped,
        metrics.splits,
        metrics.deaths,
        metrics.bots_respawned,
        metrics.humans_removed,
        f"{tick_ms:.3f}",
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
        return {"min": 0.0, "max": 0.0, "avg": 0.0, "p50": 0.0, "p95": 0.0}
    sorted_values = sorted(values)
    return {
        "min": float(sorted_values[0]),
        "max": float(sorted_values[-1]),
        "avg": float(sum(values) / len(values)),
        "p50": _percentile(sorted_values, 0.50),
        "p95": _percentile(sorted_values, 0.95),
    }


def run_headless(
    steps: int,
    code: str = "HEADLS",
    bots: Optional[int] = None,
    humans: int = 0,
    log_path: Optional[Path] = None,
    deterministic_log: bool = False,
    summary_path: Optional[Path] = None,
    config: Optional[SimulationConfig] = None,
) -> Room:
    """Run one room without a server, driving `humans` scripted players with random headings."""
    config = config if config is not None else SimulationConfig()
    room = Room(code.upper(), config, bot_count=bots, clock=None)

    pilot = random.Random(room.seed)
    human_ids = []
    for index in range(humans):
        agent = room.join(f"Player{index}", f"p_headless_{index}")
        human_ids.append(agent.id)

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    tick_ms_series: list[float] = []
    mass_series: list[float] = []
    try:
        for tick in range(steps):
            if tick % _HUMAN_STEER_INTERVAL == 0:
                for agent_id in human_ids:
                    angle = pilot.uniform(0.0, 2.0 * math.pi)
                    room.submit_input(agent_id, math.cos(angle), math.sin(angle), pilot.random() < 0.1, False)
            metrics = room.step()
            tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms
            tick_ms_series.append(tick_ms)
            mass_series.append(metrics.total_mass)
            if writer:
                writer.writerow(_format_row(metrics, tick_ms))
    finally:
        if csv_file:
            csv_file.close()

    if summary_path:
        summary = {
            "steps": steps,
            "code": room.code,
            "seed": room.seed,
            "bots": room.bot_count,
            "humans": humans,
            "deterministic_log": deterministic_log,
            "tick_ms": _summary_stats(tick_ms_series),
            "total_mass": _summary_stats(mass_series),
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))
    return room


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless CellClash room simulation")
    parser.add_argument("--steps", type=int, default=2000)
    parser.add_argument("--code", type=str, default="HEADLS", help="Room code; also seeds the room RNG.")
    parser.add_argument("--bots", type=int, default=None)
    parser.add_argument("--humans", type=int, default=0, help="Scripted players wandering the arena.")
    parser.add_argument("--config", type=Path, default=None, help="YAML simulation config")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write per-tick metrics")
    parser.add_argument("--summary", type=Path, default=None, help="Optional JSON file with run summary stats.")
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical codes match).",
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    config = SimulationConfig.from_yaml(args.config) if args.config else None
    run_headless(
        args.steps,
        code=args.code,
        bots=args.bots,
        humans=args.humans,
        log_path=args.log,
        deterministic_log=args.deterministic_log,
        summary_path=args.summary,
        config=config,
    )


if __name__ == "__main__":
    main()
