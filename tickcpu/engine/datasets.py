import csv
import json
import os
from typing import Any, Dict, List

from .models import Process


def _package_dir() -> str:
    return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def build_default_processes() -> List[Process]:
    return load_preset(1)


# Helper: clone process list (no runtime fields)
def clone_processes(procs: List[Process]) -> List[Process]:
    return [
        Process(
            p.id,
            p.name,
            arrival_time=p.arrival_time,
            burst_time=p.burst_time,
            priority=p.original_priority,
        )
        for p in procs
    ]


def process_from_dict(item: Dict[str, Any], fallback_id: int) -> Process:
    """Build a Process from a loose JSON mapping; raises ValueError on bad fields."""
    try:
        pid = int(item.get("id", item.get("pid", fallback_id)))
        arrival = int(item.get("arrival_time", item.get("arrival", 0)))
        burst = int(item.get("burst_time", item.get("burst", 1)))
        priority = int(item.get("priority", 0))
    except (TypeError, ValueError):
        raise ValueError("id, arrival_time, burst_time and priority must be integers")

    if arrival < 0:
        raise ValueError("arrival_time must be >= 0")
    if burst < 1:
        raise ValueError("burst_time must be a positive integer")

    name = str(item.get("name") or f"P{pid}")
    return Process(pid, name, arrival_time=arrival, burst_time=burst, priority=priority)


# ------------------------------
# Dataset loaders: presets + JSON + CSV
# ------------------------------
PRESETS = {
    1: "Mixed arrivals",
    2: "Round Robin demo",
    3: "Long job, short late arrival",
    4: "Starvation (aging demo)",
    5: "Idle gaps",
}


def load_preset(preset_id: int) -> List[Process]:
    if preset_id == 1:
        return [
            Process(1, "P1", arrival_time=0, burst_time=5, priority=2),
            Process(2, "P2", arrival_time=1, burst_time=3, priority=1),
            Process(3, "P3", arrival_time=2, burst_time=1, priority=3),
        ]

    if preset_id == 2:
        return [
            Process(1, "P1", arrival_time=0, burst_time=5, priority=2),
            Process(2, "P2", arrival_time=1, burst_time=3, priority=1),
            Process(3, "P3", arrival_time=2, burst_time=1, priority=3),
            Process(4, "P4", arrival_time=4, burst_time=2, priority=4),
        ]

    if preset_id == 3:
        return [
            Process(1, "P1", arrival_time=0, burst_time=20, priority=1),
            Process(2, "P2", arrival_time=2, burst_time=5, priority=1),
        ]

    if preset_id == 4:
        return [
            Process(1, "P1", arrival_time=0, burst_time=6, priority=1),
            Process(2, "P2", arrival_time=0, burst_time=4, priority=9),
            Process(3, "P3", arrival_time=2, burst_time=6, priority=1),
            Process(4, "P4", arrival_time=4, burst_time=6, priority=1),
        ]

    if preset_id == 5:
        return [
            Process(1, "P1", arrival_time=0, burst_time=3, priority=1),
            Process(2, "P2", arrival_time=6, burst_time=2, priority=0),
            Process(3, "P3", arrival_time=8, burst_time=4, priority=2),
            Process(4, "P4", arrival_time=12, burst_time=2, priority=1),
        ]

    raise ValueError(f"unknown preset {preset_id}; choose one of {sorted(PRESETS)}")


def _resolve(path: str) -> str:
    # Relative paths resolve from the working directory first, then the package
    if os.path.isabs(path) or os.path.exists(path):
        return path
    return os.path.join(_package_dir(), path)


def load_processes_json(path: str) -> List[Process]:
    with open(_resolve(path), "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("processes", [])

    return [process_from_dict(item, idx + 1) for idx, item in enumerate(data)]


def _int_or(value: str, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def load_processes_csv(path: str) -> List[Process]:
    """Rows are `id,name,arrival,burst,priority`; a header row mentioning `id` is skipped.

    Blank or unparseable fields take defaults (arrival 0, burst 1, priority 0);
    a negative arrival or a burst below 1 raises ValueError like the JSON loader.
    """
    processes: List[Process] = []
    with open(_resolve(path), "r", encoding="utf-8", newline="") as f:
        for index, parts in enumerate(csv.reader(f)):
            parts = [p.strip() for p in parts]
            if index == 0 and any("id" in p.lower() for p in parts):
                continue
            if len(parts) < 4:
                continue

            fallback_id = len(processes) + 1
            item = {
                "id": _int_or(parts[0], fallback_id),
                "name": parts[1],
                "arrival_time": _int_or(parts[2], 0),
                "burst_time": _int_or(parts[3], 1),
                "priority": _int_or(parts[4], 0) if len(parts) > 4 else 0,
            }
            processes.append(process_from_dict(item, fallback_id))

    return processes
