import zlib
from itertools import groupby
from typing import Any, Dict, List, Tuple

from .theme import CPU_IDLE, TASK_COLORS


def pid_color(name: str):
    """Stable Gantt color for a process name; idle ticks are grey."""
    if name == "IDLE":
        return CPU_IDLE
    return TASK_COLORS[zlib.crc32(name.encode("utf-8")) % len(TASK_COLORS)]


def compress_gantt(gantt: List[str]) -> List[Tuple[str, int, int]]:
    """Collapse per-tick names into (name, start, end) segments, end exclusive."""
    segs = []
    t = 0
    for name, run in groupby(gantt):
        length = sum(1 for _ in run)
        segs.append((name, t, t + length))
        t += length
    return segs


def ready_chip_label(entry: Dict[str, Any], show_priority: bool) -> str:
    if not show_priority:
        return f"{entry['name']} rem:{entry['remaining']}"
    label = f"{entry['name']} pr:{entry['priority']} rem:{entry['remaining']}"
    # star marks a priority lowered by aging
    if entry["priority"] < entry.get("original_priority", entry["priority"]):
        label += " *"
    return label


def clamp_tick_ms(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, int(value)))
