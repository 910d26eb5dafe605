import logging
from typing import List

from .datasets import clone_processes
from .metrics import compute_metrics, timeline_summary
from .models import Algorithm, Process
from .scheduler import CPUScheduler

logger = logging.getLogger(__name__)

DEFAULT_MAX_TICKS = 200000  # safety


def run_to_completion(sched: CPUScheduler, max_ticks: int = DEFAULT_MAX_TICKS) -> bool:
    """Tick until the scheduler finishes or `max_ticks` is hit. Returns True if it finished."""
    guard = 0
    while (not sched.is_finished()) and guard < max_ticks:
        sched.tick()
        guard += 1

    if not sched.is_finished():
        logger.warning(
            "simulation stopped at tick cap: algorithm=%s time=%d max_ticks=%d",
            sched.algorithm.value,
            sched.time,
            max_ticks,
        )
        return False
    return True


def run_algorithm_once(
    processes: List[Process],
    algorithm,
    quantum: int = 2,
    aging_enabled: bool = False,
    aging_threshold: int = 5,
    aging_boost: int = 1,
    max_ticks: int = DEFAULT_MAX_TICKS,
):
    """Run a full simulation for a given algorithm on a fresh clone of `processes` and return summary metrics."""
    sched = CPUScheduler(
        clone_processes(processes),
        algorithm=algorithm,
        quantum=quantum,
        aging_enabled=aging_enabled,
        aging_threshold=aging_threshold,
        aging_boost=aging_boost,
    )
    completed = run_to_completion(sched, max_ticks)

    rows, avg_wt, avg_tat, avg_rt = compute_metrics(sched.processes)
    summary = timeline_summary(sched.gantt_chart, len(sched.finished))

    return {
        "algorithm": sched.algorithm.value,
        "completed": completed,
        "avg_wt": float(avg_wt),
        "avg_tat": float(avg_tat),
        "avg_rt": float(avg_rt),
        "cpu_util": float(summary["cpu_util"]),
        "makespan": int(summary["makespan"]),
        "throughput": float(summary["throughput"]),
        "finish_order": [p.id for p in sched.finished],
        "_rows": rows,
    }


def compare_all_algorithms(
    processes: List[Process],
    rr_quantum: int = 2,
    aging_enabled: bool = False,
    aging_threshold: int = 5,
    aging_boost: int = 1,
    max_ticks: int = DEFAULT_MAX_TICKS,
):
    """Return a list of result dicts for all supported algorithms."""
    out = []
    for a in Algorithm:
        out.append(
            run_algorithm_once(
                processes,
                a,
                quantum=rr_quantum,
                aging_enabled=aging_enabled,
                aging_threshold=aging_threshold,
                aging_boost=aging_boost,
                max_ticks=max_ticks,
            )
        )
    return out
