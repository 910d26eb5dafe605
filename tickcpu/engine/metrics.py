from typing import Any, Dict, List, Tuple

from .models import Process

PLACEHOLDER = "-"


def _metric_row(p: Process) -> Dict[str, Any]:
    done = p.completion_time != -1
    row: Dict[str, Any] = {
        "PID": p.id,
        "NAME": p.name,
        "AT": p.arrival_time,
        "BT": p.burst_time,
        "PR": p.original_priority,
        "ST": p.start_time if p.started else PLACEHOLDER,
        "CT": p.completion_time if done else PLACEHOLDER,
        "TAT": p.turnaround_time if done else PLACEHOLDER,
        "WT": p.waiting_time if done else PLACEHOLDER,
        "RT": p.response_time if p.started else PLACEHOLDER,
        "_done": done,
    }
    return row


def compute_metrics(processes: List[Process]) -> Tuple[List[Dict[str, Any]], float, float, float]:
    """Per-process table rows plus average waiting, turnaround and response time.

    Every process gets a row, sorted by (arrival, id); unfinished fields hold "-".
    Averages cover finished processes only and are 0.0 when none finished.
    """
    rows = [_metric_row(p) for p in sorted(processes, key=lambda x: (x.arrival_time, x.id))]
    done = [r for r in rows if r["_done"]]
    if not done:
        return rows, 0.0, 0.0, 0.0

    n = len(done)
    avg_wt = sum(r["WT"] for r in done) / n
    avg_tat = sum(r["TAT"] for r in done) / n
    avg_rt = sum(r["RT"] for r in done) / n
    return rows, avg_wt, avg_tat, avg_rt


def timeline_summary(gantt: List[str], finished_count: int) -> Dict[str, Any]:
    total = len(gantt)
    busy = sum(1 for x in gantt if x != "IDLE")
    return {
        "cpu_util": (busy / total * 100.0) if total else 0.0,
        "makespan": total,
        "throughput": (finished_count / total) if total else 0.0,
    }
