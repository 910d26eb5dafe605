from typing import Any, Dict, List, Optional

from tickcpu.engine import CPUScheduler, compute_metrics, timeline_summary


def safe_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return float(default)


def safe_int(value: Any, default: int = 0) -> int:
    """Loose JSON/form value -> int; blanks and junk give `default`."""
    if isinstance(value, str):
        value = value.strip() or default
    try:
        return int(value)
    except (TypeError, ValueError):
        return int(default)


TRUTHY = {"true", "1", "yes", "y", "on"}
FALSY = {"false", "0", "no", "n", "off"}


def safe_bool(value: Any, default: bool) -> bool:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUTHY or lowered in FALSY:
            return lowered in TRUTHY
        return default
    if isinstance(value, (bool, int, float)):
        return bool(value)
    return default


def _maybe_int(value: Any) -> Optional[int]:
    if value in {"-", None}:
        return None
    return safe_int(value, 0)


def _config_block(settings: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "quantum": safe_int(settings.get("quantum", 2), 2),
        "aging_enabled": bool(settings.get("aging_enabled", False)),
        "aging_threshold": safe_int(settings.get("aging_threshold", 5), 5),
        "aging_boost": safe_int(settings.get("aging_boost", 1), 1),
        "tick_ms": safe_int(settings.get("tick_ms", 200), 200),
        "max_ticks": safe_int(settings.get("max_ticks", 10000), 10000),
    }


def per_process_rows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Metric table rows as JSON-friendly dicts; "-" placeholders become None."""
    out: List[Dict[str, Any]] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        out.append(
            {
                "id": safe_int(row.get("PID", 0), 0),
                "name": str(row.get("NAME", "")),
                "at": safe_int(row.get("AT", 0), 0),
                "bt": safe_int(row.get("BT", 0), 0),
                "pr": safe_int(row.get("PR", 0), 0),
                "st": _maybe_int(row.get("ST")),
                "ct": _maybe_int(row.get("CT")),
                "tat": _maybe_int(row.get("TAT")),
                "wt": _maybe_int(row.get("WT")),
                "rt": _maybe_int(row.get("RT")),
            }
        )
    return out


def serialize_compare_result(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "algorithm": str(raw.get("algorithm", "FCFS")),
        "completed": bool(raw.get("completed", True)),
        "avg_wt": safe_float(raw.get("avg_wt", 0.0)),
        "avg_tat": safe_float(raw.get("avg_tat", 0.0)),
        "avg_rt": safe_float(raw.get("avg_rt", 0.0)),
        "cpu_util": safe_float(raw.get("cpu_util", 0.0)),
        "makespan": safe_int(raw.get("makespan", 0)),
        "throughput": safe_float(raw.get("throughput", 0.0)),
        "finish_order": list(raw.get("finish_order", [])),
        "per_process": per_process_rows(raw.get("_rows") or []),
    }


def default_state(settings: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    cfg = settings or {}
    return {
        "time": 0,
        "algorithm": str(cfg.get("algorithm", "FCFS")),
        "cpu_process": None,
        "last_executed": None,
        "ready_queue": [],
        "job_pool": [],
        "finished": [],
        "done": True,
        "config": _config_block(cfg),
        "gantt": [],
        "metrics": {
            "avg_wt": 0.0,
            "avg_tat": 0.0,
            "avg_rt": 0.0,
            "cpu_util": 0.0,
            "makespan": 0,
            "throughput": 0.0,
        },
        "per_process": [],
        "trace": [],
        "event_log": [],
    }


def serialize_state(
    scheduler: Optional[CPUScheduler],
    settings: Dict[str, Any],
    event_log: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Engine snapshot plus the session-level summary the clients render."""
    state = default_state(settings)
    if scheduler is None:
        if event_log:
            state["event_log"] = [str(x) for x in event_log]
        return state

    rows, avg_wt, avg_tat, avg_rt = compute_metrics(scheduler.processes)
    summary = timeline_summary(scheduler.gantt_chart, len(scheduler.finished))

    state.update(scheduler.get_state())
    state.update(
        {
            "done": scheduler.is_finished(),
            "gantt": list(scheduler.gantt_chart),
            "metrics": {
                "avg_wt": safe_float(avg_wt, 0.0),
                "avg_tat": safe_float(avg_tat, 0.0),
                "avg_rt": safe_float(avg_rt, 0.0),
                "cpu_util": safe_float(summary["cpu_util"], 0.0),
                "makespan": safe_int(summary["makespan"], 0),
                "throughput": safe_float(summary["throughput"], 0.0),
            },
            "per_process": per_process_rows(rows),
            "trace": list(scheduler.event_log),
            "event_log": [str(x) for x in (event_log or [])],
        }
    )
    return state
