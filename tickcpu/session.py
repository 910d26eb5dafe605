import logging
from threading import Lock
from typing import Any, Dict, List, Optional

from tickcpu.engine import (
    Algorithm,
    CPUScheduler,
    Process,
    build_default_processes,
    clone_processes,
    load_preset,
    process_from_dict,
)
from tickcpu.serializers import default_state, safe_bool, safe_int, serialize_state

logger = logging.getLogger(__name__)

_session_lock = Lock()

scheduler: Optional[CPUScheduler] = None
default_processes: List[Process] = []
added_processes: List[Process] = []
base_processes: List[Process] = []
settings: Dict[str, Any] = {
    "algorithm": "FCFS",
    "tick_ms": 200,
    "quantum": 2,
    "aging_enabled": False,
    "aging_threshold": 5,
    "aging_boost": 1,
    "max_ticks": 10000,
}
event_log: List[str] = []
EVENT_LOG_LIMIT = 200


# Integer settings and the fallback used when a value cannot be parsed; all are clamped to >= 1
_INT_SETTINGS = {
    "tick_ms": 200,
    "quantum": 2,
    "aging_threshold": 5,
    "aging_boost": 1,
    "max_ticks": 10000,
}


def _apply_settings(data: Dict[str, Any]) -> None:
    settings["algorithm"] = Algorithm.parse(data.get("algorithm", settings["algorithm"])).value
    for key, fallback in _INT_SETTINGS.items():
        settings[key] = max(1, safe_int(data.get(key, settings[key]), fallback))
    aging = data.get("aging_enabled", data.get("aging", settings["aging_enabled"]))
    settings["aging_enabled"] = safe_bool(aging, False)


def _configure(sched: CPUScheduler) -> None:
    sched.set_algorithm(settings["algorithm"])
    sched.set_time_quantum(settings["quantum"])
    sched.set_aging(settings["aging_enabled"])
    sched.set_aging_threshold(settings["aging_threshold"])
    sched.set_aging_boost(settings["aging_boost"])


def _new_scheduler_from_base() -> Optional[CPUScheduler]:
    if not base_processes:
        return None
    sched = CPUScheduler(clone_processes(base_processes))
    _configure(sched)
    return sched


def _log(msg: str) -> None:
    global event_log
    event_log.append(msg)
    if len(event_log) > EVENT_LOG_LIMIT:
        event_log = event_log[-EVENT_LOG_LIMIT:]


def _rebuild_base_processes() -> None:
    global base_processes
    base_processes = clone_processes(default_processes) + clone_processes(added_processes)


def _state() -> Dict[str, Any]:
    return serialize_state(scheduler, settings, event_log)


def _next_id() -> int:
    return max((p.id for p in base_processes), default=0) + 1


def _build_process_list(payload_processes: Any) -> List[Process]:
    processes: List[Process] = []
    seen = set()
    for item in payload_processes:
        if not isinstance(item, dict):
            continue
        proc = process_from_dict(item, len(processes) + 1)
        if proc.id in seen:
            raise ValueError(f"duplicate process id {proc.id}")
        seen.add(proc.id)
        processes.append(proc)
    return processes


def _tick_once() -> bool:
    """Advance the live scheduler by one tick; False when the tick cap stops it."""
    if scheduler.time >= settings["max_ticks"]:
        logger.warning(
            "tick cap reached: time=%d max_ticks=%d algorithm=%s",
            scheduler.time,
            settings["max_ticks"],
            scheduler.algorithm.value,
        )
        _log(f"Tick cap {settings['max_ticks']} reached; simulation halted")
        return False
    _log(scheduler.tick())
    return True


def reset_session() -> Dict[str, Any]:
    global scheduler, event_log
    with _session_lock:
        _rebuild_base_processes()
        scheduler = _new_scheduler_from_base()
        if scheduler is not None:
            event_log = ["Session reset"]
            return _state()

        event_log = []
        return default_state(settings)


def init_session(payload: Dict[str, Any]) -> Dict[str, Any]:
    global scheduler, default_processes, added_processes, event_log

    data = payload or {}
    with _session_lock:
        payload_processes = data.get("processes")
        if isinstance(payload_processes, list):
            processes = _build_process_list(payload_processes)
        elif data.get("preset") is not None:
            processes = load_preset(safe_int(data.get("preset"), 1))
        else:
            processes = build_default_processes()

        _apply_settings(data)
        default_processes = processes
        added_processes = []
        _rebuild_base_processes()
        scheduler = _new_scheduler_from_base()

        event_log = [
            f"Initialized algorithm={settings['algorithm']} processes={len(base_processes)}"
        ]
        logger.info("session initialized: algorithm=%s processes=%d", settings["algorithm"], len(base_processes))
        return _state()


def set_config(payload: Dict[str, Any]) -> Dict[str, Any]:
    data = payload or {}
    with _session_lock:
        _apply_settings(data)
        if scheduler is not None:
            _configure(scheduler)

        _log(
            f"Config algorithm={settings['algorithm']} quantum={settings['quantum']} "
            f"aging={settings['aging_enabled']}:{settings['aging_threshold']}/{settings['aging_boost']} "
            f"tick={settings['tick_ms']} max_ticks={settings['max_ticks']}"
        )
        return {"ok": True, "config": dict(settings)}


def tick_session() -> Dict[str, Any]:
    with _session_lock:
        if scheduler is None:
            return default_state(settings)

        if not scheduler.is_finished():
            _tick_once()

        return _state()


def run_session(steps: int) -> Dict[str, Any]:
    with _session_lock:
        if scheduler is None:
            return default_state(settings)

        count = max(0, safe_int(steps, 0))
        for _ in range(count):
            if scheduler.is_finished() or not _tick_once():
                break

        return _state()


def add_process(proc: Dict[str, Any]) -> Dict[str, Any]:
    global scheduler
    with _session_lock:
        if not isinstance(proc, dict):
            raise ValueError("process must be an object")

        base_proc = process_from_dict(proc, _next_id())
        if any(p.id == base_proc.id for p in base_processes):
            raise ValueError(f"process id {base_proc.id} already exists")

        added_processes.append(base_proc)
        base_processes.append(clone_processes([base_proc])[0])

        if scheduler is None:
            scheduler = _new_scheduler_from_base()
            _log(f"Added P{base_proc.id} (bootstrap)")
            return _state()

        # Arrivals at or before the current time join the ready queue on the next tick
        scheduler.add_process(
            base_proc.id,
            base_proc.name,
            base_proc.arrival_time,
            base_proc.burst_time,
            base_proc.original_priority,
        )
        _log(f"Added P{base_proc.id} AT={base_proc.arrival_time} BT={base_proc.burst_time}")
        return _state()


def clear_added_processes() -> Dict[str, Any]:
    global scheduler, added_processes, event_log
    with _session_lock:
        added_processes = []
        _rebuild_base_processes()
        scheduler = _new_scheduler_from_base()
        event_log = ["Cleared all user-added processes"]
        return _state() if scheduler is not None else default_state(settings)


def set_speed(tick_ms: int) -> Dict[str, Any]:
    with _session_lock:
        settings["tick_ms"] = max(1, safe_int(tick_ms, settings["tick_ms"]))
        return _state()


def get_state() -> Dict[str, Any]:
    with _session_lock:
        return _state()


def get_compare_processes() -> List[Process]:
    with _session_lock:
        return clone_processes(base_processes)


def get_settings() -> Dict[str, Any]:
    with _session_lock:
        return dict(settings)
