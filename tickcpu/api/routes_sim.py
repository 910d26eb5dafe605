from typing import Any, Dict, List

from fastapi import APIRouter, Body, HTTPException

from tickcpu.engine import PRESETS, Algorithm, Process, compare_all_algorithms, load_preset, process_from_dict
from tickcpu.serializers import serialize_compare_result
from tickcpu.session import (
    add_process,
    clear_added_processes,
    get_compare_processes,
    get_settings,
    get_state,
    init_session,
    reset_session,
    run_session,
    set_config,
    tick_session,
)

router = APIRouter()


def _unprocessable(exc: Exception) -> HTTPException:
    return HTTPException(status_code=422, detail=str(exc))


def _compare_inputs(payload: Dict[str, Any]) -> List[Process]:
    raw = payload.get("processes")
    if isinstance(raw, list) and raw:
        return [process_from_dict(item, idx + 1) for idx, item in enumerate(raw) if isinstance(item, dict)]
    if payload.get("preset") is not None:
        return load_preset(int(payload["preset"]))
    return get_compare_processes()


@router.get("/health")
def health() -> Dict[str, bool]:
    return {"ok": True}


@router.get("/sim/algorithms")
def sim_algorithms() -> Dict[str, Any]:
    return {
        "algorithms": [a.value for a in Algorithm],
        "presets": [{"id": k, "name": v} for k, v in PRESETS.items()],
    }


@router.post("/sim/init")
def sim_init(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    try:
        return init_session(payload)
    except ValueError as exc:
        raise _unprocessable(exc)


@router.post("/sim/tick")
def sim_tick() -> Dict[str, Any]:
    return tick_session()


@router.post("/sim/run")
def sim_run(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    steps = payload.get("steps", 1)
    # bool is an int subclass; reject it along with floats and strings
    if isinstance(steps, bool) or not isinstance(steps, int) or steps < 0:
        raise HTTPException(status_code=422, detail="steps must be a non-negative integer")
    return run_session(steps)


@router.post("/sim/add")
def sim_add(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    nested = payload.get("process")
    try:
        return add_process(nested if isinstance(nested, dict) else payload)
    except ValueError as exc:
        raise _unprocessable(exc)


@router.post("/sim/clear_added")
def sim_clear_added() -> Dict[str, Any]:
    return clear_added_processes()


@router.post("/sim/config")
def sim_config(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    return set_config(payload)


@router.get("/sim/state")
def sim_state() -> Dict[str, Any]:
    return get_state()


@router.post("/sim/compare")
def sim_compare(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    """Run every algorithm on the posted processes, a preset, or the session's dataset."""
    cfg = get_settings()
    try:
        processes = _compare_inputs(payload)
        quantum = max(1, int(payload.get("quantum", cfg["quantum"])))
        aging_threshold = max(1, int(payload.get("aging_threshold", cfg["aging_threshold"])))
        aging_boost = max(1, int(payload.get("aging_boost", cfg["aging_boost"])))
    except (TypeError, ValueError) as exc:
        raise _unprocessable(exc)

    if not processes:
        raise HTTPException(status_code=422, detail="no processes to compare")

    try:
        results = compare_all_algorithms(
            processes,
            rr_quantum=quantum,
            aging_enabled=bool(payload.get("aging_enabled", cfg["aging_enabled"])),
            aging_threshold=aging_threshold,
            aging_boost=aging_boost,
            max_ticks=int(cfg["max_ticks"]),
        )
    except ValueError as exc:
        # duplicate ids surface here, when each scheduler is built
        raise _unprocessable(exc)
    return {"results": [serialize_compare_result(r) for r in results]}


@router.post("/sim/reset")
def sim_reset() -> Dict[str, Any]:
    return reset_session()
