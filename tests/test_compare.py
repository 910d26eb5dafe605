import logging

import pytest

from tickcpu.engine import (
    Algorithm,
    CPUScheduler,
    compare_all_algorithms,
    compute_metrics,
    load_preset,
    run_algorithm_once,
    run_to_completion,
    timeline_summary,
)


def test_compute_metrics_after_fcfs_run():
    sched = CPUScheduler(load_preset(1))
    assert run_to_completion(sched)

    rows, avg_wt, avg_tat, avg_rt = compute_metrics(sched.processes)

    assert [r["PID"] for r in rows] == [1, 2, 3]
    assert [r["CT"] for r in rows] == [5, 8, 9]
    assert [r["TAT"] for r in rows] == [5, 7, 7]
    assert avg_wt == pytest.approx(10 / 3)
    assert avg_tat == pytest.approx(19 / 3)
    assert avg_rt == pytest.approx(10 / 3)


def test_compute_metrics_marks_unfinished_rows():
    sched = CPUScheduler(load_preset(1))
    sched.tick()

    rows, avg_wt, _, _ = compute_metrics(sched.processes)

    assert rows[0]["ST"] == 0
    assert rows[0]["CT"] == "-"
    assert rows[1]["RT"] == "-"
    assert not any(r["_done"] for r in rows)
    assert avg_wt == 0.0


def test_timeline_summary_counts_idle_ticks():
    summary = timeline_summary(["P1", "IDLE", "P2", "P2"], 2)
    assert summary["cpu_util"] == pytest.approx(75.0)
    assert summary["makespan"] == 4
    assert summary["throughput"] == pytest.approx(0.5)
    assert timeline_summary([], 0)["cpu_util"] == 0.0


def test_compare_runs_every_algorithm_on_fresh_copies():
    procs = load_preset(1)
    results = compare_all_algorithms(procs, rr_quantum=2)

    assert [r["algorithm"] for r in results] == [a.value for a in Algorithm]
    assert all(r["completed"] for r in results)
    assert all(r["makespan"] == 9 for r in results)

    orders = {r["algorithm"]: r["finish_order"] for r in results}
    assert orders["FCFS"] == [1, 2, 3]
    assert orders["SJF"] == [1, 3, 2]
    assert orders["SRTF"] == [3, 2, 1]

    # Inputs are never mutated
    assert all(p.start_time == -1 for p in procs)


def test_run_to_completion_reports_tick_cap(caplog):
    sched = CPUScheduler(load_preset(3))
    with caplog.at_level(logging.WARNING):
        assert run_to_completion(sched, max_ticks=2) is False
    assert sched.time == 2
    assert "tick cap" in caplog.text


def test_run_algorithm_once_flags_incomplete_runs():
    result = run_algorithm_once(load_preset(3), "SRTF", max_ticks=5)
    assert result["completed"] is False
    assert result["makespan"] == 5
