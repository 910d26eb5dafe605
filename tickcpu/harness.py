"""Batch harness: load a dataset, drive the scheduler to completion, print statistics."""

import argparse
import logging
import sys
from typing import List, Optional

from tickcpu.engine import (
    Algorithm,
    CPUScheduler,
    Process,
    compare_all_algorithms,
    compute_metrics,
    load_preset,
    load_processes_csv,
    load_processes_json,
    timeline_summary,
)

logger = logging.getLogger(__name__)


def _load_dataset(args: argparse.Namespace) -> List[Process]:
    if args.csv:
        return load_processes_csv(args.csv)
    if args.json:
        return load_processes_json(args.json)
    return load_preset(int(args.preset))


def _render_table(sched: CPUScheduler) -> str:
    rows, avg_wt, avg_tat, avg_rt = compute_metrics(sched.processes)
    summary = timeline_summary(sched.gantt_chart, len(sched.finished))

    cols = ["PID", "NAME", "AT", "BT", "PR", "ST", "CT", "TAT", "WT", "RT"]
    out = ["".join(f"{c:<8}" for c in cols)]
    for r in rows:
        out.append("".join(f"{str(r[c]):<8}" for c in cols))
    out.append("")
    out.append(f"Finish order: {' '.join(str(p.id) for p in sched.finished)}")
    out.append(f"Average Waiting Time: {avg_wt:.2f}")
    out.append(f"Average Turnaround Time: {avg_tat:.2f}")
    out.append(f"Average Response Time: {avg_rt:.2f}")
    out.append(f"CPU Utilization: {summary['cpu_util']:.1f}%   Makespan: {summary['makespan']}")
    return "\n".join(out) + "\n"


def _cmd_run(args: argparse.Namespace) -> int:
    try:
        processes = _load_dataset(args)
    except (OSError, ValueError) as e:
        print(f"ERROR: cannot load dataset: {e}", file=sys.stderr)
        return 2

    sched = CPUScheduler(
        algorithm=args.algorithm,
        quantum=args.quantum,
        aging_enabled=args.aging,
        aging_threshold=args.aging_threshold,
        aging_boost=args.aging_boost,
    )
    try:
        for p in processes:
            sched.add_process(p.id, p.name, p.arrival_time, p.burst_time, p.priority)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    label = sched.algorithm.value
    if sched.algorithm is Algorithm.RR:
        label += f" (Q={sched.quantum})"
    print(f"Algorithm: {label}")

    # --max-ticks is a safety cap for malformed datasets
    ticks = 0
    while not sched.is_finished() and ticks < args.max_ticks:
        line = sched.tick()
        if args.trace:
            print(line)
        ticks += 1

    print()
    sys.stdout.write(_render_table(sched))

    if not sched.is_finished():
        logger.warning("tick cap %d reached before all processes finished", args.max_ticks)
        return 1
    return 0


def _cmd_compare(args: argparse.Namespace) -> int:
    try:
        processes = _load_dataset(args)
    except (OSError, ValueError) as e:
        print(f"ERROR: cannot load dataset: {e}", file=sys.stderr)
        return 2

    try:
        results = compare_all_algorithms(
            processes,
            rr_quantum=args.quantum,
            aging_enabled=args.aging,
            aging_threshold=args.aging_threshold,
            aging_boost=args.aging_boost,
            max_ticks=args.max_ticks,
        )
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    print(f"{'ALGORITHM':<12}{'AVG WT':>9}{'AVG TAT':>9}{'AVG RT':>9}{'UTIL %':>9}{'MAKESPAN':>10}")
    for r in results:
        print(
            f"{r['algorithm']:<12}{r['avg_wt']:>9.2f}{r['avg_tat']:>9.2f}{r['avg_rt']:>9.2f}"
            f"{r['cpu_util']:>9.1f}{r['makespan']:>10}"
        )
    return 0 if all(r["completed"] for r in results) else 1


def _cmd_serve(args: argparse.Namespace) -> int:
    from tickcpu.main import serve

    serve(host=args.host, port=args.port)
    return 0


def _cmd_view(args: argparse.Namespace) -> int:
    from tickcpu.pygame_ui.app import run

    run()
    return 0


def _add_dataset_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--preset", type=int, default=1, help="Built-in dataset id (1-5).")
    p.add_argument("--csv", type=str, help="CSV file with rows id,name,arrival,burst,priority.")
    p.add_argument("--json", type=str, help="JSON list of process objects.")
    p.add_argument("--quantum", type=int, default=2, help="Round Robin time quantum.")
    p.add_argument("--aging", action="store_true", help="Enable priority aging.")
    p.add_argument("--aging-threshold", type=int, default=5, help="Waiting ticks per aging boost.")
    p.add_argument("--aging-boost", type=int, default=1, help="Priority steps per aging boost.")
    p.add_argument("--max-ticks", type=int, default=10000, help="Safety cap: max ticks to simulate.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tickcpu",
        description="Discrete-time CPU scheduling simulator.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run one algorithm to completion and print statistics.")
    run.add_argument(
        "--algorithm",
        type=str,
        default="FCFS",
        help=f"One of {', '.join(a.value for a in Algorithm)}; unknown names run as FCFS.",
    )
    run.add_argument("--trace", action="store_true", help="Print the trace line of every tick.")
    _add_dataset_args(run)
    run.set_defaults(func=_cmd_run)

    compare = sub.add_parser("compare", help="Run every algorithm on the same dataset.")
    _add_dataset_args(compare)
    compare.set_defaults(func=_cmd_compare)

    serve = sub.add_parser("serve", help="Start the HTTP/WebSocket API.")
    serve.add_argument("--host", type=str, default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8080)
    serve.set_defaults(func=_cmd_serve)

    view = sub.add_parser("view", help="Open the pygame viewer.")
    view.set_defaults(func=_cmd_view)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))
