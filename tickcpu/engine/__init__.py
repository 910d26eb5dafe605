from .compare import compare_all_algorithms, run_algorithm_once, run_to_completion
from .datasets import (
    PRESETS,
    build_default_processes,
    clone_processes,
    load_preset,
    load_processes_csv,
    load_processes_json,
    process_from_dict,
)
from .metrics import compute_metrics, timeline_summary
from .models import Algorithm, Process, SchedulerConfig
from .scheduler import CPUScheduler

__all__ = [
    "Algorithm",
    "Process",
    "SchedulerConfig",
    "CPUScheduler",
    "compute_metrics",
    "timeline_summary",
    "PRESETS",
    "build_default_processes",
    "clone_processes",
    "load_preset",
    "load_processes_csv",
    "load_processes_json",
    "process_from_dict",
    "run_algorithm_once",
    "run_to_completion",
    "compare_all_algorithms",
]
