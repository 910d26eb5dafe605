import json
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .models import Algorithm, Process, SchedulerConfig

logger = logging.getLogger(__name__)

# Ready-queue ordering applied right before a dispatch decision.
# FCFS and RR keep insertion order.
_DISPATCH_KEYS: Dict[Algorithm, Callable[[Process], Tuple[int, int, int]]] = {
    Algorithm.SJF: lambda p: (p.burst_time, p.arrival_time, p.id),
    Algorithm.SRTF: lambda p: (p.remaining_time, p.arrival_time, p.id),
    Algorithm.PRIORITY: lambda p: (p.priority, p.arrival_time, p.id),
    Algorithm.PRIORITY_NP: lambda p: (p.priority, p.arrival_time, p.id),
}


class CPUScheduler:
    """
    Discrete-time CPU scheduler. Each tick() advances the clock by one unit.

    Supported algorithms:
      - FCFS       (non-preemptive, arrival order)
      - SJF        (non-preemptive, shortest burst first)
      - SRTF       (preemptive SJF: shortest remaining time first)
      - RR         (Round Robin; time quantum)
      - Priority   (preemptive; lower priority number runs first)
      - PriorityNP (non-preemptive priority)

    Every process lives in exactly one of: job_pool (not yet arrived),
    ready_queue, running (the CPU slot) or finished (completion order).
    """

    def __init__(
        self,
        processes: Optional[List[Process]] = None,
        algorithm: Any = "FCFS",
        quantum: int = 2,
        aging_enabled: bool = False,
        aging_threshold: int = 5,
        aging_boost: int = 1,
    ):
        self.config = SchedulerConfig()
        self.set_algorithm(algorithm)
        self.set_time_quantum(quantum)
        self.set_aging(aging_enabled)
        self.set_aging_threshold(aging_threshold)
        self.set_aging_boost(aging_boost)

        # Every submitted process, in submission order
        self.processes: List[Process] = []
        self.event_log_limit: int = 200
        self.reset()

        for p in processes or []:
            self._submit(p)

    def reset(self):
        """Rewind the clock and put every submitted process back in the job pool."""
        self.time = 0
        self.job_pool: List[Process] = []
        self.ready_queue: List[Process] = []
        self.running: Optional[Process] = None
        self.finished: List[Process] = []

        # RR time-slice tracking
        self.quantum_used: int = 0

        # What actually ran during the previous tick (CPU may be idle by now)
        self.last_executed: Optional[Process] = None

        self.gantt_chart: List[str] = []
        self.event_log: List[str] = []

        for p in self.processes:
            p.remaining_time = p.burst_time
            p.priority = p.original_priority
            p.start_time = -1
            p.completion_time = -1
            p.waiting_time = 0
            p.turnaround_time = 0
            p.response_time = -1
            p.age_counter = 0
            self.job_pool.append(p)

    # -------- Configuration --------
    @property
    def algorithm(self) -> Algorithm:
        return self.config.algorithm

    @property
    def quantum(self) -> int:
        return self.config.time_quantum

    def set_algorithm(self, algorithm: Any):
        self.config.algorithm = Algorithm.parse(algorithm)

    def set_time_quantum(self, quantum: int):
        self.config.time_quantum = max(1, int(quantum))

    def set_aging(self, enabled: bool):
        self.config.aging_enabled = bool(enabled)

    def set_aging_threshold(self, threshold: int):
        self.config.aging_threshold = max(1, int(threshold))

    def set_aging_boost(self, boost: int):
        self.config.aging_boost = max(1, int(boost))

    # -------- Process submission --------
    def add_process(self, id: int, name: str, arrival_time: int, burst_time: int, priority: int = 0) -> Process:
        p = Process(
            id=int(id),
            name=str(name),
            arrival_time=int(arrival_time),
            burst_time=int(burst_time),
            priority=int(priority),
        )
        self._submit(p)
        return p

    def _submit(self, p: Process):
        if any(existing.id == p.id for existing in self.processes):
            raise ValueError(f"process id {p.id} already exists")
        self.processes.append(p)
        self.job_pool.append(p)

    def is_finished(self) -> bool:
        return not self.job_pool and not self.ready_queue and self.running is None

    def _log_event(self, msg: str):
        self.event_log.append(msg)
        if len(self.event_log) > self.event_log_limit:
            self.event_log = self.event_log[-self.event_log_limit:]

    # -------- Tick phases --------
    def _take_arrivals(self) -> List[Process]:
        arrived = [p for p in self.job_pool if p.arrival_time <= self.time]
        if arrived:
            self.job_pool = [p for p in self.job_pool if p.arrival_time > self.time]
        return arrived

    def _preempt(self):
        self.ready_queue.append(self.running)
        self.running = None
        self.quantum_used = 0

    def _check_quantum_expiry(self, trace: List[str]):
        p = self.running
        if self.algorithm is not Algorithm.RR or p is None:
            return
        if p.remaining_time > 0 and self.quantum_used >= self.config.time_quantum:
            trace.append(f"Process {p.id} quantum expired. ")
            self._preempt()

    def _check_preemption(self, trace: List[str]):
        p = self.running
        if p is None or not self.ready_queue:
            return

        if self.algorithm is Algorithm.SRTF:
            best = min(self.ready_queue, key=lambda q: (q.remaining_time, q.id))
            # Preempt only if a strictly shorter remaining-time job exists
            if best.remaining_time < p.remaining_time:
                trace.append(f"Process {p.id} preempted by Process {best.id} (SRTF). ")
                self._preempt()

        elif self.algorithm is Algorithm.PRIORITY:
            best = min(self.ready_queue, key=lambda q: (q.priority, q.id))
            if best.priority < p.priority:
                trace.append(
                    f"Process {p.id} preempted by Process {best.id} "
                    f"(Priority {best.priority} < {p.priority}). "
                )
                self._preempt()

    def schedule(self):
        if self.running is not None or not self.ready_queue:
            return

        key = _DISPATCH_KEYS.get(self.algorithm)
        if key is not None:
            self.ready_queue.sort(key=key)

        p = self.ready_queue.pop(0)
        self.running = p
        self.quantum_used = 0
        if p.start_time == -1:
            p.start_time = self.time
            p.response_time = self.time - p.arrival_time

    def execute(self, trace: List[str]):
        p = self.running
        if p is None:
            self.last_executed = None
            self.gantt_chart.append("IDLE")
            trace.append("CPU Idle.")
        else:
            self.last_executed = p
            trace.append(f"Running Process {p.id} ({p.remaining_time} remaining). ")
            p.remaining_time -= 1
            self.quantum_used += 1
            self.gantt_chart.append(p.name)

        # Sole place waiting time accrues
        for q in self.ready_queue:
            q.waiting_time += 1

        if p is not None and p.remaining_time <= 0:
            p.completion_time = self.time + 1
            p.turnaround_time = p.completion_time - p.arrival_time
            self.finished.append(p)
            self.running = None
            self.quantum_used = 0
            trace.append(f"Process {p.id} finished.")

    def apply_aging(self, trace: List[str]):
        for p in self.ready_queue:
            p.age_counter += 1
            if p.age_counter >= self.config.aging_threshold:
                if p.priority > 0:
                    p.priority = max(0, p.priority - self.config.aging_boost)
                    trace.append(f" [Aged: P{p.id} priority={p.priority}]")
                p.age_counter = 0

    def tick(self) -> str:
        """Advance the simulation by one time unit and return a trace line."""
        trace = [f"Time {self.time}: "]

        arrivals = self._take_arrivals()
        # A quantum-expired process is queued ahead of same-tick arrivals
        self._check_quantum_expiry(trace)
        self.ready_queue.extend(arrivals)

        self._check_preemption(trace)
        self.schedule()
        self.execute(trace)

        if self.config.aging_enabled:
            self.apply_aging(trace)

        self.time += 1

        line = "".join(trace)
        self._log_event(line)
        logger.debug(line)
        return line

    # -------- State export --------
    def get_state(self) -> Dict[str, Any]:
        cpu = self.running
        last = self.last_executed
        return {
            "time": self.time,
            "algorithm": self.algorithm.value,
            "cpu_process": None if cpu is None else {
                "id": cpu.id,
                "name": cpu.name,
                "remaining": cpu.remaining_time,
                "quantum_used": self.quantum_used,
            },
            "last_executed": None if last is None else {"id": last.id, "name": last.name},
            "ready_queue": [
                {
                    "id": p.id,
                    "name": p.name,
                    "remaining": p.remaining_time,
                    "priority": p.priority,
                    "original_priority": p.original_priority,
                    "age_counter": p.age_counter,
                }
                for p in self.ready_queue
            ],
            "job_pool": [{"id": p.id, "arrival": p.arrival_time} for p in self.job_pool],
            "finished": [
                {
                    "id": p.id,
                    "name": p.name,
                    "waiting_time": p.waiting_time,
                    "turnaround_time": p.turnaround_time,
                    "response_time": p.response_time,
                }
                for p in self.finished
            ],
        }

    def get_state_json(self) -> str:
        return json.dumps(self.get_state())
