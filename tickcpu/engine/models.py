from dataclasses import dataclass
from enum import Enum
from typing import Any


class Algorithm(str, Enum):
    FCFS = "FCFS"
    SJF = "SJF"
    SRTF = "SRTF"
    RR = "RR"
    PRIORITY = "Priority"
    PRIORITY_NP = "PriorityNP"

    @classmethod
    def parse(cls, value: Any) -> "Algorithm":
        """Map a loose algorithm name to a member; anything unknown runs as FCFS."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip()
        for member in cls:
            if text == member.value:
                return member
        # Case-insensitive aliases accepted from the API / CLI
        aliases = {
            "FCFS": cls.FCFS,
            "SJF": cls.SJF,
            "SRTF": cls.SRTF,
            "RR": cls.RR,
            "PRIORITY": cls.PRIORITY,
            "PRIORITY_P": cls.PRIORITY,
            "PRIORITYNP": cls.PRIORITY_NP,
            "PRIORITY_NP": cls.PRIORITY_NP,
        }
        return aliases.get(text.upper(), cls.FCFS)

    @property
    def uses_priority(self) -> bool:
        return self in (Algorithm.PRIORITY, Algorithm.PRIORITY_NP)


@dataclass
class SchedulerConfig:
    algorithm: Algorithm = Algorithm.FCFS
    time_quantum: int = 2            # RR only
    aging_enabled: bool = False
    aging_threshold: int = 5         # waiting ticks per boost
    aging_boost: int = 1             # priority steps granted per boost


@dataclass
class Process:
    id: int
    name: str
    arrival_time: int
    burst_time: int
    priority: int = 0          # lower number = higher priority

    # Runtime state
    remaining_time: int = 0
    start_time: int = -1       # -1 until first dispatch
    completion_time: int = -1
    waiting_time: int = 0
    turnaround_time: int = 0
    response_time: int = -1

    # Aging
    age_counter: int = 0
    original_priority: int = 0

    def __post_init__(self):
        self.remaining_time = int(self.burst_time)
        self.original_priority = int(self.priority)

    @property
    def started(self) -> bool:
        return self.start_time != -1

    @property
    def aged(self) -> bool:
        return self.priority < self.original_priority
