from tickcpu.engine import Algorithm, CPUScheduler, Process

__all__ = ["Algorithm", "CPUScheduler", "Process"]
