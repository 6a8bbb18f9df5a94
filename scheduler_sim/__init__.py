"""
Scheduler simulation package.

Discrete-time simulation of CPU scheduling policies (FCFS, Round Robin,
SPN, HRRN) producing a per-instant occupancy grid and per-process
completion statistics.
"""

__all__ = ["cli"]
