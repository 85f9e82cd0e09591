"""
Performance tracking utilities for fbas-graphs
"""

import time
import json
import numpy as np
from typing import Dict, List, Any
from collections import defaultdict
from pathlib import Path


class PerformanceTracker:
    """
    Track stage timings, counters and gauges of a run
    """

    def __init__(self):
        self.timers: Dict[str, List[float]] = defaultdict(list)
        self.counters: Dict[str, int] = defaultdict(int)
        self.gauges: Dict[str, float] = {}

    def start_timer(self, name: str) -> 'TimerContext':
        """Start a timer"""
        return TimerContext(self, name)

    def record_time(self, name: str, duration: float):
        """Record a time measurement"""
        self.timers[name].append(duration)

    def increment_counter(self, name: str, value: int = 1):
        """Increment a counter"""
        self.counters[name] += value

    def set_gauge(self, name: str, value: float):
        """Set a gauge value"""
        self.gauges[name] = value

    def get_timer_stats(self, name: str) -> Dict[str, float]:
        """Get statistics for a timer"""
        times = self.timers.get(name, [])
        if not times:
            return {}

        return {
            'count': len(times),
            'total': float(sum(times)),
            'mean': float(np.mean(times)),
            'min': float(min(times)),
            'max': float(max(times)),
            'p95': float(np.percentile(times, 95))
        }

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of all metrics"""
        summary = {
            'timers': {},
            'counters': dict(self.counters),
            'gauges': dict(self.gauges)
        }

        for name in self.timers:
            summary['timers'][name] = self.get_timer_stats(name)

        return summary

    def export_json(self, filepath: str):
        """Export summary to JSON file"""
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w') as f:
            json.dump(self.get_summary(), f, indent=2)


class TimerContext:
    """Context manager for timing code blocks"""

    def __init__(self, tracker: PerformanceTracker, name: str):
        self.tracker = tracker
        self.name = name
        self.start_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            duration = time.perf_counter() - self.start_time
            self.tracker.record_time(self.name, duration)
