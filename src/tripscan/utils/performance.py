import logging
import time
from typing import Optional

import psutil
from prometheus_client import Histogram

logger = logging.getLogger(__name__)

# Prometheus Metrics
TASK_DURATION_SECONDS = Histogram(
    "task_duration_seconds",
    "Time spent performing the task",
    ["task_name"]
)

TASK_CPU_USAGE_PERCENT = Histogram(
    "task_cpu_usage_percent",
    "CPU usage percent during the task",
    ["task_name"]
)

TASK_MEMORY_USAGE_BYTES = Histogram(
    "task_memory_usage_bytes",
    "Memory usage in bytes at the end of the task",
    ["task_name"]
)


class PerformanceMonitor:
    """Helper to measure Time, CPU, and Memory usage."""

    def __init__(self):
        self.start_time = 0.0
        self.end_time = 0.0
        self.end_cpu = 0.0
        self.start_mem = 0
        self.end_mem = 0
        self.process = psutil.Process()

    def start(self):
        self.start_time = time.perf_counter()
        self.process.cpu_percent(interval=None)  # Set baseline for next call
        self.start_mem = self.process.memory_info().rss

    def stop(self):
        self.end_time = time.perf_counter()
        self.end_cpu = self.process.cpu_percent(interval=None)  # Average CPU usage since start()
        self.end_mem = self.process.memory_info().rss

    @property
    def duration(self):
        return self.end_time - self.start_time

    def report(self, label: str, count: Optional[int] = None) -> str:
        count_str = f" (N={count})" if count is not None else ""
        msg = f"[{label}]{count_str} Time: {self.duration:.4f}s"

        TASK_DURATION_SECONDS.labels(task_name=label).observe(self.duration)

        mem_diff_mb = (self.end_mem - self.start_mem) / (1024 * 1024)
        end_mem_mb = self.end_mem / (1024 * 1024)
        msg += f" | CPU: {self.end_cpu:.1f}% | Mem: {end_mem_mb:.1f}MB (Delta: {mem_diff_mb:+.2f}MB)"

        TASK_CPU_USAGE_PERCENT.labels(task_name=label).observe(self.end_cpu)
        TASK_MEMORY_USAGE_BYTES.labels(task_name=label).observe(self.end_mem)

        logger.info(msg)
        return msg
