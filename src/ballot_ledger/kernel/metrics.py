"""
Prometheus metrics collection for Ballot Ledger.

Counts commands, appended events and the weight flowing into the tally.
"""

import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from prometheus_client import Counter, Histogram, start_http_server

# ============================================================================
# Event Store Metrics
# ============================================================================

events_appended_total = Counter(
    "ballot_events_appended_total",
    "Total number of events appended to the event store",
    ["stream_type", "event_type"],
)

events_loaded_total = Counter(
    "ballot_events_loaded_total",
    "Total number of events loaded from the event store",
    ["stream_type"],
)

# ============================================================================
# Command Processing Metrics
# ============================================================================

command_duration_seconds = Histogram(
    "ballot_command_duration_seconds",
    "Duration of command processing in seconds",
    ["command_type"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

commands_processed_total = Counter(
    "ballot_commands_processed_total",
    "Total number of commands processed",
    ["command_type", "status"],  # status: success, failure
)

# ============================================================================
# Tally Metrics
# ============================================================================

weight_tallied_total = Counter(
    "ballot_weight_tallied_total",
    "Vote weight credited to proposals",
    ["path"],  # path: vote, delegation
)

# ============================================================================
# Helper Functions
# ============================================================================

P = ParamSpec("P")
R = TypeVar("R")


def track_command_duration(command_type: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator to track command duration and success/failure counts.

    Args:
        command_type: Type of command being processed
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            status = "success"
            try:
                return func(*args, **kwargs)
            except Exception:
                status = "failure"
                raise
            finally:
                duration = time.perf_counter() - start
                command_duration_seconds.labels(command_type=command_type).observe(duration)
                commands_processed_total.labels(
                    command_type=command_type, status=status
                ).inc()

        return wrapper

    return decorator


def record_weight_tallied(path: str, weight: int) -> None:
    """Record weight credited to a proposal via 'vote' or 'delegation'."""
    if weight > 0:
        weight_tallied_total.labels(path=path).inc(weight)


def start_metrics_server(port: int = 9090) -> None:
    """Start Prometheus metrics HTTP server on the given port."""
    start_http_server(port)
