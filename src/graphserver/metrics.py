"""Prometheus metrics definitions for the graph test server.

Tracks how the harness spends test-suite time:
- server start outcomes and duration
- readiness probes per start
- teardown failures absorbed by stop()
"""

from prometheus_client import Counter, Histogram

# Startup is normally sub-second; the default budget tops out around 3s
_BUCKETS_STARTUP = (
    0.05, 0.1, 0.25, 0.5, 1,
    2, 3, 5, 10,
)

SERVER_STARTS_TOTAL = Counter(
    "graphserver_starts_total",
    "Total server start attempts",
    ["result"],  # started, failed, timeout, config_error
)

SERVER_START_DURATION = Histogram(
    "graphserver_start_duration_seconds",
    "Duration from start() call to readiness",
    buckets=_BUCKETS_STARTUP,
)

READINESS_PROBES_TOTAL = Counter(
    "graphserver_readiness_probes_total",
    "Total readiness status checks",
    ["status"],  # starting, started, failed, stopped
)

TEARDOWN_FAILURES_TOTAL = Counter(
    "graphserver_teardown_failures_total",
    "Total errors absorbed while stopping the server",
)
