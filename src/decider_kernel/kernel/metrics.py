"""
Prometheus metrics for the decider kernel.

Counts what aggregates do with commands and events so a service embedding
the kernel can see how often commands are ignored and how much history it
replays.
"""

from prometheus_client import Counter, Histogram

# ============================================================================
# Command Metrics
# ============================================================================

commands_dispatched_total = Counter(
    "decider_commands_dispatched_total",
    "Total number of commands dispatched to aggregates",
    ["command_type", "status"],  # status: success, ignored, failure
)

# Label value for commands with no registered dispatcher. Unregistered tags
# come from callers, so they never become label values themselves.
UNKNOWN_COMMAND_TYPE = "unknown"

dispatch_duration_seconds = Histogram(
    "decider_dispatch_duration_seconds",
    "Duration of command dispatch (decide + fold) in seconds",
    ["command_type"],
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.5, 1.0),
)

# ============================================================================
# Event Metrics
# ============================================================================

events_emitted_total = Counter(
    "decider_events_emitted_total",
    "Total number of events produced by command dispatch",
    ["event_type"],
)

events_ignored_total = Counter(
    "decider_events_ignored_total",
    "Total number of events folded without a registered reducer",
)

events_rehydrated_total = Counter(
    "decider_events_rehydrated_total",
    "Total number of history events folded while creating aggregates",
)

events_flushed_total = Counter(
    "decider_events_flushed_total",
    "Total number of pending events moved to history by flush",
)
