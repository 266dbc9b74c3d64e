"""
Decider Kernel - generic kernel for event-sourced aggregates

State is always a pure fold over an ordered event log. Commands are
decided against current state, the resulting events are folded in
immediately, and they stay pending until the caller flushes them to
wherever events are persisted.

Fun fact: Event sourcing predates software by a few millennia - the
oldest surviving ledgers are Mesopotamian clay tablets, append-only by
construction!
"""

from decider_kernel.kernel import (
    AggregateRoot,
    Command,
    Decider,
    Event,
    KernelPolicy,
    create_aggregate_factory,
    create_command,
    create_event,
)

__version__ = "0.1.0"
__all__ = [
    "Event",
    "Command",
    "create_event",
    "create_command",
    "Decider",
    "AggregateRoot",
    "create_aggregate_factory",
    "KernelPolicy",
    "__version__",
]
