"""
Kernel - generic machinery for event-sourced aggregates

The kernel knows nothing about any business entity. A domain supplies a
Decider (reducer table, dispatcher table, initial state) and the kernel
folds events into state, turns commands into new events, and keeps
pending events apart from committed history until they are flushed.
"""

from decider_kernel.kernel.aggregate import (
    AggregateFactory,
    AggregateRoot,
    create_aggregate_factory,
)
from decider_kernel.kernel.decider import (
    Decider,
    Dispatcher,
    DispatcherFn,
    Reducer,
    ReducerFn,
    normalize_events,
)
from decider_kernel.kernel.errors import (
    DeciderError,
    EffectMappingError,
    EventValidationError,
    InvariantViolation,
    UnknownCommandType,
    UnknownEventName,
    UnknownEventType,
)
from decider_kernel.kernel.events import Command, Event, create_command, create_event
from decider_kernel.kernel.policy import (
    KernelPolicy,
    default_kernel_policy,
    strict_kernel_policy,
)

__all__ = [
    # Events & Commands
    "Event",
    "Command",
    "create_event",
    "create_command",
    # Decider
    "Decider",
    "Reducer",
    "ReducerFn",
    "Dispatcher",
    "DispatcherFn",
    "normalize_events",
    # Aggregate
    "AggregateRoot",
    "AggregateFactory",
    "create_aggregate_factory",
    # Policy
    "KernelPolicy",
    "default_kernel_policy",
    "strict_kernel_policy",
    # Errors
    "DeciderError",
    "UnknownCommandType",
    "UnknownEventType",
    "EventValidationError",
    "UnknownEventName",
    "EffectMappingError",
    "InvariantViolation",
]
