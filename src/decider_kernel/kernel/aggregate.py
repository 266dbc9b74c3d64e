"""
Aggregate - a decider bound to one event log

An aggregate instance owns three things:
- committed events: history already known to the caller (loaded or flushed)
- pending events: produced by dispatch since the last flush
- current state: always fold(initial_state(), committed + pending)

The kernel never persists anything. Callers take flush()'s return value
and write it wherever their events live.

Fun fact: Accountants never erase a ledger entry - they add a correcting
one. An aggregate works the same way: there is no rollback, only more events.
"""

import time
from typing import Callable, Generic, Iterable, Optional, Sequence

from decider_kernel.kernel.decider import Decider, S
from decider_kernel.kernel.errors import UnknownCommandType, UnknownEventType
from decider_kernel.kernel.events import Command, Event
from decider_kernel.kernel.logging import LogOperation, get_logger
from decider_kernel.kernel.metrics import (
    UNKNOWN_COMMAND_TYPE,
    commands_dispatched_total,
    dispatch_duration_seconds,
    events_emitted_total,
    events_flushed_total,
    events_ignored_total,
    events_rehydrated_total,
)
from decider_kernel.kernel.policy import KernelPolicy, default_kernel_policy

logger = get_logger(__name__)


class AggregateRoot(Generic[S]):
    """
    Stateful wrapper around a Decider and a mutable event log

    Not thread-safe: one flow of control owns an instance at a time. The
    Decider itself is shared and never mutated.
    """

    def __init__(
        self,
        decider: Decider[S],
        history: Iterable[Event] = (),
        policy: KernelPolicy | None = None,
    ) -> None:
        """
        Rehydrate an aggregate from its history

        Args:
            decider: Decision policy for this aggregate type
            history: Previously committed events, oldest first (copied)
            policy: Unknown-tag handling (defaults to ignoring them)

        Raises:
            UnknownEventType: If the policy is strict and history holds an
                event with no reducer
        """
        self._decider = decider
        self._policy = policy or default_kernel_policy
        self._committed: list[Event] = list(history)
        self._pending: list[Event] = []
        self._state: S = self._fold(self._decider.initial_state(), self._committed)

        if self._committed:
            events_rehydrated_total.inc(len(self._committed))
        logger.debug("Aggregate rehydrated", history_length=len(self._committed))

    @property
    def decider(self) -> Decider[S]:
        return self._decider

    @property
    def policy(self) -> KernelPolicy:
        return self._policy

    def get_state(self) -> S:
        """Current derived state (treat as read-only)"""
        return self._state

    def dispatch(self, command: Command) -> None:
        """
        Decide on a command and apply the resulting events

        Each produced event is folded in order, so event k sees the state
        left by events 1..k-1. State and the pending list change together
        only after every event folded cleanly; if the dispatcher or a
        reducer raises, the aggregate is left exactly as it was.

        Args:
            command: Command to dispatch

        Raises:
            UnknownCommandType: If the policy is strict and no dispatcher
                is registered for the command's tag
            UnknownEventType: If the policy is strict and a produced event
                has no reducer
        """
        if not self._decider.handles_command(command.type):
            self._ignore_command(command)
            return

        start = time.perf_counter()
        with LogOperation(
            logger,
            "dispatch",
            level="debug",
            command_type=command.type,
        ):
            try:
                new_events = self._decider.decide(self._state, command)
                new_state = self._fold(self._state, new_events)
            except Exception:
                commands_dispatched_total.labels(
                    command_type=command.type, status="failure"
                ).inc()
                raise
            finally:
                dispatch_duration_seconds.labels(command_type=command.type).observe(
                    time.perf_counter() - start
                )

            self._state = new_state
            self._pending.extend(new_events)

        commands_dispatched_total.labels(command_type=command.type, status="success").inc()
        for event in new_events:
            events_emitted_total.labels(event_type=event.type).inc()
        logger.debug(
            "Command dispatched",
            command_type=command.type,
            events_emitted=len(new_events),
            event_types=[e.type for e in new_events],
            pending=len(self._pending),
        )

    def all_events(self) -> tuple[Event, ...]:
        """Snapshot of committed followed by pending events"""
        return tuple(self._committed) + tuple(self._pending)

    def pending_events(self) -> tuple[Event, ...]:
        """Snapshot of events produced since the last flush, in production order"""
        return tuple(self._pending)

    def flush(self) -> tuple[Event, ...]:
        """
        Move every pending event into history

        Returns:
            The events just moved, in order - hand these to persistence.
            Empty when nothing was pending.
        """
        flushed = tuple(self._pending)
        self._committed.extend(flushed)
        self._pending.clear()

        if flushed:
            events_flushed_total.inc(len(flushed))
            logger.debug(
                "Pending events flushed",
                flushed=len(flushed),
                history_length=len(self._committed),
            )
        return flushed

    def _fold(self, state: S, events: Sequence[Event]) -> S:
        for event in events:
            if not self._decider.handles_event(event.type):
                self._ignore_event(event)
                continue
            state = self._decider.evolve(state, event)
        return state

    def _ignore_command(self, command: Command) -> None:
        if self._policy.unknown_command == "raise":
            commands_dispatched_total.labels(
                command_type=UNKNOWN_COMMAND_TYPE, status="failure"
            ).inc()
            raise UnknownCommandType(command.type, self._decider.get_command_types())

        commands_dispatched_total.labels(
            command_type=UNKNOWN_COMMAND_TYPE, status="ignored"
        ).inc()
        log = logger.warning if self._policy.warn_on_unknown else logger.debug
        log(
            "No dispatcher registered for command type - ignored",
            command_type=command.type,
            available_commands=self._decider.get_command_types(),
        )

    def _ignore_event(self, event: Event) -> None:
        if self._policy.unknown_event == "raise":
            raise UnknownEventType(event.type, self._decider.get_event_types())

        events_ignored_total.inc()
        log = logger.warning if self._policy.warn_on_unknown else logger.debug
        log("No reducer registered for event type - ignored", event_type=event.type)

    def __repr__(self) -> str:
        return (
            f"AggregateRoot(state={self._state!r}, committed={len(self._committed)}, "
            f"pending={len(self._pending)})"
        )


AggregateFactory = Callable[[Optional[Iterable[Event]]], AggregateRoot[S]]


def create_aggregate_factory(
    decider: Decider[S],
    policy: KernelPolicy | None = None,
) -> AggregateFactory[S]:
    """
    Build a factory producing aggregates for one decider

    Args:
        decider: Shared decision policy
        policy: Unknown-tag handling for every aggregate the factory makes

    Returns:
        create(history=None) - a new aggregate, rehydrated from history
        when one is given
    """

    def create(history: Iterable[Event] | None = None) -> AggregateRoot[S]:
        return AggregateRoot(decider, history or (), policy)

    return create
