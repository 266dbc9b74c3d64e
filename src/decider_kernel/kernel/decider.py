"""
Decider - the pure decision policy of one aggregate type

A decider bundles three things:
- a reducer table: event tag -> (state, event) -> state
- a dispatcher table: command tag -> (state, command) -> event(s)
- an initial-state constructor

Tables keyed by tag stand in for virtual dispatch over a closed set of
event/command variants. A missing tag is not an error here: evolve()
returns the state unchanged and decide() returns no events.

Fun fact: The "decider" name comes from Jérémie Chassaing's functional
event sourcing talks - decide, evolve, initialState is the whole pattern!
"""

from types import MappingProxyType
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, Sequence, TypeVar, Union

from decider_kernel.kernel.events import Command, Event

S = TypeVar("S")

# Marks an omitted fold() start state; None can be a real state
_MISSING: Any = object()

# Type aliases for clarity
DispatchResult = Optional[Union[Event, Sequence[Event]]]
ReducerFn = Callable[[S, Event], S]
DispatcherFn = Callable[[S, Command], DispatchResult]
Reducer = Mapping[str, ReducerFn[S]]
Dispatcher = Mapping[str, DispatcherFn[S]]


def normalize_events(result: DispatchResult) -> tuple[Event, ...]:
    """
    Normalize a dispatcher return value to an ordered tuple of events

    A single event becomes a one-element tuple, a sequence keeps its order,
    and None (a handler that fell through without returning) means no events.
    """
    if result is None:
        return ()
    if isinstance(result, Event):
        return (result,)
    return tuple(result)


class Decider(Generic[S]):
    """
    Immutable reducer/dispatcher/initial-state bundle

    Holds no per-aggregate state, so one instance can back any number of
    aggregates at once. The tables are copied into read-only mappings on
    construction; later changes to the dicts the caller passed in have no
    effect.
    """

    def __init__(
        self,
        *,
        reducer: Reducer[S],
        dispatcher: Dispatcher[S],
        initial_state: Callable[[], S],
    ) -> None:
        if not callable(initial_state):
            raise TypeError("initial_state must be a zero-argument callable")
        self._reducer: Mapping[str, ReducerFn[S]] = MappingProxyType(dict(reducer))
        self._dispatcher: Mapping[str, DispatcherFn[S]] = MappingProxyType(dict(dispatcher))
        self._initial_state = initial_state

    @property
    def reducer(self) -> Reducer[S]:
        return self._reducer

    @property
    def dispatcher(self) -> Dispatcher[S]:
        return self._dispatcher

    def initial_state(self) -> S:
        """Build a fresh initial state"""
        return self._initial_state()

    def handles_event(self, event_type: str) -> bool:
        return event_type in self._reducer

    def handles_command(self, command_type: str) -> bool:
        return command_type in self._dispatcher

    def get_event_types(self) -> list[str]:
        """Event tags with a registered reducer"""
        return list(self._reducer.keys())

    def get_command_types(self) -> list[str]:
        """Command tags with a registered dispatcher"""
        return list(self._dispatcher.keys())

    def evolve(self, state: S, event: Event) -> S:
        """
        Fold one event into state

        Unregistered event tags are the identity: the same state comes back.
        Exceptions raised by the reducer propagate.
        """
        reduce_fn = self._reducer.get(event.type)
        if reduce_fn is None:
            return state
        return reduce_fn(state, event)

    def fold(self, events: Iterable[Event], state: S = _MISSING) -> S:
        """
        Left-fold events through evolve()

        Args:
            events: Events in log order
            state: Starting state (defaults to a fresh initial state)

        Returns:
            State after the last event
        """
        current = self.initial_state() if state is _MISSING else state
        for event in events:
            current = self.evolve(current, event)
        return current

    def decide(self, state: S, command: Command) -> tuple[Event, ...]:
        """
        Resolve a command against state into new events

        Does not touch state. Unregistered command tags produce no events.
        Exceptions raised by the dispatcher propagate.
        """
        dispatch_fn = self._dispatcher.get(command.type)
        if dispatch_fn is None:
            return ()
        return normalize_events(dispatch_fn(state, command))

    def __repr__(self) -> str:
        return (
            f"Decider(events={self.get_event_types()}, "
            f"commands={self.get_command_types()})"
        )
