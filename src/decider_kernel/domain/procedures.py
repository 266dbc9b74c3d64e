"""
Procedures - named asynchronous use cases that produce events

A procedure receives the domain's events factory, an input and a context,
and returns the events it decided on plus whatever data the caller should
get back. create_domain() binds every procedure to the shared factory and
exposes the results as actions.

Procedures are async because the work around a decision (loading an
aggregate, asking another service) usually is. The kernel itself stays
synchronous.
"""

from typing import Any, Awaitable, Callable, Generic, Mapping, Sequence, TypeVar, Union

from pydantic import BaseModel, Field

from decider_kernel.domain.events_factory import (
    CreateValidator,
    EventsFactory,
    EventsMap,
    create_events_factory,
)
from decider_kernel.kernel.events import Event
from decider_kernel.kernel.logging import LogOperation, get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ProcedureResult(BaseModel, Generic[T]):
    """What a procedure returns: the events it produced and its output data"""

    events: tuple[Event, ...] = Field(default_factory=tuple)
    data: T | None = None

    model_config = {"frozen": True}


class ActionResult(BaseModel, Generic[T]):
    """What an action returns to its caller"""

    data: T | None = None
    events: tuple[Event, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}


Procedure = Callable[
    [EventsFactory, Any, Any], Awaitable[Union[ProcedureResult, Mapping[str, Any]]]
]
Action = Callable[[Any, Any], Awaitable[ActionResult]]


class Domain:
    """
    A set of actions sharing one events factory

    Attributes:
        actions: Procedure name -> async action(input, ctx)
        events_factory: Factory every procedure builds its events with
    """

    def __init__(self, actions: Mapping[str, Action], events_factory: EventsFactory) -> None:
        self.actions = dict(actions)
        self.events_factory = events_factory

    def action(self, name: str) -> Action:
        """Look up an action by procedure name (KeyError if absent)"""
        return self.actions[name]

    def __getattr__(self, name: str) -> Action:
        if name.startswith("_") or name not in self.__dict__.get("actions", {}):
            raise AttributeError(name)
        return self.actions[name]

    def __repr__(self) -> str:
        return (
            f"Domain(actions={list(self.actions)}, "
            f"events={self.events_factory.event_names()})"
        )


def _bind(name: str, procedure: Procedure, events_factory: EventsFactory) -> Action:
    async def action(input: Any, ctx: Any = None) -> ActionResult:
        with LogOperation(logger, "procedure", level="debug", procedure=name):
            result = await procedure(events_factory, input, ctx)
        if isinstance(result, Mapping):
            result = ProcedureResult.model_validate(result)
        events: Sequence[Event] = result.events
        logger.debug(
            "Procedure produced events",
            procedure=name,
            event_types=[e.type for e in events],
        )
        return ActionResult(data=result.data, events=tuple(events))

    action.__name__ = name
    action.__qualname__ = name
    return action


def create_domain(
    events_map: EventsMap,
    procedures: Mapping[str, Procedure],
    create_validation_fn: CreateValidator | None = None,
) -> Domain:
    """
    Bind procedures to a domain's events factory

    Args:
        events_map: Event name -> payload schema; the key is the event name
        procedures: Procedure name -> async procedure(factory, input, ctx)
        create_validation_fn: Validator builder invoked for every schema.
            When omitted, event payloads are not validated.

    Returns:
        Domain whose actions await the matching procedure and return an
        ActionResult. Exceptions from procedures and validators propagate.
    """
    events_factory = create_events_factory(events_map, create_validation_fn)
    actions = {
        name: _bind(name, procedure, events_factory)
        for name, procedure in procedures.items()
    }
    return Domain(actions, events_factory)
