"""
Adapter - translate a domain's events into side-effect descriptions

An adapter pairs a Domain with an effect map (event name -> function
returning zero or more effects). Each action gets a handler that runs the
action and then maps its events to effects. Effects are plain values -
SQL statements, outgoing messages, whatever the caller executes - so the
domain itself never performs I/O.

Fun fact: This is the "functional core, imperative shell" idea from Gary
Bernhardt's 2012 "Boundaries" talk - decisions are pure, effects are data,
and only the outer shell actually touches the world!
"""

from typing import Any, Awaitable, Callable, Generic, Iterable, Mapping, Sequence, TypeVar

from pydantic import BaseModel, Field

from decider_kernel.domain.procedures import Action, Domain
from decider_kernel.kernel.errors import EffectMappingError
from decider_kernel.kernel.events import Event
from decider_kernel.kernel.logging import get_logger

logger = get_logger(__name__)

E = TypeVar("E")

EffectFn = Callable[[Event], Iterable[E]]
EffectMap = Mapping[str, EffectFn[E]]


class HandlerResult(BaseModel, Generic[E]):
    """Action output plus the effects its events translate to"""

    data: Any = None
    effects: tuple[E, ...] = Field(default_factory=tuple)
    events: tuple[Event, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}


Handler = Callable[[Any, Any], Awaitable[HandlerResult]]


def create_effects_factory(effect_map: EffectMap[E]) -> Callable[[Sequence[Event]], tuple[E, ...]]:
    """
    Build a function mapping events to a flat tuple of effects

    Order is preserved: effects of the first event come first, and each
    event's effects keep the order its mapper returned them in. Events with
    no mapper contribute nothing.
    """
    mappers = dict(effect_map)

    def to_effects(events: Sequence[Event]) -> tuple[E, ...]:
        effects: list[E] = []
        for event in events:
            mapper = mappers.get(event.type)
            if mapper is None:
                logger.debug("No effect mapper for event type", event_type=event.type)
                continue
            effects.extend(mapper(event))
        return tuple(effects)

    return to_effects


class Adapter(Generic[E]):
    """
    A domain wired to an effect map

    Attributes:
        domain: The adapted domain
        to_effects: events -> effects
        handlers: Procedure name -> async handler(input, ctx)
    """

    def __init__(
        self,
        domain: Domain,
        to_effects: Callable[[Sequence[Event]], tuple[E, ...]],
        handlers: Mapping[str, Handler],
    ) -> None:
        self.domain = domain
        self.to_effects = to_effects
        self.handlers = dict(handlers)

    def handler(self, name: str) -> Handler:
        """Look up a handler by procedure name (KeyError if absent)"""
        return self.handlers[name]


def _wrap(name: str, action: Action, to_effects: Callable[[Sequence[Event]], tuple]) -> Handler:
    async def execute(input: Any, ctx: Any = None) -> HandlerResult:
        result = await action(input, ctx)
        effects = to_effects(result.events)
        logger.debug(
            "Handler produced effects",
            procedure=name,
            events=len(result.events),
            effects=len(effects),
        )
        return HandlerResult(data=result.data, effects=effects, events=result.events)

    execute.__name__ = name
    execute.__qualname__ = name
    return execute


def create_adapter(domain: Domain) -> Callable[[EffectMap[E]], Adapter[E]]:
    """
    Prepare an adapter for a domain

    Usage:
        adapter = create_adapter(domain)({
            "account_created": lambda e: [f"insert {e.data['id']}"],
        })
        result = await adapter.handlers["create_account"](input, ctx)

    Returns:
        create(effect_map) -> Adapter. The effect map must name exactly the
        domain's events, otherwise EffectMappingError is raised.
    """

    def create(effect_map: EffectMap[E]) -> Adapter[E]:
        declared = set(domain.events_factory.event_names())
        mapped = set(effect_map.keys())
        missing = sorted(declared - mapped)
        unexpected = sorted(mapped - declared)
        if missing or unexpected:
            raise EffectMappingError(missing, unexpected)

        to_effects = create_effects_factory(effect_map)
        handlers = {
            name: _wrap(name, action, to_effects)
            for name, action in domain.actions.items()
        }
        return Adapter(domain, to_effects, handlers)

    return create
