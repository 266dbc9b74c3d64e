"""
Events factory - named constructors for a domain's events

A domain declares its events as a map of event name -> payload schema
(a pydantic model class). The factory turns that map into one callable per
event, so procedures write ``factory.account_created({"id": "42"})`` and
get back a kernel Event, validated when a validator is configured.

Fun fact: Skipping validation is a legitimate production choice - events
produced by your own code were usually validated at the command boundary
already, and replaying millions of them through a schema adds up!
"""

from typing import Any, Callable, Iterator, Mapping

from pydantic import BaseModel, ValidationError

from decider_kernel.kernel.errors import EventValidationError, UnknownEventName
from decider_kernel.kernel.events import Event

Schema = type[BaseModel]
PayloadValidator = Callable[[dict[str, Any]], None]
CreateValidator = Callable[[Schema], PayloadValidator]
EventsMap = Mapping[str, "Schema | None"]


def pydantic_validator(schema: Schema) -> PayloadValidator:
    """Standard validator: the payload must satisfy the pydantic schema"""

    def validate(payload: dict[str, Any]) -> None:
        schema.model_validate(payload)

    return validate


def _skip_validation(payload: dict[str, Any]) -> None:
    return None


class EventFactory:
    """Callable building one named event"""

    def __init__(
        self,
        event_name: str,
        schema: Schema | None,
        validate: PayloadValidator,
    ) -> None:
        self.event_name = event_name
        self.schema = schema
        self._validate = validate

    def __call__(self, payload: dict[str, Any] | BaseModel | None = None) -> Event:
        """
        Build the event, validating the payload first

        Args:
            payload: Event data as a dict or as an instance of the schema model

        Raises:
            EventValidationError: If the validator rejects the payload with a
                pydantic ValidationError (other validator errors propagate as-is)
        """
        if isinstance(payload, BaseModel):
            data = payload.model_dump(mode="json")
        else:
            data = dict(payload or {})

        try:
            self._validate(data)
        except ValidationError as e:
            raise EventValidationError(self.event_name, e.errors(include_url=False)) from e

        return Event(type=self.event_name, data=data)

    def __repr__(self) -> str:
        schema_name = self.schema.__name__ if self.schema else None
        return f"EventFactory({self.event_name!r}, schema={schema_name})"


class EventsFactory(Mapping[str, EventFactory]):
    """
    Read-only map of event name -> EventFactory

    Factories are reachable by key (``factory["account_created"]``) and,
    for names that are valid identifiers, by attribute.
    """

    def __init__(self, factories: dict[str, EventFactory]) -> None:
        self._factories = dict(factories)

    def __getitem__(self, event_name: str) -> EventFactory:
        try:
            return self._factories[event_name]
        except KeyError:
            raise UnknownEventName(event_name) from None

    def __getattr__(self, event_name: str) -> EventFactory:
        if event_name.startswith("_"):
            raise AttributeError(event_name)
        return self[event_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)

    def __len__(self) -> int:
        return len(self._factories)

    def __contains__(self, event_name: object) -> bool:
        return event_name in self._factories

    def event_names(self) -> list[str]:
        return list(self._factories.keys())


def create_events_factory(
    events_map: EventsMap,
    create_validation_fn: CreateValidator | None = None,
) -> EventsFactory:
    """
    Build an EventsFactory from a domain's event declarations

    Args:
        events_map: Event name -> payload schema (None for schemaless events)
        create_validation_fn: Builds a validator for a schema. Without one,
            payloads are not validated at all.

    Returns:
        Factory with one EventFactory per declared event
    """
    factories: dict[str, EventFactory] = {}
    for event_name, schema in events_map.items():
        if schema is not None and create_validation_fn is not None:
            validate = create_validation_fn(schema)
        else:
            validate = _skip_validation
        factories[event_name] = EventFactory(event_name, schema, validate)
    return EventsFactory(factories)
