"""
Event and Command shape contract

Every value the kernel moves around is a tagged record: a discriminating
``type`` string plus an opaque ``data`` payload. Events are facts that
already happened; commands are requests that may or may not produce facts.

Fun fact: In event sourcing, events are named in past tense
("ShoppingCartOpened") while commands are imperative ("OpenShoppingCart").
The grammar alone tells you which side of the decision you are on!
"""

from types import MappingProxyType
from typing import Any, Mapping

from pydantic import AfterValidator, BaseModel, Field, PlainSerializer
from typing_extensions import Annotated


def freeze_payload(value: Any) -> Any:
    """
    Deep-freeze a payload: mappings become read-only proxies, lists and
    tuples become tuples, sets become frozensets. Scalars pass through.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_payload(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_payload(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(freeze_payload(item) for item in value)
    return value


def thaw_payload(value: Any) -> Any:
    """Inverse of freeze_payload, for serialization"""
    if isinstance(value, Mapping):
        return {key: thaw_payload(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw_payload(item) for item in value]
    return value


def _hash_key(value: Any) -> Any:
    if isinstance(value, Mapping):
        return tuple(sorted((key, _hash_key(item)) for key, item in value.items()))
    if isinstance(value, tuple):
        return tuple(_hash_key(item) for item in value)
    return value


# Validated as a dict, stored read-only, dumped back as a plain dict
Payload = Annotated[
    dict[str, Any],
    AfterValidator(freeze_payload),
    PlainSerializer(thaw_payload),
]


class Event(BaseModel):
    """
    Immutable fact describing something that happened to an aggregate

    Identity is structural - two events with the same tag and payload are
    equal and hash alike. The payload is frozen on creation, so an event
    handed out in a snapshot cannot rewrite the log it came from. Ordering
    is carried by the log that holds them, not by the event.
    """

    type: str = Field(
        ...,
        min_length=1,
        description="Event type tag: 'ShoppingCartOpened', 'ProductItemAdded', etc.",
    )

    data: Payload = Field(
        default_factory=dict,
        validate_default=True,
        description="Event-specific payload (opaque to the kernel)",
    )

    model_config = {
        "frozen": True,  # Events are immutable
        "extra": "forbid",
        "json_schema_extra": {
            "examples": [
                {
                    "type": "ShoppingCartConfirmed",
                    "data": {
                        "shopping_cart_id": "cart-123",
                        "confirmed_at": "2025-01-15T10:30:00+00:00",
                    },
                }
            ]
        },
    }

    def __hash__(self) -> int:
        return hash((self.type, _hash_key(self.data)))


class Command(BaseModel):
    """
    Immutable request to change an aggregate's state

    Commands are transient: dispatch consumes them once and only the
    resulting events are kept.
    """

    type: str = Field(
        ...,
        min_length=1,
        description="Command type tag: 'OpenShoppingCart', 'ConfirmShoppingCart', etc.",
    )

    data: Payload = Field(
        default_factory=dict,
        validate_default=True,
        description="Command-specific parameters (opaque to the kernel)",
    )

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "json_schema_extra": {
            "examples": [
                {
                    "type": "ConfirmShoppingCart",
                    "data": {
                        "shopping_cart_id": "cart-123",
                        "now": "2025-01-15T10:30:00+00:00",
                    },
                }
            ]
        },
    }

    def __hash__(self) -> int:
        return hash((self.type, _hash_key(self.data)))


def create_event(type: str, data: dict[str, Any] | None = None) -> Event:
    """Factory function for creating events"""
    return Event(type=type, data=data or {})


def create_command(type: str, data: dict[str, Any] | None = None) -> Command:
    """Factory function for creating commands"""
    return Command(type=type, data=data or {})
