"""
Test Helper Functions - command and event builders for the shopping cart

Builders keep the scenario tests readable: each one returns a kernel
Command or Event with a sensible default cart id.
"""

from datetime import datetime
from typing import Any

from decider_kernel.cart.commands import (
    ADD_PRODUCT_ITEM,
    CANCEL_SHOPPING_CART,
    CONFIRM_SHOPPING_CART,
    OPEN_SHOPPING_CART,
    REMOVE_PRODUCT_ITEM,
)
from decider_kernel.kernel.decider import Decider
from decider_kernel.kernel.events import Command, Event, create_command, create_event

CART_ID = "cart-123"
CLIENT_ID = "client-456"


def open_cart(now: datetime, cart_id: str = CART_ID, client_id: str = CLIENT_ID) -> Command:
    return create_command(
        OPEN_SHOPPING_CART,
        {"shopping_cart_id": cart_id, "client_id": client_id, "now": now},
    )


def add_item(cart_id: str = CART_ID) -> Command:
    return create_command(ADD_PRODUCT_ITEM, {"shopping_cart_id": cart_id})


def remove_item(cart_id: str = CART_ID) -> Command:
    return create_command(REMOVE_PRODUCT_ITEM, {"shopping_cart_id": cart_id})


def confirm_cart(now: datetime, cart_id: str = CART_ID) -> Command:
    return create_command(CONFIRM_SHOPPING_CART, {"shopping_cart_id": cart_id, "now": now})


def cancel_cart(now: datetime, cart_id: str = CART_ID) -> Command:
    return create_command(CANCEL_SHOPPING_CART, {"shopping_cart_id": cart_id, "now": now})


def tally_event(amount: int) -> Event:
    """Event for the counter decider used by kernel tests"""
    return create_event("Added", {"amount": amount})


def events_as_json(events: list[Event]) -> list[dict[str, Any]]:
    """Serialize events the way an events file stores them"""
    return [event.model_dump(mode="json") for event in events]


def _tally(total: int, event: Event) -> int:
    return total + event.data["amount"]


# Importable by reference ("tests.helpers:tally_decider") for CLI tests
tally_decider: Decider[int] = Decider(
    reducer={"Added": _tally},
    dispatcher={"Add": lambda total, command: tally_event(command.data["amount"])},
    initial_state=lambda: 0,
)
