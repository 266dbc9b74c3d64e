"""
Pytest configuration and shared fixtures

Fun fact: Files named conftest.py are discovered automatically - every
fixture below is available to every test module without an import!
"""

from datetime import datetime, timezone

import pytest

from decider_kernel.cart import ShoppingCart, shopping_cart_decider
from decider_kernel.kernel.aggregate import AggregateFactory, create_aggregate_factory
from decider_kernel.kernel.decider import Decider
from decider_kernel.kernel.events import Command, Event, create_event
from decider_kernel.kernel.logging import configure_logging


@pytest.fixture(autouse=True, scope="session")
def _configure_logging() -> None:
    """Log everything during tests so logging paths are exercised"""
    configure_logging(json_output=False, log_level="DEBUG")


@pytest.fixture
def now() -> datetime:
    """
    A fixed moment for deterministic timestamps

    2025-01-15 12:00:00 UTC - a plain Wednesday, nothing special about it.
    """
    return datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def cart_factory() -> AggregateFactory[ShoppingCart]:
    """Fresh shopping cart factory (the decider itself is shared)"""
    return create_aggregate_factory(shopping_cart_decider)


def _add(total: int, event: Event) -> int:
    return total + event.data["amount"]


def _reset(total: int, event: Event) -> int:
    return 0


def _decide_add(total: int, command: Command) -> Event:
    return create_event("Added", {"amount": command.data["amount"]})


def _decide_add_twice(total: int, command: Command) -> list[Event]:
    # The second event doubles whatever the first left behind
    return [
        create_event("Added", {"amount": command.data["amount"]}),
        create_event("Doubled", {}),
    ]


def _decide_reset(total: int, command: Command) -> list[Event]:
    if total == 0:
        return []
    return [create_event("Reset", {})]


def _decide_nothing(total: int, command: Command) -> None:
    return None


@pytest.fixture
def counter_decider() -> Decider[int]:
    """
    Minimal integer decider for kernel tests

    Events: Added(amount), Doubled, Reset. "Doubled" has no reducer on
    purpose in some tests - see counter_decider_with_double.
    """
    return Decider(
        reducer={"Added": _add, "Reset": _reset},
        dispatcher={
            "Add": _decide_add,
            "AddTwice": _decide_add_twice,
            "Reset": _decide_reset,
            "Nothing": _decide_nothing,
        },
        initial_state=lambda: 0,
    )


@pytest.fixture
def counter_decider_with_double(counter_decider: Decider[int]) -> Decider[int]:
    """Counter decider whose reducer also handles Doubled"""
    reducer = dict(counter_decider.reducer)
    reducer["Doubled"] = lambda total, event: total * 2
    return Decider(
        reducer=reducer,
        dispatcher=counter_decider.dispatcher,
        initial_state=counter_decider.initial_state,
    )
