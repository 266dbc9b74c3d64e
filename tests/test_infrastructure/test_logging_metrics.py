"""
Test infrastructure components: structured logging and Prometheus metrics.

These tests verify the kernel reports what it does without changing what
it does.
"""

import io
import json
from datetime import datetime

import pytest
import structlog

from decider_kernel.cart import ShoppingCart
from decider_kernel.kernel.aggregate import AggregateFactory, AggregateRoot
from decider_kernel.kernel.decider import Decider
from decider_kernel.kernel.errors import UnknownCommandType
from decider_kernel.kernel.events import create_command, create_event
from decider_kernel.kernel.logging import (
    REDACTED,
    LogOperation,
    bind_correlation_id,
    configure_logging,
    get_logger,
    is_production,
)
from decider_kernel.kernel.metrics import (
    UNKNOWN_COMMAND_TYPE,
    commands_dispatched_total,
    dispatch_duration_seconds,
    events_emitted_total,
    events_flushed_total,
    events_ignored_total,
    events_rehydrated_total,
)
from decider_kernel.kernel.policy import strict_kernel_policy
from tests.helpers import add_item, open_cart, tally_event


@pytest.fixture
def log_stream():
    """Route logs into a buffer for the duration of one test"""
    stream = io.StringIO()
    structlog.contextvars.clear_contextvars()
    configure_logging(json_output=True, log_level="DEBUG", stream=stream)
    yield stream
    structlog.contextvars.clear_contextvars()
    configure_logging(json_output=False, log_level="DEBUG")


def sample_count(metric) -> int:
    return sum(len(family.samples) for family in metric.collect())


def read_log_lines(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


class TestLoggingFramework:
    """Test structured logging framework."""

    def test_configure_logging_console(self) -> None:
        configure_logging(json_output=False, log_level="INFO")
        assert get_logger(__name__) is not None
        configure_logging(json_output=False, log_level="DEBUG")

    def test_bind_correlation_id(self, log_stream: io.StringIO) -> None:
        generated = bind_correlation_id()
        assert len(generated) >= 16
        assert bind_correlation_id("cid-json") == "cid-json"

        get_logger("tests.json").info("hello", answer=42)

        (line,) = [entry for entry in read_log_lines(log_stream) if entry["event"] == "hello"]
        assert line["answer"] == 42
        assert line["correlation_id"] == "cid-json"
        assert line["level"] == "info"

    def test_unbound_lines_have_no_correlation_id(self, log_stream: io.StringIO) -> None:
        get_logger("tests.json").info("plain")

        (line,) = read_log_lines(log_stream)
        assert "correlation_id" not in line

    def test_log_operation_logs_start_and_completion(self, log_stream: io.StringIO) -> None:
        logger = get_logger("tests.operation")

        with LogOperation(logger, "replay", history=3):
            pass

        messages = [entry["event"] for entry in read_log_lines(log_stream)]
        assert messages == ["replay started", "replay completed"]

    def test_log_operation_with_exception(self, log_stream: io.StringIO) -> None:
        logger = get_logger("tests.operation")

        with pytest.raises(ValueError):
            with LogOperation(logger, "failing_operation"):
                raise ValueError("Test error")

        failed = read_log_lines(log_stream)[-1]
        assert failed["event"] == "failing_operation failed"
        assert failed["level"] == "error"
        assert failed["error"] == "Test error"

    def test_log_operation_redacts_context(self, log_stream: io.StringIO) -> None:
        logger = get_logger("tests.operation")

        with LogOperation(logger, "open", client_id="alice", command_type="OpenShoppingCart"):
            pass

        for entry in read_log_lines(log_stream):
            assert entry["client_id"] == REDACTED
            assert entry["command_type"] == "OpenShoppingCart"

    def test_redaction_applies_to_every_line(self, log_stream: io.StringIO) -> None:
        get_logger("tests.json").warning("login", email="a@b.c", shopping_cart_id="c-1")

        (line,) = read_log_lines(log_stream)
        assert line["email"] == REDACTED
        assert line["shopping_cart_id"] == "c-1"

    def test_is_production(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        assert is_production() is False
        monkeypatch.setenv("ENVIRONMENT", "Production")
        assert is_production() is True


class TestMetrics:
    """Test Prometheus metrics collection."""

    def test_successful_dispatch_counts(
        self, cart_factory: AggregateFactory[ShoppingCart], now: datetime
    ) -> None:
        success = commands_dispatched_total.labels(
            command_type="OpenShoppingCart", status="success"
        )
        emitted = events_emitted_total.labels(event_type="ShoppingCartOpened")
        duration = dispatch_duration_seconds.labels(command_type="OpenShoppingCart")
        before = (success._value.get(), emitted._value.get(), duration._sum.get())

        cart_factory().dispatch(open_cart(now))

        assert success._value.get() == before[0] + 1
        assert emitted._value.get() == before[1] + 1
        assert duration._sum.get() >= before[2]

    def test_failed_dispatch_counts(self, cart_factory: AggregateFactory[ShoppingCart]) -> None:
        failure = commands_dispatched_total.labels(
            command_type="AddProductItemToShoppingCart", status="failure"
        )
        before = failure._value.get()

        with pytest.raises(Exception):
            cart_factory().dispatch(add_item())

        assert failure._value.get() == before + 1

    def test_ignored_command_counts(self, counter_decider: Decider[int]) -> None:
        ignored = commands_dispatched_total.labels(
            command_type=UNKNOWN_COMMAND_TYPE, status="ignored"
        )
        before = ignored._value.get()

        AggregateRoot(counter_decider).dispatch(create_command("Teleport"))

        assert ignored._value.get() == before + 1

    def test_ignored_event_counts(self, counter_decider: Decider[int]) -> None:
        before = events_ignored_total._value.get()

        AggregateRoot(counter_decider, [tally_event(1), create_event("Doubled")])

        assert events_ignored_total._value.get() == before + 1

    def test_unregistered_tags_add_no_series(self, counter_decider: Decider[int]) -> None:
        aggregate = AggregateRoot(counter_decider)
        aggregate.dispatch(create_command("garbage-warmup"))
        before = sample_count(commands_dispatched_total) + sample_count(events_ignored_total)

        for i in range(50):
            aggregate.dispatch(create_command(f"garbage-{i}"))
            AggregateRoot(counter_decider, [create_event(f"garbage-event-{i}")])

        after = sample_count(commands_dispatched_total) + sample_count(events_ignored_total)
        assert after == before

    def test_strict_unknown_command_counts_as_failure(self, counter_decider: Decider[int]) -> None:
        failure = commands_dispatched_total.labels(
            command_type=UNKNOWN_COMMAND_TYPE, status="failure"
        )
        before = failure._value.get()

        with pytest.raises(UnknownCommandType):
            AggregateRoot(counter_decider, policy=strict_kernel_policy).dispatch(
                create_command("Teleport")
            )

        assert failure._value.get() == before + 1

    def test_rehydrate_and_flush_counts(self, counter_decider: Decider[int]) -> None:
        rehydrated_before = events_rehydrated_total._value.get()
        flushed_before = events_flushed_total._value.get()

        aggregate = AggregateRoot(counter_decider, [tally_event(1), tally_event(2)])
        aggregate.dispatch(create_command("AddTwice", {"amount": 3}))
        aggregate.flush()
        aggregate.flush()

        assert events_rehydrated_total._value.get() == rehydrated_before + 2
        assert events_flushed_total._value.get() == flushed_before + 2
