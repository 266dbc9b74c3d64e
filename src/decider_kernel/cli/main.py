"""
Decider Kernel CLI

Replays event histories stored as JSON files through a decider. The tool
only reads: nothing it computes is written back.

An events file is a JSON list of ``{"type": ..., "data": {...}}`` objects,
oldest first.

Usage:
    decider replay history.json
    decider replay history.json --decider myapp.orders:order_decider --json
    decider dispatch history.json --command '{"type": "ConfirmShoppingCart", "data": {...}}'
    decider events history.json
"""

import importlib
import json
import os
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from pydantic import BaseModel, TypeAdapter, ValidationError
from typing_extensions import Annotated

from decider_kernel.kernel.aggregate import AggregateRoot
from decider_kernel.kernel.decider import Decider
from decider_kernel.kernel.errors import DeciderError
from decider_kernel.kernel.events import Command, Event
from decider_kernel.kernel.logging import bind_correlation_id, configure_logging, is_production
from decider_kernel.kernel.policy import KernelPolicy, strict_kernel_policy

configure_logging(
    json_output=is_production(),
    log_level=os.getenv("DECIDER_LOG_LEVEL", "WARNING"),
)

app = typer.Typer(
    name="decider",
    help="Decider Kernel - replay and inspect event-sourced aggregates",
    add_completion=False,
)


@app.callback()
def main() -> None:
    # One correlation ID per invocation ties its log lines together
    bind_correlation_id()


DEFAULT_DECIDER = "decider_kernel.cart:shopping_cart_decider"

_events_adapter = TypeAdapter(list[Event])

DeciderOption = Annotated[
    str,
    typer.Option("--decider", help="Decider to use, as 'module.path:attribute'"),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output JSON")]
StrictOption = Annotated[
    bool,
    typer.Option("--strict", help="Raise on unknown command and event types"),
]
EventsFileArgument = Annotated[
    Path,
    typer.Argument(help="JSON file holding the event history"),
]


def fail(message: str) -> NoReturn:
    """Print an error to stderr and exit with status 1"""
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


def load_decider(reference: str) -> Decider[Any]:
    """Import a Decider from a 'module.path:attribute' reference"""
    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        fail(f"Decider reference must look like 'module.path:attribute', got '{reference}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        fail(f"Cannot import module '{module_name}': {e}")

    decider = getattr(module, attribute, None)
    if not isinstance(decider, Decider):
        fail(f"'{reference}' is not a Decider")
    return decider


def load_events(path: Path) -> list[Event]:
    """Read an event history from a JSON file"""
    if not path.exists():
        fail(f"Events file not found: {path}")
    try:
        raw = path.read_bytes()
    except OSError as e:
        fail(f"Cannot read events file {path}: {e.strerror or e}")
    try:
        return _events_adapter.validate_json(raw)
    except ValidationError as e:
        fail(f"Invalid events file {path}: {e.error_count()} error(s)\n{e}")


def resolve_policy(strict: bool) -> KernelPolicy:
    if strict:
        return strict_kernel_policy
    try:
        return KernelPolicy.from_env()
    except ValidationError as e:
        fail(f"Invalid kernel policy in environment: {e}")


def to_jsonable(value: Any) -> Any:
    """Render a state or event for output"""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return value


def echo_state(state: Any) -> None:
    typer.echo(json.dumps(to_jsonable(state), indent=2, default=str))


def rehydrate(decider_ref: str, events_file: Path, strict: bool) -> AggregateRoot[Any]:
    decider = load_decider(decider_ref)
    history = load_events(events_file)
    policy = resolve_policy(strict)
    try:
        return AggregateRoot(decider, history, policy)
    except DeciderError as e:
        fail(str(e))


@app.command()
def replay(
    events_file: EventsFileArgument,
    decider: DeciderOption = DEFAULT_DECIDER,
    json_output: JsonOption = False,
    strict: StrictOption = False,
) -> None:
    """Fold an event history and print the resulting state"""
    aggregate = rehydrate(decider, events_file, strict)
    state = aggregate.get_state()

    if json_output:
        typer.echo(
            json.dumps(
                {"events": len(aggregate.all_events()), "state": to_jsonable(state)},
                indent=2,
                default=str,
            )
        )
        return

    typer.echo(f"✓ Replayed {len(aggregate.all_events())} event(s)")
    typer.echo("State:")
    echo_state(state)


@app.command()
def dispatch(
    events_file: EventsFileArgument,
    command: Annotated[
        str,
        typer.Option("--command", help='Command as JSON: {"type": ..., "data": {...}}'),
    ],
    decider: DeciderOption = DEFAULT_DECIDER,
    json_output: JsonOption = False,
    strict: StrictOption = False,
) -> None:
    """Rehydrate, dispatch one command, and print the new events and state"""
    aggregate = rehydrate(decider, events_file, strict)

    try:
        parsed = Command.model_validate_json(command)
    except ValidationError as e:
        fail(f"Invalid command: {e}")

    try:
        aggregate.dispatch(parsed)
    except (DeciderError, ValidationError) as e:
        fail(f"Command {parsed.type} rejected: {e}")

    produced = aggregate.flush()
    state = aggregate.get_state()

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "events": [to_jsonable(e) for e in produced],
                    "state": to_jsonable(state),
                },
                indent=2,
                default=str,
            )
        )
        return

    if not produced:
        typer.echo(f"Command {parsed.type} produced no events")
    else:
        typer.echo(f"✓ Command {parsed.type} produced {len(produced)} event(s):")
        for event in produced:
            payload = event.model_dump(mode="json")["data"]
            typer.echo(f"  {event.type}: {json.dumps(payload)}")
    typer.echo("State:")
    echo_state(state)


@app.command()
def events(
    events_file: EventsFileArgument,
    decider: Annotated[
        Optional[str],
        typer.Option("--decider", help="Mark event types the decider does not handle"),
    ] = None,
) -> None:
    """List the event types in a history, in order"""
    history = load_events(events_file)
    known = load_decider(decider) if decider else None

    if not history:
        typer.echo("No events")
        return

    typer.echo(f"Events ({len(history)}):")
    for position, event in enumerate(history, start=1):
        marker = ""
        if known is not None and not known.handles_event(event.type):
            marker = "  (no reducer - ignored)"
        typer.echo(f"  {position}. {event.type}{marker}")


if __name__ == "__main__":
    app()
