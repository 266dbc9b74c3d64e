"""
Custom exceptions for the decider kernel

The kernel is deliberately quiet: unknown tags are no-ops by default and
exceptions raised by domain code propagate untouched. The errors below
only appear when a caller opts into strict handling, or when the domain
layer is wired incorrectly.

Fun fact: "Fail fast" was coined by Jim Shore in 2004, but the kernel's
default is "shrug and carry on" - which is exactly what you want while an
event schema is evolving underneath a running system.
"""


class DeciderError(Exception):
    """Base exception for all decider kernel errors"""

    pass


class UnknownCommandType(DeciderError):
    """
    Raised when a command has no registered dispatcher (strict policy only)

    Under the default policy such commands are silently ignored.
    """

    def __init__(self, command_type: str, known_types: list[str]) -> None:
        self.command_type = command_type
        self.known_types = known_types
        super().__init__(
            f"No dispatcher registered for command type '{command_type}'. "
            f"Known command types: {known_types}"
        )


class UnknownEventType(DeciderError):
    """
    Raised when an event has no registered reducer (strict policy only)

    Under the default policy such events leave state unchanged.
    """

    def __init__(self, event_type: str, known_types: list[str]) -> None:
        self.event_type = event_type
        self.known_types = known_types
        super().__init__(
            f"No reducer registered for event type '{event_type}'. "
            f"Known event types: {known_types}"
        )


class EventValidationError(DeciderError):
    """Raised when an event payload is rejected by its schema validator"""

    def __init__(self, event_name: str, errors: list[dict] | str) -> None:
        self.event_name = event_name
        self.errors = errors
        super().__init__(f"Invalid payload for event '{event_name}': {errors}")


class UnknownEventName(DeciderError, KeyError):
    """
    Raised when an events factory is asked for an event it does not define

    Also a KeyError, so Mapping.get() and ``in`` checks behave normally.
    """

    def __init__(self, event_name: str) -> None:
        self.event_name = event_name
        super().__init__(f"Event '{event_name}' is not defined in this domain")

    def __str__(self) -> str:
        return str(self.args[0])


class EffectMappingError(DeciderError):
    """
    Raised when an adapter's effect map does not match the domain's events

    Every domain event needs exactly one effect mapper, and the map may not
    name events the domain never produces.
    """

    def __init__(self, missing: list[str], unexpected: list[str]) -> None:
        self.missing = missing
        self.unexpected = unexpected
        parts = []
        if missing:
            parts.append(f"missing effect mappers for {missing}")
        if unexpected:
            parts.append(f"unknown events {unexpected}")
        super().__init__("Effect map mismatch: " + "; ".join(parts))


class InvariantViolation(DeciderError):
    """
    Raised by a dispatcher when a command is not allowed in the current state

    Dispatchers raise; the kernel lets the error reach the caller untouched.
    """

    pass

