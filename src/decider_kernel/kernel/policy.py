"""
Kernel Policy - how the kernel treats tags it does not recognise

By default an unknown command is a no-op and an unknown event folds to the
unchanged state. That tolerance keeps old histories replayable while a
schema evolves, but it can also hide a typo'd tag forever. The policy lets
callers opt into raising instead.
"""

import os
from typing import Literal

from pydantic import BaseModel, Field

UnknownTagHandling = Literal["ignore", "raise"]


class KernelPolicy(BaseModel):
    """
    Configuration for unknown-tag handling

    Shared read-only by every aggregate created from the same factory.
    """

    unknown_command: UnknownTagHandling = Field(
        default="ignore",
        description="'ignore' treats unregistered commands as no-ops, 'raise' raises UnknownCommandType",
    )

    unknown_event: UnknownTagHandling = Field(
        default="ignore",
        description="'ignore' folds unregistered events as identity, 'raise' raises UnknownEventType",
    )

    warn_on_unknown: bool = Field(
        default=False,
        description="Log ignored tags at WARNING instead of DEBUG",
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "description": "Unknown command/event tag handling for aggregates"
        },
    }

    @property
    def strict(self) -> bool:
        """True when both unknown commands and unknown events raise"""
        return self.unknown_command == "raise" and self.unknown_event == "raise"

    @classmethod
    def from_env(cls) -> "KernelPolicy":
        """
        Build a policy from environment variables

        Reads DECIDER_UNKNOWN_COMMAND, DECIDER_UNKNOWN_EVENT and
        DECIDER_WARN_ON_UNKNOWN. Unset variables keep their defaults.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value
        """
        overrides: dict[str, object] = {}
        unknown_command = os.getenv("DECIDER_UNKNOWN_COMMAND")
        if unknown_command:
            overrides["unknown_command"] = unknown_command.lower()
        unknown_event = os.getenv("DECIDER_UNKNOWN_EVENT")
        if unknown_event:
            overrides["unknown_event"] = unknown_event.lower()
        warn = os.getenv("DECIDER_WARN_ON_UNKNOWN")
        if warn:
            overrides["warn_on_unknown"] = warn
        return cls.model_validate(overrides)


# Default global policy instance
default_kernel_policy = KernelPolicy()

strict_kernel_policy = KernelPolicy(unknown_command="raise", unknown_event="raise")
