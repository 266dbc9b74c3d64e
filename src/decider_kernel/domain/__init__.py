"""
Domain - procedure orchestration around the kernel

Binds named async procedures to an events factory (create_domain) and maps
the resulting events to side-effect descriptions (create_adapter).
"""

from decider_kernel.domain.adapter import (
    Adapter,
    HandlerResult,
    create_adapter,
    create_effects_factory,
)
from decider_kernel.domain.events_factory import (
    EventFactory,
    EventsFactory,
    create_events_factory,
    pydantic_validator,
)
from decider_kernel.domain.procedures import (
    ActionResult,
    Domain,
    ProcedureResult,
    create_domain,
)

__all__ = [
    "EventFactory",
    "EventsFactory",
    "create_events_factory",
    "pydantic_validator",
    "ProcedureResult",
    "ActionResult",
    "Domain",
    "create_domain",
    "HandlerResult",
    "Adapter",
    "create_adapter",
    "create_effects_factory",
]
