"""
Identifier generation.

Statements and registrations are identified by UUID strings. The generator
is a plain zero-argument callable so a statement can be handed a
deterministic one (tests) or a different strategy (configuration).
"""

from enum import Enum
from typing import Callable
from uuid import uuid1, uuid4

IdGenerator = Callable[[], str]


class IdStrategy(str, Enum):
    """Supported identifier strategies."""
    UUID4 = "uuid4"    # Random (default)
    UUID1 = "uuid1"    # Time-based, sortable by creation


def generate_id() -> str:
    """Return a fresh random UUID string."""
    return str(uuid4())


def generate_time_id() -> str:
    """Return a fresh time-based UUID string."""
    return str(uuid1())


_GENERATORS: dict[IdStrategy, IdGenerator] = {
    IdStrategy.UUID4: generate_id,
    IdStrategy.UUID1: generate_time_id,
}


def get_id_generator(strategy: IdStrategy = IdStrategy.UUID4) -> IdGenerator:
    """Get the generator for a strategy."""
    return _GENERATORS[IdStrategy(strategy)]
