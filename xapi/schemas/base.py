"""
Shared pieces of every statement part.

All parts are JSON-compatible pydantic models that keep unknown fields
(`extra="allow"`), so a statement read back from a store survives a
round trip unchanged.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ObjectType(str, Enum):
    """
    Discriminator values for the actor and object slots.
    """
    AGENT = "Agent"
    GROUP = "Group"
    ACTIVITY = "Activity"
    STATEMENT_REF = "StatementRef"
    SUB_STATEMENT = "SubStatement"


class VariantModel(BaseModel):
    """
    A concrete statement part (actor, verb or object variant).

    Every variant can be built from raw data, from a string shorthand or
    from an existing instance (see coerce).
    """
    model_config = ConfigDict(extra="allow")

    @classmethod
    def coerce(cls, value: Any):
        """
        Clone-or-construct.

        An instance of this class is returned unchanged; a model of another
        class is dumped and rebuilt; anything else is validated as raw data.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, BaseModel):
            value = value.model_dump(exclude_none=True)
        return cls.model_validate(value)

    def is_valid(self) -> bool:
        return False

    def get_id(self) -> Optional[str]:
        return None
