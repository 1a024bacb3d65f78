"""
Type Resolver

Decides, from the `objectType` discriminator (or its absence), which
concrete variant a loosely-typed actor, verb or object value becomes, and
builds it through that variant's own coerce().

    actor:  "Agent" | absent -> Agent, "Group" -> Group
    object: "Activity" | absent -> Activity, "Agent" -> Agent,
            "Group" -> Group, "StatementRef" -> StatementRef,
            "SubStatement" -> SubStatement

Empty values stay empty (None). Values that are already the chosen variant
come back unchanged. Unknown discriminators, and values that cannot carry
one, become an UnrecognizedObject holding the raw value.
"""

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel

from ..observability import get_logger
from .agent import Agent, Group
from .base import ObjectType
from .objects import Activity, StatementRef, UnrecognizedObject
from .verb import Verb

logger = get_logger(__name__)

Variants = Mapping[Optional[str], type]

ACTOR_VARIANTS: Variants = {
    None: Agent,
    ObjectType.AGENT.value: Agent,
    ObjectType.GROUP.value: Group,
}


def object_variants() -> Variants:
    """Tag -> class mapping for the object slot."""
    # Import here to avoid circular imports
    from .statement import SubStatement

    return {
        None: Activity,
        ObjectType.ACTIVITY.value: Activity,
        ObjectType.AGENT.value: Agent,
        ObjectType.GROUP.value: Group,
        ObjectType.STATEMENT_REF.value: StatementRef,
        ObjectType.SUB_STATEMENT.value: SubStatement,
    }


def discriminator(value: Any) -> Optional[Any]:
    """The value's objectType, or None when it has none."""
    if isinstance(value, Mapping):
        tag = value.get("objectType")
    else:
        tag = getattr(value, "objectType", None)
    if isinstance(tag, ObjectType):
        tag = tag.value
    return tag or None


def variant_for(tag: Optional[Any], variants: Variants) -> Optional[type]:
    """The class a discriminator maps to, or None if it is not recognized."""
    try:
        return variants.get(tag)
    except TypeError:
        # Unhashable tag
        return None


def _resolve(value: Any, variants: Variants, slot: str) -> Any:
    if isinstance(value, UnrecognizedObject):
        return value
    if not isinstance(value, BaseModel) and not value:
        return None

    if isinstance(value, (str, Mapping, BaseModel)):
        tag = discriminator(value)
        variant = variant_for(tag, variants)
    else:
        tag, variant = type(value).__name__, None

    if variant is None:
        logger.debug(
            "Unrecognized objectType, keeping raw value",
            slot=slot,
            object_type=str(tag),
        )
        return UnrecognizedObject.coerce(value)

    return variant.coerce(value)


def resolve_actor(value: Any) -> Any:
    """Normalize a value destined for the actor slot."""
    return _resolve(value, ACTOR_VARIANTS, "actor")


def resolve_object(value: Any) -> Any:
    """Normalize a value destined for the object slot."""
    return _resolve(value, object_variants(), "object")


def resolve_verb(value: Any) -> Any:
    """Wrap a value into a Verb unless it already is one."""
    if isinstance(value, (Verb, UnrecognizedObject)):
        return value
    if not isinstance(value, BaseModel) and not value:
        return None
    if isinstance(value, (str, Mapping, BaseModel)):
        return Verb.coerce(value)
    logger.debug(
        "Verb is neither a string nor a mapping, keeping raw value",
        slot="verb",
        object_type=type(value).__name__,
    )
    return UnrecognizedObject.coerce(value)
