# Statement schemas: the statement itself and the parts it is built from.

from .base import ObjectType, VariantModel
from .agent import Account, Actor, Agent, Group
from .verb import Verb
from .objects import Activity, ActivityDefinition, StatementRef, UnrecognizedObject
from .context import Context, ContextActivities
from .resolver import (
    ACTOR_VARIANTS,
    discriminator,
    object_variants,
    resolve_actor,
    resolve_object,
    resolve_verb,
    variant_for,
)
from .statement import RESTRICTED_FIELDS, Statement, StatementBody, SubStatement

__all__ = [
    # Base
    "ObjectType",
    "VariantModel",
    # Actors
    "Account",
    "Actor",
    "Agent",
    "Group",
    # Verb
    "Verb",
    # Objects
    "Activity",
    "ActivityDefinition",
    "StatementRef",
    "UnrecognizedObject",
    # Context
    "Context",
    "ContextActivities",
    # Resolver
    "ACTOR_VARIANTS",
    "discriminator",
    "object_variants",
    "resolve_actor",
    "resolve_object",
    "resolve_verb",
    "variant_for",
    # Statement
    "RESTRICTED_FIELDS",
    "Statement",
    "StatementBody",
    "SubStatement",
]
