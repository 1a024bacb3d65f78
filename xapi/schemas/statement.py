"""
Statement Schema

A statement says that an actor did something (verb) to an object:

    stmt = Statement(
        "mailto:a@b.com",
        "http://adlnet.gov/expapi/verbs/launched",
        "http://example.org/activities/sandbox",
    )
    >> {"actor": {"objectType": "Agent", "mbox": "mailto:a@b.com"},
        "verb": {"id": "http://adlnet.gov/expapi/verbs/launched"},
        "object": {"objectType": "Activity", "id": "http://example.org/activities/sandbox"},
        "id": "..."}

Every argument is optional; an incomplete statement is still built, it just
isn't valid. The constructor doubles as a clone/upgrade function: passing a
whole statement (raw dict from a store, or another Statement) as the first
argument copies all of its fields, and parts that are already typed are
reused as-is.

Building never raises for missing or oddly shaped parts. Use is_valid() to
ask whether the statement is complete.
"""

from collections.abc import Mapping
from contextvars import ContextVar
from typing import Any, ClassVar, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from ..config import get_config
from ..core.ids import IdGenerator, generate_id, get_id_generator
from ..core.paths import ensure_path, set_value
from ..core.serializer import Serializer
from ..observability import get_logger
from .base import ObjectType
from .context import Context
from .objects import Activity
from .resolver import discriminator, resolve_actor, resolve_object, resolve_verb

logger = get_logger(__name__)

REQUIRED_PARTS = ("actor", "verb", "object")

# Set by the receiving store, never by the author of a sub-statement
RESTRICTED_FIELDS = ("id", "stored", "version", "authority")

# Set while parsing stored data: the data keeps its own identifiers
_parsing: ContextVar[bool] = ContextVar("statement_parsing", default=False)


def _part(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def _is_whole_statement(value: Any) -> bool:
    if not isinstance(value, (Mapping, BaseModel)):
        return False
    return all(_part(value, name) for name in REQUIRED_PARTS)


def _own_fields(value: Any) -> dict[str, Any]:
    # Shallow: nested parts are shared, not copied
    return dict(value)


def _part_is_valid(part: Any) -> bool:
    if part is None:
        return False
    check = getattr(part, "is_valid", None)
    return bool(callable(check) and check())


class StatementBody(BaseModel):
    """
    Fields and behaviour shared by Statement and SubStatement.
    """
    model_config = ConfigDict(extra="allow")

    child_types: ClassVar[dict[str, type]] = {"context": Context}

    actor: Optional[Any] = Field(default=None, description="Agent or Group")
    verb: Optional[Any] = Field(default=None, description="Verb")
    object: Optional[Any] = Field(
        default=None,
        description="Activity, Agent, Group, StatementRef or SubStatement"
    )
    context: Optional[Context] = None

    _id_generator: Optional[IdGenerator] = PrivateAttr(default=None)

    def __init__(
        self,
        actor: Any = None,
        verb: Any = None,
        object: Any = None,
        *,
        id_generator: Optional[IdGenerator] = None,
        preserve_id: Optional[bool] = None,
        **fields: Any,
    ):
        """
        Args:
            actor: Agent or Group (or an IFI string), or a whole statement
            verb: Verb (or a verb id)
            object: Object of the statement (or an activity id)
            id_generator: Source of fresh identifiers
            preserve_id: Keep an existing id instead of assigning a new one.
                        Defaults to the XAPI_PRESERVE_IDS setting.
            **fields: Any other statement fields (timestamp, result, ...)
        """
        data: dict[str, Any] = {}
        if _is_whole_statement(actor):
            source = actor
            data.update(_own_fields(source))
            actor = _part(source, "actor")
            verb = _part(source, "verb")
            object = _part(source, "object")

        data.update(actor=actor, verb=verb, object=object)
        data.update(fields)
        super().__init__(**data)

        config = get_config()
        self._id_generator = id_generator or get_id_generator(config.id_strategy)
        if not _parsing.get():
            self._assign_id(config.preserve_ids if preserve_id is None else preserve_id)

    @classmethod
    def model_validate(cls, obj: Any, *args: Any, **kwargs: Any):
        """
        Parse a stored statement.

        Parts are normalized as in the constructor, but identifiers found in
        the data are kept and none are generated.
        """
        token = _parsing.set(True)
        try:
            return super().model_validate(obj, *args, **kwargs)
        finally:
            _parsing.reset(token)

    @classmethod
    def model_validate_json(cls, json_data: Any, *args: Any, **kwargs: Any):
        """Parse a stored statement from JSON text (see model_validate)."""
        token = _parsing.set(True)
        try:
            return super().model_validate_json(json_data, *args, **kwargs)
        finally:
            _parsing.reset(token)

    @classmethod
    def coerce(cls, value: Any):
        """Clone-or-construct, like the other statement parts."""
        if isinstance(value, cls):
            return value
        return cls(**_own_fields(value))

    @model_validator(mode="before")
    @classmethod
    def _normalize_parts(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        data["actor"] = resolve_actor(data.get("actor"))
        data["verb"] = resolve_verb(data.get("verb"))
        data["object"] = resolve_object(data.get("object"))
        return data

    def _assign_id(self, preserve: bool) -> None:
        pass

    def _next_id(self) -> str:
        return (self._id_generator or generate_id)()

    def __str__(self) -> str:
        return self.render()

    # ================================================================
    # VALIDITY
    # ================================================================

    def is_valid(self) -> bool:
        """True if actor, verb and object are present and each valid."""
        return all(_part_is_valid(getattr(self, name)) for name in REQUIRED_PARTS)

    # ================================================================
    # CONTEXT
    # ================================================================

    def generate_registration(self) -> str:
        """
        Assign a fresh registration id, replacing any previous one.

        Returns:
            The new registration id
        """
        context = ensure_path(self, "context")
        return set_value(context, "registration", self._next_id())

    def add_parent_activity(self, activity: Any) -> None:
        """Append to context.contextActivities.parent."""
        self._add_context_activity("parent", activity)

    def add_grouping_activity(self, activity: Any) -> None:
        """Append to context.contextActivities.grouping."""
        self._add_context_activity("grouping", activity)

    def add_other_context_activity(self, activity: Any) -> None:
        """Append to context.contextActivities.other."""
        self._add_context_activity("other", activity)

    def _add_context_activity(self, kind: str, activity: Any) -> None:
        activities = ensure_path(self, f"context.contextActivities.{kind}[]")
        activities.append(Activity.coerce(activity))

    # ================================================================
    # OUTPUT
    # ================================================================

    def to_wire(self) -> dict[str, Any]:
        """JSON-compatible dict for a receiving store (nulls omitted)."""
        return Serializer.to_wire(self)

    def render(self) -> str:
        """Every field, nulls included, as indented JSON text."""
        return Serializer.render(self)

    def show(self) -> None:
        print(self.render())


class Statement(StatementBody):
    """
    A top-level statement.

    A fresh id is assigned on every construction, including when cloning
    another statement, unless preserve_id is set. Parsing with
    Statement.model_validate() keeps the id found in the data.
    """
    id: Optional[str] = Field(default=None, description="Statement UUID")

    @model_validator(mode="before")
    @classmethod
    def _id_as_string(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and isinstance(data.get("id"), UUID):
            data = dict(data)
            data["id"] = str(data["id"])
        return data

    def _assign_id(self, preserve: bool) -> None:
        previous = self.id
        if preserve and previous:
            return
        self.id = self._next_id()
        if previous:
            logger.debug(
                "Replaced statement id on reconstruction",
                previous_id=previous,
                statement_id=self.id,
            )


class SubStatement(StatementBody):
    """
    A self-contained statement used as the object of another statement.

    Never carries id, stored, version or authority: they are dropped from
    the input before the model is populated. Sub-statements do not nest.
    """
    objectType: str = ObjectType.SUB_STATEMENT.value

    @model_validator(mode="before")
    @classmethod
    def _restrict_fields(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = {key: value for key, value in data.items() if key not in RESTRICTED_FIELDS}
        data["objectType"] = ObjectType.SUB_STATEMENT.value
        return data

    def _has_restricted_fields(self) -> bool:
        extra = self.model_extra or {}
        return any(name in extra for name in RESTRICTED_FIELDS)

    def is_valid(self) -> bool:
        """
        Base validity, plus: tagged as SubStatement, its object is not a
        SubStatement, and no restricted field has been set.
        """
        return (
            super().is_valid()
            and self.objectType == ObjectType.SUB_STATEMENT.value
            and discriminator(self.object) != ObjectType.SUB_STATEMENT.value
            and not self._has_restricted_fields()
        )

    def get_type(self) -> str:
        return ObjectType.SUB_STATEMENT.value

    def get_display(self) -> Optional[str]:
        """
        "<actor id>:<verb display>:<object id>", or None if invalid.
        """
        if not self.is_valid():
            return None
        return f"{self.actor.get_id()}:{self.verb.get_display()}:{self.object.get_id()}"
