"""
Statement context: registration and related activities.
"""

from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .objects import Activity

CONTEXT_ACTIVITY_KINDS = ("parent", "grouping", "other")


class ContextActivities(BaseModel):
    """
    Named, ordered lists of activities related to the statement.
    """
    model_config = ConfigDict(extra="allow")

    parent: Optional[list[Activity]] = Field(
        default=None,
        description="Activities that directly contain the statement's object"
    )
    grouping: Optional[list[Activity]] = Field(
        default=None,
        description="Activities with an indirect relation to the object"
    )
    other: Optional[list[Activity]] = Field(
        default=None,
        description="Any other related activities"
    )

    @field_validator("parent", "grouping", "other", mode="before")
    @classmethod
    def _as_list(cls, value: Any) -> Any:
        # A single activity is accepted in place of a one-element list
        if value is None or isinstance(value, list):
            return value
        return [value]


class Context(BaseModel):
    """
    Optional context of a statement.

    instructor, team, platform, language, extensions, ... pass through as
    extras.
    """
    model_config = ConfigDict(extra="allow")

    child_types: ClassVar[dict[str, type]] = {"contextActivities": ContextActivities}

    registration: Optional[str] = Field(
        default=None,
        description="Registration (attempt) the statement belongs to"
    )
    contextActivities: Optional[ContextActivities] = None
