"""
Object variants that are not actors: Activity and StatementRef,
plus the explicit UnrecognizedObject pass-through.
"""

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, model_validator

from ..config import get_config
from .base import ObjectType, VariantModel


class ActivityDefinition(BaseModel):
    """
    Metadata describing an activity.

    Interaction fields (interactionType, choices, ...) pass through as extras.
    """
    model_config = ConfigDict(extra="allow")

    name: Optional[dict[str, str]] = None
    description: Optional[dict[str, str]] = None
    type: Optional[str] = Field(default=None, description="Activity type IRI")
    moreInfo: Optional[str] = None
    extensions: Optional[dict[str, Any]] = None


class Activity(VariantModel):
    """
    A thing that was interacted with: a course, a lesson, a page, ...

    A bare string is read as the activity id.
    """
    objectType: str = ObjectType.ACTIVITY.value
    id: Optional[str] = Field(default=None, description="Activity IRI")
    definition: Optional[ActivityDefinition] = None

    @model_validator(mode="before")
    @classmethod
    def _from_id(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"id": data}
        return data

    @classmethod
    def create(
        cls,
        activity_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> "Activity":
        """Build an activity whose definition strings use the configured language."""
        definition = None
        if name or description:
            language = get_config().display_language
            definition = ActivityDefinition(
                name={language: name} if name else None,
                description={language: description} if description else None,
            )
        return cls(id=activity_id, definition=definition)

    def is_valid(self) -> bool:
        return bool(self.id)

    def get_id(self) -> Optional[str]:
        return self.id


class StatementRef(VariantModel):
    """
    A pointer to another, already stored statement.

    A bare string is read as the referenced statement id.
    """
    objectType: str = ObjectType.STATEMENT_REF.value
    id: Optional[str] = Field(default=None, description="Referenced statement id")

    @model_validator(mode="before")
    @classmethod
    def _from_id(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"id": data}
        return data

    def is_valid(self) -> bool:
        return bool(self.id) and self.objectType == ObjectType.STATEMENT_REF.value

    def get_id(self) -> Optional[str]:
        return self.id


class UnrecognizedObject(RootModel[Any]):
    """
    A value whose discriminator names no known variant.

    The raw value is kept as-is and serialized verbatim. It never counts
    as valid.
    """

    @classmethod
    def coerce(cls, value: Any) -> "UnrecognizedObject":
        if isinstance(value, cls):
            return value
        return cls(value)

    @property
    def objectType(self) -> Optional[Any]:
        if isinstance(self.root, Mapping):
            return self.root.get("objectType")
        return getattr(self.root, "objectType", None)

    def is_valid(self) -> bool:
        return False

    def get_id(self) -> Optional[Any]:
        if isinstance(self.root, Mapping):
            return self.root.get("id")
        return None
