"""
Verb Schema

The action of a statement, e.g. http://adlnet.gov/expapi/verbs/completed.
"""

from typing import Any, Optional

from pydantic import Field, model_validator

from ..config import get_config
from .base import VariantModel


class Verb(VariantModel):
    """
    The action taken by the actor.

    A bare string is read as the verb id.
    """
    id: Optional[str] = Field(default=None, description="Verb IRI")
    display: Optional[dict[str, str]] = Field(
        default=None,
        description="Language map of human-readable names"
    )

    @model_validator(mode="before")
    @classmethod
    def _from_id(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"id": data}
        return data

    @classmethod
    def create(cls, verb_id: str, description: Optional[str] = None) -> "Verb":
        """Build a verb with a display string in the configured language."""
        display = None
        if description:
            display = {get_config().display_language: description}
        return cls(id=verb_id, display=display)

    def is_valid(self) -> bool:
        return bool(self.id)

    def get_id(self) -> Optional[str]:
        return self.id

    def get_display(self, language: Optional[str] = None) -> Optional[str]:
        """
        Human-readable name of the verb.

        Falls back to the first available language, then to the id.
        """
        if self.display:
            language = language or get_config().display_language
            if language in self.display:
                return self.display[language]
            return next(iter(self.display.values()))
        return self.id
