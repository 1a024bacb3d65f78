"""
Actor variants: Agent (an individual) and Group.

An agent is identified by exactly one inverse functional identifier (IFI):
mbox, mbox_sha1sum, openid or account. A bare string is read as an IFI:

    Agent.coerce("mailto:a@b.com")       -> mbox
    Agent.coerce("<40 hex chars>")       -> mbox_sha1sum
    Agent.coerce("https://id.example/x") -> openid
"""

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .base import ObjectType, VariantModel

_SHA1_RE = re.compile(r"^[0-9a-f]{40}$", re.IGNORECASE)
_OPENID_RE = re.compile(r"^https?:", re.IGNORECASE)

IFI_FIELDS = ("mbox", "mbox_sha1sum", "openid", "account")


def _ifi_from_string(identifier: str) -> dict[str, Any]:
    if identifier.startswith("mailto:"):
        return {"mbox": identifier}
    if _SHA1_RE.match(identifier):
        return {"mbox_sha1sum": identifier}
    if _OPENID_RE.match(identifier):
        return {"openid": identifier}
    return {}


class Account(BaseModel):
    """An account on an existing system, e.g. an LMS or intranet."""
    model_config = ConfigDict(extra="allow")

    homePage: Optional[str] = Field(
        default=None,
        description="Canonical home page of the system the account is on"
    )
    name: Optional[str] = Field(
        default=None,
        description="Unique id or name of the account on that system"
    )

    def is_valid(self) -> bool:
        return bool(self.homePage and self.name)


class Actor(VariantModel):
    """
    Common identity fields of Agent and Group.
    """
    name: Optional[str] = Field(default=None, description="Display name")
    mbox: Optional[str] = Field(default=None, description="mailto: IRI")
    mbox_sha1sum: Optional[str] = Field(
        default=None,
        description="Hex SHA1 of the mailto: IRI"
    )
    openid: Optional[str] = Field(default=None, description="OpenID URI")
    account: Optional[Account] = None

    @model_validator(mode="before")
    @classmethod
    def _from_identifier(cls, data: Any) -> Any:
        if isinstance(data, str):
            return _ifi_from_string(data)
        # A bare account mapping stands for an agent identified by it
        if (
            isinstance(data, dict)
            and "homePage" in data
            and "name" in data
            and "objectType" not in data
            and not any(key in data for key in IFI_FIELDS)
        ):
            return {"account": data}
        return data

    def has_ifi(self) -> bool:
        return bool(
            self.mbox
            or self.mbox_sha1sum
            or self.openid
            or (self.account is not None and self.account.is_valid())
        )

    def get_id(self) -> Optional[str]:
        """The identifying IFI as a string."""
        if self.mbox:
            return self.mbox
        if self.openid:
            return self.openid
        if self.mbox_sha1sum:
            return self.mbox_sha1sum
        if self.account is not None:
            return f"{self.account.homePage}|{self.account.name}"
        return None


class Agent(Actor):
    """An individual."""
    objectType: str = ObjectType.AGENT.value

    def is_valid(self) -> bool:
        return self.has_ifi()


class Group(Actor):
    """
    A collection of agents.

    Identified groups carry an IFI; anonymous groups are defined by their
    members.
    """
    objectType: str = ObjectType.GROUP.value
    member: Optional[list[Agent]] = Field(
        default=None,
        description="Agents in this group"
    )

    def is_valid(self) -> bool:
        return self.has_ifi() or bool(self.member)
