"""
Module 05 - Claim Registry
File: events.py

Purpose: Event records emitted by successful registry operations.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


EventName = Literal[
    "OwnershipTransferred",
    "MerkleRootUpdated",
    "Claimed",
    "ClaimedAll",
    "Blacklisted",
    "Whitelisted",
    "Paused",
    "Unpaused",
    "TokenWithdrawn",
]


class RegistryEvent(BaseModel):
    """
    One emitted event.

    `args` keeps the event's positional arguments by name, e.g.
    Claimed -> {"index": 0, "account": "0x…", "amount": 50}.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: EventName
    args: dict[str, Any] = Field(default_factory=dict)

    def matches(self, name: str, **args: Any) -> bool:
        """True if the event has this name and (at least) these args."""
        if self.name != name:
            return False
        return all(self.args.get(key) == value for key, value in args.items())
