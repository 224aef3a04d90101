"""Capability grant construction from process-wide policy flags.

Every boolean capability in a grant comes from a named policy flag. A flag that is
absent or does not parse as a boolean falls back to its documented default; a
malformed flag never fails a request. ``room_join`` is always granted since the only
purpose of a token is to join the room it names.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, NamedTuple, Union

from livekit.api import VideoGrants

_TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class PolicyFlag(NamedTuple):
    field: str
    env: str
    default: bool


POLICY_FLAGS: tuple[PolicyFlag, ...] = (
    PolicyFlag("room_create", "ROOM_CREATE", False),
    PolicyFlag("room_list", "ROOM_LIST", False),
    PolicyFlag("room_record", "ROOM_RECORD", False),
    PolicyFlag("room_admin", "ROOM_ADMIN", False),
    PolicyFlag("can_publish", "CAN_PUBLISH", True),
    PolicyFlag("can_subscribe", "CAN_SUBSCRIBE", True),
    PolicyFlag("can_publish_data", "CAN_PUBLISH_DATA", True),
    PolicyFlag("can_update_own_metadata", "CAN_UPDATE_OWN_METADATA", False),
    PolicyFlag("ingress_admin", "INGRESS_ADMIN", False),
    PolicyFlag("hidden", "HIDDEN", False),
    PolicyFlag("recorder", "RECORDER", False),
    PolicyFlag("agent", "AGENT", False),
)


@dataclass(frozen=True, slots=True)
class Override:
    """A policy flag that was set to a valid boolean."""

    value: bool


@dataclass(frozen=True, slots=True)
class Unset:
    """A policy flag that is absent or malformed."""


UNSET = Unset()

FlagValue = Union[Override, Unset]


def parse_flag(raw: str | None) -> FlagValue:
    """Parse a raw flag string using ``1/t/true`` and ``0/f/false`` spellings."""

    if raw is None:
        return UNSET
    if raw in _TRUE_STRINGS:
        return Override(True)
    if raw in _FALSE_STRINGS:
        return Override(False)
    return UNSET


def resolve(flag: FlagValue, default: bool) -> bool:
    if isinstance(flag, Override):
        return flag.value
    return default


@dataclass(frozen=True, slots=True)
class CapabilityPolicy:
    """Per-capability overrides resolved against the documented defaults."""

    overrides: Mapping[str, FlagValue]

    @classmethod
    def from_flags(cls, flags: Mapping[str, str]) -> "CapabilityPolicy":
        """Build a policy from raw flag strings keyed by environment name."""

        return cls(overrides={flag.field: parse_flag(flags.get(flag.env)) for flag in POLICY_FLAGS})

    @classmethod
    def defaults(cls) -> "CapabilityPolicy":
        return cls.from_flags({})

    def capabilities(self) -> dict[str, bool]:
        return {
            flag.field: resolve(self.overrides.get(flag.field, UNSET), flag.default)
            for flag in POLICY_FLAGS
        }


def build_grant(room: str, policy: CapabilityPolicy) -> VideoGrants:
    """Return the capability grant for ``room`` under ``policy``."""

    if not room:
        raise ValueError("room must be a non-empty string")

    return VideoGrants(room_join=True, room=room, **policy.capabilities())
