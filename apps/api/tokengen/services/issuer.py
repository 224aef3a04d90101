"""Join token issuance.

Tokens are HS256 JWTs minted with the LiveKit server SDK. Each one carries the
participant identity and its room grant and expires one hour after issuance. Nothing
is stored; a downstream LiveKit server verifies signature and expiry on its own.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Union

from livekit.api import AccessToken, VideoGrants

from .grants import CapabilityPolicy, build_grant

TOKEN_TTL = timedelta(hours=1)

logger = logging.getLogger(__name__)


class SigningError(RuntimeError):
    """Raised when a token cannot be signed with the configured key material."""


@dataclass(frozen=True, slots=True)
class SigningIdentity:
    """API key id and secret shared with the LiveKit server."""

    key_id: str
    secret: str = field(repr=False)

    @property
    def complete(self) -> bool:
        return bool(self.key_id.strip()) and bool(self.secret.strip())


def sign_join_token(signing: SigningIdentity, identity: str, grant: VideoGrants) -> str:
    """Sign ``grant`` for ``identity``, valid for one hour from now."""

    # AccessToken falls back to LIVEKIT_* env vars for empty credentials, so empty
    # material has to be rejected before it gets there.
    if not signing.complete:
        raise SigningError("signing key id and secret must both be set")

    try:
        token = (
            AccessToken(signing.key_id, signing.secret)
            .with_identity(identity)
            .with_grants(grant)
            .with_ttl(TOKEN_TTL)
            .to_jwt()
        )
    except Exception as exc:  # noqa: BLE001 - any primitive failure is an issuance failure
        raise SigningError(str(exc)) from exc

    if not token:
        raise SigningError("signing produced an empty token")
    return token


class FailureKind(str, enum.Enum):
    INVALID_INPUT = "invalid_input"
    MISSING_SIGNING_MATERIAL = "missing_signing_material"
    SIGNING_FAILED = "signing_failed"


@dataclass(frozen=True, slots=True)
class TokenIssued:
    token: str
    identity: str
    room: str
    expires_in: int = int(TOKEN_TTL.total_seconds())


@dataclass(frozen=True, slots=True)
class IssueFailure:
    kind: FailureKind
    message: str


IssueResult = Union[TokenIssued, IssueFailure]


class JoinTokenIssuer:
    """Validate a token request, build its grant and sign it."""

    def __init__(self, signing: SigningIdentity, policy: CapabilityPolicy) -> None:
        self._signing = signing
        self._policy = policy

    def issue(self, room: str, identity: str) -> IssueResult:
        if not (room or "").strip() or not (identity or "").strip():
            logger.warning("Rejected token request with missing room or identity")
            return IssueFailure(FailureKind.INVALID_INPUT, "Room and identity parameters are required")

        if not self._signing.complete:
            logger.error("Signing key material is not configured")
            return IssueFailure(FailureKind.MISSING_SIGNING_MATERIAL, "signing key id and secret must both be set")

        grant = build_grant(room, self._policy)
        try:
            token = sign_join_token(self._signing, identity, grant)
        except SigningError as exc:
            logger.error("Failed to generate token: %s", exc)
            return IssueFailure(FailureKind.SIGNING_FAILED, str(exc))

        logger.info("Token generated for room %s and identity %s", room, identity)
        return TokenIssued(token=token, identity=identity, room=room)
