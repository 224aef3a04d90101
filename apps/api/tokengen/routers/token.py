"""Join token endpoint."""
from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, Body, Depends, HTTPException

from ..core.config import get_settings
from ..schemas.token import TokenRequest, TokenResponse
from ..services.grants import CapabilityPolicy
from ..services.issuer import FailureKind, IssueFailure, JoinTokenIssuer

router = APIRouter()

_STATUS_BY_KIND = {
    FailureKind.INVALID_INPUT: (400, "Room and identity parameters are required"),
    FailureKind.MISSING_SIGNING_MATERIAL: (503, "Token signing is not configured"),
    FailureKind.SIGNING_FAILED: (500, "Failed to generate token"),
}


@lru_cache
def get_issuer() -> JoinTokenIssuer:
    """Build the process-wide issuer from settings."""

    settings = get_settings()
    return JoinTokenIssuer(
        signing=settings.signing_identity(),
        policy=CapabilityPolicy.from_flags(settings.policy_flags()),
    )


def _respond(issuer: JoinTokenIssuer, room: str, identity: str) -> TokenResponse:
    result = issuer.issue(room, identity)
    if isinstance(result, IssueFailure):
        status_code, detail = _STATUS_BY_KIND[result.kind]
        raise HTTPException(status_code=status_code, detail=detail)
    return TokenResponse(token=result.token, identity=result.identity)


@router.get("/token", response_model=TokenResponse)
async def get_token(
    room: str = "",
    identity: str = "",
    issuer: JoinTokenIssuer = Depends(get_issuer),
) -> TokenResponse:
    """Issue a join token for ``room`` and ``identity`` query parameters."""

    return _respond(issuer, room, identity)


@router.post("/token", response_model=TokenResponse)
async def post_token(
    room: str = "",
    identity: str = "",
    payload: TokenRequest | None = Body(default=None),
    issuer: JoinTokenIssuer = Depends(get_issuer),
) -> TokenResponse:
    """Issue a join token from query parameters or a JSON body."""

    if payload is not None:
        room = room or payload.room
        identity = identity or payload.identity
    return _respond(issuer, room, identity)
