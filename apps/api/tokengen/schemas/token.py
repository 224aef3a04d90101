"""Data contracts for the token endpoint."""
from __future__ import annotations

from pydantic import BaseModel, Field


class TokenRequest(BaseModel):
    room: str = Field(default="", description="Room name to join")
    identity: str = Field(default="", description="Participant identity")


class TokenResponse(BaseModel):
    token: str = Field(..., description="Signed LiveKit join token")
    identity: str = Field(..., description="Identity the token was issued to")
