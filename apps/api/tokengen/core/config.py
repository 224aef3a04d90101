"""Process configuration for the token server."""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from ..services.grants import POLICY_FLAGS
from ..services.issuer import SigningIdentity


class Settings(BaseSettings):
    """Runtime configuration, read once at process start."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_env: str = Field(default="development")
    log_level: str = Field(default="info")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])

    livekit_api_key: str = Field(default="")
    livekit_api_secret: SecretStr = Field(default=SecretStr(""))

    # Raw capability policy flags. Parsed leniently by the grant builder.
    room_create: str | None = None
    room_list: str | None = None
    room_record: str | None = None
    room_admin: str | None = None
    can_publish: str | None = None
    can_subscribe: str | None = None
    can_publish_data: str | None = None
    can_update_own_metadata: str | None = None
    ingress_admin: str | None = None
    hidden: str | None = None
    recorder: str | None = None
    agent: str | None = None

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Allow comma-separated env values for CORS origins."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator(*(flag.field for flag in POLICY_FLAGS), mode="before")
    @classmethod
    def _keep_raw_flag(cls, value: object) -> object:
        # dotenv and env sources hand us strings already; coerce anything else so a
        # malformed flag never fails settings construction.
        if value is None or isinstance(value, str):
            return value
        return str(value)

    def policy_flags(self) -> dict[str, str]:
        """Return the raw capability flags keyed by their environment name."""

        flags: dict[str, str] = {}
        for flag in POLICY_FLAGS:
            raw = getattr(self, flag.field)
            if raw is not None:
                flags[flag.env] = raw
        return flags

    def signing_identity(self) -> SigningIdentity:
        return SigningIdentity(
            key_id=self.livekit_api_key,
            secret=self.livekit_api_secret.get_secret_value(),
        )

    def missing_signing_material(self) -> list[str]:
        """Names of the signing variables that are unset or empty."""

        missing = []
        if not self.livekit_api_key.strip():
            missing.append("LIVEKIT_API_KEY")
        if not self.livekit_api_secret.get_secret_value().strip():
            missing.append("LIVEKIT_API_SECRET")
        return missing


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


settings = get_settings()
