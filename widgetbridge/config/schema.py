"""Pydantic models for widgetbridge configuration validation."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ACCOUNT = "0x991c468AbcE2b4DD627a6210C145373EbABdd186"
DEFAULT_CHAIN_ID = 1


class SessionConfig(BaseModel):
    """Seed values for the bridge's session state.

    Example in config.json:
        "session": {
            "account": "0x991c468AbcE2b4DD627a6210C145373EbABdd186",
            "chain_id": 1
        }
    """

    model_config = ConfigDict(extra="forbid")

    account: str = DEFAULT_ACCOUNT
    """Wallet address reported by eth_accounts. Opaque to the bridge."""

    chain_id: int = Field(default=DEFAULT_CHAIN_ID, ge=0)
    """Initial chain id, until wallet_switchEthereumChain changes it."""

    @field_validator("account")
    @classmethod
    def validate_account(cls, v: str) -> str:
        """Reject empty account strings."""
        if not v.strip():
            raise ValueError("account must not be empty")
        return v


class WidgetConfig(BaseModel):
    """Configuration for the embedded widget document."""

    model_config = ConfigDict(extra="forbid")

    url: str = "http://kiln.localhost:8081/overview"
    """URL the host embeds. Informational; the bridge does not load it."""

    allowed_origin: str | None = None
    """If set, inbound messages must carry exactly this origin."""


class ServerConfig(BaseModel):
    """Configuration for the WebSocket host server."""

    model_config = ConfigDict(extra="forbid")

    host: str = "127.0.0.1"
    """Interface to bind."""

    port: int = Field(default=8787, ge=1, le=65535)
    """Port to listen on."""


class Config(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    session: SessionConfig = SessionConfig()
    widget: WidgetConfig = WidgetConfig()
    server: ServerConfig = ServerConfig()

    handler_timeout: float | None = Field(default=30.0, gt=0)
    """Seconds a handler may run before the request fails. None disables."""
