"""Pydantic settings for the protocol deployer."""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from web3 import Web3


class Settings(BaseSettings):
    """Deployment settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Network
    rpc_url: str = Field(default="http://127.0.0.1:8545", description="JSON-RPC endpoint")
    private_key: Optional[str] = Field(default=None, description="Deployer private key (node account if unset)")
    confirmation_timeout: int = Field(default=120, ge=10, le=3600, description="Receipt wait in seconds")

    # Existing registry to re-attach to
    registry: Optional[str] = Field(default=None, description="Address of an already deployed Registry")

    # Feature flags and assets
    stable_pools_available: bool = Field(default=False, description="Enable stable pools")
    native_asset_symbol: str = Field(description="Native asset ticker, e.g. WETH")
    rewards_asset_symbol: str = Field(default="", description="Rewards asset ticker, empty to disable rewards")
    rewards_asset_token: str = Field(default="", description="Rewards token address")
    governance_token: str = Field(default="", description="Governance token registered as immutable contract")

    # Documents
    pools_data_path: Path = Field(default=Path("deploy/data/poolsData.json"), description="Market list")
    prt_data_path: Optional[Path] = Field(default=Path("deploy/data/prtData.json"), description="PRT parameters")
    artifacts_dir: Path = Field(default=Path("artifacts"), description="Compiled contract artifacts")
    deployments_dir: Path = Field(default=Path(".deployments"), description="Saved deployment reports")

    # System parameters (human units)
    configure_parameters: bool = Field(default=True, description="Set up asset and system parameters")
    liquidation_boundary: Decimal = Field(default=Decimal("50"), ge=0, le=100, description="Percent")
    min_currency_amount: Decimal = Field(default=Decimal("0.01"), ge=0, description="Token units")

    log_level: str = Field(default="INFO", description="Root logging level")

    @field_validator("registry", "private_key", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        """Treat empty strings as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("prt_data_path", mode="before")
    @classmethod
    def parse_prt_data_path(cls, v):
        """Allow PRT_DATA_PATH= to disable PRT initialization."""
        if isinstance(v, str):
            return Path(v) if v.strip() else None
        return v

    @field_validator("registry", "rewards_asset_token", "governance_token")
    @classmethod
    def check_address(cls, v):
        """Reject malformed addresses."""
        if v and not Web3.is_address(v):
            raise ValueError(f"Invalid address - {v}")
        return v

    @model_validator(mode="after")
    def check_rewards_token(self):
        """A rewards symbol needs a token address to point at."""
        if self.rewards_asset_symbol and not self.rewards_asset_token:
            raise ValueError("REWARDS_ASSET_TOKEN is required when REWARDS_ASSET_SYMBOL is set")
        return self

    @property
    def rewards_enabled(self) -> bool:
        return self.rewards_asset_symbol != ""

    def ensure_deployments_dir(self) -> Path:
        """Ensure the deployments directory exists and return it."""
        self.deployments_dir.mkdir(parents=True, exist_ok=True)
        return self.deployments_dir


def load_settings(**overrides) -> Settings:
    """Build settings, turning validation failures into ConfigError."""
    from deployer.core.errors import ConfigError

    try:
        return Settings(**overrides)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "settings" for err in e.errors())
        raise ConfigError(f"Invalid deployment configuration ({fields}): {e}", label="Load settings") from e


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()
