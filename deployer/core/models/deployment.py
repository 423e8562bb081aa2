"""Deployment run data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Set

from deployer.core.constants import ZERO_ADDRESS
from deployer.core.models.market import FeatureFlags, MarketDescriptor, PoolType
from deployer.core.models.reputation import ReputationTokenParams


def _utcnow() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


def pool_row(symbol: str) -> str:
    """Address table key of a provisioned pool."""
    return f"Pool {symbol}"


class DeploymentStage(Enum):
    """Orchestrator states, in the only order they may be reached."""

    PENDING = "pending"
    DEPLOYED = "deployed"
    REGISTERED = "registered"
    INITIALIZED = "initialized"
    PROVISIONED = "provisioned"

    @property
    def next(self) -> Optional["DeploymentStage"]:
        stages = list(DeploymentStage)
        index = stages.index(self)
        return stages[index + 1] if index + 1 < len(stages) else None


@dataclass(frozen=True)
class TransactionRecord:
    """One confirmed on-chain operation."""

    label: str
    tx_hash: str
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    contract_address: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "tx_hash": self.tx_hash,
            "block_number": self.block_number,
            "gas_used": self.gas_used,
            "contract_address": self.contract_address,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TransactionRecord":
        return cls(
            label=data["label"],
            tx_hash=data["tx_hash"],
            block_number=data.get("block_number"),
            gas_used=data.get("gas_used"),
            contract_address=data.get("contract_address"),
        )


@dataclass(frozen=True)
class ProvisionedPool:
    """A pool created for one market descriptor."""

    symbol: str
    pool_type: PoolType
    asset_key: bytes
    address: str


@dataclass
class DeployedContracts:
    """Addresses produced by the contract deployer, keyed by contract name."""

    registry: str
    addresses: Dict[str, str] = field(default_factory=dict)
    reused_registry: bool = False
    reused: Set[str] = field(default_factory=set)  # contract names attached instead of deployed

    def address_of(self, contract: str) -> str:
        try:
            return self.addresses[contract]
        except KeyError:
            raise KeyError(f"{contract} was not deployed in this run")


@dataclass(frozen=True)
class SystemParametersConfig:
    """System-wide parameters (normalized)."""

    liquidation_boundary: int  # fixed-point percent
    min_currency_amount: int  # wei


@dataclass
class DeploymentConfig:
    """Everything a run needs, parsed and normalized before the first chain call."""

    flags: FeatureFlags
    native_asset_symbol: str
    markets: List[MarketDescriptor]
    system_parameters: SystemParametersConfig
    rewards_asset_symbol: str = ""
    rewards_asset_token: str = ""
    governance_token: str = ""
    reputation_token: Optional[ReputationTokenParams] = None

    @property
    def rewards_enabled(self) -> bool:
        return self.rewards_asset_symbol != ""


@dataclass
class DeploymentReport:
    """Externally observable outcome of a run."""

    stage: DeploymentStage
    registry: Optional[str]
    components: Dict[str, str] = field(default_factory=dict)  # display name -> address
    rewards_token: str = ZERO_ADDRESS
    pools: Dict[str, str] = field(default_factory=dict)  # symbol -> pool address
    transactions: List[TransactionRecord] = field(default_factory=list)
    chain_id: Optional[int] = None
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def completed(self) -> bool:
        return self.stage == DeploymentStage.PROVISIONED

    def address_table(self) -> Dict[str, str]:
        """Every registered component and provisioned pool mapped to its address.

        Pool rows are keyed ``Pool <symbol>`` so a market symbol never shadows
        a component name.
        """
        table: Dict[str, str] = {}
        if self.registry:
            table["Registry"] = self.registry
        table.update(self.components)
        table["RewardsToken"] = self.rewards_token
        for symbol, address in self.pools.items():
            table[pool_row(symbol)] = address
        return table

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "stage": self.stage.value,
            "registry": self.registry,
            "components": dict(self.components),
            "rewards_token": self.rewards_token,
            "pools": dict(self.pools),
            "transactions": [tx.to_dict() for tx in self.transactions],
            "chain_id": self.chain_id,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DeploymentReport":
        """Deserialize from dictionary."""
        return cls(
            stage=DeploymentStage(data["stage"]),
            registry=data.get("registry"),
            components=dict(data.get("components", {})),
            rewards_token=data.get("rewards_token", ZERO_ADDRESS),
            pools=dict(data.get("pools", {})),
            transactions=[TransactionRecord.from_dict(tx) for tx in data.get("transactions", [])],
            chain_id=data.get("chain_id"),
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else _utcnow(),
        )
