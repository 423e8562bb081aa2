"""Core data models for the protocol deployer."""

from .market import (
    PoolType,
    FeatureFlags,
    MainPoolParams,
    InterestRateParams,
    DistributionMinimums,
    MarketDescriptor,
)
from .registration import Registration, RegistrationKind
from .reputation import ReputationTokenParams
from .deployment import (
    DeploymentStage,
    TransactionRecord,
    ProvisionedPool,
    DeployedContracts,
    SystemParametersConfig,
    DeploymentConfig,
    DeploymentReport,
    pool_row,
)

__all__ = [
    "PoolType",
    "FeatureFlags",
    "MainPoolParams",
    "InterestRateParams",
    "DistributionMinimums",
    "MarketDescriptor",
    "Registration",
    "RegistrationKind",
    "ReputationTokenParams",
    "DeploymentStage",
    "TransactionRecord",
    "ProvisionedPool",
    "DeployedContracts",
    "SystemParametersConfig",
    "DeploymentConfig",
    "DeploymentReport",
    "pool_row",
]
