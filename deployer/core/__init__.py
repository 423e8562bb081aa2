"""Core module - models, constants, errors and unit conversions."""

from .models import (
    PoolType,
    FeatureFlags,
    MarketDescriptor,
    Registration,
    RegistrationKind,
    DeploymentStage,
    DeploymentReport,
)
from .constants import PRECISION, WAD, ZERO_ADDRESS

__all__ = [
    "PoolType",
    "FeatureFlags",
    "MarketDescriptor",
    "Registration",
    "RegistrationKind",
    "DeploymentStage",
    "DeploymentReport",
    "PRECISION",
    "WAD",
    "ZERO_ADDRESS",
]
