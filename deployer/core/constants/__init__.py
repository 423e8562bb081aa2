"""Core constants module.

Re-exports all constants for convenience.
"""

from deployer.core.constants.generic import (
    WAD,
    PRECISION,
    PERCENTAGE_100,
    ZERO_ADDRESS,
    ASSET_KEY_LENGTH,
    ALREADY_INITIALIZED_REVERTS,
)

from deployer.core.constants.registry import (
    DEFI_CORE_NAME,
    SYSTEM_PARAMETERS_NAME,
    ASSET_PARAMETERS_NAME,
    REWARDS_DISTRIBUTION_NAME,
    USER_INFO_REGISTRY_NAME,
    SYSTEM_POOLS_REGISTRY_NAME,
    SYSTEM_POOLS_FACTORY_NAME,
    PRICE_MANAGER_NAME,
    PRT_NAME,
    ROLE_MANAGER_NAME,
    INTEREST_RATE_LIBRARY_NAME,
    GOVERNANCE_TOKEN_NAME,
    INJECTION_ORDER,
    DISPLAY_NAMES,
    display_name,
)

__all__ = [
    # Generic
    "WAD",
    "PRECISION",
    "PERCENTAGE_100",
    "ZERO_ADDRESS",
    "ASSET_KEY_LENGTH",
    "ALREADY_INITIALIZED_REVERTS",
    # Registry names
    "DEFI_CORE_NAME",
    "SYSTEM_PARAMETERS_NAME",
    "ASSET_PARAMETERS_NAME",
    "REWARDS_DISTRIBUTION_NAME",
    "USER_INFO_REGISTRY_NAME",
    "SYSTEM_POOLS_REGISTRY_NAME",
    "SYSTEM_POOLS_FACTORY_NAME",
    "PRICE_MANAGER_NAME",
    "PRT_NAME",
    "ROLE_MANAGER_NAME",
    "INTEREST_RATE_LIBRARY_NAME",
    "GOVERNANCE_TOKEN_NAME",
    "INJECTION_ORDER",
    "DISPLAY_NAMES",
    "display_name",
]
