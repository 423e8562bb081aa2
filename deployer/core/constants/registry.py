"""Symbolic names under which components are bound in the Registry contract.

These match the ``*_NAME`` constants exposed by the on-chain Registry.
"""

DEFI_CORE_NAME = "DEFI_CORE"
SYSTEM_PARAMETERS_NAME = "SYSTEM_PARAMETERS"
ASSET_PARAMETERS_NAME = "ASSET_PARAMETERS"
REWARDS_DISTRIBUTION_NAME = "REWARDS_DISTRIBUTION"
USER_INFO_REGISTRY_NAME = "USER_INFO_REGISTRY"
SYSTEM_POOLS_REGISTRY_NAME = "SYSTEM_POOLS_REGISTRY"
SYSTEM_POOLS_FACTORY_NAME = "SYSTEM_POOLS_FACTORY"
PRICE_MANAGER_NAME = "PRICE_MANAGER"
PRT_NAME = "PRT"
ROLE_MANAGER_NAME = "ROLE_MANAGER"
INTEREST_RATE_LIBRARY_NAME = "INTEREST_RATE_LIBRARY"
GOVERNANCE_TOKEN_NAME = "GOVERNANCE_TOKEN"

# Components whose injectDependencies step runs during initialization, in order
INJECTION_ORDER = (
    DEFI_CORE_NAME,
    SYSTEM_PARAMETERS_NAME,
    ASSET_PARAMETERS_NAME,
    REWARDS_DISTRIBUTION_NAME,
    USER_INFO_REGISTRY_NAME,
    SYSTEM_POOLS_REGISTRY_NAME,
    SYSTEM_POOLS_FACTORY_NAME,
    PRICE_MANAGER_NAME,
    PRT_NAME,
)

# Human readable names used in logs and the final address table
DISPLAY_NAMES = {
    DEFI_CORE_NAME: "DefiCore",
    SYSTEM_PARAMETERS_NAME: "SystemParameters",
    ASSET_PARAMETERS_NAME: "AssetParameters",
    REWARDS_DISTRIBUTION_NAME: "RewardsDistribution",
    USER_INFO_REGISTRY_NAME: "UserInfoRegistry",
    SYSTEM_POOLS_REGISTRY_NAME: "SystemPoolsRegistry",
    SYSTEM_POOLS_FACTORY_NAME: "SystemPoolsFactory",
    PRICE_MANAGER_NAME: "PriceManager",
    PRT_NAME: "PRT",
    ROLE_MANAGER_NAME: "RoleManager",
    INTEREST_RATE_LIBRARY_NAME: "InterestRateLibrary",
    GOVERNANCE_TOKEN_NAME: "GovernanceToken",
}


def display_name(name: str) -> str:
    """Get the display name for a registry key, falling back to the key."""
    return DISPLAY_NAMES.get(name, name)
